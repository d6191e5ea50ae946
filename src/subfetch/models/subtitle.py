"""Subtitle data models."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from subfetch.models.media import Metadata, Video
from subfetch.utils.language import display_name, normalize_tag


class _SubtitleInfo:
    """Behaviour shared by local and online subtitles."""

    for_media: Video
    language: str
    hearing_impaired: bool

    @property
    def meta(self) -> Metadata:
        """Metadata of the media this subtitle belongs to."""
        return self.for_media.meta

    def is_lang(self, tag: str) -> bool:
        """Return True if the subtitle is in the given language."""
        return self.language == normalize_tag(tag)

    def __str__(self) -> str:
        return display_name(self.language)


@dataclass(frozen=True)
class LocalSubtitle(_SubtitleInfo):
    """A subtitle stored on disk next to its video."""

    path: Path
    for_media: Video
    language: str = "und"
    hearing_impaired: bool = False

    def __post_init__(self):
        object.__setattr__(self, "language", normalize_tag(self.language))

    @property
    def filename(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class OnlineSubtitle(_SubtitleInfo):
    """A subtitle candidate returned by a provider, not yet downloaded."""

    link: str
    for_media: Video
    language: str = "und"
    hearing_impaired: bool = False
    provider: str = ""  # Name of the provider that found it

    def __post_init__(self):
        object.__setattr__(self, "language", normalize_tag(self.language))


Subtitle = Union[LocalSubtitle, OnlineSubtitle]


@dataclass(frozen=True)
class RatedSubtitle:
    """A candidate paired with its match score for one selection cycle.

    ``score`` is None when the candidate could not be scored, which is
    distinct from a genuine score of 0.0.
    """

    subtitle: OnlineSubtitle
    score: Optional[float] = None

    @property
    def scored(self) -> bool:
        return self.score is not None

    def format_score(self) -> str:
        """Score as a percentage string, or 'N/A' when unscored."""
        if self.score is None:
            return "N/A"
        return f"{self.score * 100:.0f}%"
