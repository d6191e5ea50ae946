"""Media data models: movies, episodes and their release metadata."""

import dataclasses
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

from subfetch.exceptions import MediaMergeError, MediaParseError

if TYPE_CHECKING:
    from subfetch.models.subtitle import LocalSubtitle, OnlineSubtitle


@dataclass(frozen=True)
class Metadata:
    """Release information parsed from the trailing part of a filename."""

    group: str = ""  # Release group (e.g. "SPARKS")
    codec: str = ""  # Normalized codec tag (e.g. "x264")
    quality: str = ""  # Resolution tag (e.g. "1080p")
    source: str = ""  # Source tag (e.g. "bluray")
    tags: tuple[str, ...] = ()  # All lower-cased tokens

    def __str__(self) -> str:
        parts = [p for p in (self.quality, self.source, self.codec) if p]
        if self.group:
            parts.append(f"-{self.group}")
        return " ".join(parts)


@dataclass(frozen=True)
class Movie:
    """A feature film identified by name and release year."""

    name: str
    year: int
    meta: Metadata = field(default_factory=Metadata)

    def __post_init__(self):
        if not isinstance(self.year, int) or not (1900 <= self.year <= 2099):
            raise MediaParseError(f"Invalid movie year: {self.year!r}")

    def __str__(self) -> str:
        return f"{self.name} ({self.year})"


@dataclass(frozen=True)
class Episode:
    """A single episode of a TV show."""

    show: str
    season: int
    episode: int
    title: str = ""  # Episode name, often unknown from the filename
    meta: Metadata = field(default_factory=Metadata)

    def __str__(self) -> str:
        return f"{self.show} S{self.season:02d}E{self.episode:02d}"


Video = Union[Movie, Episode]
Media = Union[Movie, Episode, "LocalSubtitle", "OnlineSubtitle"]


def is_video(media: object) -> bool:
    """Return True if the media is a movie or an episode."""
    return isinstance(media, (Movie, Episode))


def merge(media: Video, other: Video) -> Video:
    """Fill gaps in media with information from other media of the same kind.

    Neither argument is modified; a new value is returned.

    Args:
        media: Local media to enrich
        other: Media carrying canonical information (e.g. from a scraper)

    Returns:
        New media value of the same variant as ``media``

    Raises:
        MediaMergeError: If the variants differ, a subtitle is involved, or
            key fields (year, season/episode numbers) conflict
    """
    if isinstance(media, Movie) and isinstance(other, Movie):
        if media.year != other.year:
            raise MediaMergeError("invalid media merge year does not match")
        return dataclasses.replace(media, name=other.name or media.name)

    if isinstance(media, Episode) and isinstance(other, Episode):
        if (media.season, media.episode) != (other.season, other.episode):
            raise MediaMergeError("invalid media merge episode does not match")
        return dataclasses.replace(
            media,
            show=other.show or media.show,
            title=other.title or media.title,
        )

    if not is_video(media) or not is_video(other):
        raise MediaMergeError("merging of subtitles is not supported")
    raise MediaMergeError("invalid media merge not same media type")
