"""Media files found on the local filesystem."""

import os
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from subfetch.core.parser import parse_subtitle_language
from subfetch.exceptions import PersistenceError
from subfetch.models.media import Video, is_video
from subfetch.models.subtitle import LocalSubtitle
from subfetch.utils.language import LanguageSet, normalize_tag
from subfetch.utils.logger import get_logger

logger = get_logger(__name__)

SUBTITLE_EXTENSION = ".srt"


@dataclass(frozen=True)
class LocalMedia:
    """A parsed video bound to its file on disk."""

    path: Path
    media: Video
    modified: datetime

    @classmethod
    def from_path(cls, path: Path, media: Video) -> "LocalMedia":
        """Bind media to a file, reading its modification time."""
        return cls(
            path=path,
            media=media,
            modified=datetime.fromtimestamp(path.stat().st_mtime),
        )

    @property
    def is_video(self) -> bool:
        return is_video(self.media)

    def __str__(self) -> str:
        return str(self.media)

    def subtitle_path(self, language: str) -> Path:
        """Path where a subtitle in the given language is stored."""
        return self.path.with_name(f"{self.path.stem}.{normalize_tag(language)}{SUBTITLE_EXTENSION}")

    def existing_subtitles(self) -> list[LocalSubtitle]:
        """List subtitles already stored next to the video.

        A subtitle belongs to the video when its name is the video's stem
        followed by an optional language tag, e.g. ``movie.en.srt`` or
        ``movie.srt`` for ``movie.mkv``. Subtitles of sibling releases such as
        ``movie.x265.en.srt`` are not included.

        Returns:
            Local subtitles, sorted by filename
        """
        stem = self.path.stem
        subtitles = []

        for candidate in sorted(self.path.parent.glob(f"*{SUBTITLE_EXTENSION}")):
            name = candidate.name
            if not name.startswith(f"{stem}.") or not candidate.is_file():
                continue

            suffix = name[len(stem):]
            if suffix.count(".") > 2:
                continue

            subtitles.append(
                LocalSubtitle(
                    path=candidate,
                    for_media=self.media,
                    language=parse_subtitle_language(suffix),
                )
            )

        return subtitles

    def languages(self) -> LanguageSet:
        """Languages of the subtitles already stored next to the video."""
        return LanguageSet(sub.language for sub in self.existing_subtitles())

    def save_subtitle(self, content: bytes, language: str) -> LocalSubtitle:
        """Write subtitle content next to the video.

        The file is written to a temporary name in the same directory and
        atomically moved into place.

        Args:
            content: Raw subtitle bytes
            language: Language tag of the subtitle

        Returns:
            LocalSubtitle for the written file

        Raises:
            PersistenceError: If the file could not be written
        """
        language = normalize_tag(language)
        target = self.subtitle_path(language)

        try:
            fd, temp_name = tempfile.mkstemp(
                prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
            )
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(content)
                os.replace(temp_name, target)
            except BaseException:
                Path(temp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            logger.error(
                "Failed to write subtitle",
                file=str(target),
                error=str(e),
            )
            raise PersistenceError(
                f"could not write subtitle {target.name}",
                media=str(self.media),
                language=language,
            ) from None

        logger.debug("Subtitle written", file=str(target), size=len(content))

        return LocalSubtitle(path=target, for_media=self.media, language=language)
