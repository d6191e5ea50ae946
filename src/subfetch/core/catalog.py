"""In-memory catalog of locally discovered media."""

from datetime import datetime, timedelta
from typing import Iterable, Iterator, Optional

from subfetch.models.local import LocalMedia
from subfetch.utils.language import LanguageSet, missing


class MediaCatalog:
    """Immutable, insertion-ordered collection of local media for one run.

    All filters return a new catalog and never touch the filesystem, except
    ``filter_missing`` which reads the subtitles stored next to each item.
    """

    def __init__(self, items: Iterable[LocalMedia] = ()):
        self._items = tuple(items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[LocalMedia]:
        return iter(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"MediaCatalog({len(self._items)} items)"

    def list(self) -> list[LocalMedia]:
        """Items in insertion order."""
        return list(self._items)

    def filter_video(self) -> "MediaCatalog":
        """Keep only items backed by a movie or an episode."""
        return MediaCatalog(item for item in self._items if item.is_video)

    def filter_modified(
        self, within: timedelta, now: Optional[datetime] = None
    ) -> "MediaCatalog":
        """Keep only items modified within a trailing time window.

        Args:
            within: Size of the window (e.g. ``timedelta(hours=24)``)
            now: Reference time (defaults to the current local time)
        """
        cutoff = (now or datetime.now()) - within
        return MediaCatalog(item for item in self._items if item.modified > cutoff)

    def filter_missing(self, languages: Iterable[str]) -> "MediaCatalog":
        """Keep only items lacking a subtitle in at least one wanted language."""
        wanted = LanguageSet(languages)
        return MediaCatalog(
            item for item in self._items if missing(wanted, item.languages())
        )
