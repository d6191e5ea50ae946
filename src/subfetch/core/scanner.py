"""File scanner for discovering video files."""

from pathlib import Path
from typing import Iterable, List

from subfetch.core.catalog import MediaCatalog
from subfetch.core.parser import parse_filename
from subfetch.exceptions import MediaParseError
from subfetch.models.local import LocalMedia
from subfetch.utils.logger import get_logger

logger = get_logger(__name__)


class FileScanner:
    """Scan directories for video files and build a media catalog."""

    SUPPORTED_EXTENSIONS = {".mkv", ".mp4", ".avi", ".m4v"}

    def __init__(self, extensions: Iterable[str] | None = None, recursive: bool = True):
        """Initialize scanner.

        Args:
            extensions: File extensions to include (default: SUPPORTED_EXTENSIONS)
            recursive: If True, scan subdirectories recursively
        """
        if extensions is None:
            extensions = self.SUPPORTED_EXTENSIONS

        # Ensure extensions start with a dot and are lowercase
        self.extensions = {
            ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions
        }
        self.recursive = recursive

    def scan(self, path: Path) -> List[Path]:
        """Scan a path for video files.

        Args:
            path: Path to scan (file or directory)

        Returns:
            List of video file paths, sorted by path

        Raises:
            FileNotFoundError: If path doesn't exist
            ValueError: If path is not a file or directory
        """
        if not path.exists():
            raise FileNotFoundError(f"Path not found: {path}")

        if path.is_file():
            if path.suffix.lower() in self.extensions:
                return [path]
            logger.warning(
                "File extension not supported",
                file=str(path),
                extension=path.suffix,
                supported=sorted(self.extensions),
            )
            return []

        if path.is_dir():
            candidates = path.rglob("*") if self.recursive else path.glob("*")
            files = sorted(
                p for p in candidates if p.is_file() and p.suffix.lower() in self.extensions
            )

            logger.info(
                "Directory scan complete",
                directory=str(path),
                recursive=self.recursive,
                total_files=len(files),
            )
            return files

        raise ValueError(f"Path is neither a file nor a directory: {path}")

    def catalog(self, paths: Iterable[Path]) -> MediaCatalog:
        """Scan paths and parse every video found into a catalog.

        Files whose names cannot be parsed into a movie or an episode are
        logged and left out.

        Args:
            paths: Files or directories to scan

        Returns:
            MediaCatalog in scan order, without duplicates
        """
        seen = set()
        items = []

        for path in paths:
            for file in self.scan(Path(path)):
                resolved = file.resolve()
                if resolved in seen:
                    continue
                seen.add(resolved)

                try:
                    media = parse_filename(file.name)
                except MediaParseError as e:
                    logger.warning("Skipping unrecognized video", file=str(file), error=str(e))
                    continue

                items.append(LocalMedia.from_path(resolved, media))

        logger.info("Media catalog built", total_media=len(items))
        return MediaCatalog(items)
