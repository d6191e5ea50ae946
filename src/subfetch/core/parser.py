"""Filename heuristics for building movies, episodes and release metadata."""

import re
from pathlib import PurePath

from subfetch.exceptions import MediaParseError
from subfetch.models.media import Episode, Metadata, Movie, Video
from subfetch.utils.language import UNDETERMINED, normalize_tag
from subfetch.utils.logger import get_logger

logger = get_logger(__name__)

_EPISODE_PATTERNS = (
    # Show.Name.S01E01.Tags or Show Name - s01e01 - Tags
    re.compile(r"^(.+?)[\W_]+S(\d{1,2})E(\d{1,3})(?:[\W_]+(.*))?$", re.IGNORECASE),
    # Show.Name.1x01.Tags
    re.compile(r"^(.+?)[\W_]+(\d{1,2})x(\d{2,3})(?:[\W_]+(.*))?$", re.IGNORECASE),
)

# Greedy name so that a year inside the title ("2001 A Space Odyssey 1968")
# does not shadow the release year
_MOVIE_PATTERN = re.compile(r"^(.+)[\W_]+\(?(19\d\d|20\d\d)\)?(?:[\W_]+(.*))?$")

_CODECS = (
    (re.compile(r"(?<![a-z0-9])(x264|h\.?264)(?![a-z0-9])"), "x264"),
    (re.compile(r"(?<![a-z0-9])(x265|h\.?265)(?![a-z0-9])"), "x265"),
    (re.compile(r"(?<![a-z0-9])hevc(?![a-z0-9])"), "hevc"),
    (re.compile(r"(?<![a-z0-9])avc(?![a-z0-9])"), "avc"),
    (re.compile(r"(?<![a-z0-9])xvid(?![a-z0-9])"), "xvid"),
)

_QUALITIES = ("2160p", "1080p", "720p", "480p", "360p")

_SOURCES = (
    (re.compile(r"(?<![a-z0-9])(blu-?ray|bdremux)(?![a-z0-9])"), "bluray"),
    (re.compile(r"(?<![a-z0-9])web-?dl(?![a-z0-9])"), "web-dl"),
    (re.compile(r"(?<![a-z0-9])web-?rip(?![a-z0-9])"), "webrip"),
    (re.compile(r"(?<![a-z0-9])hdtv(?![a-z0-9])"), "hdtv"),
    (re.compile(r"(?<![a-z0-9])dvd-?rip(?![a-z0-9])"), "dvdrip"),
    (re.compile(r"(?<![a-z0-9])hd-?rip(?![a-z0-9])"), "hdrip"),
    (re.compile(r"(?<![a-z0-9])(br-?rip|bd-?rip)(?![a-z0-9])"), "bdrip"),
    (re.compile(r"(?<![a-z0-9])remux(?![a-z0-9])"), "remux"),
)

# Subtitle filename markers that look like language tags but are not
_SUBTITLE_FLAGS = ("sdh", "cc")


def parse_filename(filename: str) -> Video:
    """Parse a video filename into a movie or an episode.

    Patterns supported:
    - TV shows: "Show.Name.S01E01.1080p.WEB-DL.x264-GROUP.mkv"
    - TV shows: "Show Name - 1x01 - HDTV.mkv"
    - Movies: "Movie.Name.2023.1080p.BluRay.x264-GROUP.mkv"
    - Movies: "Movie Name (2023).mkv"

    Args:
        filename: Filename or path to parse (extension is ignored)

    Returns:
        Episode or Movie

    Raises:
        MediaParseError: If the filename describes neither
    """
    name = PurePath(filename).stem

    for pattern in _EPISODE_PATTERNS:
        if match := pattern.match(name):
            episode = Episode(
                show=_clean_title(match.group(1)),
                season=int(match.group(2)),
                episode=int(match.group(3)),
                meta=parse_metadata(match.group(4) or ""),
            )
            logger.debug("Parsed episode from filename", filename=filename, media=str(episode))
            return episode

    if match := _MOVIE_PATTERN.match(name):
        movie = Movie(
            name=_clean_title(match.group(1)),
            year=int(match.group(2)),
            meta=parse_metadata(match.group(3) or ""),
        )
        logger.debug("Parsed movie from filename", filename=filename, media=str(movie))
        return movie

    raise MediaParseError(f"could not parse media from {filename!r}")


def parse_metadata(tags: str) -> Metadata:
    """Parse release metadata from the trailing segment of a filename.

    Args:
        tags: Text after the title/year or episode marker
            (e.g. "1080p.BluRay.x264-SPARKS")

    Returns:
        Metadata with normalized codec, quality and source tags
    """
    lowered = tags.lower()

    codec = next((tag for pattern, tag in _CODECS if pattern.search(lowered)), "")
    source = next((tag for pattern, tag in _SOURCES if pattern.search(lowered)), "")
    quality = next((q for q in _QUALITIES if q in lowered), "")

    group = ""
    if "-" in tags:
        candidate = re.split(r"[\W_]+", tags.rsplit("-", 1)[1].strip())[0]
        if candidate and candidate.lower() not in ("dl", "rip", "ray"):
            group = candidate

    return Metadata(
        group=group,
        codec=codec,
        quality=quality,
        source=source,
        tags=tuple(t for t in re.split(r"[\W_]+", lowered) if t),
    )


def parse_subtitle_language(suffix: str) -> str:
    """Determine the language of a subtitle from its filename suffix.

    Args:
        suffix: Part of the subtitle filename after the video stem
            (e.g. ".en.srt", ".pt-BR.srt", ".srt")

    Returns:
        Normalized language tag, or 'und' if the suffix names no language
    """
    parts = [p for p in suffix.split(".") if p]
    if len(parts) < 2:
        return UNDETERMINED

    candidate = parts[-2]
    if candidate.lower() in _SUBTITLE_FLAGS:
        return UNDETERMINED
    return normalize_tag(candidate)


def _clean_title(title: str) -> str:
    """Replace separators with spaces and collapse whitespace."""
    cleaned = title.replace(".", " ").replace("_", " ")
    cleaned = re.sub(r"\s+", " ", cleaned)
    return cleaned.strip(" -")
