"""Exception hierarchy for subfetch."""

from typing import Optional


class SubfetchError(Exception):
    """Base exception for all subfetch errors."""

    pass


class ConfigurationError(SubfetchError):
    """Invalid run configuration or input (no media, no languages, no video)."""

    pass


class MediaParseError(SubfetchError):
    """A filename could not be parsed into media."""

    pass


class MediaMergeError(SubfetchError):
    """Two media values could not be merged."""

    pass


class AcquisitionError(SubfetchError):
    """Soft per-unit error raised while acquiring a subtitle.

    Carries the context of the unit that failed. Lower-level errors are not
    chained into the message.
    """

    def __init__(
        self,
        message: str,
        media: Optional[str] = None,
        language: Optional[str] = None,
        provider: Optional[str] = None,
    ):
        super().__init__(message)
        self.media = media
        self.language = language
        self.provider = provider
        self.partial = None


class ProviderError(AcquisitionError):
    """Subtitle provider search or download failed."""

    pass


class NoCandidatesError(AcquisitionError):
    """No subtitle candidate could be rated against the media."""

    pass


class ScoreTooLowError(AcquisitionError):
    """The best candidate scored below the configured threshold."""

    def __init__(self, score: Optional[float], threshold: float, **context):
        shown = "N/A" if score is None else f"{score * 100:.0f}%"
        super().__init__(f"Score too low {shown}", **context)
        self.score = score
        self.threshold = threshold


class PersistenceError(AcquisitionError):
    """Writing a subtitle next to its video failed."""

    pass


class PluginError(SubfetchError):
    """A post-processing plugin failed."""

    def __init__(self, message: str, plugin: str, output: str = ""):
        super().__init__(message)
        self.plugin = plugin
        self.output = output
        self.partial = None


class TMDBError(SubfetchError):
    """TheMovieDB lookup failed."""

    pass
