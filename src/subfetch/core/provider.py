"""Subtitle provider interface and loading."""

import importlib
from abc import ABC, abstractmethod
from typing import Any

from subfetch.exceptions import ConfigurationError
from subfetch.models.local import LocalMedia
from subfetch.models.subtitle import OnlineSubtitle
from subfetch.utils.logger import get_logger

logger = get_logger(__name__)


class SubtitleProvider(ABC):
    """Abstract base class for subtitle providers.

    Implementations raise ``ProviderError`` when a search or a download fails.
    """

    name: str = "provider"

    @abstractmethod
    async def search(self, item: LocalMedia) -> list[OnlineSubtitle]:
        """Search subtitles for a local media item.

        Args:
            item: Local media to find subtitles for

        Returns:
            Candidates in provider relevance order (may be empty)
        """
        pass

    @abstractmethod
    async def download(self, subtitle: OnlineSubtitle) -> bytes:
        """Resolve a candidate's link and fetch its content.

        Args:
            subtitle: Candidate previously returned by ``search``

        Returns:
            Raw subtitle bytes
        """
        pass

    async def close(self) -> None:
        """Release any resources held by the provider."""
        pass


def load_provider(path: str, **options: Any) -> SubtitleProvider:
    """Import and instantiate a provider from a 'package.module:Class' path.

    Args:
        path: Import path of the provider class
        **options: Keyword arguments passed to the provider constructor

    Returns:
        Provider instance

    Raises:
        ConfigurationError: If the path is malformed, cannot be imported, or
            does not name a SubtitleProvider
    """
    module_name, sep, class_name = path.partition(":")
    if not sep or not module_name or not class_name:
        raise ConfigurationError(f"Provider must be given as 'module:Class', got {path!r}")

    try:
        module = importlib.import_module(module_name)
        provider_cls = getattr(module, class_name)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(f"Could not load provider {path!r}: {e}") from e

    if not (isinstance(provider_cls, type) and issubclass(provider_cls, SubtitleProvider)):
        raise ConfigurationError(f"{path!r} is not a SubtitleProvider")

    provider = provider_cls(**options)
    logger.info("Loaded subtitle provider", provider=provider.name, path=path)
    return provider
