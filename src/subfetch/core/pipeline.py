"""Subtitle acquisition orchestrator."""

import asyncio
from pathlib import Path
from typing import Awaitable, Callable, Iterable, Optional, Union

from subfetch.config import Config
from subfetch.core.catalog import MediaCatalog
from subfetch.core.evaluator import Evaluator, MetadataEvaluator
from subfetch.core.plugins import PluginPipeline
from subfetch.core.provider import SubtitleProvider
from subfetch.core.rating import RatingEngine, filter_hearing_impaired, filter_language
from subfetch.exceptions import (
    AcquisitionError,
    ConfigurationError,
    NoCandidatesError,
    PluginError,
    ProviderError,
    ScoreTooLowError,
)
from subfetch.models.local import LocalMedia
from subfetch.models.result import AcquisitionResult, UnitOutcome, UnitStatus
from subfetch.models.subtitle import LocalSubtitle, OnlineSubtitle, RatedSubtitle
from subfetch.utils.language import LanguageSet, display_name, missing
from subfetch.utils.logger import get_logger

logger = get_logger(__name__)


class AcquisitionOrchestrator:
    """Finds, rates, downloads and post-processes missing subtitles.

    Items are processed one at a time in catalog order and, per item, one
    language at a time in tag order. No provider calls run concurrently.
    """

    def __init__(
        self,
        config: Config,
        provider: SubtitleProvider,
        evaluator: Optional[Evaluator] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the orchestrator.

        Args:
            config: Application configuration
            provider: Subtitle provider used for search and download
            evaluator: Similarity evaluator (defaults to MetadataEvaluator)
            sleep: Coroutine used for the inter-language delay
        """
        self.config = config
        self.options = config.acquisition
        self.provider = provider
        self.rating = RatingEngine(evaluator or MetadataEvaluator())
        self.plugins = PluginPipeline(config.plugins, timeout=config.plugin_timeout)
        self._sleep = sleep

    async def acquire(
        self,
        media: Optional[Union[MediaCatalog, Iterable[LocalMedia]]],
        languages: Optional[Iterable[str]],
    ) -> AcquisitionResult:
        """Acquire subtitles for every item missing a wanted language.

        Args:
            media: Local media to process
            languages: Wanted language tags

        Returns:
            AcquisitionResult with the saved subtitles and per-unit outcomes

        Raises:
            ConfigurationError: If no media, no languages or no video was given
            AcquisitionError: In strict mode, the first per-unit failure
            PluginError: In strict mode, the first plugin failure
        """
        if media is None:
            raise ConfigurationError("no media supplied for subtitles")

        catalog = media if isinstance(media, MediaCatalog) else MediaCatalog(media)
        if not catalog:
            raise ConfigurationError("no media supplied for subtitles")

        if languages is None:
            raise ConfigurationError("no languages supplied for subtitles")

        wanted = LanguageSet(languages)
        video = catalog.filter_video()

        if not video:
            raise ConfigurationError("no video media found in path")

        logger.info(
            "Starting subtitle acquisition",
            media_count=len(video),
            languages=wanted.ordered(),
            dry=self.options.dry,
            strict=self.options.strict,
        )

        result = AcquisitionResult()
        attempted: set[tuple[Path, str]] = set()

        try:
            for index, item in enumerate(video, 1):
                await self._process_item(item, f"{index}/{len(video)}", wanted, result, attempted)
        except (AcquisitionError, PluginError) as e:
            e.partial = result
            logger.error("Acquisition aborted", reason=str(e), acquired=len(result.subtitles))
            raise

        logger.info("Subtitle acquisition finished", **result.summary())
        return result

    async def _process_item(
        self,
        item: LocalMedia,
        progress: str,
        wanted: LanguageSet,
        result: AcquisitionResult,
        attempted: set[tuple[Path, str]],
    ) -> None:
        log = logger.bind(media=str(item), item=progress)

        # Step 1: Resolve missing languages
        present = item.languages()
        missing_langs = missing(wanted, present)

        for lang in sorted(wanted - missing_langs):
            result.outcomes.append(
                UnitOutcome(item=item, language=lang, status=UnitStatus.SKIPPED_COMPLETE)
            )

        if not missing_langs:
            log.info("Subtitles already present, skipping")
            return

        # Step 2: Search (never in dry run)
        candidates: list[OnlineSubtitle] = []
        if not self.options.dry:
            try:
                candidates = await self.provider.search(item)
            except Exception as e:
                error = self._provider_error(e, "subtitle search failed", item)
                log.error("Subtitle search failed", provider=self.provider.name, error=str(e))
                if self.options.strict:
                    raise error from None
                for lang in missing_langs.ordered():
                    result.outcomes.append(
                        UnitOutcome(
                            item=item, language=lang, status=UnitStatus.FAILED, reason=str(error)
                        )
                    )
                return

        # Step 3: Hearing impaired filter
        candidates = filter_hearing_impaired(candidates, self.options.impaired)

        # Step 4: One download cycle per missing language
        for lang in missing_langs.ordered():
            lang_log = log.bind(lang=display_name(lang))

            if self.options.delay > 0:
                await self._sleep(self.options.delay)

            lang_subs = filter_language(candidates, lang)

            if not lang_subs and not self.options.dry:
                lang_log.warning("No subtitle available")
                result.outcomes.append(
                    UnitOutcome(
                        item=item,
                        language=lang,
                        status=UnitStatus.SKIPPED_NO_CANDIDATES,
                        reason="no subtitle available",
                    )
                )
                continue

            if self.options.dry:
                lang_log.info("Skip download", reason="dry-run")
                result.outcomes.append(
                    UnitOutcome(item=item, language=lang, status=UnitStatus.DRY_RUN)
                )
                continue

            key = (item.path, lang)
            if key in attempted:
                lang_log.info("Subtitle already attempted in this run, skipping")
                continue
            attempted.add(key)

            result.outcomes.append(await self._acquire_language(lang_log, item, lang, lang_subs, result))

    async def _acquire_language(
        self,
        log,
        item: LocalMedia,
        lang: str,
        candidates: list[OnlineSubtitle],
        result: AcquisitionResult,
    ) -> UnitOutcome:
        try:
            saved, best = await self._download_best(log, item, lang, candidates)
        except NoCandidatesError as e:
            self._raise_if_strict(e)
            return UnitOutcome(
                item=item, language=lang, status=UnitStatus.SKIPPED_NO_CANDIDATES, reason=str(e)
            )
        except ScoreTooLowError as e:
            self._raise_if_strict(e)
            return UnitOutcome(
                item=item, language=lang, status=UnitStatus.SKIPPED_BELOW_THRESHOLD, reason=str(e)
            )
        except (AcquisitionError, PluginError) as e:
            self._raise_if_strict(e)
            return UnitOutcome(item=item, language=lang, status=UnitStatus.FAILED, reason=str(e))

        result.subtitles.append(saved)
        return UnitOutcome(
            item=item,
            language=lang,
            status=UnitStatus.ACQUIRED,
            score=best.format_score(),
            subtitle=saved,
        )

    async def _download_best(
        self,
        log,
        item: LocalMedia,
        lang: str,
        candidates: list[OnlineSubtitle],
    ) -> tuple[LocalSubtitle, RatedSubtitle]:
        context = {"media": str(item), "language": lang, "provider": self.provider.name}

        # Rate and select; rate() keeps every candidate, so None means an empty pool
        best = self.rating.best(self.rating.rate(item.media, candidates))
        if best is None:
            message = "no subtitles satisfied media"
            log.warning(message)
            raise NoCandidatesError(message, **context)

        # Threshold gate
        threshold = self.options.threshold
        if not self.rating.passes(best, threshold):
            error = ScoreTooLowError(best.score, threshold, **context)
            log.warning(str(error), threshold=f"{self.options.score}%")
            raise error

        # Download
        try:
            content = await self.provider.download(best.subtitle)
        except Exception as e:
            error = self._provider_error(e, "could not download subtitle", item, lang)
            log.error("Could not download subtitle", link=best.subtitle.link, error=str(e))
            raise error from None

        # Persist
        saved = item.save_subtitle(content, best.subtitle.language)
        log.info("Subtitle downloaded", score=best.format_score(), file=str(saved.path))

        # Post-process; the file stays on disk if a plugin fails
        self.plugins.run(saved)

        return saved, best

    def _provider_error(
        self, error: Exception, message: str, item: LocalMedia, lang: Optional[str] = None
    ) -> ProviderError:
        if isinstance(error, ProviderError):
            return error
        return ProviderError(
            f"{message}: {error}",
            media=str(item),
            language=lang,
            provider=self.provider.name,
        )

    def _raise_if_strict(self, error: Exception) -> None:
        if self.options.strict:
            raise error
