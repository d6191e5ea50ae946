"""Candidate filtering, rating and selection."""

from typing import Iterable, Optional

from subfetch.core.evaluator import Evaluator
from subfetch.models.media import Video
from subfetch.models.subtitle import OnlineSubtitle, RatedSubtitle
from subfetch.utils.language import normalize_tag
from subfetch.utils.logger import get_logger

logger = get_logger(__name__)


def filter_hearing_impaired(
    candidates: Iterable[OnlineSubtitle], impaired: bool
) -> list[OnlineSubtitle]:
    """Drop hearing-impaired candidates unless they are wanted.

    Args:
        candidates: Candidates in provider order
        impaired: If True, keep every candidate

    Returns:
        Remaining candidates, order preserved
    """
    if impaired:
        return list(candidates)
    return [sub for sub in candidates if not sub.hearing_impaired]


def filter_language(
    candidates: Iterable[OnlineSubtitle], language: str
) -> list[OnlineSubtitle]:
    """Keep candidates in the given language, order preserved."""
    tag = normalize_tag(language)
    return [sub for sub in candidates if sub.language == tag]


class RatingEngine:
    """Score candidates against local media and pick the best one."""

    def __init__(self, evaluator: Evaluator):
        """Initialize rating engine.

        Args:
            evaluator: Similarity evaluator used for scoring
        """
        self.evaluator = evaluator

    def rate(
        self, media: Video, candidates: Iterable[OnlineSubtitle]
    ) -> list[RatedSubtitle]:
        """Score every candidate against the media.

        Produces one RatedSubtitle per candidate, in input order. Scores
        are clamped to [0, 1]; an evaluator returning None leaves the
        candidate unscored.
        """
        rated = []
        for candidate in candidates:
            score = self.evaluator.evaluate(media, candidate.for_media)
            if score is not None:
                score = min(max(float(score), 0.0), 1.0)
            rated.append(RatedSubtitle(subtitle=candidate, score=score))

        logger.debug(
            "Rated subtitle candidates",
            media=str(media),
            scores=[r.format_score() for r in rated],
        )
        return rated

    @staticmethod
    def best(rated: Iterable[RatedSubtitle]) -> Optional[RatedSubtitle]:
        """Select the highest scoring candidate.

        Ties go to the candidate seen first. Unscored candidates rank below
        any numeric score.

        Returns:
            Best RatedSubtitle, or None if there are no candidates
        """
        best = None
        for entry in rated:
            if best is None or _rank(entry) > _rank(best):
                best = entry
        return best

    @staticmethod
    def passes(rated: RatedSubtitle, threshold: float) -> bool:
        """Check a candidate against the minimum acceptable score.

        Args:
            rated: Candidate to check
            threshold: Minimum score as a fraction in [0, 1]
        """
        if rated.score is None:
            return threshold <= 0
        return rated.score >= threshold


def _rank(rated: RatedSubtitle) -> float:
    return -1.0 if rated.score is None else rated.score
