"""Similarity evaluation between local media and subtitle candidates."""

import re
from abc import ABC, abstractmethod
from typing import Optional

from subfetch.models.media import Episode, Metadata, Movie, Video


class Evaluator(ABC):
    """Scores how well a candidate's media matches the local media."""

    @abstractmethod
    def evaluate(self, reference: Video, candidate: Video) -> Optional[float]:
        """Score the similarity of two media.

        Args:
            reference: The local media
            candidate: The media a subtitle candidate was made for

        Returns:
            Score in [0, 1], or None if no meaningful score is available
        """
        pass


class MetadataEvaluator(Evaluator):
    """Weighted comparison of identity fields and release metadata.

    Identity (title/year for movies, show/season/episode for episodes)
    carries IDENTITY_WEIGHT of the score, the release metadata shares
    the remainder equally between group, codec, quality and source.
    """

    IDENTITY_WEIGHT = 0.6
    RELEASE_FIELDS = ("group", "codec", "quality", "source")

    def evaluate(self, reference: Video, candidate: Video) -> Optional[float]:
        if isinstance(reference, Movie) and isinstance(candidate, Movie):
            identity = self._movie_identity(reference, candidate)
        elif isinstance(reference, Episode) and isinstance(candidate, Episode):
            identity = self._episode_identity(reference, candidate)
        else:
            return 0.0

        release = self._release_similarity(reference.meta, candidate.meta)
        return self.IDENTITY_WEIGHT * identity + (1 - self.IDENTITY_WEIGHT) * release

    @staticmethod
    def _movie_identity(reference: Movie, candidate: Movie) -> float:
        score = 0.0
        if _normalize(reference.name) == _normalize(candidate.name):
            score += 0.5
        if reference.year == candidate.year:
            score += 0.5
        return score

    @staticmethod
    def _episode_identity(reference: Episode, candidate: Episode) -> float:
        score = 0.0
        if _normalize(reference.show) == _normalize(candidate.show):
            score += 0.4
        if reference.season == candidate.season:
            score += 0.3
        if reference.episode == candidate.episode:
            score += 0.3
        return score

    def _release_similarity(self, reference: Metadata, candidate: Metadata) -> float:
        matches = 0
        for name in self.RELEASE_FIELDS:
            ours = getattr(reference, name).lower()
            theirs = getattr(candidate, name).lower()
            if ours and ours == theirs:
                matches += 1
        return matches / len(self.RELEASE_FIELDS)


def _normalize(title: str) -> str:
    """Lower-case a title and drop punctuation for comparison."""
    return re.sub(r"[\W_]+", " ", title.lower()).strip()
