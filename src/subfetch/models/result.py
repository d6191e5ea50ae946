"""Acquisition result models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from subfetch.models.local import LocalMedia
from subfetch.models.subtitle import LocalSubtitle
from subfetch.utils.language import display_name


class UnitStatus(Enum):
    """Terminal state of one (media item, language) unit."""

    ACQUIRED = "acquired"
    DRY_RUN = "dry_run"
    SKIPPED_COMPLETE = "skipped_complete"
    SKIPPED_NO_CANDIDATES = "skipped_no_candidates"
    SKIPPED_BELOW_THRESHOLD = "skipped_below_threshold"
    FAILED = "failed"


@dataclass
class UnitOutcome:
    """What happened to one language of one media item."""

    item: LocalMedia
    language: str
    status: UnitStatus
    score: Optional[str] = None  # Formatted score of the selected candidate
    reason: Optional[str] = None  # Reason for skip/failure
    subtitle: Optional[LocalSubtitle] = None

    def __str__(self) -> str:
        """Human-readable representation."""
        lang = display_name(self.language)
        if self.status == UnitStatus.ACQUIRED:
            return f"✓ {self.item}: {lang} ({self.score})"
        elif self.status == UnitStatus.DRY_RUN:
            return f"⊙ {self.item}: Would download {lang} (dry run)"
        elif self.status == UnitStatus.FAILED:
            return f"✗ {self.item}: {lang} failed ({self.reason})"
        else:
            return f"⊘ {self.item}: {lang} skipped ({self.reason or self.status.value})"


@dataclass
class AcquisitionResult:
    """Accumulated outcome of an acquisition run."""

    subtitles: list[LocalSubtitle] = field(default_factory=list)
    outcomes: list[UnitOutcome] = field(default_factory=list)

    def with_status(self, status: UnitStatus) -> list[UnitOutcome]:
        """Outcomes with the given status, in processing order."""
        return [o for o in self.outcomes if o.status == status]

    @property
    def would_acquire(self) -> list[tuple[LocalMedia, str]]:
        """(item, language) pairs a dry run would have downloaded."""
        return [(o.item, o.language) for o in self.with_status(UnitStatus.DRY_RUN)]

    def summary(self) -> dict[str, int]:
        """Count of outcomes per status."""
        counts = {status.value: 0 for status in UnitStatus}
        for outcome in self.outcomes:
            counts[outcome.status.value] += 1
        return counts
