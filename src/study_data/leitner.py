"""
Leitner Spaced-Repetition Scheduler.

Five boxes with review intervals of 1, 3, 7, 14 and 30 days. A correct answer
moves an item up one box (capped at 5); a wrong answer sends it back to box 1.

Item keys are formatted as "<tool>:<itemId>" so due items can be attributed to
the tool that owns them.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from loguru import logger

from .models import MAX_BOX, MIN_BOX, ExposureRecord, StudyDocument
from .registry import SR_INTERVALS
from .utils import MS_PER_DAY, whole_days


@dataclass
class LeitnerConfig:
    """Configuration for the Leitner scheduler."""

    intervals: tuple[int, ...] = SR_INTERVALS
    fallback_interval: int = 1  # Days, for boxes outside the table


@dataclass
class DueItem:
    """A tracked item whose review interval has elapsed."""

    key: str
    box: int
    last_seen_at: int
    days_since_seen: int
    times_seen: int
    days_overdue: int

    @property
    def tool(self) -> str:
        """Owning tool, taken from the key prefix."""
        return tool_from_key(self.key)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def tool_from_key(key: str) -> str:
    """Tool identifier encoded in an item key, or 'unknown'."""
    return key.split(":", 1)[0] or "unknown"


class LeitnerScheduler:
    """Box arithmetic and due-item derivation over the exposure table."""

    def __init__(self, config: LeitnerConfig | None = None):
        """
        Initialize the scheduler.

        Args:
            config: Custom configuration (uses defaults if None)
        """
        self.config = config or LeitnerConfig()

    def interval_days(self, box: int) -> int:
        """Review interval of a box in days."""
        if MIN_BOX <= box <= len(self.config.intervals):
            return self.config.intervals[box - 1]
        return self.config.fallback_interval

    def interval_ms(self, box: int) -> int:
        return self.interval_days(box) * MS_PER_DAY

    @staticmethod
    def next_box(box: int, was_correct: bool) -> int:
        """Box after an answer: up one on success, back to 1 on failure."""
        if was_correct:
            return min(box + 1, MAX_BOX)
        return MIN_BOX

    def track_exposure(
        self,
        document: StudyDocument,
        item_key: str,
        was_correct: bool,
        now: int,
    ) -> ExposureRecord:
        """
        Record one review of an item.

        Args:
            document: Document to mutate
            item_key: "<tool>:<itemId>" key
            was_correct: Whether the answer was correct
            now: Current epoch ms

        Returns:
            The updated ExposureRecord
        """
        record = document.exposure.get(item_key)
        if record is None:
            record = ExposureRecord(last_seen_at=now, times_seen=0, box=MIN_BOX)
            document.exposure[item_key] = record

        record.last_seen_at = now
        record.times_seen += 1
        record.box = self.next_box(record.box, was_correct)
        logger.debug(f"Exposure {item_key}: box={record.box} seen={record.times_seen}")
        return record

    def due_items(self, document: StudyDocument, now: int, limit: int | None = None) -> list[DueItem]:
        """
        Items due for review.

        Lower boxes come first; within a box, the most overdue first.

        Args:
            document: Document to read
            now: Current epoch ms
            limit: Maximum items to return (falsy = no limit)
        """
        due = []
        for key, record in document.exposure.items():
            due_at = record.last_seen_at + self.interval_ms(record.box)
            if now < due_at:
                continue
            due.append(
                DueItem(
                    key=key,
                    box=record.box,
                    last_seen_at=record.last_seen_at,
                    days_since_seen=whole_days(now - record.last_seen_at),
                    times_seen=record.times_seen,
                    days_overdue=whole_days(now - due_at),
                )
            )

        due.sort(key=lambda item: (item.box, -item.days_overdue))
        return due[:limit] if limit else due

    @staticmethod
    def exposure_count(document: StudyDocument) -> int:
        return len(document.exposure)
