"""
Wrong-Answer Ledger.

An append-only log of missed questions. Each entry carries its own Leitner
schedule (`sr_box`, `sr_next_due_at`) and a full retest history.
"""

from __future__ import annotations

import uuid
from collections import Counter
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Any

from loguru import logger

from .leitner import LeitnerScheduler
from .models import MIN_BOX, RetestEntry, StudyDocument, WrongAnswerEntry, WrongAnswerRecord

MASTERED_BOX = 4


@dataclass
class WrongAnswerStats:
    """Tallies over the full ledger."""

    total: int = 0
    due_for_retest_count: int = 0
    mastered_count: int = 0
    error_type_counts: dict[str, int] = field(default_factory=dict)
    topic_counts: dict[str, int] = field(default_factory=dict)
    source_counts: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def new_wrong_answer_id(now: int) -> str:
    """Ledger id: creation time plus a random suffix."""
    return f"wa_{now}_{uuid.uuid4().hex[:8]}"


class WrongAnswerLedger:
    """Logs wrong answers and schedules their retests."""

    def __init__(self, scheduler: LeitnerScheduler | None = None):
        self.scheduler = scheduler or LeitnerScheduler()

    def add(
        self,
        document: StudyDocument,
        entry: WrongAnswerEntry | Mapping[str, Any] | None,
        now: int,
    ) -> WrongAnswerRecord:
        """
        Append a wrong answer, first due for retest one day from now.

        Args:
            document: Document to mutate
            entry: Question details; camelCase or snake_case keys, all optional
            now: Current epoch ms
        """
        if not isinstance(entry, WrongAnswerEntry):
            entry = WrongAnswerEntry.model_validate(dict(entry or {}))

        record = WrongAnswerRecord(
            **entry.model_dump(),
            id=new_wrong_answer_id(now),
            created_at=now,
            sr_box=MIN_BOX,
            sr_next_due_at=now + self.scheduler.interval_ms(MIN_BOX),
        )
        document.wrong_answer_log.append(record)
        logger.debug(f"Logged wrong answer {record.id} ({record.topic or 'no topic'})")
        return record

    @staticmethod
    def due(document: StudyDocument, now: int) -> list[WrongAnswerRecord]:
        return [record for record in document.wrong_answer_log if record.sr_next_due_at <= now]

    def retest(
        self,
        document: StudyDocument,
        wrong_answer_id: str,
        was_correct: bool,
        now: int,
    ) -> WrongAnswerRecord | None:
        """
        Record a retest and reschedule the entry.

        Returns:
            The updated record, or None if the id is unknown
        """
        record = self.find(document, wrong_answer_id)
        if record is None:
            return None

        record.retest_history.append(RetestEntry(timestamp=now, was_correct=was_correct))
        record.sr_box = self.scheduler.next_box(record.sr_box, was_correct)
        record.sr_next_due_at = now + self.scheduler.interval_ms(record.sr_box)
        return record

    @staticmethod
    def find(document: StudyDocument, wrong_answer_id: str) -> WrongAnswerRecord | None:
        return next((r for r in document.wrong_answer_log if r.id == wrong_answer_id), None)

    @staticmethod
    def stats(document: StudyDocument, now: int) -> WrongAnswerStats:
        log = document.wrong_answer_log
        # Empty error types and topics form their own bucket; empty sources are skipped.
        return WrongAnswerStats(
            total=len(log),
            due_for_retest_count=sum(1 for r in log if r.sr_next_due_at <= now),
            mastered_count=sum(1 for r in log if r.sr_box >= MASTERED_BOX),
            error_type_counts=dict(Counter(r.error_type for r in log)),
            topic_counts=dict(Counter(r.topic for r in log)),
            source_counts=dict(Counter(r.source for r in log if r.source)),
        )
