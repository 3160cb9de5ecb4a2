"""
Study Data Service.

Public API for the practice tools and the dashboard:
- Record results, exposures, dosage quizzes and wrong answers
- Derive weaknesses, due items, streaks and the daily review set
- Per-tool status and the overall stats snapshot
- Export / import / reset of the whole store

Each call is one load-mutate-save cycle (or one load for read-only views).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

from loguru import logger

from config import Settings, get_settings

from .activity import DEFAULT_DAILY_LOG_DAYS, ActivityLog
from .daily_review import DailyReviewGenerator, ReviewItem
from .dosage import DosageResult, DosageStats, DosageTracker
from .leitner import DueItem, LeitnerScheduler
from .models import DailyRecord, ExposureRecord, SessionRecord, StudyDocument, WrongAnswerEntry, WrongAnswerRecord
from .registry import TOPICS
from .storage import JSONFileStorage, StorageBackend
from .store import StudyStore
from .utils import Clock, percent
from .weakness import WeaknessEngine, WeaknessEntry
from .wrong_answers import WrongAnswerLedger, WrongAnswerStats


class ToolStatus(str, Enum):
    """Progress status of a tool, for the hub cards."""

    NOT_STARTED = "not-started"
    ITEMS_DUE = "items-due"
    IN_PROGRESS = "in-progress"


@dataclass
class ProjectStatus:
    """Aggregate view of one tool across all topics."""

    total_attempts: int
    accuracy: int | None
    last_used_at: int | None
    due_for_review_count: int
    status: ToolStatus

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data


@dataclass
class OverallStats:
    """Read-only dashboard snapshot combining every engine."""

    total_attempts: int
    accuracy: int | None
    concept_scores: dict[str, int | None]
    weaknesses: list[WeaknessEntry]
    streak: int
    exposure_count: int
    due_items_count: int
    dosage_stats: DosageStats
    wrong_answer_stats: WrongAnswerStats

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["dosage_stats"] = self.dosage_stats.to_dict()
        return data


class StudyDataService:
    """
    Facade over the study store and its engines.

    Construct once per host and share; tests pass a StudyStore over
    MemoryStorage with a fake clock.
    """

    def __init__(
        self,
        store: StudyStore,
        weakness: WeaknessEngine | None = None,
        scheduler: LeitnerScheduler | None = None,
        daily_review_size: int | None = None,
        daily_review_max_retests: int | None = None,
    ):
        """
        Initialize the service.

        Args:
            store: Study store (persistence + clock)
            weakness: Weakness engine (default thresholds if None)
            scheduler: Leitner scheduler (default intervals if None)
            daily_review_size: Cap of the daily review set
            daily_review_max_retests: Wrong-answer retests at the head of the set
        """
        self.store = store
        self.weakness = weakness or WeaknessEngine()
        self.scheduler = scheduler or LeitnerScheduler()
        self.ledger = WrongAnswerLedger(self.scheduler)
        self.activity = ActivityLog()
        self.dosage = DosageTracker()

        generator_options = {}
        if daily_review_size is not None:
            generator_options["size"] = daily_review_size
        if daily_review_max_retests is not None:
            generator_options["max_retests"] = daily_review_max_retests
        self.daily_review = DailyReviewGenerator(
            self.scheduler, self.ledger, self.weakness, **generator_options
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        backend: StorageBackend | None = None,
        clock: Clock | None = None,
    ) -> StudyDataService:
        """Build a service over the configured JSON-file storage."""
        settings = settings or get_settings()
        store = StudyStore(
            backend or JSONFileStorage(settings.study_data_dir),
            storage_key=settings.study_data_storage_key,
            clock=clock,
        )
        return cls(
            store,
            daily_review_size=settings.daily_review_size,
            daily_review_max_retests=settings.daily_review_max_retests,
        )

    def _now(self) -> int:
        return self.store.now()

    # =========================================================================
    # Performance & Weakness
    # =========================================================================

    def record_result(
        self,
        tool: str,
        topic: str,
        correct: int,
        total: int,
        details: Any = None,
    ) -> int | None:
        """
        Record a batch of practice results.

        Updates the topic/tool performance, the topic weakness, the session
        log and today's activity.

        Args:
            tool: Tool identifier
            topic: Topic identifier
            correct: Correct answers in the batch
            total: Questions in the batch
            details: Optional JSON-serializable payload stored with the session

        Returns:
            Accuracy percent of this tool on this topic (None if no attempts)
        """
        with self.store.transaction() as document:
            now = self._now()
            accuracy = self.weakness.apply_result(document, tool, topic, correct, total, now)
            self.activity.append_session(document, tool, topic, correct, total, details, now)
            self.activity.bump_daily(document, tool, correct, total, now)
        logger.debug(f"Recorded {correct}/{total} for {tool} on {topic} (accuracy {accuracy})")
        return accuracy

    def get_weaknesses(self) -> list[WeaknessEntry]:
        return self.weakness.weaknesses(self.store.snapshot())

    def get_concept_score(self, topic: str) -> int | None:
        return self.weakness.concept_score(self.store.snapshot(), topic)

    # =========================================================================
    # Spaced Repetition
    # =========================================================================

    def track_exposure(self, item_key: str, was_correct: bool) -> ExposureRecord:
        with self.store.transaction() as document:
            return self.scheduler.track_exposure(document, item_key, was_correct, self._now())

    def get_due_items(self, limit: int | None = None) -> list[DueItem]:
        return self.scheduler.due_items(self.store.snapshot(), self._now(), limit=limit)

    def get_exposure_count(self) -> int:
        return self.scheduler.exposure_count(self.store.snapshot())

    # =========================================================================
    # Dosage Quizzes
    # =========================================================================

    def record_dosage_quiz(self, score: int, total_questions: int) -> DosageResult:
        with self.store.transaction() as document:
            return self.dosage.record_quiz(document, score, total_questions, self._now())

    def get_dosage_stats(self) -> DosageStats:
        return self.dosage.stats(self.store.snapshot())

    # =========================================================================
    # Wrong-Answer Ledger
    # =========================================================================

    def add_wrong_answer(self, entry: WrongAnswerEntry | Mapping[str, Any] | None = None) -> WrongAnswerRecord:
        with self.store.transaction() as document:
            return self.ledger.add(document, entry, self._now())

    def get_wrong_answers_due(self) -> list[WrongAnswerRecord]:
        return self.ledger.due(self.store.snapshot(), self._now())

    def retest_wrong_answer(self, wrong_answer_id: str, was_correct: bool) -> WrongAnswerRecord | None:
        """
        Record a retest of a logged wrong answer.

        Returns:
            The rescheduled record, or None (nothing written) for an unknown id
        """
        with self.store.lock:
            if self.ledger.find(self.store.snapshot(), wrong_answer_id) is None:
                logger.debug(f"Retest for unknown wrong answer {wrong_answer_id!r} ignored")
                return None

            with self.store.transaction() as document:
                return self.ledger.retest(document, wrong_answer_id, was_correct, self._now())

    def get_wrong_answer_stats(self) -> WrongAnswerStats:
        return self.ledger.stats(self.store.snapshot(), self._now())

    # =========================================================================
    # Sessions & Daily Activity
    # =========================================================================

    def get_session_history(self, days: float) -> list[SessionRecord]:
        return self.activity.session_history(self.store.snapshot(), days, self._now())

    def get_daily_log(self, days: int | None = DEFAULT_DAILY_LOG_DAYS) -> dict[str, DailyRecord]:
        return self.activity.daily_log(self.store.snapshot(), self._now(), days)

    def get_streak(self) -> int:
        return self.activity.streak(self.store.snapshot(), self._now())

    # =========================================================================
    # Daily Review
    # =========================================================================

    def generate_daily_10(self) -> list[ReviewItem]:
        """Mixed review set: retests, then due items, then weak topics."""
        return self.daily_review.generate(self.store.snapshot(), self._now())

    # =========================================================================
    # Aggregate Stats
    # =========================================================================

    def get_project_status(self, tool: str) -> ProjectStatus:
        document = self.store.snapshot()
        correct, total, last_used_at = self.weakness.tool_totals(document, tool)
        prefix = f"{tool}:"
        due_count = sum(
            1 for item in self.scheduler.due_items(document, self._now()) if item.key.startswith(prefix)
        )

        if total == 0:
            status = ToolStatus.NOT_STARTED
        elif due_count > 0:
            status = ToolStatus.ITEMS_DUE
        else:
            status = ToolStatus.IN_PROGRESS

        return ProjectStatus(
            total_attempts=total,
            accuracy=percent(correct, total),
            last_used_at=last_used_at,
            due_for_review_count=due_count,
            status=status,
        )

    def get_overall_stats(self) -> OverallStats:
        """Dashboard snapshot, derived from a single load of the store."""
        document = self.store.snapshot()
        now = self._now()
        correct, total = self.weakness.overall_totals(document)

        return OverallStats(
            total_attempts=total,
            accuracy=percent(correct, total),
            concept_scores={topic: self.weakness.concept_score(document, topic) for topic in TOPICS},
            weaknesses=self.weakness.weaknesses(document),
            streak=self.activity.streak(document, now),
            exposure_count=self.scheduler.exposure_count(document),
            due_items_count=len(self.scheduler.due_items(document, now)),
            dosage_stats=self.dosage.stats(document),
            wrong_answer_stats=self.ledger.stats(document, now),
        )

    # =========================================================================
    # Export / Import / Reset
    # =========================================================================

    def export_data(self) -> str:
        return self.store.export_data()

    def import_data(self, raw: str) -> bool:
        return self.store.import_data(raw)

    def reset_all(self) -> StudyDocument:
        return self.store.reset()
