"""
Persisted document schema.

The whole store is one JSON document. Field names on the wire are camelCase
(`lastSeenAt`, `srNextDueAt`, ...); the Python attributes are snake_case.
Timestamps are epoch milliseconds.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

SCHEMA_VERSION = 1

# Bounded histories (oldest entries dropped first)
PERFORMANCE_HISTORY_LIMIT = 50
SESSION_LIMIT = 500
DOSAGE_SCORE_LIMIT = 20

MIN_BOX = 1
MAX_BOX = 5


class StudyModel(BaseModel):
    """
    Base for every persisted record: camelCase aliases, snake_case attributes.

    Unknown keys are kept so that data written by other tools survives a
    load and save.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


def clamp_box(box: int) -> int:
    """Pull a Leitner box back into the MIN_BOX..MAX_BOX range."""
    return min(max(box, MIN_BOX), MAX_BOX)


# =============================================================================
# Performance & Weakness
# =============================================================================


class ResultSample(StudyModel):
    """One recorded result batch."""

    timestamp: int
    correct: int
    total: int


class PerformanceRecord(StudyModel):
    """Cumulative performance of one tool on one topic."""

    correct: int = 0
    total: int = 0
    history: list[ResultSample] = Field(default_factory=list)


class WeaknessRecord(StudyModel):
    """Derived weakness of a topic, recomputed from performance on every update."""

    score: int = 100
    flagged_by: list[str] = Field(default_factory=list)
    last_updated_at: int = 0
    total_attempts: int = 0


# =============================================================================
# Spaced Repetition
# =============================================================================


class ExposureRecord(StudyModel):
    """Leitner state of one practiced item."""

    last_seen_at: int
    times_seen: int = 0
    box: int = MIN_BOX

    @field_validator("box")
    @classmethod
    def _box_in_range(cls, value: int) -> int:
        return clamp_box(value)


# =============================================================================
# Sessions & Activity
# =============================================================================


class SessionRecord(StudyModel):
    """A single recorded practice session."""

    timestamp: int
    tool: str
    topic: str
    correct: int
    total: int
    details: Any = None


class DailyRecord(StudyModel):
    """Aggregate activity for one calendar day."""

    items: int = 0
    correct: int = 0
    projects: list[str] = Field(default_factory=list)


# =============================================================================
# Dosage Quiz Streak
# =============================================================================


class DosageScore(StudyModel):
    """One dosage-calculation quiz attempt."""

    timestamp: int
    score: int
    total: int
    percent: int


class DosageStreakRecord(StudyModel):
    """Consecutive passing dosage quizzes."""

    current: int = 0
    best: int = 0
    recent_scores: list[DosageScore] = Field(default_factory=list)


# =============================================================================
# Wrong-Answer Ledger
# =============================================================================


class RetestEntry(StudyModel):
    """Outcome of one retest of a logged wrong answer."""

    timestamp: int
    was_correct: bool


class WrongAnswerEntry(StudyModel):
    """Caller-supplied description of a missed question; every field optional."""

    # Input parsing: stray caller keys are not copied into the ledger.
    model_config = ConfigDict(extra="ignore")

    stem: str = ""
    your_answer: str = ""
    correct_answer: str = ""
    why_tempting: str = ""
    error_type: str = ""
    concept: str = ""
    topic: str = ""
    source: str = ""
    what_to_remember: str = ""

    @field_validator(
        "stem",
        "your_answer",
        "correct_answer",
        "why_tempting",
        "error_type",
        "concept",
        "topic",
        "source",
        "what_to_remember",
        mode="before",
    )
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class WrongAnswerRecord(WrongAnswerEntry):
    """A logged wrong answer with its own Leitner schedule."""

    model_config = ConfigDict(extra="allow")

    id: str
    created_at: int
    sr_box: int = MIN_BOX
    sr_next_due_at: int
    retest_history: list[RetestEntry] = Field(default_factory=list)

    @field_validator("sr_box")
    @classmethod
    def _box_in_range(cls, value: int) -> int:
        return clamp_box(value)


# =============================================================================
# Document
# =============================================================================


class StudyDocument(StudyModel):
    """The single persisted document; the source of truth for every engine."""

    version: int = 0
    created_at: int = 0
    last_updated_at: int = 0
    performance: dict[str, dict[str, PerformanceRecord]] = Field(default_factory=dict)
    weakness: dict[str, WeaknessRecord] = Field(default_factory=dict)
    exposure: dict[str, ExposureRecord] = Field(default_factory=dict)
    sessions: list[SessionRecord] = Field(default_factory=list)
    dosage_streak: DosageStreakRecord = Field(default_factory=DosageStreakRecord)
    wrong_answer_log: list[WrongAnswerRecord] = Field(default_factory=list)
    daily_log: dict[str, DailyRecord] = Field(default_factory=dict)

    @classmethod
    def fresh(cls, now: int) -> StudyDocument:
        """Empty document at the current schema version."""
        return cls(version=SCHEMA_VERSION, created_at=now, last_updated_at=now)
