"""
Study Data: local persistence and analytics for the practice tools.

A single versioned JSON document shared by every tool, with pure derivations
over it.

Components:
- StudyStore: load/save/migrate of the document over a storage backend
- WeaknessEngine: per-topic accuracy and weakness scores
- LeitnerScheduler: 5-box spaced repetition for practiced items
- WrongAnswerLedger: missed questions with their own retest schedule
- ActivityLog: sessions, daily aggregates and streaks
- DosageTracker: dosage-calculation quiz streak
- DailyReviewGenerator: the mixed "daily 10" review set
- StudyDataService: the facade the tools and dashboard call
"""

from .activity import ActivityLog
from .daily_review import DailyReviewGenerator, ReviewItem, ReviewItemType
from .dosage import DosageResult, DosageStats, DosageTracker
from .leitner import DueItem, LeitnerConfig, LeitnerScheduler
from .models import (
    SCHEMA_VERSION,
    DailyRecord,
    ExposureRecord,
    SessionRecord,
    StudyDocument,
    WrongAnswerEntry,
    WrongAnswerRecord,
)
from .registry import SR_INTERVALS, TOOLS, TOPICS, ToolInfo, TopicInfo
from .service import OverallStats, ProjectStatus, StudyDataService, ToolStatus
from .storage import JSONFileStorage, MemoryStorage, StorageBackend
from .store import StudyStore
from .weakness import WeaknessConfig, WeaknessEngine, WeaknessEntry
from .wrong_answers import WrongAnswerLedger, WrongAnswerStats

__all__ = [
    # Registries
    "TOPICS",
    "TOOLS",
    "SR_INTERVALS",
    "TopicInfo",
    "ToolInfo",
    # Persistence
    "StudyStore",
    "StorageBackend",
    "JSONFileStorage",
    "MemoryStorage",
    "SCHEMA_VERSION",
    "StudyDocument",
    "DailyRecord",
    "ExposureRecord",
    "SessionRecord",
    "WrongAnswerEntry",
    "WrongAnswerRecord",
    # Engines
    "WeaknessEngine",
    "WeaknessConfig",
    "WeaknessEntry",
    "LeitnerScheduler",
    "LeitnerConfig",
    "DueItem",
    "WrongAnswerLedger",
    "WrongAnswerStats",
    "ActivityLog",
    "DosageTracker",
    "DosageResult",
    "DosageStats",
    "DailyReviewGenerator",
    "ReviewItem",
    "ReviewItemType",
    # Facade
    "StudyDataService",
    "ProjectStatus",
    "OverallStats",
    "ToolStatus",
]
