"""
Session & Daily Activity Log.

Sessions are kept newest-last and bounded; daily aggregates are keyed by
local calendar day and drive the activity streak.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from .models import SESSION_LIMIT, DailyRecord, SessionRecord, StudyDocument
from .utils import MS_PER_DAY, day_key, local_date

STREAK_LOOKBACK_DAYS = 365
DEFAULT_DAILY_LOG_DAYS = 30


class ActivityLog:
    """Session history, per-day aggregates and streaks."""

    @staticmethod
    def append_session(
        document: StudyDocument,
        tool: str,
        topic: str,
        correct: int,
        total: int,
        details: Any,
        now: int,
    ) -> SessionRecord:
        session = SessionRecord(
            timestamp=now,
            tool=tool,
            topic=topic,
            correct=correct,
            total=total,
            details=details,
        )
        document.sessions.append(session)
        if len(document.sessions) > SESSION_LIMIT:
            document.sessions = document.sessions[-SESSION_LIMIT:]
        return session

    @staticmethod
    def bump_daily(document: StudyDocument, tool: str, correct: int, total: int, now: int) -> DailyRecord:
        """Add a result batch to today's aggregate."""
        record = document.daily_log.setdefault(day_key(now), DailyRecord())
        record.items += total
        record.correct += correct
        if tool not in record.projects:
            record.projects.append(tool)
        return record

    @staticmethod
    def session_history(document: StudyDocument, days: float, now: int) -> list[SessionRecord]:
        """Sessions recorded within the last `days` days."""
        cutoff = now - days * MS_PER_DAY
        return [s for s in document.sessions if s.timestamp >= cutoff]

    @staticmethod
    def daily_log(document: StudyDocument, now: int, days: int | None = DEFAULT_DAILY_LOG_DAYS) -> dict[str, DailyRecord]:
        """
        One entry per calendar day, today first.

        Days without activity map to a zero-valued record.
        """
        today = local_date(now)
        result = {}
        for offset in range(days or DEFAULT_DAILY_LOG_DAYS):
            key = day_key(today - timedelta(days=offset))
            stored = document.daily_log.get(key)
            result[key] = stored.model_copy(deep=True) if stored else DailyRecord()
        return result

    @staticmethod
    def streak(document: StudyDocument, now: int) -> int:
        """
        Consecutive active days ending today.

        An inactive today does not break the streak; the day may be in progress.
        """
        today = local_date(now)
        streak = 0
        for offset in range(STREAK_LOOKBACK_DAYS):
            record = document.daily_log.get(day_key(today - timedelta(days=offset)))
            if record and record.items > 0:
                streak += 1
            elif offset > 0:
                break
        return streak
