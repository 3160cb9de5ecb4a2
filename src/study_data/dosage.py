"""Dosage-calculation quiz streak."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from .models import DOSAGE_SCORE_LIMIT, DosageScore, StudyDocument
from .utils import percent

PASS_PERCENT = 90
RECENT_SCORES_SHOWN = 5


@dataclass
class DosageResult:
    """Outcome of one recorded dosage quiz."""

    passed: bool
    percent: int
    streak: int
    best: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class DosageStats:
    """Dosage quiz summary for the dashboard."""

    streak: int = 0
    best: int = 0
    recent_scores: list[DosageScore] = field(default_factory=list)
    average_percent: int | None = None
    total_attempts: int = 0
    pass_rate: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["recent_scores"] = [score.model_dump(by_alias=True) for score in self.recent_scores]
        return data


class DosageTracker:
    """Consecutive-pass counter over dosage quizzes (pass = 90% or better)."""

    def __init__(self, pass_percent: int = PASS_PERCENT):
        self.pass_percent = pass_percent

    def record_quiz(self, document: StudyDocument, score: int, total: int, now: int) -> DosageResult:
        streak = document.dosage_streak
        quiz_percent = percent(score, total) or 0

        streak.recent_scores.append(DosageScore(timestamp=now, score=score, total=total, percent=quiz_percent))
        if len(streak.recent_scores) > DOSAGE_SCORE_LIMIT:
            streak.recent_scores = streak.recent_scores[-DOSAGE_SCORE_LIMIT:]

        passed = quiz_percent >= self.pass_percent
        if passed:
            streak.current += 1
            streak.best = max(streak.best, streak.current)
        else:
            streak.current = 0

        return DosageResult(passed=passed, percent=quiz_percent, streak=streak.current, best=streak.best)

    def stats(self, document: StudyDocument) -> DosageStats:
        streak = document.dosage_streak
        scores = streak.recent_scores
        if not scores:
            return DosageStats(streak=streak.current, best=streak.best)

        passes = sum(1 for s in scores if s.percent >= self.pass_percent)
        return DosageStats(
            streak=streak.current,
            best=streak.best,
            recent_scores=[s.model_copy() for s in scores[-RECENT_SCORES_SHOWN:]],
            average_percent=percent(sum(s.percent for s in scores), 100 * len(scores)),
            total_attempts=len(scores),
            pass_rate=percent(passes, len(scores)),
        )
