"""
Daily Review Generator.

Builds the "daily 10": a bounded mixed review set drawn, in strict priority
order, from
1. due wrong-answer retests (at most 2),
2. due spaced-repetition items,
3. weak topics, worst first, as focused-practice suggestions.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from .leitner import DueItem, LeitnerScheduler
from .models import StudyDocument, WrongAnswerRecord
from .registry import WRONG_ANSWER_TOOL
from .weakness import WeaknessEngine
from .wrong_answers import WrongAnswerLedger

DAILY_REVIEW_SIZE = 10
MAX_RETESTS = 2


class ReviewItemType(str, Enum):
    """Source of a daily review item."""

    WRONG_ANSWER_RETEST = "wrong-answer-retest"
    SPACED_REP = "spaced-rep"
    WEAKNESS_PRACTICE = "weakness-practice"


@dataclass
class ReviewItem:
    """One entry of the daily review set."""

    type: ReviewItemType
    tool: str | None = None
    wrong_answer: WrongAnswerRecord | None = None
    due_item: DueItem | None = None
    # weakness-practice only
    topic: str | None = None
    display_name: str | None = None
    score: int | None = None
    suggested_tools: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["type"] = self.type.value
        if self.wrong_answer is not None:
            data["wrong_answer"] = self.wrong_answer.model_dump(by_alias=True)
        return data


class DailyReviewGenerator:
    """Composes the daily review set from the three demand signals."""

    def __init__(
        self,
        scheduler: LeitnerScheduler,
        ledger: WrongAnswerLedger,
        weakness: WeaknessEngine,
        size: int = DAILY_REVIEW_SIZE,
        max_retests: int = MAX_RETESTS,
    ):
        self.scheduler = scheduler
        self.ledger = ledger
        self.weakness = weakness
        self.size = size
        self.max_retests = max_retests

    def generate(self, document: StudyDocument, now: int) -> list[ReviewItem]:
        items: list[ReviewItem] = []

        for record in self.ledger.due(document, now)[: min(self.max_retests, self.size)]:
            items.append(
                ReviewItem(
                    type=ReviewItemType.WRONG_ANSWER_RETEST,
                    tool=WRONG_ANSWER_TOOL,
                    wrong_answer=record,
                )
            )

        for due in self.scheduler.due_items(document, now, limit=self.size):
            if len(items) >= self.size:
                break
            items.append(ReviewItem(type=ReviewItemType.SPACED_REP, tool=due.tool, due_item=due))

        for weak in self.weakness.weaknesses(document):
            if len(items) >= self.size:
                break
            items.append(
                ReviewItem(
                    type=ReviewItemType.WEAKNESS_PRACTICE,
                    topic=weak.topic,
                    display_name=weak.display_name,
                    score=weak.score,
                    suggested_tools=list(weak.flagged_by_ids),
                )
            )

        return items
