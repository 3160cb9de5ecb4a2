"""
Performance & Weakness Engine.

Per-topic, per-tool accuracy plus a derived 0-100 weakness score per topic.
The weakness record is always recomputed from the full performance table of
its topic, never adjusted incrementally.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from loguru import logger

from .models import PERFORMANCE_HISTORY_LIMIT, PerformanceRecord, ResultSample, StudyDocument, WeaknessRecord
from .registry import tool_name, topic_color, topic_display
from .utils import percent


@dataclass
class WeaknessConfig:
    """Thresholds for flagging and listing weak topics."""

    flag_accuracy: float = 0.75  # Tool flags a topic below this accuracy
    flag_min_attempts: int = 3
    weak_score: int = 80  # Topic is listed as weak below this score
    weak_min_attempts: int = 3


@dataclass
class WeaknessEntry:
    """A weak topic, as shown on the dashboard."""

    topic: str
    display_name: str
    color: str
    score: int
    flagged_by_names: list[str] = field(default_factory=list)
    flagged_by_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class WeaknessEngine:
    """Records practice results and derives topic weaknesses."""

    def __init__(self, config: WeaknessConfig | None = None):
        self.config = config or WeaknessConfig()

    def apply_result(
        self,
        document: StudyDocument,
        tool: str,
        topic: str,
        correct: int,
        total: int,
        now: int,
    ) -> int | None:
        """
        Add a result batch to the topic/tool record and refresh the topic weakness.

        Args:
            document: Document to mutate
            tool: Tool identifier
            topic: Topic identifier
            correct: Correct answers in this batch
            total: Questions in this batch
            now: Current epoch ms

        Returns:
            Updated accuracy percent of this tool on this topic, None if no attempts
        """
        record = document.performance.setdefault(topic, {}).setdefault(tool, PerformanceRecord())
        record.correct += correct
        record.total += total
        record.history.append(ResultSample(timestamp=now, correct=correct, total=total))
        if len(record.history) > PERFORMANCE_HISTORY_LIMIT:
            record.history = record.history[-PERFORMANCE_HISTORY_LIMIT:]

        self.recompute(document, topic, now)
        return percent(record.correct, record.total)

    def recompute(self, document: StudyDocument, topic: str, now: int) -> WeaknessRecord:
        """Rebuild the weakness record of a topic from its performance table."""
        total_correct = 0
        total_attempts = 0
        flagged_by = []

        for tool, record in document.performance.get(topic, {}).items():
            total_correct += record.correct
            total_attempts += record.total
            if (
                record.total >= self.config.flag_min_attempts
                and record.correct / record.total < self.config.flag_accuracy
            ):
                flagged_by.append(tool)

        score = percent(total_correct, total_attempts)
        weakness = WeaknessRecord(
            score=100 if score is None else score,
            flagged_by=flagged_by,
            last_updated_at=now,
            total_attempts=total_attempts,
        )
        document.weakness[topic] = weakness
        logger.debug(f"Weakness {topic}: score={weakness.score} flagged_by={flagged_by}")
        return weakness

    def weaknesses(self, document: StudyDocument) -> list[WeaknessEntry]:
        """Weak topics, weakest first."""
        result = [
            WeaknessEntry(
                topic=topic,
                display_name=topic_display(topic),
                color=topic_color(topic),
                score=record.score,
                flagged_by_names=[tool_name(tool) for tool in record.flagged_by],
                flagged_by_ids=list(record.flagged_by),
            )
            for topic, record in document.weakness.items()
            if record.total_attempts >= self.config.weak_min_attempts
            and record.score < self.config.weak_score
        ]
        result.sort(key=lambda entry: entry.score)
        return result

    def concept_score(self, document: StudyDocument, topic: str) -> int | None:
        record = document.weakness.get(topic)
        return record.score if record else None

    def tool_totals(self, document: StudyDocument, tool: str) -> tuple[int, int, int | None]:
        """
        Aggregate one tool's performance across all topics.

        Returns:
            (correct, total, last result timestamp or None)
        """
        correct = 0
        total = 0
        last_used = 0
        for tools in document.performance.values():
            record = tools.get(tool)
            if record is None:
                continue
            correct += record.correct
            total += record.total
            if record.history and record.history[-1].timestamp > last_used:
                last_used = record.history[-1].timestamp
        return correct, total, last_used or None

    def overall_totals(self, document: StudyDocument) -> tuple[int, int]:
        """(correct, total) across every topic and tool."""
        correct = 0
        total = 0
        for tools in document.performance.values():
            for record in tools.values():
                correct += record.correct
                total += record.total
        return correct, total
