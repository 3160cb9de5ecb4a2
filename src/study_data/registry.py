"""
Static registries shared by every practice tool.

Topics carry the dashboard colors (matching the hub CSS variables), tools
carry their page reference. Both are read-only; the store itself accepts any
string key, so the lookup helpers fall back gracefully for unregistered ids.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TopicInfo:
    """Display metadata for a topic area."""

    key: str
    display: str
    color: str
    css_var: str


@dataclass(frozen=True)
class ToolInfo:
    """Display metadata for a practice tool."""

    key: str
    id: int
    name: str
    file: str


DEFAULT_COLOR = "#999"

TOPICS: dict[str, TopicInfo] = {
    info.key: info
    for info in (
        TopicInfo("cardiac", "Cardiac Output & Perfusion", "#E74C3C", "--cardiac"),
        TopicInfo("oxygenation", "Oxygenation", "#27AE60", "--oxy"),
        TopicInfo("fluid-electrolytes", "Fluid & Electrolytes", "#3498DB", "--fluid"),
        TopicInfo("cognition-sensation", "Cognition & Sensation", "#8E44AD", "--neuro"),
        TopicInfo("emergency-disaster", "Emergency & Disaster", "#E67E22", "--emergency"),
    )
}

TOOLS: dict[str, ToolInfo] = {
    info.key: info
    for info in (
        ToolInfo("shock-simulator", 1, "Shock Simulator", "shock-simulator.html"),
        ToolInfo("cardiac-pharm", 2, "Cardiac Pharm", "cardiac-pharm.html"),
        ToolInfo("sbar-journal", 3, "SBAR Journal", "sbar-journal.html"),
        ToolInfo("chain-maps", 4, "Chain Maps", "chain-maps.html"),
        ToolInfo("ecg-portfolio", 5, "ECG Portfolio", "ecg-portfolio.html"),
        ToolInfo("wrong-answer-log", 6, "Wrong Answer Log", "wrong-answer-log.html"),
        ToolInfo("teach-back-cards", 7, "Teach-Back Cards", "teach-back-cards.html"),
        ToolInfo("complication-connector", 8, "Complication Connector", "complication-connector.html"),
        ToolInfo("dosage-calc", 9, "Dosage Calc Drill", "dosage-calc.html"),
        ToolInfo("quiz-prep", 10, "Quiz Prep Hub", "quiz-prep.html"),
    )
}

# Leitner box -> review interval in days (box n uses SR_INTERVALS[n - 1])
SR_INTERVALS: tuple[int, ...] = (1, 3, 7, 14, 30)

WRONG_ANSWER_TOOL = "wrong-answer-log"


def topic_display(topic: str) -> str:
    """Display name for a topic, or the raw key if unregistered."""
    info = TOPICS.get(topic)
    return info.display if info else topic


def topic_color(topic: str) -> str:
    """Hex color for a topic, or the neutral default if unregistered."""
    info = TOPICS.get(topic)
    return info.color if info else DEFAULT_COLOR


def tool_name(tool: str) -> str:
    """Display name for a tool, or the raw key if unregistered."""
    info = TOOLS.get(tool)
    return info.name if info else tool
