"""Expand/collapse state and line previews for timeline messages."""

from collections.abc import Iterable

from .logging import get_logger
from .models import (
    MessageType,
    PlanMessage,
    Preview,
    TodoMessage,
    TodoStatus,
    ToolResultMessage,
)

logger = get_logger(__name__)

DEFAULT_MAX_PREVIEW_LINES = 5
DEFAULT_EXPANDED: frozenset[MessageType] = frozenset({MessageType.THINKING})
PREVIEW_TOOLS: frozenset[str] = frozenset({"Bash", "Edit", "Grep"})

TODO_MARKERS = {
    TodoStatus.COMPLETED: "[x]",
    TodoStatus.IN_PROGRESS: "[~]",
    TodoStatus.PENDING: "[ ]",
}


def preview_of(content: str, max_preview_lines: int = DEFAULT_MAX_PREVIEW_LINES) -> Preview:
    """Split content into lines and keep the first ``max_preview_lines``."""
    lines = content.split("\n")
    total = len(lines)
    if total <= max_preview_lines:
        return Preview(preview=content, has_more=False, total_lines=total, preview_lines=total)
    return Preview(
        preview="\n".join(lines[:max_preview_lines]),
        has_more=True,
        total_lines=total,
        preview_lines=max_preview_lines,
    )


def message_text(message) -> str:
    """The disclosable body of any message variant."""
    if isinstance(message, TodoMessage):
        return "\n".join(
            f"{TODO_MARKERS[item.status]} {item.content}" for item in message.items
        )
    if isinstance(message, PlanMessage):
        return message.plan
    return message.content


def shows_preview(message) -> bool:
    """Only some tool results are previewed while collapsed."""
    return isinstance(message, ToolResultMessage) and message.tool_name in PREVIEW_TOOLS


def preview_summary(message) -> str | None:
    """Short badge for a collapsed tool result, when one applies."""
    if not isinstance(message, ToolResultMessage):
        return None
    raw = message.raw_result if isinstance(message.raw_result, dict) else {}
    if message.tool_name == "Edit" and raw.get("structuredPatch"):
        return f"Modified {message.summary}"
    if message.tool_name == "Bash":
        stderr = raw.get("stderr")
        if isinstance(stderr, str) and stderr.strip():
            return "Error"
        if raw.get("stdout"):
            return "Success"
    return None


class DisclosureStore:
    """Per-message expanded/collapsed state, keyed by message id.

    A message's initial state is fixed the first time it is observed
    (thinking expanded, everything else collapsed) and afterwards changes
    only through ``toggle``. Re-observing a recomputed message list never
    resets it. Messages with blank content are not collapsible.
    """

    def __init__(self) -> None:
        self._expanded: dict[str, bool] = {}
        self._collapsible: dict[str, bool] = {}

    def __contains__(self, message_id: str) -> bool:
        return message_id in self._expanded

    def __len__(self) -> int:
        return len(self._expanded)

    def observe(self, messages: Iterable) -> None:
        for message in messages:
            if message.id in self._expanded:
                continue
            self._expanded[message.id] = message.type in DEFAULT_EXPANDED
            self._collapsible[message.id] = bool(message_text(message).strip())

    def is_expanded(self, message_id: str) -> bool:
        return self._expanded.get(message_id, False)

    def is_collapsible(self, message_id: str) -> bool:
        return self._collapsible.get(message_id, False)

    def toggle(self, message_id: str) -> bool:
        """Flip a collapsible message and return its new state."""
        if message_id not in self._expanded:
            logger.debug("disclosure.unknown_message", message_id=message_id)
            return False
        if not self._collapsible[message_id]:
            logger.debug("disclosure.not_collapsible", message_id=message_id)
            return self._expanded[message_id]
        self._expanded[message_id] = not self._expanded[message_id]
        return self._expanded[message_id]

    def snapshot(self) -> dict[str, bool]:
        return dict(self._expanded)
