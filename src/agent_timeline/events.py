"""Validation and normalization of raw agent events."""

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from .logging import get_logger
from .models import AgentEvent, EventKind, ProgressStatus, TodoItem, TodoStatus

logger = get_logger(__name__)

# Wire type -> normalized kind. Aliases come from the agent's SSE stream.
KIND_ALIASES: dict[str, EventKind] = {
    "iteration_start": EventKind.ITERATION,
    "tool_error": EventKind.TOOL_COMPLETE,
    "fatal_error": EventKind.ERROR,
    "message": EventKind.RESPONSE,
}


def load_events(path: Path) -> list[dict]:
    """Load a JSONL event recording, skipping blank and malformed lines."""
    records = []
    with open(path, encoding="utf-8") as f:
        for line_num, line in enumerate(f, 1):
            if not line.strip():
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as e:
                logger.warning(
                    "events.malformed_json", path=str(path), line=line_num, error=str(e)
                )
    return records


def resolve_kind(raw_type: str) -> EventKind:
    """Map a wire ``type`` string to an EventKind (``unknown`` if unrecognized)."""
    if raw_type in KIND_ALIASES:
        return KIND_ALIASES[raw_type]
    try:
        return EventKind(raw_type)
    except ValueError:
        return EventKind.UNKNOWN


def _str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _int(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _mapping(value: Any) -> dict | None:
    return dict(value) if isinstance(value, Mapping) else None


def _todo_items(value: Any) -> list[TodoItem] | None:
    """Keep well-formed todo entries; default bad status and activeForm."""
    if not isinstance(value, list):
        return None
    items = []
    for entry in value:
        if not isinstance(entry, Mapping) or not isinstance(entry.get("content"), str):
            continue
        try:
            status = TodoStatus(entry.get("status"))
        except ValueError:
            status = TodoStatus.PENDING
        active_form = entry.get("activeForm")
        items.append(
            TodoItem(
                content=entry["content"],
                status=status,
                active_form=active_form if isinstance(active_form, str) else entry["content"],
            )
        )
    return items


def _progress_status(value: Any) -> ProgressStatus | None:
    try:
        return ProgressStatus(value)
    except ValueError:
        return None


def normalize_event(raw: Any, index: int) -> AgentEvent:
    """Normalize one raw record. Never raises; bad fields are dropped."""
    if not isinstance(raw, Mapping):
        logger.debug("events.not_a_mapping", index=index, value_type=type(raw).__name__)
        return AgentEvent(index=index, kind=EventKind.UNKNOWN)

    raw_type = _str(raw.get("type")) or ""
    kind = resolve_kind(raw_type)

    args = _mapping(raw.get("args"))
    if args is None:
        args = _mapping(raw.get("input"))

    result = raw.get("result")
    success = raw.get("success")
    success = success if isinstance(success, bool) else None
    error = _str(raw.get("error"))
    if raw_type == "tool_error":
        success = False
        if result is None:
            result = error

    return AgentEvent(
        index=index,
        kind=kind,
        raw_type=raw_type,
        tool=_str(raw.get("tool")) or None,
        args=args,
        result=result,
        success=success,
        iteration=_int(raw.get("iteration")),
        content=_str(raw.get("content")),
        message=_str(raw.get("message")),
        thinking=_str(raw.get("thinking")),
        todos=_todo_items(raw.get("todos")),
        plan=_str(raw.get("plan")),
        tool_use_id=_str(raw.get("toolUseId")),
        label=_str(raw.get("label")),
        status=_progress_status(raw.get("status")),
        order=_number(raw.get("order")),
        error=error,
        raw=dict(raw),
    )


def normalize_events(raw_events: Iterable[Any]) -> list[AgentEvent]:
    """Normalize a full history in arrival order, re-indexing as needed."""
    events: list[AgentEvent] = []
    for index, raw in enumerate(raw_events):
        if isinstance(raw, AgentEvent):
            events.append(raw.model_copy(update={"index": index}))
        else:
            events.append(normalize_event(raw, index))
    return events


def ensure_events(events: Iterable[Any]) -> list[AgentEvent]:
    """Accept raw records or already-normalized events."""
    events = list(events)
    if all(isinstance(e, AgentEvent) for e in events):
        return events
    return normalize_events(events)
