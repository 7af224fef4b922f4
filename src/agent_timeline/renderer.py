"""JSON and plain-text output for timeline snapshots."""

import json
from pathlib import Path

from .correlator import completed_count
from .disclosure import (
    DisclosureStore,
    message_text,
    preview_of,
    preview_summary,
    shows_preview,
)
from .models import MessageType, ProgressStatus, Timeline, ToolCallStatus

STATUS_SYMBOLS = {
    ToolCallStatus.PENDING: "·",
    ToolCallStatus.RUNNING: "▸",
    ToolCallStatus.SUCCESS: "✓",
    ToolCallStatus.ERROR: "✗",
}


def timeline_to_dict(timeline: Timeline) -> dict:
    """Convert a Timeline to plain JSON-compatible data."""
    data = timeline.model_dump(mode="json", by_alias=True, exclude={"events"})
    data["events"] = [
        event.model_dump(mode="json", by_alias=True, exclude={"raw"})
        for event in timeline.events
    ]
    return data


def compute_metadata(timeline: Timeline, source: Path | None = None) -> dict:
    """Compute summary metadata for the snapshot."""
    completed_steps = sum(
        1 for step in timeline.progress_steps if step.status == ProgressStatus.COMPLETE
    )
    return {
        "source": source.stem if source else None,
        "status": timeline.status.value,
        "total_events": len(timeline.events),
        "total_messages": len(timeline.messages),
        "total_tool_calls": len(timeline.tool_calls),
        "completed_tool_calls": completed_count(timeline.tool_calls),
        "completed_steps": completed_steps,
        "total_steps": len(timeline.progress_steps),
    }


def render_json(timeline: Timeline, source: Path | None = None, compact: bool = False) -> str:
    """Render a timeline as a JSON string, metadata first."""
    ordered = {"metadata": compute_metadata(timeline, source), **timeline_to_dict(timeline)}
    return json.dumps(ordered, indent=None if compact else 2, ensure_ascii=False)


def _message_header(message) -> str:
    if message.type == MessageType.CHAT:
        return "User" if message.role == "user" else "Assistant"
    if message.type == MessageType.TOOL_RESULT:
        badge = preview_summary(message) or message.summary
        return f"{message.tool_name} ({badge})"
    if message.type == MessageType.TOOL:
        return "Tool"
    return message.type.value.capitalize()


def render_text(
    timeline: Timeline,
    disclosure: DisclosureStore | None = None,
    max_preview_lines: int = 5,
) -> str:
    """Plain-text overview: run status, tool calls, progress, message previews."""
    lines = [f"status: {timeline.status.value}"]
    if timeline.current_tool:
        lines.append(f"current tool: {timeline.current_tool}")
    if timeline.is_thinking:
        lines.append("thinking...")

    if timeline.tool_calls:
        done = completed_count(timeline.tool_calls)
        lines.append("")
        lines.append(f"tool calls ({done}/{len(timeline.tool_calls)} succeeded):")
        for call in timeline.tool_calls:
            lines.append(f"  {STATUS_SYMBOLS[call.status]} {call.id} [{call.status.value}]")

    if timeline.progress_steps:
        lines.append("")
        lines.append("progress:")
        for step in timeline.progress_steps:
            marker = ">" if step == timeline.current_step else " "
            lines.append(f" {marker} {step.label} [{step.status.value}]")

    for message in timeline.messages:
        lines.append("")
        lines.append(f"-- {_message_header(message)} @{message.timestamp}")
        body = message_text(message)
        expanded = disclosure.is_expanded(message.id) if disclosure else False
        if message.type == MessageType.TOOL_RESULT and not shows_preview(message):
            if not expanded:
                continue
        preview = preview_of(body, max_preview_lines)
        if expanded or not preview.has_more:
            lines.append(body)
        else:
            lines.append(preview.preview)
            lines.append(f"... {preview.more_label}")

    return "\n".join(lines)
