"""Event -> message classification."""

from collections.abc import Callable, Iterable
from typing import Any

from .config import DEFAULT_SETTINGS, TimelineSettings
from .correlator import Correlator, get_correlator, prepare_events, split_tool_events
from .formatting import format_tool_result, summarize_tool
from .logging import get_logger
from .models import (
    AgentEvent,
    ChatMessage,
    EventKind,
    Message,
    PlanMessage,
    ThinkingMessage,
    TodoMessage,
    ToolMessage,
    ToolResultMessage,
)

logger = get_logger(__name__)

PROMPT_MESSAGE_ID = "prompt"


def message_id(message_type: str, event: AgentEvent) -> str:
    """Identity of the message derived from ``event``; stable across recomputation."""
    return f"{message_type}-{event.index}"


def event_timestamp(event: AgentEvent, settings: TimelineSettings) -> int:
    return settings.base_timestamp + event.index


def start_args_for_completions(
    events: list[AgentEvent], correlator: Correlator
) -> dict[int, dict]:
    """Completion index -> args of the start it correlates with.

    Only starts that arrived before the completion count, so a message
    derived from a prefix never changes when more events arrive.
    """
    starts, completions = split_tool_events(events)
    pairs = correlator.pair(starts, completions)
    by_index = {start.index: start for start in starts}
    args: dict[int, dict] = {}
    for start_index, completion in pairs.items():
        start = by_index[start_index]
        if start.index < completion.index and start.args:
            args[completion.index] = start.args
    return args


class _Context:
    def __init__(self, settings: TimelineSettings, start_args: dict[int, dict]) -> None:
        self.settings = settings
        self.start_args = start_args

    def timestamp(self, event: AgentEvent) -> int:
        return event_timestamp(event, self.settings)


def _tool_start(event: AgentEvent, ctx: _Context) -> Message | None:
    if not event.tool:
        return None
    return ToolMessage(
        id=message_id("tool", event),
        timestamp=ctx.timestamp(event),
        content=event.tool,
    )


def _tool_complete(event: AgentEvent, ctx: _Context) -> Message | None:
    if not event.tool:
        return None
    args = event.args or ctx.start_args.get(event.index)
    return ToolResultMessage(
        id=message_id("tool_result", event),
        timestamp=ctx.timestamp(event),
        tool_name=event.tool,
        content=format_tool_result(event.result),
        summary=summarize_tool(event.tool, args, ctx.settings.bash_summary_width),
        raw_result=event.result,
    )


def _thinking(event: AgentEvent, ctx: _Context) -> Message | None:
    text = event.thinking or event.content
    if not text:
        return None
    return ThinkingMessage(
        id=message_id("thinking", event),
        timestamp=ctx.timestamp(event),
        content=text,
    )


def _todo(event: AgentEvent, ctx: _Context) -> Message | None:
    if not event.todos:
        return None
    return TodoMessage(
        id=message_id("todo", event),
        timestamp=ctx.timestamp(event),
        items=event.todos,
    )


def _plan(event: AgentEvent, ctx: _Context) -> Message | None:
    if not event.plan:
        return None
    return PlanMessage(
        id=message_id("plan", event),
        timestamp=ctx.timestamp(event),
        plan=event.plan,
        tool_use_id=event.tool_use_id or "",
    )


def _response_text(event: AgentEvent) -> str | None:
    # The agent stream's `message` events may carry their text under any of these.
    if event.content:
        return event.content
    if event.message:
        return event.message
    for key in ("text", "output"):
        value = event.raw.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def _response(event: AgentEvent, ctx: _Context) -> Message | None:
    text = _response_text(event)
    if not text:
        return None
    return ChatMessage(
        id=message_id("chat", event),
        timestamp=ctx.timestamp(event),
        role="assistant",
        content=text,
    )


CLASSIFIERS: dict[EventKind, Callable[[AgentEvent, _Context], Message | None]] = {
    EventKind.TOOL_START: _tool_start,
    EventKind.TOOL_COMPLETE: _tool_complete,
    EventKind.THINKING: _thinking,
    EventKind.TODO: _todo,
    EventKind.PLAN: _plan,
    EventKind.RESPONSE: _response,
    EventKind.CONTENT: _response,
}


def classify(
    events: Iterable[Any],
    prior_user_message: str | None = None,
    *,
    settings: TimelineSettings | None = None,
) -> list[Message]:
    """Convert an event history into an ordered list of typed messages.

    Accepts raw records or normalized events. Each event yields at most one
    message, stamped ``base_timestamp + arrival index``; a prior user prompt
    is stamped ``prompt_offset`` before the first event. The input is never
    modified.
    """
    settings = settings or DEFAULT_SETTINGS
    correlator = get_correlator(settings)
    events = prepare_events(events, correlator)
    ctx = _Context(settings, start_args_for_completions(events, correlator))

    messages: list[Message] = []
    if prior_user_message:
        messages.append(
            ChatMessage(
                id=PROMPT_MESSAGE_ID,
                timestamp=settings.base_timestamp - settings.prompt_offset,
                role="user",
                content=prior_user_message,
            )
        )

    for event in events:
        handler = CLASSIFIERS.get(event.kind)
        if handler is None:
            continue
        message = handler(event, ctx)
        if message is None:
            logger.debug("classifier.dropped", index=event.index, kind=event.kind.value)
            continue
        messages.append(message)

    return messages
