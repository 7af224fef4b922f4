"""Pairing of tool start events with their completion events."""

from collections import defaultdict
from collections.abc import Iterable
from typing import Any, Protocol

from .config import DEFAULT_SETTINGS, TimelineSettings
from .events import ensure_events
from .formatting import describe_tool
from .logging import get_logger
from .models import AgentEvent, EventKind, RunStatus, ToolCall, ToolCallStatus

logger = get_logger(__name__)


class Correlator(Protocol):
    def pair(
        self, starts: list[AgentEvent], completions: list[AgentEvent]
    ) -> dict[int, AgentEvent]:
        """Map start event index -> matching completion event."""
        ...


class PositionalCorrelator:
    """The Nth start of a tool name pairs with the Nth completion of that name.

    The wire format carries no call identifier, so concurrent calls to the
    same tool are told apart by occurrence count alone. Completions that
    arrive out of start order are mis-paired.
    """

    def pair(
        self, starts: list[AgentEvent], completions: list[AgentEvent]
    ) -> dict[int, AgentEvent]:
        completions_by_tool: dict[str, list[AgentEvent]] = defaultdict(list)
        for completion in completions:
            if completion.tool is not None:
                completions_by_tool[completion.tool].append(completion)

        seen: dict[str, int] = defaultdict(int)
        pairs: dict[int, AgentEvent] = {}
        for start in starts:
            if start.tool is None:
                continue
            occurrence = seen[start.tool]
            seen[start.tool] += 1
            candidates = completions_by_tool[start.tool]
            if occurrence < len(candidates):
                pairs[start.index] = candidates[occurrence]

        for tool, candidates in completions_by_tool.items():
            unmatched = len(candidates) - seen[tool]
            if unmatched > 0:
                logger.debug("correlator.unmatched_completions", tool=tool, count=unmatched)
        return pairs


class ToolUseIdCorrelator:
    """Direct lookup on ``toolUseId``.

    Events without an id pair positionally among themselves only, so an
    id-bearing completion is never claimed by an id-less start.
    """

    def pair(
        self, starts: list[AgentEvent], completions: list[AgentEvent]
    ) -> dict[int, AgentEvent]:
        by_id: dict[str, AgentEvent] = {}
        for completion in completions:
            if completion.tool_use_id and completion.tool_use_id not in by_id:
                by_id[completion.tool_use_id] = completion

        pairs: dict[int, AgentEvent] = {}
        claimed: set[str] = set()
        for start in starts:
            if not start.tool_use_id or start.tool_use_id in claimed:
                continue
            match = by_id.get(start.tool_use_id)
            if match is not None and match.tool == start.tool:
                pairs[start.index] = match
                claimed.add(start.tool_use_id)

        anonymous_starts = [s for s in starts if not s.tool_use_id]
        anonymous_completions = [c for c in completions if not c.tool_use_id]
        pairs.update(PositionalCorrelator().pair(anonymous_starts, anonymous_completions))
        return pairs


CORRELATORS: dict[str, type] = {
    "positional": PositionalCorrelator,
    "tool_use_id": ToolUseIdCorrelator,
}


def get_correlator(settings: TimelineSettings | None = None) -> Correlator:
    settings = settings or DEFAULT_SETTINGS
    return CORRELATORS[settings.correlation]()


def split_tool_events(events: list[AgentEvent]) -> tuple[list[AgentEvent], list[AgentEvent]]:
    """Ordered tool_start and tool_complete subsequences that name a tool."""
    starts = [e for e in events if e.kind == EventKind.TOOL_START and e.tool]
    completions = [e for e in events if e.kind == EventKind.TOOL_COMPLETE and e.tool]
    return starts, completions


def _answered(start: AgentEvent, pairs: dict[int, AgentEvent]) -> bool:
    completion = pairs.get(start.index)
    return completion is not None and completion.index > start.index


def fold_tool_inputs(
    events: list[AgentEvent], correlator: Correlator | None = None
) -> list[AgentEvent]:
    """Fold late ``tool_input`` arguments into the start they belong to.

    The target is the latest start of the same tool (and the same
    ``toolUseId``, when the input carries one) that the correlator has not
    yet answered with a completion. Answered starts are never rewritten,
    so a result summary derived from their args cannot change afterwards.
    The ``tool_input`` events stay in the list. Folding twice is a no-op.
    """
    correlator = correlator or PositionalCorrelator()
    folded = list(events)
    position_of = {event.index: position for position, event in enumerate(folded)}
    for position, event in enumerate(events):
        if event.kind != EventKind.TOOL_INPUT or event.tool is None or event.args is None:
            continue
        starts, completions = split_tool_events(folded[:position])
        pairs = correlator.pair(starts, completions)
        target = next(
            (
                s
                for s in reversed(starts)
                if s.tool == event.tool
                and (event.tool_use_id is None or s.tool_use_id == event.tool_use_id)
                and not _answered(s, pairs)
            ),
            None,
        )
        if target is None:
            logger.debug("correlator.orphan_tool_input", index=event.index, tool=event.tool)
            continue
        target_position = position_of[target.index]
        folded[target_position] = folded[target_position].model_copy(update={"args": event.args})
    return folded


def prepare_events(
    events: Iterable[Any], correlator: Correlator | None = None
) -> list[AgentEvent]:
    """Normalize raw records (if needed) and fold their ``tool_input`` events."""
    return fold_tool_inputs(ensure_events(events), correlator)


def correlate(
    events: Iterable[Any],
    overall_status: RunStatus | str,
    current_tool: str | None = None,
    *,
    correlator: Correlator | None = None,
    settings: TimelineSettings | None = None,
) -> list[ToolCall]:
    """Build one ToolCall per tool start, in start order."""
    overall_status = RunStatus(overall_status)
    correlator = correlator or get_correlator(settings)
    events = prepare_events(events, correlator)

    starts, completions = split_tool_events(events)
    pairs = correlator.pair(starts, completions)

    calls: list[ToolCall] = []
    occurrences: dict[str, int] = defaultdict(int)
    for position, start in enumerate(starts):
        tool_name = start.tool
        occurrence = occurrences[tool_name]
        occurrences[tool_name] += 1

        completion = pairs.get(start.index)
        if completion is not None:
            status = (
                ToolCallStatus.ERROR if completion.success is False else ToolCallStatus.SUCCESS
            )
        elif overall_status == RunStatus.RUNNING and current_tool == tool_name:
            status = ToolCallStatus.RUNNING
        else:
            status = ToolCallStatus.PENDING

        args = start.args
        if args is None and completion is not None:
            args = completion.args

        calls.append(
            ToolCall(
                id=f"tool-{position}-{tool_name}",
                tool_name=tool_name,
                args=args or {},
                result=completion.result if completion is not None else None,
                status=status,
                description=describe_tool(tool_name),
                occurrence=occurrence,
            )
        )
    return calls


def completed_count(tool_calls: list[ToolCall]) -> int:
    return sum(1 for call in tool_calls if call.status == ToolCallStatus.SUCCESS)
