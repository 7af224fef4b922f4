"""Full-history derivation of the timeline snapshot."""

from collections.abc import Iterable
from typing import Any

from .classifier import classify
from .config import DEFAULT_SETTINGS, TimelineSettings
from .correlator import correlate, get_correlator, prepare_events
from .disclosure import DisclosureStore
from .events import ensure_events
from .logging import get_logger
from .models import EventKind, RunState, RunStatus, Timeline
from .progress import current_iteration, current_step, synthesize_progress

logger = get_logger(__name__)

DEFAULT_SUMMARY = "Task completed"
DEFAULT_ERROR = "Unknown error occurred"


def derive_run_state(events: Iterable[Any]) -> RunState:
    """Replay the stream's own lifecycle events into a RunState."""
    state = RunState()
    for event in ensure_events(events):
        if state.status != RunStatus.RUNNING:
            break
        if event.kind == EventKind.TOOL_START and event.tool:
            state.current_tool = event.tool
        elif event.kind == EventKind.TOOL_COMPLETE:
            state.current_tool = None
        elif event.kind == EventKind.COMPLETE:
            state.status = RunStatus.COMPLETE
            state.summary = event.message or DEFAULT_SUMMARY
        elif event.kind == EventKind.ERROR:
            state.status = RunStatus.ERROR
            state.error = event.error or event.message or DEFAULT_ERROR
        elif event.kind == EventKind.DONE:
            state.status = RunStatus.COMPLETE

    if state.status != RunStatus.RUNNING:
        state.current_tool = None
    return state


def is_thinking(status: RunStatus, current_tool: str | None) -> bool:
    """The agent is thinking while it runs with no tool active."""
    return status == RunStatus.RUNNING and not current_tool


def build_timeline(
    raw_events: Iterable[Any],
    status: RunStatus | str | None = None,
    current_tool: str | None = None,
    prior_user_message: str | None = None,
    *,
    settings: TimelineSettings | None = None,
) -> Timeline:
    """Recompute every derivation from the full event history.

    ``status`` and ``current_tool`` default to what the stream itself says
    (see ``derive_run_state``). Passing ``status`` alone means no tool is
    active unless ``current_tool`` is also given.
    """
    settings = settings or DEFAULT_SETTINGS
    events = prepare_events(raw_events, get_correlator(settings))

    if status is None:
        run_state = derive_run_state(events)
        status = run_state.status
        if current_tool is None:
            current_tool = run_state.current_tool
    status = RunStatus(status)

    steps = synthesize_progress(events, status)
    return Timeline(
        events=events,
        messages=classify(events, prior_user_message, settings=settings),
        tool_calls=correlate(events, status, current_tool, settings=settings),
        progress_steps=steps,
        current_step=current_step(steps),
        current_iteration=current_iteration(events),
        status=status,
        current_tool=current_tool,
        is_thinking=is_thinking(status, current_tool),
    )


class TimelineSession:
    """Append-only event history plus the disclosure state for one run.

    Every ``snapshot`` recomputes the timeline from scratch; only the
    disclosure store carries state across snapshots, keyed by message id.
    """

    def __init__(
        self,
        prior_user_message: str | None = None,
        *,
        settings: TimelineSettings | None = None,
    ) -> None:
        self.prior_user_message = prior_user_message
        self.settings = settings or DEFAULT_SETTINGS
        self.disclosure = DisclosureStore()
        self._raw_events: list[Any] = []

    def __len__(self) -> int:
        return len(self._raw_events)

    @property
    def raw_events(self) -> list[Any]:
        return list(self._raw_events)

    def append(self, raw: Any) -> None:
        self._raw_events.append(raw)

    def extend(self, raws: Iterable[Any]) -> None:
        self._raw_events.extend(raws)

    def snapshot(
        self, status: RunStatus | str | None = None, current_tool: str | None = None
    ) -> Timeline:
        timeline = build_timeline(
            self._raw_events,
            status,
            current_tool,
            self.prior_user_message,
            settings=self.settings,
        )
        self.disclosure.observe(timeline.messages)
        logger.debug(
            "timeline.snapshot",
            events=len(timeline.events),
            messages=len(timeline.messages),
            status=timeline.status.value,
        )
        return timeline

    def toggle(self, message_id: str) -> bool:
        return self.disclosure.toggle(message_id)

    def is_expanded(self, message_id: str) -> bool:
        return self.disclosure.is_expanded(message_id)
