"""Progress steps from explicit progress events or iteration markers."""

from collections.abc import Iterable
from typing import Any

from .events import ensure_events
from .models import AgentEvent, EventKind, ProgressStatus, ProgressStep, RunStatus


def iteration_events(events: list[AgentEvent]) -> list[AgentEvent]:
    """Events that mark an iteration: kind ``iteration`` or an ``iteration`` field."""
    return [e for e in events if e.kind == EventKind.ITERATION or e.iteration is not None]


def _iteration_numbers(markers: list[AgentEvent]) -> list[int]:
    # Markers without a number fall back to their 1-based position.
    return [
        marker.iteration if marker.iteration is not None else position
        for position, marker in enumerate(markers, 1)
    ]


def current_iteration(events: Iterable[Any]) -> int | None:
    """Number of the most recent iteration marker, if any."""
    markers = iteration_events(ensure_events(events))
    if not markers:
        return None
    return _iteration_numbers(markers)[-1]


def _explicit_steps(progress_events: list[AgentEvent]) -> list[ProgressStep]:
    return [
        ProgressStep(
            label=event.label or f"Step {position + 1}",
            status=event.status or ProgressStatus.PENDING,
            order=event.order if event.order is not None else position,
            message=event.message,
        )
        for position, event in enumerate(progress_events)
    ]


def _iteration_steps(markers: list[AgentEvent], overall_status: RunStatus) -> list[ProgressStep]:
    numbers = _iteration_numbers(markers)
    current = numbers[-1] if numbers else None
    steps = []
    for position, (marker, number) in enumerate(zip(markers, numbers)):
        if any(later > number for later in numbers[position + 1 :]):
            status = ProgressStatus.COMPLETE
        elif overall_status == RunStatus.RUNNING and number == current:
            status = ProgressStatus.RUNNING
        else:
            status = ProgressStatus.PENDING
        steps.append(
            ProgressStep(
                label=f"Iteration {number}",
                status=status,
                order=marker.index,
                message=marker.message or marker.content,
            )
        )
    return steps


def synthesize_progress(
    events: Iterable[Any], overall_status: RunStatus | str
) -> list[ProgressStep]:
    """Derive ordered progress steps for a run.

    Explicit ``progress`` events always win: when any is present they are
    used as-is and iteration markers are ignored. Otherwise one step is
    synthesized per iteration marker; a step is complete once a later marker
    carries a strictly larger number, and the step for the current iteration
    is running while the run is.
    """
    events = ensure_events(events)
    overall_status = RunStatus(overall_status)

    progress_events = [e for e in events if e.kind == EventKind.PROGRESS]
    if progress_events:
        steps = _explicit_steps(progress_events)
    else:
        steps = _iteration_steps(iteration_events(events), overall_status)

    return sorted(steps, key=lambda step: step.order)


def current_step(steps: list[ProgressStep]) -> ProgressStep | None:
    """First step (by order) that is not complete, else the last one."""
    ordered = sorted(steps, key=lambda step: step.order)
    for step in ordered:
        if step.status != ProgressStatus.COMPLETE:
            return step
    return ordered[-1] if ordered else None


def progress_fraction(steps: list[ProgressStep]) -> tuple[int, int]:
    """(completed, total) step counts."""
    completed = sum(1 for step in steps if step.status == ProgressStatus.COMPLETE)
    return completed, len(steps)
