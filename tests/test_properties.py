"""Property-based tests using Hypothesis."""

from collections import Counter

from hypothesis import given, settings
from hypothesis import strategies as st

from agent_timeline.classifier import classify
from agent_timeline.config import TimelineSettings
from agent_timeline.correlator import correlate
from agent_timeline.disclosure import preview_of
from agent_timeline.models import ProgressStatus, ToolCallStatus
from agent_timeline.progress import synthesize_progress

TOOLS = ["Read", "Bash", "Edit", "Grep"]
text = st.text(max_size=40, alphabet=st.characters(blacklist_categories=("Cs",)))


# Custom strategies
@st.composite
def tool_event(draw: st.DrawFn) -> dict:
    """Generate a tool start/complete/input event, sometimes malformed."""
    event_type = draw(st.sampled_from(["tool_start", "tool_complete", "tool_input", "tool_error"]))
    event: dict = {"type": event_type}
    if draw(st.integers(min_value=0, max_value=9)) > 0:
        event["tool"] = draw(st.sampled_from(TOOLS))
    if draw(st.booleans()):
        event["args"] = {"file_path": draw(text), "command": draw(text)}
    if draw(st.booleans()):
        event["toolUseId"] = draw(st.sampled_from(["tu_1", "tu_2", "tu_3"]))
    if event_type == "tool_complete":
        event["result"] = draw(
            st.one_of(st.none(), text, st.fixed_dictionaries({"stdout": text, "stderr": text}))
        )
        if draw(st.booleans()):
            event["success"] = draw(st.booleans())
    return event


@st.composite
def other_event(draw: st.DrawFn) -> dict:
    """Generate a non-tool event of any kind, including unknown ones."""
    event_type = draw(
        st.sampled_from(
            ["thinking", "todo", "plan", "response", "content", "progress", "iteration", "mystery"]
        )
    )
    event: dict = {"type": event_type}
    if event_type == "thinking":
        event["thinking"] = draw(text)
    elif event_type == "todo":
        event["todos"] = draw(
            st.lists(st.fixed_dictionaries({"content": text, "status": st.just("pending")}))
        )
    elif event_type == "plan":
        event["plan"] = draw(text)
    elif event_type in ("response", "content"):
        event["content"] = draw(text)
    elif event_type == "progress":
        event["label"] = draw(text)
    if draw(st.booleans()):
        event["iteration"] = draw(st.integers(min_value=0, max_value=5))
    return event


event_lists = st.lists(st.one_of(tool_event(), other_event()), max_size=30)


class TestClassifyProperties:
    """Property-based tests for classify function."""

    @given(event_lists)
    @settings(max_examples=50)
    def test_deterministic(self, events: list[dict]) -> None:
        """Classifying the same history twice gives identical output."""
        first = [m.model_dump_json() for m in classify(events, "prompt")]
        second = [m.model_dump_json() for m in classify(events, "prompt")]
        assert first == second

    @given(event_lists, event_lists, st.sampled_from(["positional", "tool_use_id"]))
    @settings(max_examples=50)
    def test_stable_prefix(self, events: list[dict], more: list[dict], correlation: str) -> None:
        """Appending events never changes messages derived from the prefix."""
        config = TimelineSettings(correlation=correlation)
        before = classify(events, settings=config)
        after = classify(events + more, settings=config)
        assert after[: len(before)] == before

    @given(event_lists)
    @settings(max_examples=50)
    def test_timestamps_strictly_increase(self, events: list[dict]) -> None:
        timestamps = [m.timestamp for m in classify(events, "hi")]
        assert all(a < b for a, b in zip(timestamps, timestamps[1:]))

    @given(event_lists)
    @settings(max_examples=50)
    def test_ids_unique(self, events: list[dict]) -> None:
        ids = [m.id for m in classify(events, "hi")]
        assert len(ids) == len(set(ids))


class TestCorrelateProperties:
    """Property-based tests for correlate function."""

    @given(event_lists, st.sampled_from(["running", "complete", "error"]))
    @settings(max_examples=50)
    def test_completions_never_claimed_twice(self, events: list[dict], status: str) -> None:
        """Per tool name, finished calls never outnumber completions."""
        calls = correlate(events, status)
        finished = Counter(
            c.tool_name
            for c in calls
            if c.status in (ToolCallStatus.SUCCESS, ToolCallStatus.ERROR)
        )
        completions = Counter(
            e["tool"]
            for e in events
            if e["type"] in ("tool_complete", "tool_error") and "tool" in e
        )
        for tool, count in finished.items():
            assert count <= completions[tool]

    @given(event_lists)
    @settings(max_examples=50)
    def test_one_call_per_named_start(self, events: list[dict]) -> None:
        starts = [e for e in events if e["type"] == "tool_start" and "tool" in e]
        assert len(correlate(events, "running")) == len(starts)


class TestProgressProperties:
    """Property-based tests for synthesize_progress function."""

    @given(st.lists(st.integers(min_value=1, max_value=20), min_size=1, max_size=15))
    @settings(max_examples=50)
    def test_last_marker_never_complete(self, numbers: list[int]) -> None:
        steps = synthesize_progress(
            [{"type": "iteration", "iteration": n} for n in numbers], "running"
        )
        assert len(steps) == len(numbers)
        assert steps[-1].status == ProgressStatus.RUNNING

    @given(st.lists(st.integers(min_value=1, max_value=20), min_size=1, max_size=15))
    @settings(max_examples=50)
    def test_sorted_by_order(self, numbers: list[int]) -> None:
        steps = synthesize_progress(
            [{"type": "iteration", "iteration": n} for n in numbers], "complete"
        )
        orders = [s.order for s in steps]
        assert orders == sorted(orders)


class TestPreviewProperties:
    """Property-based tests for preview_of function."""

    @given(st.lists(text.filter(lambda s: "\n" not in s), max_size=30), st.integers(1, 10))
    def test_line_accounting(self, lines: list[str], max_lines: int) -> None:
        content = "\n".join(lines)
        preview = preview_of(content, max_lines)
        assert preview.total_lines == max(len(lines), 1)
        if preview.has_more:
            assert preview.preview_lines == max_lines
            assert preview.preview_lines + preview.remaining_lines == preview.total_lines
            assert content.startswith(preview.preview)
        else:
            assert preview.preview == content
