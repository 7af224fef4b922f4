"""Unit tests for the disclosure module."""

from agent_timeline.disclosure import (
    DisclosureStore,
    message_text,
    preview_of,
    preview_summary,
    shows_preview,
)
from agent_timeline.models import (
    ChatMessage,
    PlanMessage,
    ThinkingMessage,
    TodoItem,
    TodoMessage,
    TodoStatus,
    ToolResultMessage,
)


def numbered_lines(count: int) -> str:
    return "\n".join(f"line {i}" for i in range(1, count + 1))


def tool_result(tool_name: str = "Bash", content: str = "out", raw=None, summary="s"):
    return ToolResultMessage(
        id=f"tool_result-{tool_name}",
        timestamp=0,
        tool_name=tool_name,
        content=content,
        summary=summary,
        raw_result=raw,
    )


class TestPreviewOf:
    """Tests for preview_of function."""

    def test_twelve_lines_five_preview(self) -> None:
        preview = preview_of(numbered_lines(12), 5)
        assert preview.preview == numbered_lines(5)
        assert len(preview.preview.split("\n")) == 5
        assert preview.has_more is True
        assert preview.total_lines == 12
        assert preview.remaining_lines == 7
        assert preview.more_label == "7 more lines"

    def test_three_lines_not_truncated(self) -> None:
        content = numbered_lines(3)
        preview = preview_of(content, 5)
        assert preview.preview == content
        assert preview.has_more is False
        assert preview.total_lines == 3
        assert preview.remaining_lines == 0
        assert preview.more_label == ""

    def test_exactly_max_lines(self) -> None:
        preview = preview_of(numbered_lines(5), 5)
        assert preview.has_more is False

    def test_empty_content(self) -> None:
        preview = preview_of("", 5)
        assert preview.total_lines == 1
        assert preview.has_more is False


class TestMessageText:
    def test_todo_items(self) -> None:
        message = TodoMessage(
            id="todo-0",
            timestamp=0,
            items=[
                TodoItem(content="A", status=TodoStatus.COMPLETED, active_form="A"),
                TodoItem(content="B", status=TodoStatus.IN_PROGRESS, active_form="B"),
                TodoItem(content="C", status=TodoStatus.PENDING, active_form="C"),
            ],
        )
        assert message_text(message) == "[x] A\n[~] B\n[ ] C"

    def test_plan(self) -> None:
        assert message_text(PlanMessage(id="plan-0", timestamp=0, plan="do it")) == "do it"

    def test_content(self) -> None:
        message = ChatMessage(id="chat-0", timestamp=0, role="assistant", content="hi")
        assert message_text(message) == "hi"


class TestResultPreviewPolicy:
    """Which tool results preview, and their collapsed badges."""

    def test_shows_preview_tools(self) -> None:
        assert shows_preview(tool_result("Bash"))
        assert shows_preview(tool_result("Edit"))
        assert shows_preview(tool_result("Grep"))
        assert not shows_preview(tool_result("Read"))
        assert not shows_preview(ChatMessage(id="c", timestamp=0, role="user", content="x"))

    def test_edit_with_patch(self) -> None:
        message = tool_result("Edit", raw={"structuredPatch": [{"lines": []}]}, summary="a.ts")
        assert preview_summary(message) == "Modified a.ts"

    def test_edit_without_patch(self) -> None:
        assert preview_summary(tool_result("Edit", raw="ok")) is None

    def test_bash_error(self) -> None:
        message = tool_result("Bash", raw={"stdout": "x", "stderr": "fail"})
        assert preview_summary(message) == "Error"

    def test_bash_success(self) -> None:
        message = tool_result("Bash", raw={"stdout": "x", "stderr": "  "})
        assert preview_summary(message) == "Success"

    def test_bash_plain_result(self) -> None:
        assert preview_summary(tool_result("Bash", raw="text")) is None


class TestDisclosureStore:
    """Tests for the keyed expand/collapse store."""

    def test_defaults_by_type(self) -> None:
        store = DisclosureStore()
        thinking = ThinkingMessage(id="thinking-0", timestamp=0, content="hmm")
        chat = ChatMessage(id="chat-1", timestamp=1, role="assistant", content="hi")
        store.observe([thinking, chat])
        assert store.is_expanded("thinking-0") is True
        assert store.is_expanded("chat-1") is False

    def test_toggle_round_trip(self) -> None:
        store = DisclosureStore()
        store.observe([tool_result()])
        assert store.toggle("tool_result-Bash") is True
        assert store.is_expanded("tool_result-Bash") is True
        assert store.toggle("tool_result-Bash") is False
        assert store.is_expanded("tool_result-Bash") is False

    def test_thinking_can_collapse(self) -> None:
        store = DisclosureStore()
        store.observe([ThinkingMessage(id="thinking-0", timestamp=0, content="hmm")])
        assert store.toggle("thinking-0") is False

    def test_reobserving_keeps_user_choice(self) -> None:
        store = DisclosureStore()
        messages = [tool_result()]
        store.observe(messages)
        store.toggle("tool_result-Bash")
        store.observe(messages)
        store.observe([tool_result(content="recomputed")])
        assert store.is_expanded("tool_result-Bash") is True
        assert len(store) == 1

    def test_empty_content_not_collapsible(self) -> None:
        store = DisclosureStore()
        store.observe([tool_result(content="  \n ")])
        assert store.is_collapsible("tool_result-Bash") is False
        assert store.toggle("tool_result-Bash") is False
        assert store.is_expanded("tool_result-Bash") is False

    def test_unknown_id(self) -> None:
        store = DisclosureStore()
        assert store.toggle("nope") is False
        assert "nope" not in store
        assert store.is_expanded("nope") is False

    def test_snapshot_is_a_copy(self) -> None:
        store = DisclosureStore()
        store.observe([tool_result()])
        snap = store.snapshot()
        snap["tool_result-Bash"] = True
        assert store.is_expanded("tool_result-Bash") is False
