"""Domain models for agent-timeline."""

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class EventKind(str, Enum):
    """Normalized kinds of agent execution events."""

    TOOL_START = "tool_start"
    TOOL_INPUT = "tool_input"
    TOOL_COMPLETE = "tool_complete"
    THINKING = "thinking"
    TODO = "todo"
    PLAN = "plan"
    RESPONSE = "response"
    CONTENT = "content"
    PROGRESS = "progress"
    ITERATION = "iteration"
    COMPLETE = "complete"
    ERROR = "error"
    DONE = "done"
    UNKNOWN = "unknown"


class RunStatus(str, Enum):
    """Overall status of an agent run."""

    RUNNING = "running"
    COMPLETE = "complete"
    ERROR = "error"


class TodoStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class ToolCallStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    ERROR = "error"


class ProgressStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETE = "complete"
    ERROR = "error"


class MessageType(str, Enum):
    """Discriminator values for timeline messages."""

    CHAT = "chat"
    TOOL = "tool"
    TOOL_RESULT = "tool_result"
    THINKING = "thinking"
    TODO = "todo"
    PLAN = "plan"
    SYSTEM = "system"


class TodoItem(BaseModel):
    """One entry of an agent-reported todo list. Status is display-only."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content: str
    status: TodoStatus = TodoStatus.PENDING
    active_form: str = Field(default="", alias="activeForm")


class AgentEvent(BaseModel):
    """A normalized agent event, tagged with its arrival index."""

    model_config = ConfigDict(frozen=True)

    index: int
    kind: EventKind
    raw_type: str = ""
    tool: str | None = None
    args: dict[str, Any] | None = None
    result: Any = None
    success: bool | None = None
    iteration: int | None = None
    content: str | None = None
    message: str | None = None
    thinking: str | None = None
    todos: list[TodoItem] | None = None
    plan: str | None = None
    tool_use_id: str | None = None
    label: str | None = None
    status: ProgressStatus | None = None
    order: float | None = None
    error: str | None = None
    raw: dict[str, Any] = {}  # original record, unrecognized fields included


class _MessageBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str  # stable across recomputation
    timestamp: int


class ChatMessage(_MessageBase):
    type: Literal[MessageType.CHAT] = MessageType.CHAT
    role: Literal["user", "assistant"]
    content: str


class ToolMessage(_MessageBase):
    type: Literal[MessageType.TOOL] = MessageType.TOOL
    content: str  # tool name


class ToolResultMessage(_MessageBase):
    type: Literal[MessageType.TOOL_RESULT] = MessageType.TOOL_RESULT
    tool_name: str
    content: str
    summary: str
    raw_result: Any = None


class ThinkingMessage(_MessageBase):
    type: Literal[MessageType.THINKING] = MessageType.THINKING
    content: str


class TodoMessage(_MessageBase):
    type: Literal[MessageType.TODO] = MessageType.TODO
    items: list[TodoItem]


class PlanMessage(_MessageBase):
    type: Literal[MessageType.PLAN] = MessageType.PLAN
    plan: str
    tool_use_id: str = ""


class SystemMessage(_MessageBase):
    type: Literal[MessageType.SYSTEM] = MessageType.SYSTEM
    subtype: Literal["init", "result", "error"] | None = None
    content: str = ""


Message = Annotated[
    ChatMessage
    | ToolMessage
    | ToolResultMessage
    | ThinkingMessage
    | TodoMessage
    | PlanMessage
    | SystemMessage,
    Field(discriminator="type"),
]


class ToolCall(BaseModel):
    """One tool invocation tracked from start to completion."""

    id: str
    tool_name: str
    args: dict[str, Any] = {}
    result: Any = None
    status: ToolCallStatus = ToolCallStatus.PENDING
    description: str = ""
    occurrence: int = 0  # per-tool-name start counter


class ProgressStep(BaseModel):
    """One unit of visible progress in a multi-step run."""

    label: str
    status: ProgressStatus = ProgressStatus.PENDING
    order: float
    message: str | None = None


class Preview(BaseModel):
    """Line-based preview of a message body."""

    preview: str
    has_more: bool
    total_lines: int
    preview_lines: int

    @property
    def remaining_lines(self) -> int:
        return self.total_lines - self.preview_lines if self.has_more else 0

    @property
    def more_label(self) -> str:
        return f"{self.remaining_lines} more lines" if self.has_more else ""


class RunState(BaseModel):
    """Run status derived from the event stream itself."""

    status: RunStatus = RunStatus.RUNNING
    current_tool: str | None = None
    error: str | None = None
    summary: str | None = None


class Timeline(BaseModel):
    """Everything derived from one event history."""

    events: list[AgentEvent]
    messages: list[Message]
    tool_calls: list[ToolCall]
    progress_steps: list[ProgressStep]
    current_step: ProgressStep | None = None
    current_iteration: int | None = None
    status: RunStatus
    current_tool: str | None = None
    is_thinking: bool
