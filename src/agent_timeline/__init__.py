"""agent-timeline: Reconcile agent execution events into a typed timeline."""

from .classifier import classify
from .config import ConfigError, TimelineSettings, load_settings
from .correlator import PositionalCorrelator, ToolUseIdCorrelator, correlate, fold_tool_inputs
from .disclosure import DisclosureStore, preview_of
from .events import normalize_event, normalize_events
from .models import (
    AgentEvent,
    ChatMessage,
    EventKind,
    Message,
    PlanMessage,
    ProgressStatus,
    ProgressStep,
    RunStatus,
    SystemMessage,
    ThinkingMessage,
    Timeline,
    TodoItem,
    TodoMessage,
    ToolCall,
    ToolCallStatus,
    ToolMessage,
    ToolResultMessage,
)
from .progress import current_step, synthesize_progress
from .timeline import TimelineSession, build_timeline, derive_run_state

__all__ = [
    "AgentEvent",
    "ChatMessage",
    "ConfigError",
    "DisclosureStore",
    "EventKind",
    "Message",
    "PlanMessage",
    "PositionalCorrelator",
    "ProgressStatus",
    "ProgressStep",
    "RunStatus",
    "SystemMessage",
    "ThinkingMessage",
    "Timeline",
    "TimelineSession",
    "TimelineSettings",
    "TodoItem",
    "TodoMessage",
    "ToolCall",
    "ToolCallStatus",
    "ToolMessage",
    "ToolResultMessage",
    "ToolUseIdCorrelator",
    "build_timeline",
    "classify",
    "correlate",
    "current_step",
    "derive_run_state",
    "fold_tool_inputs",
    "load_settings",
    "normalize_event",
    "normalize_events",
    "preview_of",
    "synthesize_progress",
]
