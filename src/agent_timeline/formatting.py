"""Per-tool summaries and result coercion for tool messages."""

import json
from collections.abc import Callable, Mapping
from typing import Any

DEFAULT_BASH_WIDTH = 50
STDERR_MARKER = "\n[stderr]\n"
ELLIPSIS = "..."

ToolSummarizer = Callable[[Mapping[str, Any], int], str]


def truncate(text: str, width: int = DEFAULT_BASH_WIDTH) -> str:
    """Keep the first ``width`` characters, marking the cut with an ellipsis."""
    return text if len(text) <= width else text[:width] + ELLIPSIS


def _field(args: Mapping[str, Any], key: str) -> str | None:
    value = args.get(key)
    if value is None or value == "":
        return None
    return str(value)


def _path_summary(verb: str, fallback: str) -> ToolSummarizer:
    def summarize(args: Mapping[str, Any], _width: int) -> str:
        path = _field(args, "file_path")
        return f"{verb} {path}" if path else fallback

    return summarize


def _edit_summary(args: Mapping[str, Any], _width: int) -> str:
    return _field(args, "file_path") or "Editing file"


def _bash_summary(args: Mapping[str, Any], width: int) -> str:
    command = _field(args, "command")
    return truncate(command, width) if command else "Running command"


def _pattern_summary(verb: str, fallback: str) -> ToolSummarizer:
    def summarize(args: Mapping[str, Any], _width: int) -> str:
        pattern = _field(args, "pattern")
        return f"{verb} {pattern}" if pattern else fallback

    return summarize


TOOL_SUMMARIES: dict[str, ToolSummarizer] = {
    "Read": _path_summary("Reading", "Reading file"),
    "Write": _path_summary("Writing", "Writing file"),
    "Edit": _edit_summary,
    "Bash": _bash_summary,
    "Glob": _pattern_summary("Searching", "Searching files"),
    "Grep": _pattern_summary("Grepping", "Searching content"),
}

TOOL_DESCRIPTIONS: dict[str, str] = {
    "write_file": "Create or overwrite a file",
    "read_file": "Read file contents",
    "edit_file": "Edit file with find/replace",
    "list_directory": "List directory contents",
    "run_command": "Execute bash command",
    "glob_search": "Search files by pattern",
    "grep_search": "Search file contents",
    "todo_write": "Update task list",
    "ask_user_question": "Ask user for input",
    "launch_sub_agent": "Launch specialized agent",
    "enter_plan_mode": "Enter planning mode",
    "exit_plan_mode": "Submit plan for approval",
    "web_search": "Search the web",
    "execute_skill": "Execute skill command",
    "notebook_edit": "Edit Jupyter notebook",
    "kill_shell": "Terminate background shell",
    "get_task_output": "Get task output",
    "signal_completion": "Signal task completion",
}
DEFAULT_DESCRIPTION = "Execute tool"


def summarize_tool(
    tool_name: str, args: Mapping[str, Any] | None, width: int = DEFAULT_BASH_WIDTH
) -> str:
    """One-line summary of a tool invocation; the tool name when nothing better fits."""
    if not args:
        return tool_name
    summarizer = TOOL_SUMMARIES.get(tool_name)
    if summarizer is None:
        return tool_name
    return summarizer(args, width)


def describe_tool(tool_name: str) -> str:
    return TOOL_DESCRIPTIONS.get(tool_name, DEFAULT_DESCRIPTION)


def format_tool_result(result: Any) -> str:
    """Coerce a tool result to display text. Never raises."""
    if isinstance(result, str):
        return result
    if result is None:
        return ""
    if isinstance(result, Mapping):
        stdout = result.get("stdout")
        stderr = result.get("stderr")
        if stdout or stderr:
            output = str(stdout) if stdout else ""
            if stderr:
                output += f"{STDERR_MARKER}{stderr}"
            return output.strip()
    if isinstance(result, (Mapping, list, tuple, bool, int, float)):
        try:
            if isinstance(result, (bool, int, float)):
                return json.dumps(result)
            return json.dumps(result, indent=2, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            pass
    return str(result)
