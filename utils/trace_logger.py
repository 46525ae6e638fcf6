"""Per-turn trace logging for `--show-llm-response`."""

import json
import logging
from typing import Any, Dict, List, Optional

CONTENT_PREVIEW_CHARS = 400
ARGS_PREVIEW_CHARS = 160
RESULT_PREVIEW_CHARS = 240


class TraceLogger:
    """Logs what the model said, which skills it called, and what they returned."""

    def __init__(self, enabled: bool, logger: Optional[logging.Logger] = None):
        self.enabled = bool(enabled)
        self.logger = logger or logging.getLogger("TraceLogger")

    def log_turn(
        self,
        actor: str,
        assistant_content: str,
        tool_calls: Optional[List[Dict[str, Any]]] = None,
        round_index: int = 0,
    ) -> None:
        """Log one model reply: its text and a `name(args)` line per skill call."""
        if not self.enabled:
            return

        prefix = f"[{actor}#{round_index + 1}]"
        content = _preview(assistant_content or "", CONTENT_PREVIEW_CHARS)
        self.logger.info(f"{prefix} assistant: {content or '(no text)'}")

        for tool_call in tool_calls or []:
            self.logger.info(f"{prefix} calls {_describe_call(tool_call)}")

    def log_skill_result(self, actor: str, skill_name: str, ok: bool, payload: Any) -> None:
        """Log a skill outcome as returned to the model."""
        if not self.enabled:
            return

        if isinstance(payload, str):
            rendered = payload
        else:
            rendered = json.dumps(payload, ensure_ascii = False, default = str)
        status = "ok" if ok else "failed"
        self.logger.info(f"[{actor}] {skill_name} {status}: {_preview(rendered, RESULT_PREVIEW_CHARS)}")


def _describe_call(tool_call: Dict[str, Any]) -> str:
    function_block = tool_call.get("function") or {}
    name = function_block.get("name") or "?"
    raw_arguments = function_block.get("arguments") or "{}"

    try:
        arguments = json.dumps(json.loads(raw_arguments), ensure_ascii = False)
    except (TypeError, ValueError):
        arguments = str(raw_arguments)

    return f"{name}({_preview(arguments, ARGS_PREVIEW_CHARS)})"


def _preview(text: str, limit: int) -> str:
    flat = " ".join(text.split())
    return flat if len(flat) <= limit else flat[:limit] + "..."
