"""Shared runtime utilities: LLM calls, options, tracing and chat persistence.

Adapters that depend on ``agent_kit`` (models, vector store, parser, HTTP,
terminal driver) are imported from their own modules.
"""

from .runtime_config import RuntimeOptions, add_runtime_args, runtime_options_from_args
from .llm_call import LLMCallResult, StreamAccumulator, build_assistant_message, call_chat_completion, stream_chat_completion
from .trace_logger import TraceLogger
from .session_store import SessionStore

__all__ = [
    "RuntimeOptions",
    "add_runtime_args",
    "runtime_options_from_args",
    "LLMCallResult",
    "StreamAccumulator",
    "build_assistant_message",
    "call_chat_completion",
    "stream_chat_completion",
    "TraceLogger",
    "SessionStore",
]
