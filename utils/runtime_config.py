"""Runtime option parsing for the terminal chat."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional


BOOL_TRUE = {"1", "true", "yes", "y", "on"}
BOOL_FALSE = {"0", "false", "no", "n", "off"}

DEFAULT_MODEL = "gpt-4o"
DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"


@dataclass
class RuntimeOptions:
    """Runtime feature switches merged from CLI and environment variables."""

    agent: Optional[str] = None
    model: str = DEFAULT_MODEL
    embedding_model: str = DEFAULT_EMBEDDING_MODEL
    stream: bool = True
    show_llm_response: bool = False
    persist: bool = True
    session_dir: Path = Path("sessions")

    def as_dict(self) -> dict:
        """Return JSON-serializable dict form for session metadata."""
        return {
            "agent": self.agent,
            "model": self.model,
            "embedding_model": self.embedding_model,
            "stream": self.stream,
            "show_llm_response": self.show_llm_response,
            "persist": self.persist,
            "session_dir": str(self.session_dir),
        }


def add_runtime_args(parser: Any) -> None:
    """Attach runtime flags to an argparse parser."""
    import argparse

    parser.add_argument(
        "--agent",
        dest = "agent",
        default = None,
        help = "Agent name to chat with; skips the selection menu.",
    )
    parser.add_argument(
        "--model",
        dest = "model",
        default = None,
        help = f"Chat model (default: {DEFAULT_MODEL}).",
    )
    parser.add_argument(
        "--stream",
        dest = "stream",
        action = argparse.BooleanOptionalAction,
        default = None,
        help = "Stream assistant output as it is generated.",
    )
    parser.add_argument(
        "--show-llm-response",
        dest = "show_llm_response",
        action = argparse.BooleanOptionalAction,
        default = None,
        help = "Log per-turn assistant text and skill calls.",
    )
    parser.add_argument(
        "--persist",
        dest = "persist",
        action = argparse.BooleanOptionalAction,
        default = None,
        help = "Persist chat sessions so reruns resume them.",
    )
    parser.add_argument(
        "--session-dir",
        dest = "session_dir",
        default = None,
        help = "Chat session directory (default: sessions/).",
    )


def runtime_options_from_args(args: Any) -> RuntimeOptions:
    """Build runtime options with CLI > ENV > default precedence."""
    agent = _resolve_str(
        cli_value = getattr(args, "agent", None),
        env_name = "AGENT_NAME",
        default = "",
    )
    model = _resolve_str(
        cli_value = getattr(args, "model", None),
        env_name = "LLM_MODEL",
        default = DEFAULT_MODEL,
    )
    embedding_model = _resolve_str(
        cli_value = None,
        env_name = "EMBEDDING_MODEL",
        default = DEFAULT_EMBEDDING_MODEL,
    )
    stream = _resolve_bool(
        cli_value = getattr(args, "stream", None),
        env_name = "AGENT_STREAM",
        default = True,
    )
    show_llm_response = _resolve_bool(
        cli_value = getattr(args, "show_llm_response", None),
        env_name = "AGENT_SHOW_LLM_RESPONSE",
        default = False,
    )
    persist = _resolve_bool(
        cli_value = getattr(args, "persist", None),
        env_name = "AGENT_PERSIST",
        default = True,
    )
    raw_session_dir = _resolve_str(
        cli_value = getattr(args, "session_dir", None),
        env_name = "AGENT_SESSION_DIR",
        default = "sessions",
    )

    return RuntimeOptions(
        agent = agent or None,
        model = model,
        embedding_model = embedding_model,
        stream = stream,
        show_llm_response = show_llm_response,
        persist = persist,
        session_dir = Path(raw_session_dir),
    )


def _resolve_bool(cli_value: Any, env_name: str, default: bool) -> bool:
    """Resolve bool with CLI > ENV > default precedence."""
    if cli_value is not None:
        return bool(cli_value)

    raw_env = os.getenv(env_name)
    if raw_env is None:
        return default

    normalized = raw_env.strip().lower()
    if normalized in BOOL_TRUE:
        return True
    if normalized in BOOL_FALSE:
        return False
    return default


def _resolve_str(cli_value: Any, env_name: str, default: str) -> str:
    """Resolve string option with CLI > ENV > default precedence."""
    if cli_value is not None and str(cli_value).strip():
        return str(cli_value).strip()

    raw_env = os.getenv(env_name)
    if raw_env is not None and raw_env.strip():
        return raw_env.strip()

    return default
