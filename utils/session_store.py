"""Chat persistence: one append-only JSONL file per session id."""

import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


logger = logging.getLogger("SessionStore")


class SessionStore:
    """
    JSONL chat store keyed by session id.

    The first line of each file is a ``meta`` event; every chat message is a
    ``message`` event. Reusing a session id reloads its messages in order.
    """

    def __init__(
        self,
        session_dir: Path,
        enabled: bool = True,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        self.enabled = bool(enabled)
        self.session_dir = Path(session_dir)
        self.metadata = metadata or {}

    def path_for(self, session_id: str) -> Path:
        """Return the JSONL path used for ``session_id``."""
        return self.session_dir / f"{_sanitize_session_id(session_id)}.jsonl"

    def load(self, session_id: str) -> List[Dict[str, Any]]:
        """Return the persisted messages of a session, oldest first."""
        path = self.path_for(session_id)
        if not self.enabled or not path.exists():
            return []

        messages = []
        with path.open("r", encoding = "utf-8") as file:
            for line_number, line in enumerate(file, start = 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    record = json.loads(line)
                except json.JSONDecodeError:
                    logger.warning(f"Skipping corrupt line {line_number} in {path}")
                    continue
                if record.get("event") == "message" and isinstance(record.get("message"), dict):
                    messages.append(record["message"])
        return messages

    def append(self, session_id: str, message: Dict[str, Any]) -> None:
        """Append one chat message to the session file."""
        if not self.enabled:
            return

        path = self.path_for(session_id)
        if not path.exists():
            self.session_dir.mkdir(parents = True, exist_ok = True)
            self._write(
                path,
                {
                    "event": "meta",
                    "timestamp": _now_iso(),
                    "session_id": session_id,
                    "metadata": self.metadata,
                },
            )
        self._write(
            path,
            {
                "event": "message",
                "timestamp": _now_iso(),
                "message": message,
            },
        )

    def _write(self, path: Path, payload: Dict[str, Any]) -> None:
        with path.open("a", encoding = "utf-8") as file:
            file.write(json.dumps(payload, ensure_ascii = False, default = str) + "\n")


def _sanitize_session_id(session_id: str) -> str:
    """Sanitize a session id for a filesystem-safe filename."""
    sanitized = re.sub(r"[^A-Za-z0-9_.-]+", "_", (session_id or "").strip())
    return sanitized.strip("_.") or "default-session"


def _now_iso() -> str:
    """Return current local timestamp in ISO-like format."""
    return datetime.now().strftime("%Y-%m-%dT%H:%M:%S")
