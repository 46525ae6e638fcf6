"""Agent catalog: menu names, factories and their shared collaborators."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List

from agent_kit.agent import Agent
from agent_kit.ports import DocumentParser, HttpFetcher, LLMInvoker, VectorStore


logger = logging.getLogger("Agent-Catalog")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
PROMPTS_DIR = PROJECT_ROOT / "prompts"
DATA_DIR = PROJECT_ROOT / "data"


@dataclass
class Collaborators:
    """Capability adapters handed to every agent factory."""

    llm_client: Any
    llm: LLMInvoker
    http: HttpFetcher
    parser: DocumentParser
    vector_store: Callable[[str], VectorStore]
    model: str = "gpt-4o"
    workdir: Path = field(default_factory = Path.cwd)


AgentFactory = Callable[[Collaborators], Agent]


def load_behavior(name: str) -> str:
    """Read an agent behavior prompt from prompts/<name>.md."""
    with (PROMPTS_DIR / f"{name}.md").open("r", encoding = "utf-8") as file:
        return file.read().strip()


def _book_assistant(collaborators: Collaborators) -> Agent:
    from assistants.book_assistant import build_book_assistant

    return build_book_assistant(collaborators)


def _crypto_assistant(collaborators: Collaborators) -> Agent:
    from assistants.crypto_assistant import build_crypto_assistant

    return build_crypto_assistant(collaborators)


def _trip_planner(collaborators: Collaborators) -> Agent:
    from assistants.trip_planner import build_trip_planner

    return build_trip_planner(collaborators)


AGENT_FACTORIES: Dict[str, AgentFactory] = {
    "Book Assistant": _book_assistant,
    "Crypto Assistant": _crypto_assistant,
    "Trip Planner": _trip_planner,
}

MENU_CHOICES: List[str] = ["Book Assistant", "Crypto Assistant"]


def resolve_agent_name(name: str) -> str:
    """Match ``name`` case-insensitively against the catalog."""
    wanted = (name or "").strip().lower()
    for candidate in AGENT_FACTORIES:
        if candidate.lower() == wanted:
            return candidate
    raise KeyError(f"Unknown agent '{name}'. Available: {', '.join(AGENT_FACTORIES)}")


def build_agent(name: str, collaborators: Collaborators) -> Agent:
    resolved = resolve_agent_name(name)
    logger.info(f"Building {resolved}")
    return AGENT_FACTORIES[resolved](collaborators)


def session_id_for(agent_name: str) -> str:
    """Session id derived from the menu name; only the first space is replaced."""
    return f"my-chat-session-{agent_name.replace(' ', '-', 1)}"
