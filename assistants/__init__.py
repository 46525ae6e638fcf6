"""Example agents: Book Assistant, Crypto Assistant and Trip Planner."""

from .catalog import (
    AGENT_FACTORIES,
    MENU_CHOICES,
    Collaborators,
    build_agent,
    resolve_agent_name,
    session_id_for,
)

__all__ = [
    "AGENT_FACTORIES",
    "MENU_CHOICES",
    "Collaborators",
    "build_agent",
    "resolve_agent_name",
    "session_id_for",
]
