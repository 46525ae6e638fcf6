"""Crypto Assistant, imported from its JSON agent definition."""

from agent_kit.agent import Agent, AgentBuilder
from assistants.catalog import DATA_DIR, Collaborators


DEFINITION_PATH = DATA_DIR / "crypto-assistant.json"


def build_crypto_assistant(collaborators: Collaborators, definition_path = DEFINITION_PATH) -> Agent:
    # Chat persistence needs an explicit agent id, so it is pinned here.
    builder = AgentBuilder.from_definition_file(
        definition_path,
        http = collaborators.http,
        llm_client = collaborators.llm_client,
        id = "crypto-assistant",
        model = collaborators.model,
    )
    return builder.build()
