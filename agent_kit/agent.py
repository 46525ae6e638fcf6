"""Agent values and the builder that assembles them.

An ``Agent`` bundles identity, behavior prompt, model reference and a frozen
skill registry. Build one explicitly and hand it to whatever drives it:

    builder = AgentBuilder(id = "book-assistant", name = "Book Assistant", llm_client = client)
    builder.add_skill("lookup_book", "Lookup a book", lookup_book, inputs = {"user_query": {"type": "Text"}})
    agent = builder.build()

Agents can also be imported from a JSON definition file whose skills are
declarative HTTP lookups (see ``AgentBuilder.from_definition_file``).
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import quote

from agent_kit.chat import Chat
from agent_kit.errors import AgentKitError
from agent_kit.ports import ChatStore, HttpFetcher
from agent_kit.skills import (
    FieldSpec,
    SkillDefinition,
    SkillProcess,
    SkillRegistry,
    SkillResult,
    parse_input_schema,
)
from utils.trace_logger import TraceLogger


logger = logging.getLogger("Agent")

DEFAULT_MODEL = "gpt-4o"


@dataclass(frozen = True)
class Agent:
    """Configured bundle of identity, behavior, model and skills."""

    id: str
    name: str
    behavior: str
    model: str
    skills: SkillRegistry
    llm_client: Any = None

    async def call(self, skill_name: str, **inputs: Any) -> SkillResult:
        """Invoke one skill directly, bypassing the model."""
        return await self.skills.invoke(skill_name, inputs)

    def chat(
        self,
        session_id: Optional[str] = None,
        persist: bool = False,
        store: Optional[ChatStore] = None,
        stream: bool = True,
        trace_logger: Optional[TraceLogger] = None,
    ) -> Chat:
        """
        Open a chat with this agent.

        Parameters:
            session_id: Identifies the conversation; reusing it reloads prior turns.
            persist: Save turns to ``store`` under ``session_id``.
            store: Chat persistence collaborator.
            stream: Stream content chunks from the model.
            trace_logger: Optional per-turn trace logger.
        """
        if persist and not session_id:
            raise AgentKitError("Chat persistence requires an explicit session id")
        if persist and store is None:
            raise AgentKitError("Chat persistence requires a chat store")
        return Chat(
            agent = self,
            session_id = session_id,
            persist = persist,
            store = store,
            stream = stream,
            trace_logger = trace_logger,
        )

    async def prompt(self, text: str) -> str:
        """One-shot prompt with skills available and no history kept."""
        return await self.chat(stream = False).ask(text)


class AgentBuilder:
    """Collects agent settings and skills, then produces an immutable Agent."""

    def __init__(
        self,
        id: str,
        name: str,
        behavior: str = "",
        model: str = DEFAULT_MODEL,
        llm_client: Any = None,
    ):
        if not id:
            raise AgentKitError("Agent id is required")
        self.id = id
        self.name = name or id
        self.behavior = behavior.strip()
        self.model = model or DEFAULT_MODEL
        self.llm_client = llm_client
        self.registry = SkillRegistry(owner = id)

    def add_skill(
        self,
        name: str,
        description: str,
        process: SkillProcess,
        inputs: Optional[Mapping[str, Union[FieldSpec, Mapping[str, Any]]]] = None,
    ) -> SkillDefinition:
        """Register a skill; ``inputs`` may hold FieldSpecs or plain dicts."""
        definition = SkillDefinition(
            name = name,
            description = description,
            process = process,
            input_schema = _to_schema(inputs or {}),
        )
        return self.registry.register(definition)

    def build(self) -> Agent:
        self.registry.freeze()
        logger.debug(f"Built agent {self.id} with skills {self.registry.names()}")
        return Agent(
            id = self.id,
            name = self.name,
            behavior = self.behavior,
            model = self.model,
            skills = self.registry,
            llm_client = self.llm_client,
        )

    @classmethod
    def from_definition_file(
        cls,
        path: Union[str, Path],
        http: HttpFetcher,
        llm_client: Any = None,
        **overrides: Any,
    ) -> "AgentBuilder":
        """
        Load an agent definition exported as JSON.

        Parameters:
            path: Definition file path.
            http: Fetcher used by the declared endpoint skills.
            llm_client: OpenAI-compatible async client for chats.
            overrides: ``id``, ``name``, ``model`` or ``behavior`` values that
                win over the file.

        File format:
            {"id": ..., "name": ..., "behavior": ..., "model": ...,
             "skills": [{"name": ..., "description": ..., "inputs": {...},
                         "endpoint": {"url": ..., "params": {...}}}]}
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Agent definition not found: {path}")

        with path.open("r", encoding = "utf-8") as file:
            data = json.load(file)

        settings = {key: data.get(key) for key in ["id", "name", "behavior", "model"]}
        settings.update({key: value for key, value in overrides.items() if value is not None})

        builder = cls(
            id = settings.get("id") or "",
            name = settings.get("name") or "",
            behavior = settings.get("behavior") or "",
            model = settings.get("model") or DEFAULT_MODEL,
            llm_client = llm_client,
        )
        for skill in data.get("skills", []):
            endpoint = skill.get("endpoint") or {}
            if not endpoint.get("url"):
                raise AgentKitError(f"Skill '{skill.get('name')}' in {path} has no endpoint url")
            builder.add_skill(
                name = skill["name"],
                description = skill.get("description", ""),
                process = endpoint_process(http, endpoint["url"], endpoint.get("params") or {}),
                inputs = skill.get("inputs") or {},
            )
        logger.info(f"Imported agent {builder.id} from {path}")
        return builder


def endpoint_process(http: HttpFetcher, url_template: str, params_template: Mapping[str, str]) -> SkillProcess:
    """
    Build a skill body that fills ``{field}`` placeholders and GETs JSON.

    URL placeholders are percent-encoded as single path segments; query
    params keep the raw values and are encoded by the HTTP client. Query
    params whose filled value is empty are dropped.
    """

    async def process(**inputs: Any) -> Any:
        values = {key: _as_text(value) for key, value in inputs.items()}
        url = url_template.format_map({key: _path_segment(value) for key, value in values.items()})
        params = {}
        for key, template in params_template.items():
            filled = str(template).format_map(values)
            if filled:
                params[key] = filled
        return await http.get_json(url, params = params or None)

    return process


def _path_segment(text: str) -> str:
    segment = quote(text, safe = "")
    # "." and ".." would still be resolved as dot segments.
    if segment in (".", ".."):
        segment = segment.replace(".", "%2E")
    return segment


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _to_schema(inputs: Mapping[str, Union[FieldSpec, Mapping[str, Any]]]) -> Dict[str, FieldSpec]:
    specs = {name: spec for name, spec in inputs.items() if isinstance(spec, FieldSpec)}
    raw = {name: spec for name, spec in inputs.items() if not isinstance(spec, FieldSpec)}
    specs.update(parse_input_schema(raw))
    return {name: specs[name] for name in inputs}
