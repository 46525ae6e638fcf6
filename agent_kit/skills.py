"""Skill definitions, input schemas and the per-agent skill registry.

A skill is a named async callable with a typed input schema:

    SkillDefinition(
        name = "lookup_book",
        description = "Lookup a book in the vector database",
        input_schema = parse_input_schema({"user_query": {"type": "Text"}}),
        process = lookup_book,
    )

The registry validates raw inputs (usually JSON arguments produced by the
LLM) against the schema before the body runs, and turns every failure into
a ``SkillFailure`` value so the tool loop always gets an answer back.
"""

import inspect
import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Mapping, Union

from agent_kit.errors import (
    AgentKitError,
    DuplicateSkillName,
    MissingField,
    SkillError,
    TypeMismatch,
    UnknownSkill,
)


logger = logging.getLogger("Skill-Registry")


class FieldType(str, Enum):
    TEXT = "Text"
    NUMBER = "Number"
    ARRAY = "Array"
    OBJECT = "Object"
    BOOLEAN = "Boolean"


_JSON_SCHEMA_TYPES = {
    FieldType.TEXT: {"type": "string"},
    FieldType.NUMBER: {"type": "number"},
    FieldType.ARRAY: {"type": "array", "items": {"type": "string"}},
    FieldType.OBJECT: {"type": "object"},
    FieldType.BOOLEAN: {"type": "boolean"},
}


@dataclass(frozen = True)
class FieldSpec:
    """Declared type and optionality of one skill input."""

    type: FieldType = FieldType.TEXT
    optional: bool = False
    description: str = ""

    def to_json_schema(self) -> Dict[str, Any]:
        schema = dict(_JSON_SCHEMA_TYPES[self.type])
        if self.description:
            schema["description"] = self.description
        return schema


SkillProcess = Callable[..., Union[Awaitable[Any], Any]]


@dataclass(frozen = True)
class SkillDefinition:
    """Immutable description of a callable skill."""

    name: str
    description: str
    process: SkillProcess
    input_schema: Mapping[str, FieldSpec] = field(default_factory = dict)

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise AgentKitError("Skill name must not be empty")
        object.__setattr__(self, "input_schema", MappingProxyType(dict(self.input_schema)))

    def to_tool_spec(self) -> Dict[str, Any]:
        """Return the OpenAI function-calling schema for this skill."""
        properties = {
            field_name: spec.to_json_schema()
            for field_name, spec in self.input_schema.items()
        }
        required = [
            field_name
            for field_name, spec in self.input_schema.items()
            if not spec.optional
        ]
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": properties,
                    "required": required,
                },
            },
        }


@dataclass(frozen = True)
class SkillSuccess:
    payload: Any

    ok = True

    def to_payload(self) -> Any:
        return self.payload


@dataclass(frozen = True)
class SkillFailure:
    message: str

    ok = False

    def to_payload(self) -> Any:
        return {"error": self.message}


SkillResult = Union[SkillSuccess, SkillFailure]


def parse_input_schema(raw_inputs: Mapping[str, Mapping[str, Any]]) -> Dict[str, FieldSpec]:
    """
    Build a field schema from plain dicts.

    Parameters:
        raw_inputs: Mapping of field name to {"type", "optional", "description"}.
            A missing type means Text.
    """
    schema = {}
    for field_name, raw_spec in raw_inputs.items():
        raw_type = raw_spec.get("type") or FieldType.TEXT.value
        try:
            field_type = FieldType(raw_type)
        except ValueError:
            raise AgentKitError(f"Field '{field_name}' has unsupported type '{raw_type}'")
        schema[field_name] = FieldSpec(
            type = field_type,
            optional = bool(raw_spec.get("optional", False)),
            description = str(raw_spec.get("description", "")),
        )
    return schema


class SkillRegistry:
    """Name -> SkillDefinition map with structural input validation."""

    def __init__(self, owner: str = "agent"):
        self.owner = owner
        self._skills: Dict[str, SkillDefinition] = {}
        self._frozen = False

    def register(self, definition: SkillDefinition) -> SkillDefinition:
        if self._frozen:
            raise AgentKitError(f"Skills of '{self.owner}' can no longer be changed")
        if definition.name in self._skills:
            raise DuplicateSkillName(definition.name)
        self._skills[definition.name] = definition
        return definition

    def freeze(self) -> None:
        self._frozen = True

    def get(self, name: str) -> SkillDefinition:
        if name not in self._skills:
            raise UnknownSkill(name)
        return self._skills[name]

    def names(self) -> List[str]:
        return list(self._skills.keys())

    def tool_specs(self) -> List[Dict[str, Any]]:
        return [definition.to_tool_spec() for definition in self._skills.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._skills

    def __len__(self) -> int:
        return len(self._skills)

    def __iter__(self) -> Iterator[SkillDefinition]:
        return iter(self._skills.values())

    def check(self, name: str, raw_inputs: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Validate raw inputs for a skill and return the call arguments.

        Unknown extra fields are dropped. Absent optional fields become None.
        Raises UnknownSkill, MissingField or TypeMismatch.
        """
        definition = self.get(name)
        raw_inputs = raw_inputs or {}

        validated = {}
        for field_name, spec in definition.input_schema.items():
            value = raw_inputs.get(field_name)
            if value is None:
                if not spec.optional:
                    raise MissingField(name, field_name)
                validated[field_name] = None
                continue
            validated[field_name] = _coerce(name, field_name, spec.type, value)
        return validated

    async def invoke(self, name: str, raw_inputs: Mapping[str, Any]) -> SkillResult:
        """Validate inputs, run the skill body, and return its result as data."""
        try:
            arguments = self.check(name, raw_inputs)
        except SkillError as exc:
            logger.warning(f"[{self.owner}] rejected call to {name}: {exc}")
            return SkillFailure(str(exc))

        definition = self._skills[name]
        logger.debug(f"[{self.owner}] invoking {name} with {sorted(arguments)}")
        try:
            output = definition.process(**arguments)
            if inspect.isawaitable(output):
                output = await output
        except Exception as exc:
            logger.warning(f"[{self.owner}] skill {name} failed: {exc}")
            return SkillFailure(f"{name} failed: {exc}")

        if isinstance(output, dict) and set(output.keys()) == {"error"}:
            return SkillFailure(str(output["error"]))
        return SkillSuccess(output)


def _coerce(skill: str, field_name: str, field_type: FieldType, value: Any) -> Any:
    """Check one value against its declared type, coercing where lenient."""
    actual = type(value).__name__

    if field_type is FieldType.TEXT:
        if isinstance(value, str):
            return value
        raise TypeMismatch(skill, field_name, "Text", actual)

    if field_type is FieldType.NUMBER:
        if isinstance(value, bool):
            raise TypeMismatch(skill, field_name, "Number", actual)
        if isinstance(value, (int, float)):
            return value
        if isinstance(value, str):
            text = value.strip()
            try:
                return int(text)
            except ValueError:
                pass
            try:
                return float(text)
            except ValueError:
                pass
        raise TypeMismatch(skill, field_name, "Number", actual)

    if field_type is FieldType.ARRAY:
        if isinstance(value, (list, tuple)):
            return list(value)
        # A single interest sent as a bare string.
        if isinstance(value, str):
            return [value]
        raise TypeMismatch(skill, field_name, "Array", actual)

    if field_type is FieldType.OBJECT:
        if isinstance(value, dict):
            return value
        raise TypeMismatch(skill, field_name, "Object", actual)

    if isinstance(value, bool):
        return value
    raise TypeMismatch(skill, field_name, "Boolean", actual)
