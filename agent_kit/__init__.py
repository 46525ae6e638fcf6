"""Agents, skills and chats for the terminal assistant demos."""

from .errors import (
    AgentKitError,
    DuplicateSkillName,
    ExternalCallFailure,
    InvalidArgument,
    MissingField,
    SessionClosed,
    SkillError,
    TypeMismatch,
    UnknownSkill,
)
from .ports import ParsedDocument, SearchHit
from .skills import (
    FieldSpec,
    FieldType,
    SkillDefinition,
    SkillFailure,
    SkillRegistry,
    SkillResult,
    SkillSuccess,
    parse_input_schema,
)
from .chat import Chat, ChatEvent, ChatEventKind
from .agent import Agent, AgentBuilder

__all__ = [
    "AgentKitError",
    "DuplicateSkillName",
    "ExternalCallFailure",
    "InvalidArgument",
    "MissingField",
    "SessionClosed",
    "SkillError",
    "TypeMismatch",
    "UnknownSkill",
    "ParsedDocument",
    "SearchHit",
    "FieldSpec",
    "FieldType",
    "SkillDefinition",
    "SkillFailure",
    "SkillRegistry",
    "SkillResult",
    "SkillSuccess",
    "parse_input_schema",
    "Chat",
    "ChatEvent",
    "ChatEventKind",
    "Agent",
    "AgentBuilder",
]
