"""Error taxonomy shared by agents, skills and capability adapters."""

from typing import Optional


class AgentKitError(Exception):
    """Base class for every error raised by agent_kit."""


class InvalidArgument(AgentKitError):
    """Raised when a numeric argument is outside its accepted range."""


class SkillError(AgentKitError):
    """Base class for registry-level skill errors."""


class UnknownSkill(SkillError):
    """Raised when no skill with the requested name is registered."""

    def __init__(self, name: str):
        super().__init__(f"Unknown skill: {name}")
        self.name = name


class DuplicateSkillName(SkillError):
    """Raised when a skill name is registered twice on one agent."""

    def __init__(self, name: str):
        super().__init__(f"Skill '{name}' is already registered")
        self.name = name


class MissingField(SkillError):
    """Raised when a required input field is absent."""

    def __init__(self, skill: str, field: str):
        super().__init__(f"Skill '{skill}' is missing required field '{field}'")
        self.skill = skill
        self.field = field


class TypeMismatch(SkillError):
    """Raised when an input value does not match the declared field type."""

    def __init__(self, skill: str, field: str, expected: str, actual: str):
        super().__init__(
            f"Skill '{skill}' field '{field}' expects {expected}, got {actual}"
        )
        self.skill = skill
        self.field = field
        self.expected = expected
        self.actual = actual


class ExternalCallFailure(AgentKitError):
    """Raised when a capability port (LLM, storage, parser, HTTP) fails."""

    def __init__(self, port: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(f"{port} call failed: {message}")
        self.port = port
        self.cause = cause


class SessionClosed(AgentKitError):
    """Raised when a closed terminal session is used again."""
