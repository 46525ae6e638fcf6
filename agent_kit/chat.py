"""Chat sessions: the LLM tool loop exposed as a stream of tagged events."""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, AsyncIterator, Dict, List, Optional

from agent_kit.ports import ChatStore
from utils.llm_call import (
    StreamAccumulator,
    build_assistant_message,
    call_chat_completion,
    stream_chat_completion,
)
from utils.trace_logger import TraceLogger

if TYPE_CHECKING:
    from agent_kit.agent import Agent


logger = logging.getLogger("Chat")

MAX_TOOL_ROUNDS = 10
MAX_TOOL_OUTPUT_CHARS = 50000


class ChatEventKind(str, Enum):
    CONTENT = "content"
    TOOL_CALL = "tool_call"
    END = "end"
    ERROR = "error"


@dataclass(frozen = True)
class ChatEvent:
    """One event of a streamed chat turn."""

    kind: ChatEventKind
    text: str = ""
    tool_name: str = ""
    arguments: Dict[str, Any] = field(default_factory = dict)
    message: str = ""

    @classmethod
    def content(cls, text: str) -> "ChatEvent":
        return cls(kind = ChatEventKind.CONTENT, text = text)

    @classmethod
    def tool_call(cls, tool_name: str, arguments: Dict[str, Any]) -> "ChatEvent":
        return cls(kind = ChatEventKind.TOOL_CALL, tool_name = tool_name, arguments = arguments)

    @classmethod
    def end(cls, text: str = "") -> "ChatEvent":
        return cls(kind = ChatEventKind.END, text = text)

    @classmethod
    def error(cls, message: str) -> "ChatEvent":
        return cls(kind = ChatEventKind.ERROR, message = message)


class Chat:
    """
    A conversation with one agent.

    Each call to ``prompt`` runs one user turn: the model may call skills any
    number of times (bounded by ``max_tool_rounds``) before it answers. The
    turn's messages join the history only when the turn ends cleanly, so a
    failed turn never leaves dangling tool calls behind.
    """

    def __init__(
        self,
        agent: "Agent",
        session_id: Optional[str] = None,
        persist: bool = False,
        store: Optional[ChatStore] = None,
        stream: bool = True,
        max_tool_rounds: int = MAX_TOOL_ROUNDS,
        trace_logger: Optional[TraceLogger] = None,
    ):
        self.agent = agent
        self.session_id = session_id
        self.persist = bool(persist and store is not None and session_id)
        self.store = store
        self.stream = stream
        self.max_tool_rounds = max(1, int(max_tool_rounds))
        self.tracer = trace_logger or TraceLogger(enabled = False)
        self.history: List[Dict[str, Any]] = []

        if self.persist:
            self.history = list(self.store.load(self.session_id))
            if self.history:
                logger.info(f"Resumed session {self.session_id} with {len(self.history)} messages")

    async def prompt(self, text: str) -> AsyncIterator[ChatEvent]:
        """Run one user turn, yielding content, tool_call, end or error events."""
        turn_messages: List[Dict[str, Any]] = [{"role": "user", "content": text}]

        try:
            for round_index in range(self.max_tool_rounds):
                messages = self._messages(turn_messages)
                tools = self.agent.skills.tool_specs() or None

                if self.stream:
                    accumulator = StreamAccumulator()
                    async for piece in stream_chat_completion(
                        client = self.agent.llm_client,
                        model = self.agent.model,
                        messages = messages,
                        tools = tools,
                        accumulator = accumulator,
                    ):
                        yield ChatEvent.content(piece)
                    result = accumulator.result()
                else:
                    result = await call_chat_completion(
                        client = self.agent.llm_client,
                        model = self.agent.model,
                        messages = messages,
                        tools = tools,
                    )
                    if result.assistant_content:
                        yield ChatEvent.content(result.assistant_content)

                turn_messages.append(build_assistant_message(result))
                self.tracer.log_turn(
                    actor = self.agent.id,
                    assistant_content = result.assistant_content,
                    tool_calls = result.tool_calls,
                    round_index = round_index,
                )

                if not result.tool_calls:
                    self._commit(turn_messages)
                    yield ChatEvent.end(result.assistant_content)
                    return

                for tool_call in result.tool_calls:
                    function_block = tool_call.get("function") or {}
                    tool_name = function_block.get("name") or ""
                    arguments = parse_tool_args(function_block.get("arguments", "{}"))
                    yield ChatEvent.tool_call(tool_name, arguments)

                    outcome = await self.agent.skills.invoke(tool_name, arguments)
                    self.tracer.log_skill_result(self.agent.id, tool_name, outcome.ok, outcome.to_payload())
                    turn_messages.append(
                        {
                            "role": "tool",
                            "tool_call_id": tool_call.get("id"),
                            "content": _serialize(outcome.to_payload()),
                        }
                    )

            yield ChatEvent.error(
                f"No final answer after {self.max_tool_rounds} tool rounds"
            )
        except Exception as exc:
            logger.error(f"Chat turn failed: {exc}")
            yield ChatEvent.error(str(exc))

    async def ask(self, text: str) -> str:
        """Run one turn and return the final answer text."""
        parts = []
        async for event in self.prompt(text):
            if event.kind is ChatEventKind.ERROR:
                raise RuntimeError(event.message)
            if event.kind is ChatEventKind.END:
                return event.text or "".join(parts)
            if event.kind is ChatEventKind.CONTENT:
                parts.append(event.text)
        return "".join(parts)

    def _messages(self, turn_messages: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        messages = []
        if self.agent.behavior:
            messages.append({"role": "system", "content": self.agent.behavior})
        messages.extend(self.history)
        messages.extend(turn_messages)
        return messages

    def _commit(self, turn_messages: List[Dict[str, Any]]) -> None:
        self.history.extend(turn_messages)
        if not self.persist:
            return
        for message in turn_messages:
            self.store.append(self.session_id, message)


def parse_tool_args(arguments: Any) -> Dict[str, Any]:
    """Parse tool call arguments safely."""
    if isinstance(arguments, dict):
        return arguments
    if not arguments:
        return {}

    try:
        parsed = json.loads(arguments)
    except json.JSONDecodeError:
        cleaned = "".join(character for character in arguments if character >= " " or character in "\t\n\r")
        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError:
            return {}
    return parsed if isinstance(parsed, dict) else {}


def _serialize(payload: Any) -> str:
    if isinstance(payload, str):
        return payload[:MAX_TOOL_OUTPUT_CHARS]
    return json.dumps(payload, ensure_ascii = False, default = str)[:MAX_TOOL_OUTPUT_CHARS]
