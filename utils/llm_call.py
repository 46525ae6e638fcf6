"""Async chat completion wrapper for stream and non-stream modes."""

from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional


@dataclass
class LLMCallResult:
    """Normalized result returned by the shared LLM call wrapper."""

    assistant_content: str
    tool_calls: List[Dict[str, Any]]
    raw_metadata: Dict[str, Any] = field(default_factory = dict)


def build_request(
    model: str,
    messages: List[Dict[str, Any]],
    tools: Optional[List[Dict[str, Any]]] = None,
    max_tokens: int = 4096,
    stream: bool = False,
) -> Dict[str, Any]:
    """Assemble chat.completions.create keyword arguments."""
    request = {
        "model": model,
        "messages": messages,
        "max_tokens": max_tokens,
    }
    if tools:
        request["tools"] = tools
    if stream:
        request["stream"] = True
    return request


async def call_chat_completion(
    client: Any,
    model: str,
    messages: List[Dict[str, Any]],
    tools: Optional[List[Dict[str, Any]]] = None,
    max_tokens: int = 4096,
) -> LLMCallResult:
    """Call chat completion once without streaming."""
    request = build_request(
        model = model,
        messages = messages,
        tools = tools,
        max_tokens = max_tokens,
    )
    response = await client.chat.completions.create(**request)
    message = response.choices[0].message

    return LLMCallResult(
        assistant_content = _coerce_text(getattr(message, "content", "")),
        tool_calls = _normalize_tool_calls(getattr(message, "tool_calls", None)),
        raw_metadata = {
            "stream": False,
            "response_id": getattr(response, "id", None),
            "model": getattr(response, "model", None),
            "usage": _usage_dict(getattr(response, "usage", None)),
        },
    )


async def stream_chat_completion(
    client: Any,
    model: str,
    messages: List[Dict[str, Any]],
    tools: Optional[List[Dict[str, Any]]] = None,
    max_tokens: int = 4096,
    accumulator: Optional["StreamAccumulator"] = None,
) -> AsyncIterator[str]:
    """
    Stream one completion, yielding content pieces as they arrive.

    Tool-call fragments are merged into ``accumulator``; read
    ``accumulator.result()`` once the iterator is exhausted.
    """
    accumulator = accumulator if accumulator is not None else StreamAccumulator()
    request = build_request(
        model = model,
        messages = messages,
        tools = tools,
        max_tokens = max_tokens,
        stream = True,
    )
    stream_iter = await client.chat.completions.create(**request)
    async for chunk in stream_iter:
        piece = accumulator.add(chunk)
        if piece:
            yield piece


class StreamAccumulator:
    """Collect streamed deltas into content text and complete tool calls."""

    def __init__(self):
        self.content_parts: List[str] = []
        self.tool_buffers: Dict[int, Dict[str, Any]] = {}
        self.chunk_count = 0
        self.last_id = None
        self.last_model = None

    def add(self, chunk: Any) -> str:
        """Merge one chunk and return its content piece ('' if none)."""
        self.chunk_count += 1
        self.last_id = getattr(chunk, "id", self.last_id)
        self.last_model = getattr(chunk, "model", self.last_model)

        choices = getattr(chunk, "choices", None) or []
        if not choices:
            return ""

        delta = getattr(choices[0], "delta", None)
        if delta is None:
            return ""

        content_piece = _coerce_text(getattr(delta, "content", None))
        if content_piece:
            self.content_parts.append(content_piece)

        delta_tool_calls = getattr(delta, "tool_calls", None)
        if delta_tool_calls:
            _merge_stream_tool_calls(tool_buffers = self.tool_buffers, delta_tool_calls = delta_tool_calls)

        return content_piece

    def result(self) -> LLMCallResult:
        tool_calls = [self.tool_buffers[index] for index in sorted(self.tool_buffers.keys())]
        return LLMCallResult(
            assistant_content = "".join(self.content_parts),
            tool_calls = tool_calls,
            raw_metadata = {
                "stream": True,
                "chunk_count": self.chunk_count,
                "response_id": self.last_id,
                "model": self.last_model,
            },
        )


def build_assistant_message(result: LLMCallResult) -> Dict[str, Any]:
    """Convert normalized result to OpenAI-compatible assistant message dict."""
    assistant_message = {
        "role": "assistant",
        "content": result.assistant_content or "",
    }
    if result.tool_calls:
        assistant_message["tool_calls"] = result.tool_calls
    return assistant_message


def _normalize_tool_calls(tool_calls: Any) -> List[Dict[str, Any]]:
    """SDK tool-call objects -> OpenAI message dicts."""
    normalized = []
    for position, tool_call in enumerate(tool_calls or []):
        function = _field(tool_call, "function")
        normalized.append(
            {
                "id": _field(tool_call, "id") or f"call_{position}",
                "type": "function",
                "function": {
                    "name": _field(function, "name") or "",
                    "arguments": _field(function, "arguments") or "{}",
                },
            }
        )
    return normalized


def _merge_stream_tool_calls(tool_buffers: Dict[int, Dict[str, Any]], delta_tool_calls: Any) -> None:
    """Fold streamed tool-call fragments into per-index buffers.

    The first fragment of a call carries its id and name; later ones only
    append argument text.
    """
    for fragment in delta_tool_calls:
        index = _field(fragment, "index")
        index = len(tool_buffers) if index is None else int(index)
        buffer = tool_buffers.setdefault(
            index,
            {"id": f"call_{index}", "type": "function", "function": {"name": "", "arguments": ""}},
        )

        if _field(fragment, "id"):
            buffer["id"] = _field(fragment, "id")

        function = _field(fragment, "function")
        name = _field(function, "name")
        if name and not buffer["function"]["name"]:
            buffer["function"]["name"] = name
        buffer["function"]["arguments"] += _field(function, "arguments") or ""


def _coerce_text(value: Any) -> str:
    """Message content as text; list content is joined from its text parts."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return "".join(_coerce_text(_field(part, "text")) for part in value)
    return str(value)


def _field(obj: Any, key: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(key)
    return getattr(obj, key, None)


def _usage_dict(usage: Any) -> Optional[Dict[str, Any]]:
    if usage is None or isinstance(usage, dict):
        return usage
    model_dump = getattr(usage, "model_dump", None)
    return model_dump() if callable(model_dump) else {"value": str(usage)}
