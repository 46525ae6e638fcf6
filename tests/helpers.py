"""
Shared test utilities for this repository.

Provides:
1) In-memory fakes for every capability port (LLM, vector store, parser, HTTP, chat store)
2) A scripted OpenAI-compatible async client for chat loop tests
3) Collaborators wiring for agent factories
4) Common test runner
"""

import traceback
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

from agent_kit.ports import ParsedDocument, SearchHit
from assistants.catalog import Collaborators


FIXED_NOW = datetime(2024, 3, 15, 9, 30, 0)


class FakeLLM:
    """LLM invoker returning a canned reply and recording prompts."""

    def __init__(self, reply: str = "LLM reply"):
        self.reply = reply
        self.prompts: List[str] = []

    async def invoke(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply


class FailingLLM:
    async def invoke(self, prompt: str) -> str:
        raise RuntimeError("model unavailable")


class FakeVectorStore:
    """Records inserts; search returns the preset hits in their given order."""

    def __init__(self, namespace: str = "test", hits: Optional[List[SearchHit]] = None, insert_result: bool = True):
        self.namespace = namespace
        self.hits = list(hits or [])
        self.insert_result = insert_result
        self.inserted: List[tuple] = []
        self.queries: List[tuple] = []

    async def insert_doc(self, doc_id: str, text: str) -> bool:
        self.inserted.append((doc_id, text))
        return self.insert_result

    async def search(self, query: str, top_k: int = 5) -> List[SearchHit]:
        self.queries.append((query, top_k))
        return self.hits[:top_k]


class FakeParser:
    def __init__(self, text: str = "Once upon a time."):
        self.text = text
        self.parsed: List[str] = []

    async def parse(self, file_path: str) -> ParsedDocument:
        self.parsed.append(file_path)
        return ParsedDocument(title = Path(file_path).stem, text = self.text, pages = [self.text])


class FakeHttp:
    """HTTP fetcher returning a fixed payload and recording requests."""

    def __init__(self, payload: Any = None):
        self.payload = payload
        self.requests: List[tuple] = []

    async def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        self.requests.append((url, params))
        return self.payload


class MemoryChatStore:
    def __init__(self):
        self.sessions: Dict[str, List[Dict[str, Any]]] = {}

    def load(self, session_id: str) -> List[Dict[str, Any]]:
        return list(self.sessions.get(session_id, []))

    def append(self, session_id: str, message: Dict[str, Any]) -> None:
        self.sessions.setdefault(session_id, []).append(message)


class LetterEmbeddings:
    """Deterministic embeddings: letter frequency vectors."""

    def __init__(self):
        self.calls = 0

    async def embed(self, texts: List[str]) -> List[List[float]]:
        self.calls += 1
        vectors = []
        for text in texts:
            vector = [0.0] * 26
            for character in text.lower():
                if "a" <= character <= "z":
                    vector[ord(character) - ord("a")] += 1.0
            vectors.append(vector)
        return vectors


def text_reply(content: str) -> Dict[str, Any]:
    """Scripted model turn that answers with text."""
    return {"content": content, "tool_calls": []}


def tool_reply(name: str, arguments: str, call_id: str = "call_1", content: str = "") -> Dict[str, Any]:
    """Scripted model turn that calls one tool."""
    return {
        "content": content,
        "tool_calls": [{"id": call_id, "name": name, "arguments": arguments}],
    }


class ScriptedClient:
    """
    OpenAI-compatible async client that replays scripted turns.

    Non-stream requests get a full message; stream requests get the content
    split into two chunks and tool calls split into name and argument pieces.
    """

    def __init__(self, turns: List[Dict[str, Any]], fail_with: Optional[Exception] = None):
        self.turns = list(turns)
        self.fail_with = fail_with
        self.requests: List[Dict[str, Any]] = []
        self.chat = SimpleNamespace(completions = SimpleNamespace(create = self._create))

    async def _create(self, **request):
        self.requests.append(request)
        if self.fail_with is not None:
            raise self.fail_with
        if not self.turns:
            raise AssertionError("ScriptedClient ran out of turns")
        turn = self.turns.pop(0)
        if request.get("stream"):
            return _ChunkStream(_stream_chunks(turn))
        return _full_response(turn)


class _ChunkStream:
    def __init__(self, chunks):
        self._chunks = list(chunks)

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._chunks:
            raise StopAsyncIteration
        return self._chunks.pop(0)


def _full_response(turn: Dict[str, Any]):
    tool_calls = [
        SimpleNamespace(
            id = call["id"],
            type = "function",
            function = SimpleNamespace(name = call["name"], arguments = call["arguments"]),
        )
        for call in turn["tool_calls"]
    ]
    message = SimpleNamespace(content = turn["content"], tool_calls = tool_calls or None)
    return SimpleNamespace(id = "resp_1", model = "fake-model", usage = None, choices = [SimpleNamespace(message = message)])


def _chunk(content: Optional[str] = None, tool_calls: Optional[List[Any]] = None):
    delta = SimpleNamespace(content = content, tool_calls = tool_calls)
    return SimpleNamespace(id = "chunk", model = "fake-model", choices = [SimpleNamespace(delta = delta)])


def _stream_chunks(turn: Dict[str, Any]) -> List[Any]:
    chunks = []
    content = turn["content"]
    if content:
        middle = max(1, len(content) // 2)
        chunks.append(_chunk(content = content[:middle]))
        if content[middle:]:
            chunks.append(_chunk(content = content[middle:]))
    for index, call in enumerate(turn["tool_calls"]):
        arguments = call["arguments"]
        half = len(arguments) // 2
        chunks.append(_chunk(tool_calls = [
            SimpleNamespace(
                index = index,
                id = call["id"],
                type = "function",
                function = SimpleNamespace(name = call["name"], arguments = arguments[:half]),
            )
        ]))
        chunks.append(_chunk(tool_calls = [
            SimpleNamespace(
                index = index,
                id = None,
                type = None,
                function = SimpleNamespace(name = None, arguments = arguments[half:]),
            )
        ]))
    chunks.append(SimpleNamespace(id = "chunk", model = "fake-model", choices = []))
    return chunks


def make_collaborators(
    llm_client: Any = None,
    llm: Any = None,
    http: Any = None,
    parser: Any = None,
    stores: Optional[Dict[str, FakeVectorStore]] = None,
    workdir: Optional[Path] = None,
) -> Collaborators:
    """Collaborators backed by fakes; ``stores`` collects one fake per namespace."""
    stores = stores if stores is not None else {}

    def vector_store(namespace: str) -> FakeVectorStore:
        return stores.setdefault(namespace, FakeVectorStore(namespace))

    return Collaborators(
        llm_client = llm_client,
        llm = llm or FakeLLM(),
        http = http or FakeHttp(),
        parser = parser or FakeParser(),
        vector_store = vector_store,
        model = "fake-model",
        workdir = workdir or Path.cwd(),
    )


def run_tests(test_functions):
    """
    Run test callables and print a compact summary.

    Parameters:
        test_functions: List of test functions.
    """
    failed = []
    for test_function in test_functions:
        print(f"\n{'=' * 60}")
        print(f"Running: {test_function.__name__}")
        print("=" * 60)
        try:
            if not test_function():
                failed.append(test_function.__name__)
        except Exception as exc:
            print(f"FAILED: {exc}")
            traceback.print_exc()
            failed.append(test_function.__name__)

    passed = len(test_functions) - len(failed)
    print(f"\n{'=' * 60}")
    print(f"Results: {passed}/{len(test_functions)} passed")
    print("=" * 60)
    if failed:
        print(f"FAILED: {failed}")
        return False
    print("All tests passed!")
    return True
