"""Tests for the capability adapters: LLM call wrapper, models, vector store, HTTP and parser."""

import asyncio
import os
import sys
import tempfile
from pathlib import Path
from types import SimpleNamespace

import httpx

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from tests.helpers import LetterEmbeddings, ScriptedClient, run_tests, text_reply, tool_reply
from agent_kit.errors import ExternalCallFailure
from utils.document_parser import AutoParser
from utils.http_client import HttpJsonClient
from utils.llm_call import (
    StreamAccumulator,
    build_assistant_message,
    build_request,
    call_chat_completion,
    stream_chat_completion,
)
from utils.openai_models import ChatModel, EmbeddingModel
from utils.vector_store import RAMVec, split_text


def test_stream_accumulator_merges_tool_calls():
    """Streamed pieces are yielded in order and tool fragments merge by index."""
    client = ScriptedClient([tool_reply("lookup_book", '{"user_query": "swans"}', content = "Checking")])
    accumulator = StreamAccumulator()

    async def collect():
        return [
            piece
            async for piece in stream_chat_completion(
                client = client,
                model = "fake-model",
                messages = [{"role": "user", "content": "hi"}],
                accumulator = accumulator,
            )
        ]

    pieces = asyncio.run(collect())
    result = accumulator.result()

    assert "".join(pieces) == "Checking"
    assert result.assistant_content == "Checking"
    assert result.tool_calls == [
        {
            "id": "call_1",
            "type": "function",
            "function": {"name": "lookup_book", "arguments": '{"user_query": "swans"}'},
        }
    ]
    assert result.raw_metadata["stream"] is True
    assert client.requests[0]["stream"] is True

    message = build_assistant_message(result)
    assert message["role"] == "assistant"
    assert message["tool_calls"][0]["function"]["name"] == "lookup_book"

    print("PASS: test_stream_accumulator_merges_tool_calls")
    return True


def test_non_stream_call_normalizes():
    """Non-stream responses become plain dict tool calls; tools are optional."""
    client = ScriptedClient([text_reply("Plain answer.")])
    result = asyncio.run(call_chat_completion(client, "fake-model", [{"role": "user", "content": "hi"}]))

    assert result.assistant_content == "Plain answer."
    assert result.tool_calls == []
    assert build_assistant_message(result) == {"role": "assistant", "content": "Plain answer."}
    assert "tools" not in client.requests[0]
    assert "stream" not in client.requests[0]

    request = build_request("m", [], tools = [{"type": "function"}], stream = True)
    assert request["tools"] == [{"type": "function"}]
    assert request["stream"] is True

    print("PASS: test_non_stream_call_normalizes")
    return True


def test_chat_model_and_embeddings():
    """ChatModel wraps failures; EmbeddingModel restores input order."""
    model = ChatModel(ScriptedClient([text_reply("Summary.")]), model = "fake-model")
    assert asyncio.run(model.invoke("Summarize")) == "Summary."

    broken = ChatModel(ScriptedClient([], fail_with = RuntimeError("quota exceeded")))
    try:
        asyncio.run(broken.invoke("Summarize"))
        assert False, "Expected ExternalCallFailure"
    except ExternalCallFailure as error:
        assert error.port == "llm"
        assert "quota exceeded" in str(error)

    async def create(model, input):
        data = [SimpleNamespace(index = index, embedding = [float(index)]) for index in range(len(input))]
        return SimpleNamespace(data = list(reversed(data)))

    client = SimpleNamespace(embeddings = SimpleNamespace(create = create))
    embeddings = EmbeddingModel(client)
    assert asyncio.run(embeddings.embed(["a", "b", "c"])) == [[0.0], [1.0], [2.0]]
    assert asyncio.run(embeddings.embed([])) == []

    print("PASS: test_chat_model_and_embeddings")
    return True


def test_split_text_windows():
    """Windows overlap and blank input yields nothing."""
    assert split_text("abcdefghij", chunk_chars = 4, chunk_overlap = 1) == ["abcd", "defg", "ghij"]
    assert split_text("short", chunk_chars = 100, chunk_overlap = 10) == ["short"]
    assert split_text("   ") == []

    print("PASS: test_split_text_windows")
    return True


def test_ramvec_ranking_and_replace():
    """Search ranks by cosine similarity; re-inserting an id replaces its chunks."""
    store = RAMVec("books", LetterEmbeddings())

    assert asyncio.run(store.search("anything")) == []
    assert asyncio.run(store.insert_doc("a.txt", "aaaa")) is True
    assert asyncio.run(store.insert_doc("b.txt", "bbbb")) is True
    assert asyncio.run(store.insert_doc("empty.txt", "   ")) is False

    hits = asyncio.run(store.search("aab", top_k = 5))
    assert [hit.doc_id for hit in hits] == ["a.txt", "b.txt"]
    assert hits[0].similarity > hits[1].similarity
    assert hits[0].as_dict() == {"content": "aaaa", "similarity": hits[0].similarity}

    asyncio.run(store.insert_doc("a.txt", "zzzz"))
    assert len(store) == 2
    hits = asyncio.run(store.search("zz", top_k = 1))
    assert [(hit.doc_id, hit.content) for hit in hits] == [("a.txt", "zzzz")]

    print("PASS: test_ramvec_ranking_and_replace")
    return True


def test_http_client_json_and_errors():
    """JSON bodies are decoded; HTTP errors and bad bodies become ExternalCallFailure."""
    seen = []

    def handler(request):
        seen.append(request)
        if request.url.path == "/search.json":
            return httpx.Response(200, json = {"docs": [{"title": "The Black Swan"}]})
        if request.url.path == "/broken":
            return httpx.Response(200, text = "not json")
        return httpx.Response(500, text = "boom")

    client = HttpJsonClient(transport = httpx.MockTransport(handler))

    payload = asyncio.run(client.get_json("https://openlibrary.org/search.json", params = {"q": "Black Swan"}))
    assert payload == {"docs": [{"title": "The Black Swan"}]}
    assert seen[0].url.params["q"] == "Black Swan"
    assert seen[0].headers["accept"] == "application/json"

    for path in ["/broken", "/down"]:
        try:
            asyncio.run(client.get_json(f"https://openlibrary.org{path}"))
            assert False, f"Expected ExternalCallFailure for {path}"
        except ExternalCallFailure as error:
            assert error.port == "http"

    print("PASS: test_http_client_json_and_errors")
    return True


def test_auto_parser_text_and_missing():
    """Text files parse to one page; missing files raise ExternalCallFailure."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir, "notes.md")
        path.write_text("# Notes\nBlack swans.", encoding = "utf-8")

        parsed = asyncio.run(AutoParser().parse(str(path)))
        assert parsed.title == "notes"
        assert parsed.text == "# Notes\nBlack swans."
        assert parsed.pages == [parsed.text]

        try:
            asyncio.run(AutoParser().parse(str(Path(tmpdir, "absent.pdf"))))
            assert False, "Expected ExternalCallFailure"
        except ExternalCallFailure as error:
            assert error.port == "parser"

    print("PASS: test_auto_parser_text_and_missing")
    return True


if __name__ == "__main__":
    sys.exit(0 if run_tests([
        test_stream_accumulator_merges_tool_calls,
        test_non_stream_call_normalizes,
        test_chat_model_and_embeddings,
        test_split_text_windows,
        test_ramvec_ranking_and_replace,
        test_http_client_json_and_errors,
        test_auto_parser_text_and_missing,
    ]) else 1)
