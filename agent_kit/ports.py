"""Capability ports consumed by skills and chats.

Adapters for these contracts live in ``utils``; tests provide in-memory fakes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol


@dataclass
class SearchHit:
    """One ranked vector-store match."""

    content: str
    similarity: float
    doc_id: str = ""

    def as_dict(self) -> Dict[str, Any]:
        """Return the shape handed back to the LLM."""
        return {
            "content": self.content,
            "similarity": self.similarity,
        }


@dataclass
class ParsedDocument:
    """Text extracted from a document file."""

    title: str
    text: str
    pages: List[str] = field(default_factory = list)


class LLMInvoker(Protocol):
    async def invoke(self, prompt: str) -> str:
        ...


class VectorStore(Protocol):
    namespace: str

    async def insert_doc(self, doc_id: str, text: str) -> bool:
        ...

    async def search(self, query: str, top_k: int = 5) -> List[SearchHit]:
        ...


class DocumentParser(Protocol):
    async def parse(self, file_path: str) -> ParsedDocument:
        ...


class HttpFetcher(Protocol):
    async def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        ...


class ChatStore(Protocol):
    def load(self, session_id: str) -> List[Dict[str, Any]]:
        ...

    def append(self, session_id: str, message: Dict[str, Any]) -> None:
        ...
