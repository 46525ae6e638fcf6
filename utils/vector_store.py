"""In-memory namespaced vector store (RAMVec).

Documents are split into overlapping chunks, embedded, and kept in a numpy
matrix per namespace. Search ranks chunks by cosine similarity.
"""

import logging
from typing import Any, Dict, List

import numpy as np

from agent_kit.errors import ExternalCallFailure
from agent_kit.ports import SearchHit


logger = logging.getLogger("RAMVec")

CHUNK_CHARS = 2000
CHUNK_OVERLAP = 200
EMBED_BATCH = 64


class RAMVec:
    """Similarity search over documents held in process memory."""

    def __init__(self, namespace: str, embeddings: Any, chunk_chars: int = CHUNK_CHARS, chunk_overlap: int = CHUNK_OVERLAP):
        self.namespace = namespace
        self.embeddings = embeddings
        self.chunk_chars = max(1, int(chunk_chars))
        self.chunk_overlap = max(0, min(int(chunk_overlap), self.chunk_chars - 1))
        self._chunks: List[Dict[str, str]] = []
        self._matrix = None

    def __len__(self) -> int:
        return len(self._chunks)

    async def insert_doc(self, doc_id: str, text: str) -> bool:
        """Chunk, embed and store a document; re-inserting an id replaces it."""
        chunks = split_text(text or "", self.chunk_chars, self.chunk_overlap)
        if not chunks:
            logger.warning(f"[{self.namespace}] nothing to index for {doc_id}")
            return False

        vectors = []
        for start in range(0, len(chunks), EMBED_BATCH):
            vectors.extend(await self.embeddings.embed(chunks[start:start + EMBED_BATCH]))
        if len(vectors) != len(chunks):
            raise ExternalCallFailure("vector_store", f"expected {len(chunks)} embeddings, got {len(vectors)}")

        self._remove(doc_id)
        new_rows = _normalize(np.asarray(vectors, dtype = np.float32))
        self._matrix = new_rows if self._matrix is None else np.vstack([self._matrix, new_rows])
        self._chunks.extend({"doc_id": doc_id, "content": chunk} for chunk in chunks)

        logger.info(f"[{self.namespace}] indexed {doc_id} as {len(chunks)} chunks")
        return True

    async def search(self, query: str, top_k: int = 5) -> List[SearchHit]:
        """Return up to ``top_k`` chunks ranked by descending similarity."""
        if self._matrix is None or not self._chunks or top_k <= 0:
            return []

        query_vector = _normalize(np.asarray(await self.embeddings.embed([query]), dtype = np.float32))[0]
        scores = self._matrix @ query_vector
        ranked = np.argsort(-scores, kind = "stable")[:top_k]
        return [
            SearchHit(
                content = self._chunks[index]["content"],
                similarity = float(scores[index]),
                doc_id = self._chunks[index]["doc_id"],
            )
            for index in ranked
        ]

    def _remove(self, doc_id: str) -> None:
        keep = [index for index, chunk in enumerate(self._chunks) if chunk["doc_id"] != doc_id]
        if len(keep) == len(self._chunks):
            return
        self._chunks = [self._chunks[index] for index in keep]
        self._matrix = self._matrix[keep] if keep else None


def split_text(text: str, chunk_chars: int = CHUNK_CHARS, chunk_overlap: int = CHUNK_OVERLAP) -> List[str]:
    """Split text into overlapping windows, dropping blank ones."""
    text = text.strip()
    if not text:
        return []

    step = max(1, chunk_chars - chunk_overlap)
    chunks = []
    for start in range(0, len(text), step):
        piece = text[start:start + chunk_chars].strip()
        if piece:
            chunks.append(piece)
        if start + chunk_chars >= len(text):
            break
    return chunks


def _normalize(matrix: np.ndarray) -> np.ndarray:
    norms = np.linalg.norm(matrix, axis = 1, keepdims = True)
    norms[norms == 0] = 1.0
    return matrix / norms
