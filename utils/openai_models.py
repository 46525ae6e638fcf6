"""OpenAI-backed model adapters: prompt invocation and embeddings."""

import logging
import os
from typing import Any, List, Optional

from openai import AsyncOpenAI

from agent_kit.errors import ExternalCallFailure
from utils.llm_call import call_chat_completion
from utils.runtime_config import DEFAULT_EMBEDDING_MODEL, DEFAULT_MODEL


logger = logging.getLogger("OpenAI-Models")


def build_client(
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
) -> AsyncOpenAI:
    """Build the async OpenAI-compatible client from arguments or environment."""
    api_key = api_key or os.getenv("LLM_API_KEY") or os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise RuntimeError("LLM_API_KEY is not configured; add it to .env")
    return AsyncOpenAI(
        api_key = api_key,
        base_url = base_url or os.getenv("LLM_BASE_URL") or None,
    )


class ChatModel:
    """LLM invoker: one prompt in, one completion text out."""

    def __init__(self, client: Any, model: str = DEFAULT_MODEL, max_tokens: int = 4096):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    async def invoke(self, prompt: str) -> str:
        try:
            result = await call_chat_completion(
                client = self.client,
                model = self.model,
                messages = [{"role": "user", "content": prompt}],
                max_tokens = self.max_tokens,
            )
        except Exception as exc:
            raise ExternalCallFailure("llm", str(exc), exc) from exc
        return result.assistant_content


class EmbeddingModel:
    """Text embeddings through the OpenAI embeddings endpoint."""

    def __init__(self, client: Any, model: str = DEFAULT_EMBEDDING_MODEL):
        self.client = client
        self.model = model

    async def embed(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []
        try:
            response = await self.client.embeddings.create(model = self.model, input = texts)
        except Exception as exc:
            raise ExternalCallFailure("embeddings", str(exc), exc) from exc
        ordered = sorted(response.data, key = lambda item: item.index)
        return [list(item.embedding) for item in ordered]
