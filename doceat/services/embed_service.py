"""Embedding backends.

Default backend is Ollama (local-first, no heavy python deps). Switch via env:
- EMBED_BACKEND=ollama|openai|st

Every backend turns its own failures into ``EmbeddingFailure`` so a single
bad call aborts the whole document.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import List

import httpx

from doceat.core.config import Settings
from doceat.core.errors import EmbeddingFailure

logger = logging.getLogger(__name__)


class Embedder(ABC):
    def __init__(self, concurrency: int = 4):
        self.concurrency = max(1, concurrency)

    @abstractmethod
    async def embed(self, text: str) -> list[float]: ...

    async def embed_many(self, texts: List[str]) -> list[list[float]]:
        """Embed ``texts`` with at most ``concurrency`` calls in flight.

        Results come back in input order.
        """
        if not texts:
            return []
        sem = asyncio.Semaphore(self.concurrency)

        async def _one(text: str) -> list[float]:
            async with sem:
                return await self.embed(text)

        tasks = [asyncio.ensure_future(_one(t)) for t in texts]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for t in tasks:
                t.cancel()
            raise


class OllamaEmbedder(Embedder):
    def __init__(self, base_url: str, model: str, concurrency: int = 4, timeout: float = 120,
                 transport: httpx.AsyncBaseTransport | None = None):
        super().__init__(concurrency)
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self._transport = transport

    async def embed(self, text: str) -> list[float]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                r = await client.post(
                    f"{self.base_url}/api/embed",
                    json={"model": self.model, "input": text if text is not None else ""},
                )
                r.raise_for_status()
                data = r.json()
        except (httpx.HTTPError, ValueError) as e:
            raise EmbeddingFailure(f"ollama embedding call failed: {e}") from e

        embs = data.get("embeddings")
        if not isinstance(embs, list) or not embs or not embs[0]:
            raise EmbeddingFailure("Ollama embedding response missing 'embeddings'")
        return embs[0]


class OpenAIEmbedder(Embedder):
    def __init__(self, api_key: str | None, model: str, batch_size: int = 32, concurrency: int = 4):
        super().__init__(concurrency)
        self.api_key = api_key
        self.model = model
        self.batch_size = max(1, batch_size)

    async def _create(self, texts: List[str]) -> list[list[float]]:
        if not self.api_key:
            raise EmbeddingFailure("OPENAI_API_KEY is not set")
        from openai import AsyncOpenAI, OpenAIError

        client = AsyncOpenAI(api_key=self.api_key)
        try:
            resp = await client.embeddings.create(model=self.model, input=texts)
        except OpenAIError as e:
            raise EmbeddingFailure(f"openai embedding call failed: {e}") from e
        # the API may not return items in request order
        vecs = [d.embedding for d in sorted(resp.data, key=lambda d: d.index)]
        if len(vecs) != len(texts) or not all(vecs):
            raise EmbeddingFailure("OpenAI embedding response is missing vectors")
        return vecs

    async def embed(self, text: str) -> list[float]:
        return (await self._create([text]))[0]

    async def embed_many(self, texts: List[str]) -> list[list[float]]:
        # OpenAI supports batching
        out: list[list[float]] = []
        for i in range(0, len(texts), self.batch_size):
            out.extend(await self._create(texts[i:i + self.batch_size]))
        return out


class SentenceTransformerEmbedder(Embedder):
    def __init__(self, model_name: str, batch_size: int = 32):
        super().__init__(1)
        self.model_name = model_name
        self.batch_size = batch_size
        self._model = None

    def _encode(self, texts: List[str]) -> list[list[float]]:
        if self._model is None:
            try:
                from sentence_transformers import SentenceTransformer  # optional dependency
            except ImportError as e:
                raise EmbeddingFailure(
                    "sentence-transformers is not installed. Install with: pip install .[local_ml]"
                ) from e
            self._model = SentenceTransformer(self.model_name)
        return self._model.encode(texts, normalize_embeddings=True, batch_size=self.batch_size).tolist()

    async def embed(self, text: str) -> list[float]:
        return (await self.embed_many([text]))[0]

    async def embed_many(self, texts: List[str]) -> list[list[float]]:
        if not texts:
            return []
        return await asyncio.to_thread(self._encode, texts)


def get_embedder(settings: Settings) -> Embedder:
    backend = (settings.EMBED_BACKEND or "ollama").lower()
    logger.info("embedding backend: %s", backend)
    if backend in {"st", "sentence_transformers", "sentence-transformer"}:
        return SentenceTransformerEmbedder(settings.EMBED_MODEL, batch_size=settings.EMBED_BATCH)
    if backend in {"openai"}:
        return OpenAIEmbedder(
            settings.OPENAI_API_KEY,
            settings.OPENAI_EMBED_MODEL,
            batch_size=settings.EMBED_BATCH,
            concurrency=settings.EMBED_CONCURRENCY,
        )
    # default
    return OllamaEmbedder(
        settings.OLLAMA_BASE_URL,
        settings.OLLAMA_EMBED_MODEL,
        concurrency=settings.EMBED_CONCURRENCY,
    )
