"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import asyncio
import math
from typing import Any

import pytest

from doceat.adapters.llm.base import LLM
from doceat.adapters.vector.base import VectorStore
from doceat.core.errors import EmbeddingFailure
from doceat.core.models import BulkInsertResult, ChunkRecord, RetrievedChunk
from doceat.services.collection_service import CollectionManager
from doceat.services.embed_service import Embedder
from doceat.services.pipeline_service import DocumentService
from doceat.services.query_service import QueryService
from doceat.services.staging_service import LocalStaging


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


# ── Fakes ───────────────────────────────────────────────────────────────


class FakeVectorStore(VectorStore):
    """In-memory store keeping collections as ``{name: {"dim", "points"}}``."""

    def __init__(self, fail_indices: set[int] | None = None) -> None:
        self.collections: dict[str, dict[str, Any]] = {}
        self.ops: list[tuple[str, str]] = []
        self.fail_indices = set(fail_indices or ())
        self.closed = False

    async def collection_exists(self, name: str) -> bool:
        return name in self.collections

    async def delete_collection(self, name: str) -> None:
        self.ops.append(("delete", name))
        await asyncio.sleep(0)
        self.collections.pop(name, None)

    async def create_collection(self, name: str, dim: int) -> None:
        self.ops.append(("create", name))
        await asyncio.sleep(0)
        self.collections[name] = {"dim": dim, "points": {}}

    async def bulk_insert(self, name: str, records: list[ChunkRecord]) -> BulkInsertResult:
        self.ops.append(("insert", name))
        await asyncio.sleep(0)
        points = self.collections[name]["points"]
        errors: dict[int, str] = {}
        for rec in records:
            idx = rec.chunk.chunk_index
            if idx in self.fail_indices:
                errors[idx] = "rejected by fake store"
                continue
            points[idx] = {"payload": rec.chunk.payload(), "vector": rec.vector}
        return BulkInsertResult(inserted=len(records) - len(errors), errors=errors)

    async def search(self, name: str, vector: list[float], limit: int) -> list[RetrievedChunk]:
        self.ops.append(("search", name))
        hits = []
        for pid, p in self.collections[name]["points"].items():
            hits.append(RetrievedChunk(
                id=str(pid),
                content=p["payload"]["chunk"],
                chunk_index=p["payload"]["chunk_index"],
                score=_cosine(vector, p["vector"]),
            ))
        hits.sort(key=lambda h: h.score, reverse=True)
        return hits[:limit]

    async def close(self) -> None:
        self.closed = True

    def payloads(self, name: str) -> list[dict[str, Any]]:
        points = self.collections[name]["points"]
        return [points[i]["payload"] for i in sorted(points)]


def _cosine(a: list[float], b: list[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b))
    na = math.sqrt(sum(x * x for x in a))
    nb = math.sqrt(sum(y * y for y in b))
    return dot / (na * nb) if na and nb else 0.0


class FakeEmbedder(Embedder):
    """Letter-frequency vectors; fails on texts containing ``fail_on``."""

    DIM = 27

    def __init__(self, fail_on: str | None = None, concurrency: int = 4) -> None:
        super().__init__(concurrency)
        self.fail_on = fail_on
        self.calls: list[str] = []

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        await asyncio.sleep(0)
        if self.fail_on and self.fail_on in text:
            raise EmbeddingFailure(f"fake embedder refused {text[:20]!r}")
        vec = [0.0] * (self.DIM - 1) + [1.0]
        for ch in text.lower():
            if "a" <= ch <= "z":
                vec[ord(ch) - ord("a")] += 1.0
        return vec


class FakeLLM(LLM):
    def __init__(self, answer: str = "The document is about testing.") -> None:
        self.answer = answer
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.answer


# ── Fixtures ────────────────────────────────────────────────────────────


@pytest.fixture()
def fake_store() -> FakeVectorStore:
    return FakeVectorStore()


@pytest.fixture()
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture()
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture()
def staging(tmp_path) -> LocalStaging:
    return LocalStaging(tmp_path / "uploads")


@pytest.fixture()
def make_service(staging: LocalStaging, fake_llm: FakeLLM):
    """Build a DocumentService around the given fakes."""

    def _make(store: FakeVectorStore, embedder: FakeEmbedder, **kwargs: Any) -> DocumentService:
        params = {"chunk_size": 150, "overlap": 25, "max_json_depth": 64}
        params.update(kwargs)
        return DocumentService(
            staging=staging,
            embedder=embedder,
            collections=CollectionManager(store, default_dim=FakeEmbedder.DIM),
            query_service=QueryService(store, embedder, fake_llm, limit=5),
            **params,
        )

    return _make


@pytest.fixture()
def service(make_service, fake_store: FakeVectorStore, fake_embedder: FakeEmbedder) -> DocumentService:
    return make_service(fake_store, fake_embedder)
