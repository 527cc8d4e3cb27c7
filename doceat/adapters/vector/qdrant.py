from __future__ import annotations

import logging
import math
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List

from qdrant_client import AsyncQdrantClient
from qdrant_client.http import models as qm

from doceat.adapters.vector.base import VectorStore
from doceat.core.errors import StoreFailure
from doceat.core.models import BulkInsertResult, ChunkRecord, RetrievedChunk

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _store_op(op: str, name: str) -> AsyncIterator[None]:
    try:
        yield
    except StoreFailure:
        raise
    except Exception as e:
        raise StoreFailure(f"qdrant {op} on '{name}' failed: {e}") from e


class QdrantVectorStore(VectorStore):
    """One Qdrant collection per document.

    Points use the chunk index as id and carry ``{"chunk", "chunk_index"}``
    as payload. Vectors are computed by the caller.
    """

    def __init__(self, url: str | None = None, api_key: str | None = None, timeout: int = 20,
                 client: AsyncQdrantClient | None = None):
        self.client = client or AsyncQdrantClient(url=url, api_key=api_key, timeout=timeout)

    async def collection_exists(self, name: str) -> bool:
        async with _store_op("exists", name):
            return await self.client.collection_exists(collection_name=name)

    async def delete_collection(self, name: str) -> None:
        async with _store_op("delete", name):
            await self.client.delete_collection(collection_name=name)

    async def create_collection(self, name: str, dim: int) -> None:
        async with _store_op("create", name):
            await self.client.create_collection(
                collection_name=name,
                vectors_config=qm.VectorParams(size=dim, distance=qm.Distance.COSINE),
            )

    async def _vector_size(self, name: str) -> int:
        async with _store_op("describe", name):
            info = await self.client.get_collection(collection_name=name)
        vectors = info.config.params.vectors
        # collections created here always carry a single unnamed vector
        if isinstance(vectors, qm.VectorParams):
            return vectors.size
        raise StoreFailure(f"collection '{name}' does not use a single unnamed vector")

    @staticmethod
    def _check_record(rec: ChunkRecord, dim: int) -> str | None:
        if len(rec.vector) != dim:
            return f"vector has {len(rec.vector)} dimensions, collection expects {dim}"
        if not all(math.isfinite(v) for v in rec.vector):
            return "vector contains non-finite values"
        return None

    async def bulk_insert(self, name: str, records: List[ChunkRecord]) -> BulkInsertResult:
        """Insert every valid record in one upsert and report the rest per record."""
        if not records:
            return BulkInsertResult()
        dim = await self._vector_size(name)

        errors: Dict[int, str] = {}
        points = []
        for rec in records:
            problem = self._check_record(rec, dim)
            if problem:
                errors[rec.chunk.chunk_index] = problem
                continue
            points.append(qm.PointStruct(id=rec.chunk.chunk_index, vector=rec.vector, payload=rec.chunk.payload()))

        if points:
            try:
                await self.client.upsert(collection_name=name, points=points, wait=True)
            except Exception as e:
                logger.error("qdrant upsert of %d points into %s failed: %s", len(points), name, e)
                for p in points:
                    errors[int(p.id)] = f"upsert failed: {e}"
                return BulkInsertResult(inserted=0, errors=errors)

        return BulkInsertResult(inserted=len(points), errors=errors)

    @staticmethod
    def _normalize_hit(hit: Any) -> RetrievedChunk:
        payload = getattr(hit, "payload", None) or {}
        pid = getattr(hit, "id", None)
        return RetrievedChunk(
            id=str(pid),
            content=payload.get("chunk", ""),
            chunk_index=int(payload.get("chunk_index", pid or 0)),
            score=float(getattr(hit, "score", 0.0) or 0.0),
        )

    async def search(self, name: str, vector: List[float], limit: int) -> List[RetrievedChunk]:
        async with _store_op("search", name):
            res = await self.client.query_points(
                collection_name=name,
                query=vector,
                limit=limit,
                with_payload=True,
            )
        return [self._normalize_hit(h) for h in res.points]

    async def healthy(self) -> bool:
        try:
            await self.client.get_collections()
        except Exception as e:
            logger.warning("qdrant health check failed: %s", e)
            return False
        return True

    async def close(self) -> None:
        await self.client.close()
