import logging

from doceat.adapters.vector.base import VectorStore
from doceat.core.models import BulkInsertResult, ChunkRecord

logger = logging.getLogger(__name__)


class CollectionManager:
    """Owns the per-document collection: drop, recreate, fill.

    Re-ingesting a document replaces its collection, it never merges. A fill
    that does not fully succeed drops the new collection again, so readers
    see either the complete document or no collection at all.
    """

    def __init__(self, store: VectorStore, default_dim: int = 768):
        self.store = store
        self.default_dim = default_dim

    async def replace(self, name: str, dim: int) -> None:
        if await self.store.collection_exists(name):
            logger.info("dropping existing collection %s", name)
            await self.store.delete_collection(name)
        await self.store.create_collection(name, dim)

    async def _discard(self, name: str) -> None:
        logger.warning("dropping partially filled collection %s", name)
        await self.store.delete_collection(name)

    async def ingest(self, name: str, records: list[ChunkRecord]) -> BulkInsertResult:
        dim = len(records[0].vector) if records else self.default_dim
        await self.replace(name, dim)
        if not records:
            logger.info("collection %s created empty", name)
            return BulkInsertResult()

        try:
            result = await self.store.bulk_insert(name, records)
        except Exception:
            await self._discard(name)
            raise

        if result.ok:
            logger.info("inserted %d chunks into %s", result.inserted, name)
        else:
            logger.warning(
                "insert into %s: %d ok, %d failed: %s",
                name, result.inserted, len(result.errors), result.errors,
            )
            await self._discard(name)
        return result
