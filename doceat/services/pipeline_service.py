import asyncio
import logging

from doceat.adapters.vector.qdrant import QdrantVectorStore
from doceat.core.config import Settings
from doceat.core.errors import DocEatError, StoreFailure
from doceat.core.locks import KeyedLock
from doceat.core.models import ChunkRecord, IngestResult, QueryResult
from doceat.core.naming import sanitize_document_name
from doceat.services.chunk_service import chunk_document
from doceat.services.collection_service import CollectionManager
from doceat.services.embed_service import Embedder, get_embedder
from doceat.services.extract_service import extract_document
from doceat.services.llm_factory import get_llm
from doceat.services.query_service import QueryService
from doceat.services.staging_service import LocalStaging

logger = logging.getLogger(__name__)


class DocumentService:
    """Entry points for the outer layer: ingest a staged file, prompt a document.

    Both return result objects; domain errors become a status and a public
    message here, the detail goes to the log.
    """

    def __init__(
        self,
        staging: LocalStaging,
        embedder: Embedder,
        collections: CollectionManager,
        query_service: QueryService,
        chunk_size: int = 150,
        overlap: int = 25,
        max_json_depth: int = 64,
    ):
        if chunk_size <= 0 or not 0 <= overlap < chunk_size:
            raise ValueError(f"invalid chunking: size={chunk_size} overlap={overlap}")
        self.staging = staging
        self.embedder = embedder
        self.collections = collections
        self.query_service = query_service
        self.chunk_size = chunk_size
        self.overlap = overlap
        self.max_json_depth = max_json_depth
        self.locks = KeyedLock()

    async def _ingest(self, filename: str, collection: str) -> int:
        data = self.staging.read(filename)
        doc = await asyncio.to_thread(extract_document, filename, data)
        chunks = chunk_document(
            doc,
            chunk_size=self.chunk_size,
            overlap=self.overlap,
            max_depth=self.max_json_depth,
        )
        logger.info("%s -> %s: %d %s chunks", filename, collection, len(chunks), doc.kind)

        vecs = await self.embedder.embed_many([c.embedding_text() for c in chunks])
        records = [ChunkRecord(chunk=c, vector=v) for c, v in zip(chunks, vecs)]

        result = await self.collections.ingest(collection, records)
        if not result.ok:
            raise StoreFailure(f"bulk insert into '{collection}' failed", failures=result.errors)
        return len(chunks)

    async def _process(self, filename: str, data: bytes | None = None) -> IngestResult:
        try:
            collection = sanitize_document_name(filename)
            async with self.locks(collection):
                # same-name uploads share one staged path
                if data is not None:
                    self.staging.write(filename, data)
                n = await self._ingest(filename, collection)
                self.staging.delete(filename)
        except DocEatError as e:
            logger.warning("ingestion of %s failed (%s): %s", filename, type(e).__name__, e)
            return IngestResult(status=e.status_code, message=e.public_message)

        return IngestResult(
            status=200,
            message=f"{filename} processed into {n} chunks",
            collection=collection,
            chunks=n,
        )

    async def process_document(self, filename: str) -> IngestResult:
        """Ingest a file that is already in the staging area."""
        return await self._process(filename)

    async def upload(self, filename: str, data: bytes) -> IngestResult:
        """Stage ``data`` as ``filename`` and ingest it."""
        return await self._process(filename, data)

    async def prompt_ai(self, document_id: str, prompt: str) -> QueryResult:
        try:
            collection = sanitize_document_name(document_id)
            return await self.query_service.query(collection, prompt)
        except DocEatError as e:
            logger.warning("prompt against %s failed (%s): %s", document_id, type(e).__name__, e)
            return QueryResult(status=e.status_code, message=e.public_message)


def build_document_service(settings: Settings) -> DocumentService:
    store = QdrantVectorStore(
        url=settings.VECTOR_DB_URL,
        api_key=settings.VECTOR_DB_API_KEY,
        timeout=settings.VECTOR_DB_TIMEOUT,
    )
    embedder = get_embedder(settings)
    return DocumentService(
        staging=LocalStaging(settings.UPLOAD_PATH),
        embedder=embedder,
        collections=CollectionManager(store, default_dim=settings.EMBED_DIM),
        query_service=QueryService(store, embedder, get_llm(settings), limit=settings.QUERY_LIMIT),
        chunk_size=settings.CHUNK_SIZE,
        overlap=settings.CHUNK_OVERLAP,
        max_json_depth=settings.MAX_JSON_DEPTH,
    )
