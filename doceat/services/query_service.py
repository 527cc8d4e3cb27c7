"""Grounded answers over one document's collection."""

from __future__ import annotations

import logging

from doceat.adapters.llm.base import LLM
from doceat.adapters.vector.base import VectorStore
from doceat.core.errors import NotFound, StoreFailure
from doceat.core.models import QueryResult, RetrievedChunk
from doceat.services.embed_service import Embedder

logger = logging.getLogger(__name__)

NO_RELEVANT_CONTENT = "No relevant content found for this prompt"


def _chunk_text(c: RetrievedChunk) -> str:
    if isinstance(c.content, dict):
        return f"{c.content.get('path', '')}: {c.content.get('content', '')}"
    return c.content


def build_context(chunks: list[RetrievedChunk]) -> str:
    return "\n\n".join(f"[{i}]\n{_chunk_text(c)}" for i, c in enumerate(chunks, 1))


def build_prompt(question: str, context: str) -> str:
    system = (
        "You are a document assistant. Answer using only the provided CONTEXT, which holds excerpts "
        "of a single document. If the CONTEXT does not contain the answer, say so. "
        "Cite excerpts like [1], [2]."
    )
    return f"""{system}

QUESTION:
{question}

CONTEXT:
{context}

ANSWER:"""


class QueryService:
    def __init__(self, store: VectorStore, embedder: Embedder, llm: LLM, limit: int = 5):
        self.store = store
        self.embedder = embedder
        self.llm = llm
        self.limit = limit

    async def query(self, collection: str, prompt: str) -> QueryResult:
        if not await self.store.collection_exists(collection):
            raise NotFound(f"collection '{collection}' does not exist")

        qvec = await self.embedder.embed(prompt)
        try:
            hits = await self.store.search(collection, qvec, self.limit)
        except StoreFailure:
            # a re-ingestion may have dropped the collection since the check above
            if not await self.store.collection_exists(collection):
                raise NotFound(f"collection '{collection}' was removed during the query")
            raise
        if not hits:
            logger.info("no chunks of %s matched the prompt", collection)
            return QueryResult(status=200, message=NO_RELEVANT_CONTENT)

        answer = await self.llm.generate(build_prompt(prompt, build_context(hits)))
        logger.debug("answered from %d chunks of %s", len(hits), collection)
        return QueryResult(
            status=200,
            message="Response generated successfully",
            response=answer,
            relevant_chunks=hits,
        )
