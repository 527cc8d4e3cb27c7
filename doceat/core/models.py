import json
from typing import Any, Literal

from pydantic import BaseModel, Field


class JsonLeaf(BaseModel):
    path: str
    content: str


class Chunk(BaseModel):
    chunk_index: int
    content: str | JsonLeaf

    def embedding_text(self) -> str:
        if isinstance(self.content, JsonLeaf):
            return json.dumps({"path": self.content.path, "content": self.content.content}, ensure_ascii=False)
        return self.content

    def payload(self) -> dict[str, Any]:
        chunk = self.content.model_dump() if isinstance(self.content, JsonLeaf) else self.content
        return {"chunk": chunk, "chunk_index": self.chunk_index}


class ChunkRecord(BaseModel):
    chunk: Chunk
    vector: list[float]


class BulkInsertResult(BaseModel):
    inserted: int = 0
    # chunk_index -> reason
    errors: dict[int, str] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


class ExtractedDocument(BaseModel):
    kind: Literal["text", "json"]
    text: str | None = None
    # parsed JSON value for kind == "json"
    data: Any = None


class RetrievedChunk(BaseModel):
    id: str
    content: str | dict[str, Any]
    chunk_index: int
    score: float | None = None


class IngestResult(BaseModel):
    status: int
    message: str
    collection: str | None = None
    chunks: int = 0


class QueryResult(BaseModel):
    status: int
    message: str
    response: str | None = None
    relevant_chunks: list[RetrievedChunk] = Field(default_factory=list)
