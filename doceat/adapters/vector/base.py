from abc import ABC, abstractmethod

from doceat.core.models import BulkInsertResult, ChunkRecord, RetrievedChunk

class VectorStore(ABC):
    @abstractmethod
    async def collection_exists(self, name: str) -> bool: ...
    @abstractmethod
    async def delete_collection(self, name: str) -> None: ...
    @abstractmethod
    async def create_collection(self, name: str, dim: int) -> None: ...
    @abstractmethod
    async def bulk_insert(self, name: str, records: list[ChunkRecord]) -> BulkInsertResult: ...
    @abstractmethod
    async def search(self, name: str, vector: list[float], limit: int) -> list[RetrievedChunk]: ...

    async def healthy(self) -> bool:
        return True

    async def close(self) -> None:
        return None
