"""Unit tests for collection replacement and bulk insert."""

import pytest

from doceat.core.errors import StoreFailure
from doceat.core.models import Chunk, ChunkRecord
from doceat.services.collection_service import CollectionManager


def _records(n: int, dim: int = 4) -> list[ChunkRecord]:
    return [
        ChunkRecord(chunk=Chunk(chunk_index=i, content=f"chunk {i}"), vector=[1.0] * dim)
        for i in range(n)
    ]


@pytest.mark.asyncio
async def test_first_ingest_creates_and_fills(fake_store) -> None:
    mgr = CollectionManager(fake_store, default_dim=8)
    result = await mgr.ingest("Doc", _records(3))

    assert result.ok and result.inserted == 3
    assert fake_store.ops == [("create", "Doc"), ("insert", "Doc")]
    assert fake_store.collections["Doc"]["dim"] == 4


@pytest.mark.asyncio
async def test_reingest_replaces_instead_of_merging(fake_store) -> None:
    mgr = CollectionManager(fake_store)
    await mgr.ingest("Doc", _records(5))
    await mgr.ingest("Doc", _records(2))

    assert fake_store.ops[2:] == [("delete", "Doc"), ("create", "Doc"), ("insert", "Doc")]
    assert [p["chunk_index"] for p in fake_store.payloads("Doc")] == [0, 1]


@pytest.mark.asyncio
async def test_empty_document_gets_an_empty_collection(fake_store) -> None:
    mgr = CollectionManager(fake_store, default_dim=8)
    result = await mgr.ingest("Empty", [])

    assert result.ok and result.inserted == 0
    assert fake_store.collections["Empty"] == {"dim": 8, "points": {}}
    assert ("insert", "Empty") not in fake_store.ops


@pytest.mark.asyncio
async def test_failed_records_are_reported(fake_store) -> None:
    fake_store.fail_indices = {1, 3}
    result = await CollectionManager(fake_store).ingest("Doc", _records(4))

    assert not result.ok
    assert result.inserted == 2
    assert sorted(result.errors) == [1, 3]


@pytest.mark.asyncio
async def test_partially_filled_collection_is_dropped(fake_store) -> None:
    fake_store.fail_indices = {2}
    result = await CollectionManager(fake_store).ingest("Doc", _records(4))

    assert not result.ok
    assert "Doc" not in fake_store.collections
    assert fake_store.ops[-1] == ("delete", "Doc")


@pytest.mark.asyncio
async def test_insert_error_drops_collection_and_propagates(fake_store) -> None:
    async def broken_insert(name, records):
        raise StoreFailure("connection reset")

    fake_store.bulk_insert = broken_insert
    with pytest.raises(StoreFailure):
        await CollectionManager(fake_store).ingest("Doc", _records(2))
    assert "Doc" not in fake_store.collections
