"""
Tests for the size-capped, newest-first history ledger.
"""

import pytest

from backend.app.core.document_store import DocumentStore
from backend.app.core.storage import MemoryBackend
from backend.app.models.history import HistoryAction, HistoryDocument, HistoryEntry
from backend.app.services.history_service import DEFAULT_HISTORY_LIMIT, HistoryLedger


def _entry(name: str, n: int) -> HistoryEntry:
    return HistoryEntry(
        name=name,
        old_value=str(n - 1),
        new_value=str(n),
        action=HistoryAction.UPDATE,
        source_address="127.0.0.1",
        timestamp=n,
    )


def _ledger(limit: int) -> HistoryLedger:
    async def provider() -> int:
        return limit

    return HistoryLedger(DocumentStore(MemoryBackend(), HistoryDocument), provider)


@pytest.mark.asyncio
async def test_append_is_newest_first():
    ledger = _ledger(10)
    for n in range(3):
        await ledger.append(_entry("x", n))
    assert [e.timestamp for e in await ledger.all()] == [2, 1, 0]


@pytest.mark.asyncio
async def test_cap_drops_oldest_entries():
    ledger = _ledger(5)
    for n in range(12):
        await ledger.append(_entry("x", n))

    entries = await ledger.all()
    assert len(entries) == 5
    assert [e.timestamp for e in entries] == [11, 10, 9, 8, 7]


@pytest.mark.asyncio
async def test_for_name_preserves_order():
    ledger = _ledger(100)
    await ledger.append(_entry("a", 1))
    await ledger.append(_entry("b", 2))
    await ledger.append(_entry("a", 3))

    assert [e.timestamp for e in await ledger.for_name("a")] == [3, 1]
    assert await ledger.for_name("missing") == []


@pytest.mark.asyncio
async def test_default_limit():
    ledger = HistoryLedger(DocumentStore(MemoryBackend(), HistoryDocument))
    assert await ledger.limit_provider() == DEFAULT_HISTORY_LIMIT


def test_entries_are_immutable():
    entry = _entry("x", 1)
    with pytest.raises(Exception):
        entry.new_value = "changed"
