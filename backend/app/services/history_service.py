"""变量变更历史

history.json 按时间倒序保存，新记录插在最前面，超过上限时丢弃最旧的记录。
记录一旦写入不可修改，也没有删除接口。
"""

import logging
from collections.abc import Awaitable, Callable

from backend.app.core.document_store import DocumentStore
from backend.app.models.history import HistoryDocument, HistoryEntry

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 1000


async def _default_limit() -> int:
    return DEFAULT_HISTORY_LIMIT


class HistoryLedger:
    def __init__(
        self,
        store: DocumentStore[HistoryDocument],
        limit_provider: Callable[[], Awaitable[int]] | None = None,
    ) -> None:
        self.store = store
        self.limit_provider = limit_provider or _default_limit

    async def append(self, entry: HistoryEntry) -> None:
        limit = await self.limit_provider()
        async with self.store.lock:
            document = await self.store.load()
            entries = [entry, *document.root]
            if len(entries) > limit:
                logger.debug(f"历史记录超过上限 {limit}，丢弃 {len(entries) - limit} 条")
                entries = entries[:limit]
            await self.store.save(HistoryDocument(entries))

    async def all(self) -> list[HistoryEntry]:
        document = await self.store.load()
        return list(document.root)

    async def for_name(self, name: str) -> list[HistoryEntry]:
        document = await self.store.load()
        return [e for e in document.root if e.name == name]
