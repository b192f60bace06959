"""带读穿缓存的 JSON 文档存储

设计思路：
- 每个数据文件（config.json / history.json / settings.json）对应一个 DocumentStore
- 缓存保存 {文档, 版本}，load 时先向后端询问当前版本，相同则直接返回缓存副本
- save 整体覆盖写入，成功后用写入的文档和新版本刷新缓存；失败时缓存保持不变
- 读取或解析失败时重置为默认文档并记录 ERROR 日志（原数据会在下次保存时被覆盖）
- 对外只传递深拷贝，调用方修改返回值不会影响缓存
- lock 用于串行化同一文档的 load → 修改 → save 过程，跨进程写入仍是后写覆盖
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from backend.app.core.exceptions import StorageError
from backend.app.core.storage import Snapshot

logger = logging.getLogger(__name__)

DocT = TypeVar("DocT", bound=BaseModel)


class StorageBackend(Protocol):
    async def version(self) -> str | None: ...

    async def read(self) -> Snapshot: ...

    async def write(self, data: bytes) -> str | None: ...


@dataclass
class _CacheEntry(Generic[DocT]):
    document: DocT
    version: str | None


class DocumentStore(Generic[DocT]):
    """单个 JSON 文档的存取"""

    def __init__(
        self,
        backend: StorageBackend,
        model: type[DocT],
        factory: Callable[[], DocT] | None = None,
    ) -> None:
        self.backend = backend
        self.model = model
        self.factory = factory or model
        self.lock = asyncio.Lock()
        self._cache: _CacheEntry[DocT] | None = None

    async def load(self) -> DocT:
        version = await self.backend.version()
        cache = self._cache
        if cache is not None and version is not None and version == cache.version:
            return cache.document.model_copy(deep=True)

        document, version = await self._read()
        self._cache = _CacheEntry(document=document, version=version)
        return document.model_copy(deep=True)

    async def save(self, document: DocT) -> None:
        payload = self.dump(document)
        try:
            version = await self.backend.write(payload)
        except OSError as e:
            logger.error(f"保存 {self.backend!r} 失败: {e}")
            raise StorageError("保存失败") from e
        self._cache = _CacheEntry(document=document.model_copy(deep=True), version=version)

    def dump(self, document: DocT) -> bytes:
        return document.model_dump_json(by_alias=True, indent=2).encode("utf-8")

    async def _read(self) -> tuple[DocT, str | None]:
        try:
            snapshot = await self.backend.read()
        except OSError as e:
            logger.error(f"读取 {self.backend!r} 失败，已重置为默认数据: {e}")
            return self.factory(), None

        if snapshot.data is None:
            return self.factory(), None

        try:
            document = self.model.model_validate_json(snapshot.data)
        except ValidationError as e:
            # 原数据会在下一次保存时被覆盖，需要运维人员留意
            logger.error(
                f"解析 {self.backend!r} 失败，已重置为默认数据，"
                f"下次保存将覆盖原文件: {e}"
            )
            return self.factory(), snapshot.version
        return document, snapshot.version
