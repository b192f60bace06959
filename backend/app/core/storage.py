"""数据文件存储后端

每个后端只负责整份字节内容的读写，并提供一个"版本"用于缓存失效判断：
版本相同说明存储对象自上次读取后没有被修改。
"""

import errno
from dataclasses import dataclass
from pathlib import Path

import aiofiles
import aiofiles.os


@dataclass(frozen=True)
class Snapshot:
    """一次读取的结果；data 为 None 表示存储对象尚不存在"""

    data: bytes | None
    version: str | None


class FileBackend:
    """本地 JSON 文件后端，版本由 mtime_ns 与文件大小组成"""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"FileBackend({str(self.path)!r})"

    async def version(self) -> str | None:
        try:
            st = await aiofiles.os.stat(self.path)
        except FileNotFoundError:
            return None
        return f"{st.st_mtime_ns}-{st.st_size}"

    async def read(self) -> Snapshot:
        version = await self.version()
        if version is None:
            return Snapshot(data=None, version=None)
        async with aiofiles.open(self.path, "rb") as f:
            data = await f.read()
        return Snapshot(data=data, version=version)

    async def write(self, data: bytes) -> str | None:
        """整体覆盖写入：先写临时文件再原子替换，返回写入后的版本"""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            async with aiofiles.open(tmp, "wb") as f:
                await f.write(data)
            await aiofiles.os.replace(tmp, self.path)
        except OSError:
            # 写入失败时不留下半成品临时文件
            try:
                await aiofiles.os.remove(tmp)
            except FileNotFoundError:
                pass
            raise
        return await self.version()


class MemoryBackend:
    """内存后端，版本为写入计数；用于测试和临时实例"""

    def __init__(self, data: bytes | None = None) -> None:
        self.data = data
        self.writes = 0
        self.reads = 0
        self.fail_writes = False

    def __repr__(self) -> str:
        return f"MemoryBackend(writes={self.writes})"

    async def version(self) -> str | None:
        if self.data is None:
            return None
        return str(self.writes)

    async def read(self) -> Snapshot:
        self.reads += 1
        return Snapshot(data=self.data, version=await self.version())

    async def write(self, data: bytes) -> str | None:
        if self.fail_writes:
            raise OSError(errno.ENOSPC, "No space left on device")
        self.data = data
        self.writes += 1
        return await self.version()

    def replace_externally(self, data: bytes) -> None:
        """模拟其他进程直接改写了存储对象"""
        self.data = data
        self.writes += 1
