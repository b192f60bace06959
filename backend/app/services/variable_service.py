"""变量与分组服务

设计思路：
- 所有修改都是 load → 内存中修改 → save 一个完整周期，在 config.json 的锁内执行
- save 失败时内存中的修改直接丢弃，缓存仍是上一次成功保存的内容
- 变量的增删改在保存成功后写入历史记录
- 任何时刻变量的 groupId 都必须指向存在的分组；删除分组前先把成员移回默认分组
"""

import logging
import uuid

from backend.app.core.document_store import DocumentStore
from backend.app.core.exceptions import (
    AlreadyExistsError,
    InvalidGroupError,
    NotFoundError,
    ProtectedError,
)
from backend.app.core.utils import now_ms
from backend.app.models.history import HistoryAction, HistoryEntry
from backend.app.models.variable import (
    DEFAULT_GROUP_ID,
    ConfigDocument,
    Group,
    Variable,
)
from backend.app.services.history_service import HistoryLedger

logger = logging.getLogger(__name__)


class VariableService:
    """变量与分组服务类"""

    def __init__(
        self,
        store: DocumentStore[ConfigDocument],
        ledger: HistoryLedger,
    ) -> None:
        self.store = store
        self.ledger = ledger

    # ==================== 变量 ====================

    async def get_variable(self, name: str) -> Variable:
        document = await self.store.load()
        variable = document.find_variable(name)
        if variable is None:
            raise NotFoundError(f"变量 {name} 不存在")
        return variable

    async def list_variables(
        self,
        name_prefix: str | None = None,
        group_id: str | None = None,
    ) -> list[Variable]:
        document = await self.store.load()
        return [
            v
            for v in document.variables
            if (not name_prefix or v.name.startswith(name_prefix))
            and (not group_id or v.group_id == group_id)
        ]

    async def create_variable(
        self,
        name: str,
        value: str,
        group_id: str = DEFAULT_GROUP_ID,
        source_address: str = "",
    ) -> Variable:
        group_id = group_id or DEFAULT_GROUP_ID
        async with self.store.lock:
            document = await self.store.load()
            if document.find_variable(name) is not None:
                raise AlreadyExistsError(f"变量 {name} 已存在")
            if document.find_group(group_id) is None:
                raise InvalidGroupError(f"分组 {group_id} 不存在")
            variable = Variable(name=name, value=str(value), group_id=group_id)
            document.variables.append(variable)
            await self.store.save(document)

        await self._record(name, None, variable.value, HistoryAction.CREATE, source_address)
        logger.info(f"新增变量：{name}，值：{variable.value}，IP: {source_address}")
        return variable

    async def update_variable(
        self,
        name: str,
        value: str,
        source_address: str = "",
    ) -> Variable:
        async with self.store.lock:
            document = await self.store.load()
            variable = document.find_variable(name)
            if variable is None:
                raise NotFoundError(f"变量 {name} 不存在")
            old_value = variable.value
            variable.value = str(value)
            await self.store.save(document)

        await self._record(name, old_value, variable.value, HistoryAction.UPDATE, source_address)
        logger.info(
            f"修改变量：{name}，原值：{old_value}，新值：{variable.value}，IP: {source_address}"
        )
        return variable

    async def delete_variable(self, name: str, source_address: str = "") -> None:
        async with self.store.lock:
            document = await self.store.load()
            variable = document.find_variable(name)
            if variable is None:
                raise NotFoundError(f"变量 {name} 不存在")
            document.variables.remove(variable)
            await self.store.save(document)

        await self._record(name, variable.value, None, HistoryAction.DELETE, source_address)
        logger.info(f"删除变量：{name}，IP: {source_address}")

    async def move_variable(self, name: str, group_id: str) -> Variable:
        """调整变量所属分组，值不变因此不写历史"""
        async with self.store.lock:
            document = await self.store.load()
            variable = document.find_variable(name)
            if variable is None:
                raise NotFoundError(f"变量 {name} 不存在")
            if document.find_group(group_id) is None:
                raise InvalidGroupError(f"分组 {group_id} 不存在")
            variable.group_id = group_id
            await self.store.save(document)
        logger.info(f"变量 {name} 移动到分组 {group_id}")
        return variable

    async def variable_history(self, name: str) -> list[HistoryEntry]:
        return await self.ledger.for_name(name)

    async def _record(
        self,
        name: str,
        old_value: str | None,
        new_value: str | None,
        action: HistoryAction,
        source_address: str,
    ) -> None:
        await self.ledger.append(
            HistoryEntry(
                name=name,
                old_value=old_value,
                new_value=new_value,
                action=action,
                source_address=source_address,
                timestamp=now_ms(),
            )
        )

    # ==================== 分组 ====================

    async def list_groups(self) -> list[Group]:
        document = await self.store.load()
        return document.groups

    async def get_group(self, group_id: str) -> Group:
        document = await self.store.load()
        group = document.find_group(group_id)
        if group is None:
            raise NotFoundError(f"分组 {group_id} 不存在")
        return group

    async def create_group(self, name: str) -> Group:
        async with self.store.lock:
            document = await self.store.load()
            group_id = uuid.uuid4().hex[:12]
            while document.find_group(group_id) is not None:
                group_id = uuid.uuid4().hex[:12]
            group = Group(id=group_id, name=name)
            document.groups.append(group)
            await self.store.save(document)
        logger.info(f"新增分组：{name}（{group_id}）")
        return group

    async def rename_group(self, group_id: str, name: str) -> Group:
        if group_id == DEFAULT_GROUP_ID:
            raise ProtectedError("默认分组不能重命名")
        async with self.store.lock:
            document = await self.store.load()
            group = document.find_group(group_id)
            if group is None:
                raise NotFoundError(f"分组 {group_id} 不存在")
            old_name = group.name
            group.name = name
            await self.store.save(document)
        logger.info(f"分组重命名：{old_name} -> {name}（{group_id}）")
        return group

    async def delete_group(self, group_id: str) -> None:
        if group_id == DEFAULT_GROUP_ID:
            raise ProtectedError("默认分组不能删除")
        async with self.store.lock:
            document = await self.store.load()
            group = document.find_group(group_id)
            if group is None:
                raise NotFoundError(f"分组 {group_id} 不存在")
            moved = 0
            for variable in document.variables:
                if variable.group_id == group_id:
                    variable.group_id = DEFAULT_GROUP_ID
                    moved += 1
            document.groups.remove(group)
            await self.store.save(document)
        logger.info(f"删除分组：{group.name}（{group_id}），{moved} 个变量移回默认分组")
