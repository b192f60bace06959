"""变量变更历史模型（history.json）"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, RootModel


class HistoryAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class HistoryEntry(BaseModel):
    """单条变更记录，写入后不可修改"""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    old_value: str | None = Field(default=None, alias="oldValue")
    new_value: str | None = Field(default=None, alias="newValue")
    action: HistoryAction
    source_address: str = Field(default="", alias="ip")
    timestamp: int


class HistoryDocument(RootModel[list[HistoryEntry]]):
    """history.json 的完整内容，按时间倒序"""

    root: list[HistoryEntry] = Field(default_factory=list)
