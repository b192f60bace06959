"""变量与分组相关的请求/响应模型"""

from pydantic import BaseModel, Field

from backend.app.models.history import HistoryEntry
from backend.app.models.variable import DEFAULT_GROUP_ID, Group, Variable


class VariableCreate(BaseModel):
    """创建变量请求"""

    name: str = Field(..., min_length=1, max_length=200)
    value: str
    group_id: str = Field(default=DEFAULT_GROUP_ID, alias="groupId")

    model_config = {"populate_by_name": True}


class VariableUpdate(BaseModel):
    """修改变量请求"""

    value: str


class VariableListResponse(BaseModel):
    """变量列表响应"""

    variables: list[Variable]
    total: int


class GroupCreate(BaseModel):
    """创建分组请求"""

    name: str = Field(..., min_length=1, max_length=100)


class GroupListResponse(BaseModel):
    """分组列表响应"""

    groups: list[Group]
    total: int


class HistoryListResponse(BaseModel):
    """变量历史响应（按时间倒序）"""

    name: str
    history: list[HistoryEntry]
    total: int


class SetVariableResponse(BaseModel):
    """/set 接口响应"""

    success: bool = True
    variable: Variable
