"""Pydantic 请求/响应模型"""

from backend.app.schemas.variable import (
    GroupCreate,
    GroupListResponse,
    HistoryListResponse,
    SetVariableResponse,
    VariableCreate,
    VariableListResponse,
    VariableUpdate,
)

__all__ = [
    "GroupCreate",
    "GroupListResponse",
    "HistoryListResponse",
    "SetVariableResponse",
    "VariableCreate",
    "VariableListResponse",
    "VariableUpdate",
]
