"""变量相关 API（Token 认证）"""

from fastapi import APIRouter, Request, status

from backend.app.api.v1.deps import StateDep, TokenAuth
from backend.app.core.utils import client_ip
from backend.app.models.variable import Variable
from backend.app.schemas.variable import (
    HistoryListResponse,
    VariableCreate,
    VariableListResponse,
    VariableUpdate,
)

router = APIRouter()


@router.get("", response_model=VariableListResponse)
async def list_variables(
    state: StateDep,
    _token: TokenAuth,
    name_prefix: str | None = None,
    group_id: str | None = None,
) -> VariableListResponse:
    """获取变量列表，可按名称前缀和分组过滤"""
    variables = await state.variables.list_variables(name_prefix, group_id)
    return VariableListResponse(variables=variables, total=len(variables))


@router.post("", response_model=Variable, status_code=status.HTTP_201_CREATED)
async def create_variable(
    data: VariableCreate,
    request: Request,
    state: StateDep,
    _token: TokenAuth,
) -> Variable:
    """创建变量"""
    return await state.variables.create_variable(
        data.name,
        data.value,
        data.group_id,
        source_address=client_ip(request),
    )


@router.get("/{name}", response_model=Variable)
async def get_variable(name: str, state: StateDep, _token: TokenAuth) -> Variable:
    """获取单个变量"""
    return await state.variables.get_variable(name)


@router.put("/{name}", response_model=Variable)
async def update_variable(
    name: str,
    data: VariableUpdate,
    request: Request,
    state: StateDep,
    _token: TokenAuth,
) -> Variable:
    """修改变量值"""
    return await state.variables.update_variable(
        name, data.value, source_address=client_ip(request)
    )


@router.delete("/{name}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_variable(
    name: str,
    request: Request,
    state: StateDep,
    _token: TokenAuth,
) -> None:
    """删除变量"""
    await state.variables.delete_variable(name, source_address=client_ip(request))


@router.get("/{name}/history", response_model=HistoryListResponse)
async def get_variable_history(
    name: str,
    state: StateDep,
    _token: TokenAuth,
) -> HistoryListResponse:
    """获取变量的变更历史（按时间倒序）"""
    history = await state.variables.variable_history(name)
    return HistoryListResponse(name=name, history=history, total=len(history))
