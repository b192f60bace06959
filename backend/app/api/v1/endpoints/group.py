"""分组相关 API（Token 认证）"""

from fastapi import APIRouter, status

from backend.app.api.v1.deps import StateDep, TokenAuth
from backend.app.models.variable import Group
from backend.app.schemas.variable import GroupCreate, GroupListResponse

router = APIRouter()


@router.get("", response_model=GroupListResponse)
async def list_groups(state: StateDep, _token: TokenAuth) -> GroupListResponse:
    """获取分组列表"""
    groups = await state.variables.list_groups()
    return GroupListResponse(groups=groups, total=len(groups))


@router.post("", response_model=Group, status_code=status.HTTP_201_CREATED)
async def create_group(
    data: GroupCreate,
    state: StateDep,
    _token: TokenAuth,
) -> Group:
    """创建分组"""
    return await state.variables.create_group(data.name)
