"""API v1 路由"""

from fastapi import APIRouter

from backend.app.api.v1.endpoints import group, legacy, variable

api_router = APIRouter()

api_router.include_router(variable.router, prefix="/variables", tags=["变量"])
api_router.include_router(group.router, prefix="/groups", tags=["分组"])

# /get 与 /set 挂载在根路径
legacy_router = legacy.router
