"""兼容旧版客户端的 /get 与 /set 接口

参数全部通过查询字符串传递：/get?name=&token=，/set?name=&value=&token=
失败时沿用旧版响应体 {"error": message}
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from backend.app.api.v1.deps import StateDep, TokenAuth
from backend.app.core.exceptions import NotFoundError, StorageError
from backend.app.core.utils import client_ip
from backend.app.schemas.variable import SetVariableResponse

router = APIRouter()
logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("/get", response_class=PlainTextResponse)
async def get_value(
    request: Request,
    state: StateDep,
    _token: TokenAuth,
    name: str | None = None,
):
    """查询变量，直接返回变量值文本"""
    if not name:
        logger.error("查询变量失败：缺少变量名")
        return _error(status.HTTP_400_BAD_REQUEST, "Missing variable name")
    try:
        variable = await state.variables.get_variable(name)
    except NotFoundError:
        logger.error(f"查询变量失败：{name} 不存在，IP: {client_ip(request)}")
        return _error(status.HTTP_404_NOT_FOUND, "Variable not found")
    logger.info(f"查询变量：{name}，值：{variable.value}，IP: {client_ip(request)}")
    return PlainTextResponse(variable.value)


@router.post("/set", response_model=SetVariableResponse)
async def set_value(
    request: Request,
    state: StateDep,
    _token: TokenAuth,
    name: str | None = None,
    value: str | None = None,
):
    """修改已存在变量的值"""
    if not name or value is None:
        logger.error("修改变量失败：缺少 name 或 value")
        return _error(status.HTTP_400_BAD_REQUEST, "Missing name or value")
    try:
        variable = await state.variables.update_variable(
            name, value, source_address=client_ip(request)
        )
    except NotFoundError:
        logger.error(f"修改变量失败：{name} 不存在，IP: {client_ip(request)}")
        return _error(status.HTTP_404_NOT_FOUND, "Variable not found")
    except StorageError as e:
        return _error(e.status_code, e.message)
    return SetVariableResponse(variable=variable)
