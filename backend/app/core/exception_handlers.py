"""全局异常处理器"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

import logging

from backend.app.core.exceptions import ValueStoreError

logger = logging.getLogger(__name__)

# 字段名 → 中文
_FIELD_NAMES: dict[str, str] = {
    "name": "名称",
    "value": "值",
    "groupId": "分组",
    "group_id": "分组",
    "remark": "备注",
    "password": "密码",
    "captcha_value": "验证码",
    "history_limit": "历史记录上限",
    "page_size": "每页数量",
}

# 错误类型 → 中文模板（{field} 会被替换为字段中文名）
_ERROR_MESSAGES: dict[str, str] = {
    "missing": "请填写{field}",
    "string_too_short": "{field}长度不足，请检查填写内容",
    "string_too_long": "{field}超出最大长度，请检查填写内容",
    "value_error": "{field}格式不正确",
    "string_type": "{field}格式不正确",
    "int_parsing": "{field}必须是整数",
    "greater_than": "{field}必须大于 0",
}


def _friendly_validation_message(errors: list[dict]) -> str:
    """把 Pydantic validation errors 转成第一条中文友好提示"""
    for err in errors:
        loc = err.get("loc", [])
        field_key = loc[-1] if loc else ""
        field_name = _FIELD_NAMES.get(str(field_key), str(field_key))
        err_type = err.get("type", "")

        template = _ERROR_MESSAGES.get(err_type)
        if template:
            return template.format(field=field_name)

        # 兜底
        if field_name:
            return f"{field_name}填写有误，请检查"

    return "请求参数填写有误，请检查后重试"


async def validation_exception_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """处理 Pydantic 请求体校验错误，返回中文友好提示"""
    friendly = _friendly_validation_message(exc.errors())
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": friendly},
    )


async def value_store_exception_handler(
    request: Request, exc: ValueStoreError
) -> JSONResponse:
    """业务异常按类型映射为对应的 HTTP 状态码"""
    logger.error(f"{request.method} {request.url.path} 失败：{exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
    )


async def global_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    """兜底异常处理，避免内部错误泄露"""
    logger.error("未处理的异常: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "服务器内部错误"},
    )
