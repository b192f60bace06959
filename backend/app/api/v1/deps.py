"""API 依赖注入"""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from backend.app.core.state import AppState
from backend.app.core.utils import client_ip

logger = logging.getLogger(__name__)

ADMIN_SESSION_COOKIE = "adminsid"
CAPTCHA_COOKIE = "captcha_sid"

security = HTTPBearer(auto_error=False)


def get_state(request: Request) -> AppState:
    return request.app.state.value_store


StateDep = Annotated[AppState, Depends(get_state)]


async def require_api_token(
    request: Request,
    state: StateDep,
    token: Annotated[str | None, Query()] = None,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str:
    """校验 API Token：支持 ?token= 查询参数或 Authorization: Bearer"""
    candidate = token or (credentials.credentials if credentials else None)
    if not await state.tokens.validate(candidate):
        logger.error(f"身份验证失败，IP: {client_ip(request)}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return candidate


async def require_admin_session(request: Request, state: StateDep) -> str:
    """校验管理面板会话，未登录时跳转到登录页"""
    sid = request.cookies.get(ADMIN_SESSION_COOKIE)
    if not state.sessions.is_valid(sid):
        raise HTTPException(
            status_code=status.HTTP_303_SEE_OTHER,
            headers={"Location": "/admin/login"},
        )
    return sid


TokenAuth = Annotated[str, Depends(require_api_token)]
AdminAuth = Annotated[str, Depends(require_admin_session)]
