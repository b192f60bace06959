"""管理面板路由（Cookie 会话认证，服务端渲染 HTML）"""

import logging
from collections import Counter
from typing import Annotated

from fastapi import APIRouter, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from backend.app.api.v1.deps import (
    ADMIN_SESSION_COOKIE,
    CAPTCHA_COOKIE,
    AdminAuth,
    StateDep,
)
from backend.app.core.exceptions import UnauthorizedError, ValueStoreError
from backend.app.core.security import check_admin_password
from backend.app.core.state import AppState
from backend.app.core.utils import client_ip, paginate
from backend.app.web import pages

router = APIRouter()
logger = logging.getLogger(__name__)


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


def _failure(exc: ValueStoreError, back_url: str) -> HTMLResponse:
    return HTMLResponse(pages.message_page(exc.message, back_url), status_code=exc.status_code)


async def _login_response(
    state: AppState,
    error: str | None = None,
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    if not state.settings.admin_captcha_enabled:
        return HTMLResponse(pages.login_page(error=error), status_code=status_code)
    challenge = await state.captcha.generate()
    response = HTMLResponse(
        pages.login_page(challenge["image_base64"], error=error),
        status_code=status_code,
    )
    response.set_cookie(CAPTCHA_COOKIE, challenge["captcha_id"], httponly=True)
    return response


# ==================== 登录 ====================


@router.get("/login", response_class=HTMLResponse)
async def login_form(state: StateDep) -> HTMLResponse:
    return await _login_response(state)


@router.post("/login")
async def login(
    request: Request,
    state: StateDep,
    password: Annotated[str, Form()] = "",
    captcha_value: Annotated[str, Form()] = "",
):
    ip = client_ip(request)
    try:
        if state.settings.admin_captcha_enabled:
            state.captcha.verify(request.cookies.get(CAPTCHA_COOKIE), captcha_value)
        if not check_admin_password(password, state.settings.admin_password):
            raise UnauthorizedError("密码错误")
    except UnauthorizedError as e:
        logger.error(f"管理登录失败（{e.message}），IP: {ip}")
        return await _login_response(state, e.message, status.HTTP_401_UNAUTHORIZED)

    sid = state.sessions.create_session()
    response = _redirect("/admin")
    response.set_cookie(ADMIN_SESSION_COOKIE, sid, httponly=True)
    response.delete_cookie(CAPTCHA_COOKIE)
    logger.info(f"管理登录成功，IP: {ip}")
    return response


@router.get("/logout")
async def logout(request: Request, state: StateDep):
    state.sessions.destroy_session(request.cookies.get(ADMIN_SESSION_COOKIE))
    response = _redirect("/admin/login")
    response.delete_cookie(ADMIN_SESSION_COOKIE)
    logger.info(f"管理登出，IP: {client_ip(request)}")
    return response


# ==================== 变量 ====================


@router.get("", response_class=HTMLResponse)
async def variables_view(
    request: Request,
    state: StateDep,
    _sid: AdminAuth,
    group: str | None = None,
    page: int = 1,
) -> HTMLResponse:
    logger.info(f"访问管理面板，IP: {client_ip(request)}")
    panel = await state.panel.get_settings()
    variables = await state.variables.list_variables(group_id=group)
    groups = await state.variables.list_groups()
    items, page, total_pages = paginate(variables, page, panel.page_size)
    return HTMLResponse(pages.variables_page(items, groups, group, page, total_pages))


@router.post("/add")
async def add_variable(
    request: Request,
    state: StateDep,
    _sid: AdminAuth,
    name: Annotated[str, Form()] = "",
    value: Annotated[str | None, Form()] = None,
    group_id: Annotated[str, Form()] = "",
):
    if not name or value is None:
        logger.error(f"新增变量失败：缺少 name 或 value，IP: {client_ip(request)}")
        return HTMLResponse(pages.message_page("缺少 name 或 value"), status_code=400)
    try:
        await state.variables.create_variable(
            name, value, group_id, source_address=client_ip(request)
        )
    except ValueStoreError as e:
        logger.error(f"新增变量失败：{e.message}，IP: {client_ip(request)}")
        return _failure(e, "/admin")
    return _redirect("/admin")


@router.post("/edit")
async def edit_variable(
    request: Request,
    state: StateDep,
    _sid: AdminAuth,
    name: Annotated[str, Form()] = "",
    value: Annotated[str | None, Form()] = None,
):
    if not name or value is None:
        logger.error(f"变量编辑失败：缺少 name 或 value，IP: {client_ip(request)}")
        return HTMLResponse(pages.message_page("缺少 name 或 value"), status_code=400)
    try:
        await state.variables.update_variable(name, value, source_address=client_ip(request))
    except ValueStoreError as e:
        logger.error(f"变量编辑失败：{e.message}，IP: {client_ip(request)}")
        return _failure(e, "/admin")
    return _redirect("/admin")


@router.post("/move")
async def move_variable(
    state: StateDep,
    _sid: AdminAuth,
    name: Annotated[str, Form()] = "",
    group_id: Annotated[str, Form()] = "",
):
    try:
        await state.variables.move_variable(name, group_id)
    except ValueStoreError as e:
        return _failure(e, "/admin")
    return _redirect("/admin")


@router.post("/delete")
async def delete_variable(
    request: Request,
    state: StateDep,
    _sid: AdminAuth,
    name: Annotated[str, Form()] = "",
):
    if not name:
        logger.error(f"删除变量失败：缺少 name，IP: {client_ip(request)}")
        return HTMLResponse(pages.message_page("缺少 name"), status_code=400)
    try:
        await state.variables.delete_variable(name, source_address=client_ip(request))
    except ValueStoreError as e:
        logger.error(f"删除变量失败：{e.message}，IP: {client_ip(request)}")
        return _failure(e, "/admin")
    return _redirect("/admin")


@router.get("/history", response_class=HTMLResponse)
async def history_view(
    state: StateDep,
    _sid: AdminAuth,
    name: str | None = None,
    page: int = 1,
) -> HTMLResponse:
    panel = await state.panel.get_settings()
    if name:
        entries = await state.variables.variable_history(name)
    else:
        entries = await state.ledger.all()
    items, page, total_pages = paginate(entries, page, panel.page_size)
    return HTMLResponse(pages.history_page(items, name, page, total_pages))


# ==================== 分组 ====================


@router.get("/groups", response_class=HTMLResponse)
async def groups_view(state: StateDep, _sid: AdminAuth) -> HTMLResponse:
    groups = await state.variables.list_groups()
    variables = await state.variables.list_variables()
    counts = Counter(v.group_id for v in variables)
    return HTMLResponse(pages.groups_page(groups, counts))


@router.post("/groups/add")
async def add_group(
    state: StateDep,
    _sid: AdminAuth,
    name: Annotated[str, Form()] = "",
):
    if not name.strip():
        return HTMLResponse(pages.message_page("缺少分组名称", "/admin/groups"), status_code=400)
    try:
        await state.variables.create_group(name.strip())
    except ValueStoreError as e:
        return _failure(e, "/admin/groups")
    return _redirect("/admin/groups")


@router.post("/groups/rename")
async def rename_group(
    state: StateDep,
    _sid: AdminAuth,
    group_id: Annotated[str, Form(alias="id")] = "",
    name: Annotated[str, Form()] = "",
):
    if not name.strip():
        return HTMLResponse(pages.message_page("缺少分组名称", "/admin/groups"), status_code=400)
    try:
        await state.variables.rename_group(group_id, name.strip())
    except ValueStoreError as e:
        return _failure(e, "/admin/groups")
    return _redirect("/admin/groups")


@router.post("/groups/delete")
async def delete_group(
    state: StateDep,
    _sid: AdminAuth,
    group_id: Annotated[str, Form(alias="id")] = "",
):
    try:
        await state.variables.delete_group(group_id)
    except ValueStoreError as e:
        return _failure(e, "/admin/groups")
    return _redirect("/admin/groups")


# ==================== Token ====================


@router.get("/tokens", response_class=HTMLResponse)
async def tokens_view(state: StateDep, _sid: AdminAuth) -> HTMLResponse:
    tokens = await state.tokens.list_tokens()
    panel = await state.panel.get_settings()
    return HTMLResponse(pages.tokens_page(tokens, panel.allow_new_token))


@router.post("/tokens/add")
async def add_token(
    request: Request,
    state: StateDep,
    _sid: AdminAuth,
    name: Annotated[str, Form()] = "",
    remark: Annotated[str, Form()] = "",
):
    if not name.strip():
        return HTMLResponse(pages.message_page("缺少 Token 名称", "/admin/tokens"), status_code=400)
    try:
        await state.tokens.add_token(name.strip(), remark)
    except ValueStoreError as e:
        logger.error(f"新建 Token 失败：{e.message}，IP: {client_ip(request)}")
        return _failure(e, "/admin/tokens")
    return _redirect("/admin/tokens")


@router.post("/tokens/edit")
async def edit_token(
    state: StateDep,
    _sid: AdminAuth,
    name: Annotated[str, Form()] = "",
    token: Annotated[str, Form()] = "",
    remark: Annotated[str | None, Form()] = None,
):
    try:
        await state.tokens.edit_token(name, token.strip() or None, remark)
    except ValueStoreError as e:
        return _failure(e, "/admin/tokens")
    return _redirect("/admin/tokens")


@router.post("/tokens/delete")
async def delete_token(
    state: StateDep,
    _sid: AdminAuth,
    name: Annotated[str, Form()] = "",
):
    try:
        await state.tokens.remove_token(name)
    except ValueStoreError as e:
        return _failure(e, "/admin/tokens")
    return _redirect("/admin/tokens")


# ==================== 设置 ====================


@router.get("/settings", response_class=HTMLResponse)
async def settings_view(state: StateDep, _sid: AdminAuth) -> HTMLResponse:
    return HTMLResponse(pages.settings_page(await state.panel.get_settings()))


@router.post("/settings")
async def update_settings(
    state: StateDep,
    _sid: AdminAuth,
    history_limit: Annotated[int, Form(gt=0)],
    page_size: Annotated[int, Form(gt=0)],
    allow_new_token: Annotated[bool, Form()] = False,
):
    try:
        await state.panel.update_settings(history_limit, page_size, allow_new_token)
    except ValueStoreError as e:
        return _failure(e, "/admin/settings")
    return _redirect("/admin/settings")
