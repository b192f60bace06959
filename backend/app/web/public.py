"""首页与敏感路径拦截"""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, PlainTextResponse

from backend.app.api.v1.deps import StateDep
from backend.app.web import pages

router = APIRouter()

# 环境变量文件与数据文件禁止通过 HTTP 访问
FORBIDDEN_PATHS = ["/.env", "/config.json", "/history.json", "/settings.json"]


@router.get("/", response_class=HTMLResponse)
async def index(state: StateDep) -> HTMLResponse:
    return HTMLResponse(pages.index_page(state.settings.port))


async def forbidden() -> PlainTextResponse:
    return PlainTextResponse("Forbidden", status_code=403)


for _path in FORBIDDEN_PATHS:
    router.add_api_route(_path, forbidden, methods=["GET"], include_in_schema=False)


@router.get("/data/{path:path}", include_in_schema=False)
async def forbidden_data(path: str) -> PlainTextResponse:
    return await forbidden()
