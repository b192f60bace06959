"""FastAPI 应用入口"""

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from backend.app.api.v1 import api_router, legacy_router
from backend.app.core.config import Settings, settings
from backend.app.core.exception_handlers import (
    global_exception_handler,
    validation_exception_handler,
    value_store_exception_handler,
)
from backend.app.core.exceptions import ValueStoreError
from backend.app.core.state import build_state
from backend.app.web import admin, public

__version__ = "0.2.0"

# 配置日志
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """构建应用；测试时传入独立的 Settings 以隔离数据目录"""
    app_settings = app_settings or settings
    state = build_state(app_settings)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        """应用生命周期管理"""
        logger.info("正在启动 ValueAPI...")
        await state.startup()
        logger.info(
            f"ValueAPI v{__version__} 运行在 http://{app_settings.host}:{app_settings.port}，"
            f"数据目录: {app_settings.data_dir.resolve()}"
        )
        yield
        await state.shutdown()
        logger.info("ValueAPI 已关闭")

    app = FastAPI(
        title="ValueAPI",
        description="轻量级变量存储与管理接口",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.value_store = state

    # 全局异常处理
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValueStoreError, value_store_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    # 健康检查 API
    @app.get("/health", tags=["健康检查"])
    async def health_check() -> dict:
        """基础健康检查"""
        return {
            "status": "healthy",
            "version": __version__,
            "timestamp": datetime.now(UTC).isoformat(),
        }

    # 注册路由
    app.include_router(public.router)
    app.include_router(legacy_router, tags=["兼容接口"])
    app.include_router(api_router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/admin", include_in_schema=False)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "backend.app.main:app",
        host=settings.host,
        port=settings.port,
    )
