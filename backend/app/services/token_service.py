"""API Token 管理与面板设置

Token 与面板设置共用 settings.json。
首次访问时若不存在 Default Token，则用环境变量 TOKEN 创建；之后不会自动轮换，
管理员手动修改的密钥在重启后保持有效。
"""

import logging

from backend.app.core.document_store import DocumentStore
from backend.app.core.exceptions import (
    AlreadyExistsError,
    NotFoundError,
    ProtectedError,
)
from backend.app.core.security import constant_time_equals, generate_secret
from backend.app.core.utils import now_ms
from backend.app.models.token import (
    DEFAULT_TOKEN_NAME,
    ApiToken,
    PanelSettings,
    SettingsDocument,
)

logger = logging.getLogger(__name__)


class TokenRegistry:
    """API Token 管理"""

    def __init__(
        self,
        store: DocumentStore[SettingsDocument],
        bootstrap_secret: str | None = None,
    ) -> None:
        self.store = store
        self.bootstrap_secret = bootstrap_secret

    async def _load(self) -> SettingsDocument:
        """读取 settings.json，缺少 Default Token 时补建（调用方需持有锁）"""
        document = await self.store.load()
        if document.find_token(DEFAULT_TOKEN_NAME) is None:
            secret = self.bootstrap_secret
            if not secret:
                secret = generate_secret()
                logger.warning("未配置 TOKEN，已生成随机 Default Token，可在管理面板查看")
            document.tokens.insert(
                0,
                ApiToken(
                    name=DEFAULT_TOKEN_NAME,
                    token=secret,
                    remark="默认 Token",
                    created_at=now_ms(),
                    is_default=True,
                ),
            )
            await self.store.save(document)
            logger.info("已创建 Default Token")
        return document

    async def ensure_default(self) -> None:
        async with self.store.lock:
            await self._load()

    async def validate(self, candidate: str | None) -> bool:
        if not candidate:
            return False
        async with self.store.lock:
            document = await self._load()
        matched = False
        for token in document.tokens:
            # 不提前返回，保证比较次数与命中位置无关
            if constant_time_equals(candidate, token.token):
                matched = True
        return matched

    async def list_tokens(self) -> list[ApiToken]:
        async with self.store.lock:
            document = await self._load()
        return document.tokens

    async def get_token(self, name: str) -> ApiToken:
        async with self.store.lock:
            document = await self._load()
        token = document.find_token(name)
        if token is None:
            raise NotFoundError(f"Token {name} 不存在")
        return token

    async def add_token(self, name: str, remark: str = "") -> ApiToken:
        async with self.store.lock:
            document = await self._load()
            if not document.settings.allow_new_token:
                raise ProtectedError("当前设置不允许新建 Token")
            if document.find_token(name) is not None:
                raise AlreadyExistsError(f"Token {name} 已存在")
            token = ApiToken(
                name=name,
                token=generate_secret(),
                remark=remark,
                created_at=now_ms(),
            )
            document.tokens.append(token)
            await self.store.save(document)
        logger.info(f"新增 Token：{name}")
        return token

    async def remove_token(self, name: str) -> None:
        if name == DEFAULT_TOKEN_NAME:
            raise ProtectedError("Default Token 不能删除")
        async with self.store.lock:
            document = await self._load()
            token = document.find_token(name)
            if token is None:
                raise NotFoundError(f"Token {name} 不存在")
            document.tokens.remove(token)
            await self.store.save(document)
        logger.info(f"删除 Token：{name}")

    async def edit_token(
        self,
        name: str,
        new_secret: str | None = None,
        new_remark: str | None = None,
    ) -> ApiToken:
        """修改 Token 密钥或备注，new_secret 为空表示保持原密钥"""
        async with self.store.lock:
            document = await self._load()
            token = document.find_token(name)
            if token is None:
                raise NotFoundError(f"Token {name} 不存在")
            if new_secret:
                token.token = new_secret
            if new_remark is not None:
                token.remark = new_remark
            await self.store.save(document)
        logger.info(f"修改 Token：{name}")
        return token


class SettingsService:
    """面板设置（历史上限、分页大小、是否允许新建 Token）"""

    def __init__(self, store: DocumentStore[SettingsDocument]) -> None:
        self.store = store

    async def get_settings(self) -> PanelSettings:
        document = await self.store.load()
        return document.settings

    async def history_limit(self) -> int:
        return (await self.get_settings()).history_limit

    async def update_settings(
        self,
        history_limit: int | None = None,
        page_size: int | None = None,
        allow_new_token: bool | None = None,
    ) -> PanelSettings:
        async with self.store.lock:
            document = await self.store.load()
            current = document.settings
            document.settings = PanelSettings(
                history_limit=history_limit or current.history_limit,
                page_size=page_size or current.page_size,
                allow_new_token=(
                    current.allow_new_token
                    if allow_new_token is None
                    else allow_new_token
                ),
            )
            await self.store.save(document)
        logger.info(f"面板设置已更新: {document.settings.model_dump(by_alias=True)}")
        return document.settings
