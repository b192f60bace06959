"""应用运行期状态

数据文件、Token、会话等可变状态统一挂在 AppState 上，由 create_app() 构建后
放入 app.state，请求处理通过依赖注入获取，不使用模块级单例。
"""

from dataclasses import dataclass

from backend.app.core.config import Settings
from backend.app.core.document_store import DocumentStore
from backend.app.core.storage import FileBackend
from backend.app.models.history import HistoryDocument
from backend.app.models.token import PanelSettings, SettingsDocument
from backend.app.models.variable import ConfigDocument
from backend.app.services.captcha_service import CaptchaService
from backend.app.services.history_service import HistoryLedger
from backend.app.services.session_service import AdminSessionManager
from backend.app.services.token_service import SettingsService, TokenRegistry
from backend.app.services.variable_service import VariableService


@dataclass
class AppState:
    settings: Settings
    config_store: DocumentStore[ConfigDocument]
    history_store: DocumentStore[HistoryDocument]
    settings_store: DocumentStore[SettingsDocument]
    ledger: HistoryLedger
    tokens: TokenRegistry
    panel: SettingsService
    variables: VariableService
    sessions: AdminSessionManager
    captcha: CaptchaService

    async def startup(self) -> None:
        self.settings.ensure_dirs()
        await self.tokens.ensure_default()

    async def shutdown(self) -> None:
        self.sessions.clear()


def build_state(app_settings: Settings) -> AppState:
    def settings_factory() -> SettingsDocument:
        return SettingsDocument(
            settings=PanelSettings(
                history_limit=app_settings.history_limit,
                page_size=app_settings.page_size,
            )
        )

    config_store = DocumentStore(FileBackend(app_settings.config_path), ConfigDocument)
    history_store = DocumentStore(FileBackend(app_settings.history_path), HistoryDocument)
    settings_store = DocumentStore(
        FileBackend(app_settings.settings_path),
        SettingsDocument,
        factory=settings_factory,
    )

    panel = SettingsService(settings_store)
    ledger = HistoryLedger(history_store, limit_provider=panel.history_limit)
    return AppState(
        settings=app_settings,
        config_store=config_store,
        history_store=history_store,
        settings_store=settings_store,
        ledger=ledger,
        tokens=TokenRegistry(settings_store, bootstrap_secret=app_settings.token),
        panel=panel,
        variables=VariableService(config_store, ledger),
        sessions=AdminSessionManager(),
        captcha=CaptchaService(),
    )
