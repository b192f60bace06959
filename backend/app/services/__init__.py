"""业务逻辑层"""

from backend.app.services.captcha_service import CaptchaService
from backend.app.services.history_service import HistoryLedger
from backend.app.services.session_service import AdminSessionManager
from backend.app.services.token_service import SettingsService, TokenRegistry
from backend.app.services.variable_service import VariableService

__all__ = [
    "AdminSessionManager",
    "CaptchaService",
    "HistoryLedger",
    "SettingsService",
    "TokenRegistry",
    "VariableService",
]
