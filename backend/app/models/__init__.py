"""数据模型模块"""

from backend.app.models.history import HistoryAction, HistoryDocument, HistoryEntry
from backend.app.models.token import (
    DEFAULT_TOKEN_NAME,
    ApiToken,
    PanelSettings,
    SettingsDocument,
)
from backend.app.models.variable import (
    DEFAULT_GROUP_ID,
    DEFAULT_GROUP_NAME,
    ConfigDocument,
    Group,
    Variable,
)

__all__ = [
    "DEFAULT_GROUP_ID",
    "DEFAULT_GROUP_NAME",
    "DEFAULT_TOKEN_NAME",
    "ApiToken",
    "ConfigDocument",
    "Group",
    "HistoryAction",
    "HistoryDocument",
    "HistoryEntry",
    "PanelSettings",
    "SettingsDocument",
    "Variable",
]
