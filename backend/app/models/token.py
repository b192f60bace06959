"""API Token 与面板设置模型（settings.json）"""

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TOKEN_NAME = "Default"


class ApiToken(BaseModel):
    """API 访问令牌"""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    token: str
    remark: str = ""
    created_at: int = Field(default=0, alias="createdAt")
    is_default: bool = Field(default=False, alias="isDefault")


class PanelSettings(BaseModel):
    """可在管理面板中在线修改的设置"""

    model_config = ConfigDict(populate_by_name=True)

    history_limit: int = Field(default=1000, gt=0, alias="historyLimit")
    page_size: int = Field(default=20, gt=0, alias="pageSize")
    allow_new_token: bool = Field(default=True, alias="allowNewToken")


class SettingsDocument(BaseModel):
    """settings.json 的完整内容"""

    tokens: list[ApiToken] = Field(default_factory=list)
    settings: PanelSettings = Field(default_factory=PanelSettings)

    def find_token(self, name: str) -> ApiToken | None:
        return next((t for t in self.tokens if t.name == name), None)
