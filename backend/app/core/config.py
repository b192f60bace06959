"""应用配置"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Default Token 的初始密钥，仅在 settings.json 中不存在 Default 时使用
    token: str | None = None

    # 管理面板密码，支持明文或 bcrypt 哈希（$2b$ 开头）
    admin_password: str = Field(...)
    admin_captcha_enabled: bool = False

    # 数据文件存储配置
    data_dir: Path = Path("./data")
    config_file: str = "config.json"
    history_file: str = "history.json"
    settings_file: str = "settings.json"

    # 首次启动时写入 settings.json 的默认值
    history_limit: int = Field(default=1000, gt=0)
    page_size: int = Field(default=20, gt=0)

    # 服务监听
    host: str = "0.0.0.0"
    port: int = 3000

    # 日志配置
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @property
    def config_path(self) -> Path:
        return self.data_dir / self.config_file

    @property
    def history_path(self) -> Path:
        return self.data_dir / self.history_file

    @property
    def settings_path(self) -> Path:
        return self.data_dir / self.settings_file

    def ensure_dirs(self) -> None:
        """确保数据目录存在"""
        self.data_dir.mkdir(parents=True, exist_ok=True)


settings = Settings()
