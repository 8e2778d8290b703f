"""applog runtime configuration definitions."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Logger settings loaded from env and .env files."""

    app_name: str = "applog"
    environment: str = Field(default="dev", pattern="^(dev|test|prod)$")
    log_dir: str = "logs"
    log_file_name: str = "app.log"
    max_file_bytes: int = Field(default=5 * 1024 * 1024, ge=1)
    buffer_capacity: int = Field(default=500, ge=1)
    default_limit: int = Field(default=100, ge=1)
    console_enabled: bool = True
    console_color: bool = True
    auth_dev_bypass: bool = False
    admin_password: str = "admin123"
    auth_cookie_name: str = "admin_auth"
    auth_cookie_max_age: int = 60 * 60 * 24

    model_config = SettingsConfigDict(env_file=".env", env_prefix="APPLOG_")

    @property
    def log_path(self) -> Path:
        """Active log file location."""
        return Path(self.log_dir) / self.log_file_name
