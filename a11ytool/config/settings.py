from typing import List, Optional
from datetime import timedelta
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).parent.parent.absolute()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="A11Y_TOOL_",
        env_file=".env",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # Remote authorization endpoint
    LICENSE_API_URL: str = "https://api.licensegate.io/v1/authorize"
    REQUEST_TIMEOUT: float = 10.0  # seconds
    PRODUCT_ID: str = "react-accessibility-tool"
    REQUEST_VARIANT: str = "full"  # 'full' or 'product'

    # Cache and usage tracking
    CACHE_DIR: Optional[Path] = None
    CACHE_TTL_HOURS: float = 24
    MAX_USAGE_ENTRIES: int = 100
    STORAGE_BACKEND: str = "file"  # 'file', 'memory' or 'browser'
    TRACK_USAGE: bool = True

    # Entitlement
    PAID_TIERS: List[str] = ["pro", "enterprise"]
    LICENSE_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("A11Y_TOOL_LICENSE_KEY", "ACCESS_LICENSE_KEY"),
    )
    DOMAIN: Optional[str] = None

    # Logging
    LOG_LEVEL: str = "WARNING"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @property
    def cache_ttl(self) -> timedelta:
        return timedelta(hours=self.CACHE_TTL_HOURS)

    @property
    def cache_directory(self) -> Path:
        """Explicit override if set, else the package directory"""
        return Path(self.CACHE_DIR) if self.CACHE_DIR else PACKAGE_DIR
