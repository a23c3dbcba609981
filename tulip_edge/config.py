from pathlib import Path
from typing import Literal, Optional

from pydantic import AliasChoices, Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TULIP_", env_file=".env", env_ignore_empty=True, extra="ignore"
    )
    PROJECT_NAME: str = "tulip-edge"
    LOG_LEVEL: str = "INFO"

    # Default factory connection, used when an api-auth node leaves a field empty
    PROTOCOL: Literal["http", "https"] = "https"
    HOSTNAME: Optional[str] = None
    PORT: Optional[int] = None
    API_KEY: Optional[str] = None
    API_SECRET: Optional[str] = None

    # Connection pool defaults for nodes that do not configure keep-alive
    KEEP_ALIVE: bool = False
    KEEP_ALIVE_MSECS: int = 1000

    # No timeout unless explicitly configured
    REQUEST_TIMEOUT: Optional[float] = None

    # Outbound proxy, read from the conventional unprefixed variable
    HTTP_PROXY: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("http_proxy", "TULIP_HTTP_PROXY")
    )

    NODE_PACKAGES_DIR: Optional[Path] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def node_packages_path(self) -> Path:
        if self.NODE_PACKAGES_DIR:
            return self.NODE_PACKAGES_DIR
        return Path(__file__).parent / "node_packages"


settings = Settings()  # type: ignore
