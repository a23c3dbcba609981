from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator


class ApiAuth(BaseModel):
    """
    Connection and credentials of one factory instance.

    Shared by every capability node that references it. The key/secret pair is
    sent as HTTP basic auth on each request.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: Optional[str] = None
    protocol: Literal["http", "https"] = "https"
    hostname: str
    port: Optional[int] = None
    api_key: str = Field(alias="apiKey")
    api_secret: SecretStr = Field(alias="apiSecret")

    @field_validator("port", mode="before")
    def empty_port(cls, v):
        # Configuration UIs store an untouched port field as ""
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v

    @property
    def basic_auth(self) -> Tuple[str, str]:
        return self.api_key, self.api_secret.get_secret_value()
