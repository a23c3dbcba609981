from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, Field


class ResponseMeta(BaseModel):
    """
    Response metadata forwarded with every outgoing message.

    The body itself travels separately as msg["payload"].
    """
    status_code: int = Field(alias="statusCode")
    reason_phrase: str = Field("", alias="reasonPhrase")
    headers: Dict[str, str] = Field(default_factory=dict)
    url: Optional[str] = None

    class Config:
        populate_by_name = True

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ResponseMeta":
        return cls(
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            headers=dict(response.headers),
            url=str(response.request.url),
        )
