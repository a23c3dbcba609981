"""
Credential store for api-auth nodes.

Capability nodes reference an api-auth node by id; the store resolves that id
to the factory connection and its key/secret pair.
"""
import logging
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from tulip_edge.config import Settings, settings
from tulip_edge.credentials.models import ApiAuth
from tulip_edge.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_AUTH_ID = "default"


def build_api_auth(data: Dict[str, Any], defaults: Optional[Settings] = None) -> ApiAuth:
    """
    Build an ApiAuth from node configuration, filling empty fields from settings.
    """
    defaults = defaults or settings
    merged = {
        "protocol": defaults.PROTOCOL,
        "hostname": defaults.HOSTNAME,
        "port": defaults.PORT,
        "apiKey": defaults.API_KEY,
        "apiSecret": defaults.API_SECRET,
    }
    for key, value in data.items():
        if value is not None and value != "":
            merged[key] = value

    try:
        return ApiAuth.model_validate(merged)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid api-auth configuration: {e}") from e


class CredentialStore:
    """In-memory mapping of api-auth node id to ApiAuth."""

    def __init__(self):
        self._auths: Dict[str, ApiAuth] = {}

    def register(self, auth_id: str, auth: Union[ApiAuth, Dict[str, Any]]) -> ApiAuth:
        if not isinstance(auth, ApiAuth):
            auth = build_api_auth(auth)
        self._auths[auth_id] = auth
        logger.debug(f"Registered api-auth '{auth_id}' for {auth.protocol}://{auth.hostname}")
        return auth

    def unregister(self, auth_id: str) -> None:
        self._auths.pop(auth_id, None)

    def get(self, auth_id: Optional[str] = None) -> ApiAuth:
        """
        Resolve an api-auth id.

        Without an id, falls back to an auth built purely from settings
        (TULIP_HOSTNAME, TULIP_API_KEY, ...).
        """
        if auth_id is None:
            if DEFAULT_AUTH_ID not in self._auths:
                self._auths[DEFAULT_AUTH_ID] = build_api_auth({})
            return self._auths[DEFAULT_AUTH_ID]

        auth = self._auths.get(auth_id)
        if auth is None:
            raise ConfigurationError(
                f"Unknown api-auth '{auth_id}'. Available: {list(self._auths.keys())}"
            )
        return auth


credential_store = CredentialStore()
