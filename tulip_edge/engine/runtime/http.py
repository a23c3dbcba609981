import json
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

import httpx

from tulip_edge.engine.definitions import ResponseMeta
from tulip_edge.errors import ResponseParseError, TransportError

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


def is_success_status(status_code: int) -> bool:
    """2xx and 3xx responses are successful; redirects are not followed."""
    return 200 <= status_code < 400


def _log_warning(message: str) -> None:
    logger.warning(message)


def _log_error(message: str) -> None:
    logger.error(message)


class HTTPRuntime:
    """Handles network requests for the factory nodes."""

    @staticmethod
    def resolve_proxy(proxy_url: Optional[str]) -> Optional[httpx.Proxy]:
        """
        Proxy for outbound requests, from the http_proxy setting.

        A malformed proxy URL is logged and ignored, so requests go out directly.
        """
        if not proxy_url:
            return None
        try:
            return httpx.Proxy(url=proxy_url)
        except (httpx.InvalidURL, ValueError, TypeError) as e:
            logger.error(f"Could not create proxy from env http_proxy={proxy_url}: {e}")
            return None

    @staticmethod
    def build_client(
        keep_alive: bool = False,
        keep_alive_msecs: int = 1000,
        proxy_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> httpx.AsyncClient:
        """
        Creates the connection pool shared by all requests of one node instance.

        Args:
            keep_alive: Keep idle connections around for reuse
            keep_alive_msecs: How long an idle connection is kept, in milliseconds
            proxy_url: Outbound proxy; a malformed URL falls back to a direct connection
            timeout: Request timeout in seconds; None waits indefinitely
            transport: Custom transport (e.g. httpx.MockTransport)
        """
        if keep_alive:
            limits = httpx.Limits(keepalive_expiry=keep_alive_msecs / 1000)
        else:
            limits = httpx.Limits(max_keepalive_connections=0)

        client_kwargs: Dict[str, Any] = {"limits": limits}
        proxy = HTTPRuntime.resolve_proxy(proxy_url)
        if proxy is not None:
            # Keep-alive settings are not applied to proxied connections
            logger.debug(f"Routing requests through proxy {proxy.url}")
            client_kwargs = {"proxy": proxy}

        return httpx.AsyncClient(
            **client_kwargs,
            timeout=timeout,
            transport=transport,
            trust_env=False,
            follow_redirects=False,
        )

    @staticmethod
    def prepare_headers(
        headers: Optional[Mapping[str, Any]],
        has_body: bool,
        warn: Callable[[str], None] = _log_warning,
    ) -> httpx.Headers:
        """
        Copy message-supplied headers; a request with a body is always sent as JSON.
        """
        prepared = httpx.Headers(
            {str(k): str(v) for k, v in (headers or {}).items() if v is not None}
        )
        if has_body:
            old_content_type = prepared.get("content-type")
            if old_content_type and JSON_CONTENT_TYPE not in old_content_type:
                warn(
                    f"Overriding header 'content-type'='{old_content_type}'; "
                    f"must be '{JSON_CONTENT_TYPE}'"
                )
                prepared["content-type"] = JSON_CONTENT_TYPE
            elif not old_content_type:
                prepared["content-type"] = JSON_CONTENT_TYPE
        return prepared

    @staticmethod
    def parse_body(response: httpx.Response) -> Any:
        """
        JSON content is decoded, anything else is returned as text.

        An empty JSON response (e.g. 204) has no payload.
        """
        content_type = response.headers.get("content-type")
        if content_type and JSON_CONTENT_TYPE in content_type:
            if not response.text.strip():
                return None
            try:
                return json.loads(response.text)
            except json.JSONDecodeError as e:
                raise ResponseParseError(
                    f"Invalid JSON in response from {response.request.url}: {e}"
                ) from e
        return response.text

    @staticmethod
    async def request(
        client: httpx.AsyncClient,
        method: str,
        url: Union[str, httpx.URL],
        auth: Optional[Tuple[str, str]] = None,
        headers: Optional[httpx.Headers] = None,
        body: Optional[str] = None,
        on_error: Callable[[str], None] = _log_error,
    ) -> Dict[str, Any]:
        """
        Performs one buffered request and builds the outgoing message.

        A status outside 2xx/3xx is reported through on_error; the message is
        still produced from the response.

        Returns:
            {"response": ResponseMeta, "payload": parsed body}

        Raises:
            TransportError: If the request could not be completed
            ResponseParseError: If a JSON response body is malformed
        """
        try:
            response = await client.request(
                method,
                url,
                auth=auth,
                headers=headers,
                content=body,
            )
        except httpx.TransportError as e:
            raise TransportError(f"{method} {url} failed: {e!r}") from e

        if not is_success_status(response.status_code):
            on_error(f"Response status code {response.status_code}")

        payload = HTTPRuntime.parse_body(response)
        return {
            "response": ResponseMeta.from_response(response),
            "payload": payload,
        }
