from typing import Any, Mapping, Optional, Union

import httpx

from tulip_edge.errors import ConfigurationError, ParameterError

API_BASE_PATH = "/api/v3"
SUPPORTED_PROTOCOLS = ("http", "https")

_SCALARS = (str, int, float, bool)


def _parse_port(port: Union[int, str, None]) -> Optional[int]:
    if port is None or (isinstance(port, str) and not port.strip()):
        return None
    try:
        return int(port)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid port: {port!r}")


def get_factory_url(protocol: str, hostname: str, port: Union[int, str, None] = None) -> httpx.URL:
    """Base URL of a factory instance, e.g. https://acme.tulip.co:443."""
    if protocol not in SUPPORTED_PROTOCOLS:
        raise ConfigurationError(f"Expected protocol of http or https, got: {protocol}")
    if not hostname:
        raise ConfigurationError("Factory hostname is required")
    return httpx.URL(scheme=protocol, host=hostname, port=_parse_port(port), path="/")


def get_api_url(
    protocol: str,
    hostname: str,
    port: Union[int, str, None],
    path: str,
    query_params: Optional[Mapping[str, Any]] = None,
) -> httpx.URL:
    """
    Build {protocol}://{hostname}:{port}/api/v3{path}?{query}.

    Query parameters that are None are omitted.

    Raises:
        ConfigurationError: On an unsupported protocol or invalid port
        ParameterError: If a query parameter is not a scalar
    """
    params = {}
    for name, value in (query_params or {}).items():
        if value is None:
            continue
        if not isinstance(value, _SCALARS):
            raise ParameterError(
                f"Query parameter '{name}' must be a string, number or boolean, "
                f"got {type(value).__name__}"
            )
        params[name] = value

    base = get_factory_url(protocol, hostname, port)
    return base.copy_with(path=API_BASE_PATH + path, params=params or None)
