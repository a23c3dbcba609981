"""
Tulip Tables Node

Calls one endpoint of the Tables API, selected by `queryType`. Every path and
query parameter of the endpoint is taken from the message when set there,
otherwise from the node configuration.
"""
import json
from typing import Any, Dict

from tulip_edge.engine.catalog import FUNCTION_TYPES, get_endpoint
from tulip_edge.engine.context import NodeContext
from tulip_edge.engine.params import resolve_params
from tulip_edge.engine.runtime.http import HTTPRuntime
from tulip_edge.engine.urls import get_api_url
from tulip_edge.errors import ConfigurationError


async def execute(context: NodeContext) -> Dict[str, Any]:
    config = context.raw_config
    msg = context.msg
    auth = context.auth

    endpoint = get_endpoint(config.get("queryType"))

    # Get all relevant parameters, overriding config value with msg if set
    path_params = resolve_params(endpoint.path_params, msg, config)
    query_params = resolve_params(endpoint.query_params, msg, config)

    url = get_api_url(
        auth.protocol,
        auth.hostname,
        auth.port,
        endpoint.build_path(path_params),
        query_params,
    )
    headers = HTTPRuntime.prepare_headers(msg.get("headers"), endpoint.has_body, warn=context.warn)

    body = None
    if endpoint.has_body:
        raw_body = context.get_param("body")
        if raw_body is not None:
            body = json.dumps(raw_body)

    return await HTTPRuntime.request(
        context.client,
        endpoint.method,
        url,
        auth=auth.basic_auth,
        headers=headers,
        body=body,
        on_error=context.error,
    )


async def validate(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate configuration before the node is created.

    Returns:
        Dict with 'valid' (bool) and optional 'errors' (list)
    """
    errors = []

    try:
        endpoint = get_endpoint(config.get("queryType"))
    except ConfigurationError as e:
        errors.append(str(e))
        endpoint = None

    function = config.get("function")
    if endpoint and "function" in endpoint.query_params and function:
        if function not in FUNCTION_TYPES:
            errors.append(
                f"Invalid aggregation function: {function}. Expected one of {list(FUNCTION_TYPES)}"
            )

    return {
        "valid": len(errors) == 0,
        "errors": errors
    }
