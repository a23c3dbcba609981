"""
Tulip Links Node

Table link operations. Supported query types: info.
"""
from typing import Any, Dict

from tulip_edge.engine.catalog import LINK_QUERY_TYPES, get_link_endpoint
from tulip_edge.engine.context import NodeContext
from tulip_edge.engine.runtime.http import HTTPRuntime
from tulip_edge.engine.urls import get_api_url


async def execute(context: NodeContext) -> Dict[str, Any]:
    config = context.raw_config
    auth = context.auth

    endpoint = get_link_endpoint(config.get("queryType", "info"))
    link_id = context.msg.get("linkId") or config.get("linkId")

    url = get_api_url(
        auth.protocol,
        auth.hostname,
        auth.port,
        endpoint.build_path({"linkId": link_id}),
    )
    response = await HTTPRuntime.request(
        context.client,
        endpoint.method,
        url,
        auth=auth.basic_auth,
        on_error=context.error,
    )
    response["request"] = {"linkId": link_id}
    return response


async def validate(config: Dict[str, Any]) -> Dict[str, Any]:
    errors = []

    query_type = config.get("queryType", "info")
    if query_type not in LINK_QUERY_TYPES:
        errors.append(f"Unsupported links query type: {query_type}")

    return {
        "valid": len(errors) == 0,
        "errors": errors
    }
