"""
Tulip Machine Attribute Node

Reports one attribute value of a machine to the Machine API.
"""
import json
from typing import Any, Dict, Mapping

from tulip_edge.engine.catalog import MACHINE_ATTRIBUTE_PATH
from tulip_edge.engine.context import NodeContext
from tulip_edge.engine.runtime.http import HTTPRuntime
from tulip_edge.engine.urls import get_api_url
from tulip_edge.errors import ParameterError

DEVICE_INFO_FIELDS = ("machineId", "attributeId")
PAYLOAD_TYPES = ("msg", "str", "num", "bool", "json", "date", "env", "expression")


def parse_device_info(device_info: Any) -> Dict[str, Any]:
    """deviceInfo is stored as a JSON string: {"machineId": ..., "attributeId": ...}."""
    if isinstance(device_info, Mapping):
        return dict(device_info)
    try:
        parsed = json.loads(device_info or "{}")
    except (TypeError, json.JSONDecodeError) as e:
        raise ParameterError(f"deviceInfo is not valid JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise ParameterError("deviceInfo must be a JSON object")
    return parsed


def get_device_info(msg: Mapping[str, Any], device_info: Mapping[str, Any], param: str) -> Any:
    """
    Message value if present (must be a string), else the configured device info value.
    """
    param_val = msg.get(param)
    if param_val is None:
        return device_info.get(param)
    if not isinstance(param_val, str):
        raise ParameterError(
            f"msg.{param} must be string, {param_val!r} is of type {type(param_val).__name__}"
        )
    return param_val


def get_payload(context: NodeContext) -> Any:
    """
    Evaluate the configured payload source.

    Raises:
        ParameterError: If evaluation fails or the payload is undefined
    """
    source = context.raw_config.get("payloadSource", "payload")
    source_type = context.raw_config.get("payloadType", "msg")
    try:
        payload = context.evaluate_property(source, source_type)
    except ParameterError:
        if source_type == "expression":
            context.error(f"Error evaluating expression: {source}")
        else:
            context.error(f"Error evaluating node property {source} of type {source_type}")
        raise

    if payload is None:
        raise ParameterError("payload not defined")
    return payload


async def execute(context: NodeContext) -> Dict[str, Any]:
    msg = context.msg
    auth = context.auth

    payload = get_payload(context)
    headers = HTTPRuntime.prepare_headers(msg.get("headers"), has_body=True, warn=context.warn)

    # Use either config or override with msg value
    device_info = parse_device_info(context.raw_config.get("deviceInfo"))
    machine_id = get_device_info(msg, device_info, "machineId")
    attribute_id = get_device_info(msg, device_info, "attributeId")

    body = json.dumps(
        {
            "attributes": [
                {
                    "machineId": machine_id,
                    "attributeId": attribute_id,
                    "value": payload,
                }
            ]
        }
    )
    url = get_api_url(auth.protocol, auth.hostname, auth.port, MACHINE_ATTRIBUTE_PATH)

    return await HTTPRuntime.request(
        context.client,
        "POST",
        url,
        auth=auth.basic_auth,
        headers=headers,
        body=body,
        on_error=context.error,
    )


async def validate(config: Dict[str, Any]) -> Dict[str, Any]:
    errors = []

    try:
        parse_device_info(config.get("deviceInfo"))
    except ParameterError as e:
        errors.append(str(e))

    payload_type = config.get("payloadType", "msg")
    if payload_type not in PAYLOAD_TYPES:
        errors.append(f"Invalid payload type: {payload_type}")

    return {
        "valid": len(errors) == 0,
        "errors": errors
    }
