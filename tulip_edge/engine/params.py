"""
Request parameter resolution.

A parameter is taken from the incoming message when the message defines it,
otherwise from the node's static configuration. Values are coerced the way
the factory API expects them on the wire.
"""
import json
from typing import Any, Dict, Iterable, Mapping, Optional

from tulip_edge.errors import ParameterError

SORT_BY_OTHER = "other"


def _encode_list(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return json.dumps(list(value))
    return value


def get_param_val(name: str, msg: Mapping[str, Any], config: Mapping[str, Any]) -> Optional[Any]:
    """
    Resolve one parameter.

    Args:
        name: Parameter name, e.g. "tableId" or "body"
        msg: Incoming message
        config: Static node configuration

    Returns:
        The resolved value, or None when neither source defines it

    Raises:
        ParameterError: If a configured body is not valid JSON
    """
    msg_val = msg.get(name)
    if msg_val is not None:
        # A message body is already an object; lists are encoded for every other name
        if name == "body":
            return msg_val
        return _encode_list(msg_val)

    config_val = config.get(name)
    if config_val is None:
        return None

    if name == "sortBy" and config_val == SORT_BY_OTHER:
        return config.get("sortByFieldId")
    if name == "body":
        if not isinstance(config_val, str):
            return config_val
        try:
            return json.loads(config_val)
        except json.JSONDecodeError as e:
            raise ParameterError(f"Configured body is not valid JSON: {e}") from e
    if isinstance(config_val, (list, tuple)):
        return _encode_list(config_val)
    return config_val


def resolve_params(
    names: Iterable[str], msg: Mapping[str, Any], config: Mapping[str, Any]
) -> Dict[str, Any]:
    """Resolve every name in order; undefined parameters map to None."""
    return {name: get_param_val(name, msg, config) for name in names}
