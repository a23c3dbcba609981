import json
import os
import re
import time
from typing import Any, Dict, Mapping, Optional

from jinja2 import TemplateError
from jinja2.sandbox import SandboxedEnvironment

from tulip_edge.errors import ParameterError

_PATH_TOKEN = re.compile(r"([^.\[\]]+)|\[(\d+)\]")


def get_message_property(msg: Mapping[str, Any], path: str) -> Optional[Any]:
    """
    Read a property from a message by path, e.g. "payload.readings[0].value".

    Returns None if any segment along the path is missing.
    """
    current: Any = msg
    for key, index in _PATH_TOKEN.findall(path):
        if current is None:
            return None
        if index:
            if not isinstance(current, (list, tuple)) or int(index) >= len(current):
                return None
            current = current[int(index)]
        elif isinstance(current, Mapping):
            current = current.get(key)
        else:
            return None
    return current


class ExpressionResolver:
    """
    Evaluates typed input values against an incoming message.

    Supported types: msg, str, num, bool, json, date, env and expression.
    Expressions use Jinja2 syntax (e.g. `payload.temperature * 1.8 + 32`)
    with a restricted sandbox; the message fields are available at top level
    and as `msg`.
    """

    def __init__(self, msg: Mapping[str, Any], env: Optional[Mapping[str, str]] = None):
        self.env = SandboxedEnvironment()
        self.msg = msg
        self.process_env = os.environ if env is None else env
        self.context: Dict[str, Any] = {**msg, "msg": msg}

    def evaluate(self, expression: str) -> Any:
        try:
            compiled = self.env.compile_expression(expression, undefined_to_none=True)
            return compiled(**self.context)
        except (TemplateError, TypeError, ValueError, ZeroDivisionError, AttributeError) as e:
            raise ParameterError(f"Error evaluating expression '{expression}': {e}") from e

    def evaluate_property(self, value: Any, value_type: str) -> Any:
        """
        Evaluate one typed input.

        Raises:
            ParameterError: If the value cannot be converted to its type
        """
        if value_type == "msg":
            return get_message_property(self.msg, str(value))
        if value_type == "str":
            return value
        if value_type == "num":
            try:
                number = float(value)
            except (TypeError, ValueError) as e:
                raise ParameterError(f"Invalid number: {value!r}") from e
            return int(number) if number.is_integer() else number
        if value_type == "bool":
            return value is True or str(value).lower() == "true"
        if value_type == "json":
            try:
                return json.loads(value)
            except (TypeError, json.JSONDecodeError) as e:
                raise ParameterError(f"Invalid JSON: {e}") from e
        if value_type == "date":
            return int(time.time() * 1000)
        if value_type == "env":
            return self.process_env.get(str(value))
        if value_type == "expression":
            return self.evaluate(str(value))
        raise ParameterError(f"Unsupported property type: {value_type!r}")
