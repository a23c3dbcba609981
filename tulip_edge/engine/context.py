import logging
from typing import Any, Dict, Optional

import httpx

from tulip_edge.credentials.models import ApiAuth
from tulip_edge.engine.expressions.resolver import ExpressionResolver
from tulip_edge.engine.params import get_param_val


class NodeContext:
    """
    Execution context for one message handled by a node.

    Carries the node's static configuration, the incoming message, the
    resolved api-auth and the node instance's shared HTTP client. Node-level
    errors and warnings are logged through the node's own logger and do not
    stop the message.
    """

    def __init__(
        self,
        node_id: str,
        node_type: str,
        config: Dict[str, Any],
        msg: Dict[str, Any],
        auth: Optional[ApiAuth],
        client: httpx.AsyncClient,
        logger: Optional[logging.Logger] = None,
    ):
        self.node_id = node_id
        self.node_type = node_type
        self.raw_config = config
        self.msg = msg
        self.auth = auth
        self.client = client
        self.logger = logger or logging.getLogger(f"tulip_edge.nodes.{node_id}")
        self.resolver = ExpressionResolver(msg)

    def error(self, message: Any) -> None:
        self.logger.error(f"[{self.node_type}:{self.node_id}] {message}")

    def warn(self, message: Any) -> None:
        self.logger.warning(f"[{self.node_type}:{self.node_id}] {message}")

    def get_param(self, name: str) -> Any:
        """Message value if defined, else configured value."""
        return get_param_val(name, self.msg, self.raw_config)

    def evaluate_property(self, value: Any, value_type: str) -> Any:
        return self.resolver.evaluate_property(value, value_type)
