from typing import Any, Optional


class TulipEdgeError(Exception):
    """Base class for all tulip-edge errors."""
    pass


class ConfigurationError(TulipEdgeError):
    """Raised when a node or api-auth configuration is invalid."""
    pass


class ParameterError(TulipEdgeError):
    """Raised when a request parameter cannot be resolved or has the wrong type."""
    pass


class TransportError(TulipEdgeError):
    """Raised when the request could not reach the factory."""
    pass


class ResponseParseError(TulipEdgeError):
    """Raised when a JSON response body cannot be decoded."""
    pass


class UnknownNodeTypeError(TulipEdgeError):
    """Raised when a node type is not registered."""
    pass


class NodeExecutionError(TulipEdgeError):
    """Raised by a node instance when handling a single message failed."""

    def __init__(self, node_id: str, cause: Exception, error_context: Optional[Any] = None):
        self.node_id = node_id
        self.cause = cause
        self.error_context = error_context
        super().__init__(f"Node {node_id} failed: {cause}")
