from .nodes import NodeInstance, NodeRegistry

__all__ = ["NodeInstance", "NodeRegistry"]
