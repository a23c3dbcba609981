"""
Factory Nodes Package

Node packages are loaded from the node_packages/ directory; each one is a
self-contained manifest plus backend module.
"""

from .instance import NodeInstance
from .loader import NodePackageLoader, NodePackage
from .registry import NodeRegistry

__all__ = [
    "NodeInstance",
    "NodePackageLoader",
    "NodePackage",
    "NodeRegistry",
]
