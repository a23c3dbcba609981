"""
Node Registry

Discovers node packages and creates configured node instances.
"""

import logging
from typing import Dict, Optional, Any, Union
from pathlib import Path

import httpx

from tulip_edge.config import settings
from tulip_edge.credentials.models import ApiAuth
from tulip_edge.credentials.service import credential_store
from tulip_edge.engine.nodes.instance import NodeInstance
from tulip_edge.engine.nodes.loader import NodePackageLoader, NodePackage
from tulip_edge.errors import ConfigurationError, UnknownNodeTypeError

logger = logging.getLogger(__name__)


class NodeRegistry:
    """
    Central registry for all factory nodes.
    """

    _loader: Optional[NodePackageLoader] = None
    _initialized: bool = False

    @classmethod
    def initialize(cls, packages_dir: Optional[Path] = None):
        """
        Initialize the node registry by discovering all node packages.

        Args:
            packages_dir: Path to node_packages directory (default: from settings)
        """
        if cls._initialized:
            logger.debug("NodeRegistry already initialized")
            return

        packages_dir = packages_dir or settings.node_packages_path
        logger.info(f"Initializing NodeRegistry from: {packages_dir}")
        cls._loader = NodePackageLoader(packages_dir)
        cls._loader.discover_nodes()
        cls._initialized = True

    @classmethod
    def get_node(cls, node_type: str) -> Optional[NodePackage]:
        cls._ensure_initialized()
        return cls._loader.get_node(node_type)

    @classmethod
    def list_nodes(cls) -> Dict[str, Dict[str, Any]]:
        """
        List all available nodes with their metadata, keyed by node ID.
        """
        cls._ensure_initialized()
        return {node["id"]: node for node in cls._loader.list_nodes()}

    @classmethod
    async def create_node(
        cls,
        node_type: str,
        config: Dict[str, Any],
        auth: Union[ApiAuth, str, None] = None,
        node_id: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> NodeInstance:
        """
        Validate a node configuration and build a node instance.

        Args:
            node_type: Node package ID, e.g. "tulip.tables"
            config: Static node configuration
            auth: An ApiAuth, or the id of one registered in the credential
                store; defaults to config["apiAuth"]
            node_id: Instance ID used in logs
            transport: Custom HTTP transport for the instance's client

        Raises:
            UnknownNodeTypeError: If no package has this ID
            ConfigurationError: If validation fails or the api-auth is unknown
        """
        cls._ensure_initialized()
        package = cls._loader.get_node(node_type)
        if not package:
            raise UnknownNodeTypeError(
                f"Node '{node_type}' not found. Available: {list(cls._loader.loaded_nodes.keys())}"
            )

        # Fields missing from the configuration take their manifest default
        config = {**package.manifest.input_defaults(), **config}

        if package.validate_fn:
            validation_result = await package.validate_fn(config)
            if not validation_result.get("valid", True):
                errors = validation_result.get("errors", ["Validation failed"])
                raise ConfigurationError(f"Configuration validation failed: {', '.join(errors)}")

        if package.requires_auth and not isinstance(auth, ApiAuth):
            auth = credential_store.get(auth or config.get("apiAuth"))

        return NodeInstance(package, config, auth=auth, node_id=node_id, transport=transport)

    @classmethod
    def reload_node(cls, node_id: str) -> bool:
        cls._ensure_initialized()
        return cls._loader.reload_node(node_id)

    @classmethod
    def reload_all(cls, packages_dir: Optional[Path] = None):
        """Reload all nodes from disk"""
        cls._initialized = False
        cls.initialize(packages_dir)

    @classmethod
    def _ensure_initialized(cls):
        if not cls._initialized:
            cls.initialize()
