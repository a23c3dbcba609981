"""
Node Package Loader

Dynamically loads factory nodes from the node_packages directory.

Each package is a directory holding a manifest.json and a backend/execute.py
that defines `async def execute(context)` and optionally
`async def validate(config)`.
"""

import json
import importlib.util
import logging
from pathlib import Path
from typing import Dict, List, Optional, Any, Callable
from dataclasses import dataclass

from pydantic import ValidationError

from tulip_edge.engine.nodes.schema import NodeManifest

logger = logging.getLogger(__name__)


@dataclass
class NodePackage:
    """Represents a loaded node package"""
    id: str
    name: str
    version: str
    manifest: NodeManifest
    execute_fn: Callable
    validate_fn: Optional[Callable] = None
    package_dir: Optional[Path] = None

    @property
    def requires_auth(self) -> bool:
        return bool(self.manifest.credentials)


class NodePackageLoader:
    """
    Loads and manages packaged nodes from the filesystem.

    Usage:
        loader = NodePackageLoader(Path("node_packages"))
        nodes = loader.discover_nodes()
        package = loader.get_node("tulip.tables")
    """

    def __init__(self, packages_dir: Path):
        """
        Initialize the node loader.

        Args:
            packages_dir: Root directory containing node packages
        """
        self.packages_dir = Path(packages_dir)
        self.loaded_nodes: Dict[str, NodePackage] = {}

    def discover_nodes(self) -> List[NodePackage]:
        """
        Scan the packages directory and load all valid node packages.

        Returns:
            List of successfully loaded NodePackage objects
        """
        nodes = []

        if not self.packages_dir.exists():
            logger.warning(f"Node packages directory {self.packages_dir} does not exist")
            return nodes

        # Scan all subdirectories (one per node family)
        for category_dir in sorted(self.packages_dir.iterdir()):
            if not category_dir.is_dir() or category_dir.name.startswith(("_", ".")):
                continue

            for package_dir in sorted(category_dir.iterdir()):
                if not package_dir.is_dir() or package_dir.name.startswith(("_", ".")):
                    continue

                manifest_path = package_dir / "manifest.json"
                if not manifest_path.exists():
                    logger.warning(f"Skipping {package_dir.name}: no manifest.json")
                    continue

                try:
                    node_package = self._load_node_package(package_dir)
                except (OSError, ValueError, ImportError, SyntaxError) as e:
                    logger.error(f"Failed to load node {package_dir.name}: {e}", exc_info=True)
                    continue
                nodes.append(node_package)
                self.loaded_nodes[node_package.id] = node_package
                logger.debug(f"Loaded node: {node_package.name} v{node_package.version} ({node_package.id})")

        logger.info(f"Loaded {len(nodes)} factory nodes")
        return nodes

    def _load_node_package(self, package_dir: Path) -> NodePackage:
        """
        Load a single node package from its directory.

        Raises:
            ValueError: If manifest is invalid or execution module missing
        """
        with open(package_dir / "manifest.json", "r") as f:
            raw_manifest = json.load(f)

        manifest = self._validate_manifest(raw_manifest)

        execute_module_path = package_dir / "backend" / "execute.py"
        if not execute_module_path.exists():
            raise ValueError(f"Missing backend/execute.py in {package_dir.name}")

        spec = importlib.util.spec_from_file_location(
            f"node_packages.{manifest.id}.execute",
            execute_module_path
        )
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)

        if not hasattr(module, "execute"):
            raise ValueError(f"Node package {package_dir.name} missing execute() function")

        return NodePackage(
            id=manifest.id,
            name=manifest.name,
            version=manifest.version,
            manifest=manifest,
            execute_fn=module.execute,
            validate_fn=getattr(module, "validate", None),
            package_dir=package_dir
        )

    def _validate_manifest(self, manifest: Dict[str, Any]) -> NodeManifest:
        """
        Raises:
            ValueError: If required fields are missing or malformed
        """
        try:
            return NodeManifest.model_validate(manifest)
        except ValidationError as e:
            raise ValueError(f"Invalid manifest: {e}") from e

    def get_node(self, node_id: str) -> Optional[NodePackage]:
        """Get a loaded node package by ID"""
        return self.loaded_nodes.get(node_id)

    def list_nodes(self) -> List[Dict[str, Any]]:
        """
        Get a list of all loaded node packages with their metadata.
        """
        return [
            {
                "id": node.id,
                "name": node.name,
                "version": node.version,
                "category": node.manifest.category.value,
                "description": node.manifest.description,
                "inputs": [i.model_dump(exclude_none=True) for i in node.manifest.inputs],
                "outputs": [o.model_dump(exclude_none=True) for o in node.manifest.outputs],
                "credentials": node.manifest.credentials or [],
                "author": node.manifest.author,
                "tags": node.manifest.tags
            }
            for node in self.loaded_nodes.values()
        ]

    def reload_node(self, node_id: str) -> bool:
        """
        Reload a specific node package (useful for development).
        """
        node = self.loaded_nodes.get(node_id)
        if not node or not node.package_dir:
            return False

        try:
            new_node = self._load_node_package(node.package_dir)
        except (OSError, ValueError, ImportError, SyntaxError) as e:
            logger.error(f"Failed to reload node {node_id}: {e}")
            return False
        self.loaded_nodes[node_id] = new_node
        logger.info(f"Reloaded node: {node_id}")
        return True
