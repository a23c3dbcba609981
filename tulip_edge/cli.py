"""Command-line interface for tulip-edge."""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
from pydantic import BaseModel
from rich.console import Console
from rich.table import Table

from tulip_edge import __version__
from tulip_edge.config import settings
from tulip_edge.credentials.service import build_api_auth
from tulip_edge.engine.catalog import TABLE_QUERY_TYPES
from tulip_edge.engine.nodes.registry import NodeRegistry
from tulip_edge.errors import TulipEdgeError
from tulip_edge.logger import setup_global_logger

console = Console()


def _load_json(value: Optional[str], option: str) -> Dict[str, Any]:
    """Parse an option given as inline JSON or as @path/to/file.json."""
    if not value:
        return {}
    try:
        if value.startswith("@"):
            value = Path(value[1:]).read_text("utf-8")
        data = json.loads(value)
    except (OSError, json.JSONDecodeError) as e:
        raise click.BadParameter(str(e), param_hint=option)
    if not isinstance(data, dict):
        raise click.BadParameter("expected a JSON object", param_hint=option)
    return data


def _jsonable(message: Dict[str, Any]) -> Dict[str, Any]:
    return {
        key: value.model_dump(by_alias=True) if isinstance(value, BaseModel) else value
        for key, value in message.items()
    }


@click.group()
@click.version_option(version=__version__)
@click.option("--log-level", default=None, help="Log level (default: TULIP_LOG_LEVEL or INFO)")
def main(log_level: Optional[str]):
    """
    tulip-edge - Tulip factory API nodes.

    Inspect the available nodes and endpoints, or run a node against one message.
    """
    setup_global_logger(log_level or settings.LOG_LEVEL)


@main.command()
def nodes():
    """List the discovered node packages."""
    table = Table(title="Nodes", border_style="cyan")
    table.add_column("ID", style="bold blue")
    table.add_column("Name")
    table.add_column("Version", style="dim")
    table.add_column("Description")

    for node_id, info in NodeRegistry.list_nodes().items():
        table.add_row(node_id, info["name"], info["version"], info["description"])
    console.print(table)


@main.command()
def endpoints():
    """List the Tables API endpoint catalog (queryType values)."""
    table = Table(title="Endpoints", border_style="cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Label", style="bold")
    table.add_column("Method", style="green")
    table.add_column("Path")
    table.add_column("Query parameters", style="dim")

    for index, endpoint in enumerate(TABLE_QUERY_TYPES):
        table.add_row(
            str(index),
            endpoint.label,
            endpoint.method,
            endpoint.path_template,
            ", ".join(endpoint.query_params),
        )
    console.print(table)


@main.command()
@click.argument("node_type")
@click.option("--config", "config_json", default=None, help="Node configuration, JSON or @file")
@click.option("--auth", "auth_json", default=None, help="api-auth configuration, JSON or @file")
@click.option("--msg", "msg_json", default=None, help="Input message, JSON or @file")
def run(node_type: str, config_json: Optional[str], auth_json: Optional[str], msg_json: Optional[str]):
    """Create one NODE_TYPE node and send it a single message."""
    config = _load_json(config_json, "--config")
    msg = _load_json(msg_json, "--msg")

    async def _run() -> Dict[str, Any]:
        auth = build_api_auth(_load_json(auth_json, "--auth"))
        node = await NodeRegistry.create_node(node_type, config, auth=auth)
        async with node:
            return await node.receive(msg)

    try:
        result = asyncio.run(_run())
    except TulipEdgeError as e:
        console.print(f"[bold red]✗ {e}[/bold red]")
        sys.exit(1)

    console.print_json(data=_jsonable(result), default=str)


if __name__ == "__main__":
    main()
