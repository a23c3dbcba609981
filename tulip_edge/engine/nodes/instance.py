import logging
from typing import Any, Dict, Optional

import httpx

from tulip_edge.config import settings
from tulip_edge.credentials.models import ApiAuth
from tulip_edge.engine.context import NodeContext
from tulip_edge.engine.error_handler import ErrorCategory, ErrorClassifier
from tulip_edge.engine.nodes.loader import NodePackage
from tulip_edge.engine.runtime.http import HTTPRuntime
from tulip_edge.errors import NodeExecutionError
from tulip_edge.utils.message_id import bind_message_id


class NodeInstance:
    """
    One configured node.

    Owns the keep-alive connection pool shared by every message it handles.
    Messages are independent: several `receive` calls may run concurrently.
    """

    def __init__(
        self,
        package: NodePackage,
        config: Dict[str, Any],
        auth: Optional[ApiAuth] = None,
        node_id: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.package = package
        self.config = config
        self.auth = auth
        self.id = node_id or config.get("id") or package.id
        self.name = config.get("name") or package.name
        self.logger = logging.getLogger(f"tulip_edge.nodes.{self.id}")

        keep_alive = config.get("keepAlive")
        keep_alive_msecs = config.get("keepAliveMsecs")
        self.client = HTTPRuntime.build_client(
            keep_alive=settings.KEEP_ALIVE if keep_alive is None else bool(keep_alive),
            keep_alive_msecs=(
                settings.KEEP_ALIVE_MSECS if keep_alive_msecs is None else int(keep_alive_msecs)
            ),
            proxy_url=settings.HTTP_PROXY,
            timeout=settings.REQUEST_TIMEOUT,
            transport=transport,
        )

    async def receive(self, msg: Dict[str, Any]) -> Dict[str, Any]:
        """
        Handle one input message and return the single outgoing message.

        Raises:
            NodeExecutionError: If the message could not be handled; the
                original error is available as `cause`
        """
        with bind_message_id(msg):
            context = NodeContext(
                node_id=self.id,
                node_type=self.package.id,
                config=self.config,
                msg=msg,
                auth=self.auth,
                client=self.client,
                logger=self.logger,
            )
            try:
                return await self.package.execute_fn(context)
            except Exception as e:
                error_context = ErrorClassifier.classify(e)
                self.logger.error(
                    f"{error_context.message}: {e} ({error_context.suggestion})",
                    exc_info=error_context.category is ErrorCategory.UNKNOWN,
                )
                raise NodeExecutionError(self.id, e, error_context) from e

    async def close(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "NodeInstance":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
