"""
Message ID tracking for node executions.

Every message handled by a node carries a `_msgid`. While a node handles the
message, the id is stored in a context variable so that every log line emitted
during that execution can be tagged with it, including lines emitted from
concurrently running requests on the same node.
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator, Optional

# Context variable for message ID - accessible anywhere while a message is handled
message_id_var: ContextVar[Optional[str]] = ContextVar("message_id", default=None)

MESSAGE_ID_FIELD = "_msgid"


def get_message_id() -> Optional[str]:
    """Get the current message ID from context."""
    return message_id_var.get()


def generate_message_id() -> str:
    """Generate a new unique message ID."""
    return str(uuid.uuid4())


@contextmanager
def bind_message_id(msg: Dict[str, Any]) -> Iterator[str]:
    """
    Bind the message's `_msgid` (or a fresh one) to the current context.

    The incoming message is not modified.
    """
    message_id = msg.get(MESSAGE_ID_FIELD) or generate_message_id()
    token = message_id_var.set(str(message_id))
    try:
        yield str(message_id)
    finally:
        message_id_var.reset(token)
