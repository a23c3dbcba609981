import logging
import re

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from tulip_edge.utils.message_id import get_message_id

# Custom theme for node output
custom_theme = Theme(
    {
        "info": "dim cyan",
        "warning": "magenta",
        "error": "bold red",
        "node": "bold blue",
        "engine": "bold green",
    }
)

console = Console(theme=custom_theme)

LOGGER_NAME = "tulip_edge"


class CompactFilter(logging.Filter):
    """Filters log messages to shorten UUIDs and module paths for technical density."""

    # Regex for UUID (standard 8-4-4-4-12 format)
    UUID_PATTERN = re.compile(
        r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.I
    )
    # Regex for long floats (3+ decimal places)
    FLOAT_PATTERN = re.compile(r"(\d+\.\d{4,})")

    def filter(self, record):
        if not isinstance(record.msg, str):
            return True

        msg = record.msg
        msg = msg.replace("tulip_edge.engine.", "engine.")
        msg = msg.replace("tulip_edge.nodes.", "node ")

        # Shorten UUIDs: a1e9166a-15f5-4ccf-b2ff-a6a92c37e645 -> a1e9..
        def shorten_uuid(match):
            val = match.group(0)
            return f"{val[:4]}.."

        # Shorten Floats: 0.012413125... -> 0.012
        def shorten_float(match):
            val = float(match.group(0))
            return f"{val:.3f}"

        msg = self.UUID_PATTERN.sub(shorten_uuid, msg)
        msg = self.FLOAT_PATTERN.sub(shorten_float, msg)

        # Prefix with the message being handled, if any
        message_id = get_message_id()
        if message_id:
            msg = f"[{message_id[:8]}] {msg}"

        record.msg = msg
        return True


def setup_global_logger(log_level: str = "INFO"):
    """
    Configures the package logger using Rich for readable output.
    """
    logger = logging.getLogger(LOGGER_NAME)

    level = getattr(logging, log_level.upper(), logging.INFO)
    logger.setLevel(level)

    # Avoid duplicate handlers
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        rich_handler = RichHandler(
            console=console,
            rich_tracebacks=True,
            markup=False,
            show_path=False,  # Compact: don't show the file path
            show_time=True,
            omit_repeated_times=True,
            keywords=["node", "engine", "tables", "links", "attribute"],
        )

        # Simple format for message only
        formatter = logging.Formatter("%(message)s", datefmt="[%X]")
        rich_handler.setFormatter(formatter)
        rich_handler.addFilter(CompactFilter())
        logger.addHandler(rich_handler)

    return logger


# Export a module-level logger for simple imports
logger = logging.getLogger(LOGGER_NAME)
