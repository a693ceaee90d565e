"""Console logging setup for netrequest."""

import logging
import os
import sys

__all__ = ["configure_logs"]

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%d/%m/%y %H:%M:%S"
DEFAULT_LEVEL = "INFO"

_HANDLER_NAME = "netrequest-console"


def configure_logs(level: str | None = None) -> None:
    """Send log records to stderr, leaving stdout for the decoded response.

    Sets up:
    - Root logger at WARNING level.
    - netrequest loggers at `level`, else LOG_LEVEL, else INFO.
    - aiohttp and asyncio loggers at WARNING level.

    Calling it again only updates the level. An unknown level name falls
    back to INFO with a warning.

    Args:
        level: Level name such as "DEBUG". Overrides LOG_LEVEL.
    """
    name = (level or os.getenv("LOG_LEVEL") or DEFAULT_LEVEL).upper()
    numeric = logging.getLevelName(name)
    known = isinstance(numeric, int)
    if not known:
        numeric = logging.INFO

    root = logging.getLogger()
    root.setLevel(logging.WARNING)
    if not any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        root.addHandler(handler)

    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logging.getLogger("netrequest").setLevel(numeric)
    if not known:
        logging.getLogger(__name__).warning(f"Unknown log level {name!r}, using INFO")
