"""
Logging setup for the query gateway.
"""

import logging

log = logging.getLogger("query_gateway")


def configure_logging(level: str = "INFO") -> None:
    """
    Send gateway logs to stderr.

    Uses format: mm-dd HH:MM:SS [LEVEL] logger: message

    Args:
        level: Logging level name (e.g. INFO, DEBUG)
    """
    resolved_level = getattr(logging, (level or "INFO").upper(), logging.INFO)

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%m-%d %H:%M:%S",
        )
    )

    log.handlers.clear()
    log.addHandler(handler)
    log.setLevel(resolved_level)
    log.propagate = False
