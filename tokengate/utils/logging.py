"""Logging setup shared by the API server and the CLI."""

import logging

from tokengate.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Chatty third-party loggers that would otherwise log every RPC request.
_QUIET_LOGGERS = ("httpx", "httpcore", "solana")


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger. Safe to call more than once."""
    level_name = (level or settings.log_level).upper()
    logging.basicConfig(level=level_name, format=LOG_FORMAT, force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, logging.getLevelName(level_name)))
