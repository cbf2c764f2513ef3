"""Logging setup for the service process."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once at process start."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # aiocache logs every backend hiccup at WARNING; cache failures are handled here
    logging.getLogger("aiocache").setLevel(logging.ERROR)
