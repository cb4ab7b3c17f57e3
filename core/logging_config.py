# core/logging_config.py
import logging

from core import config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False


def setup_logging(level: str | None = None) -> None:
    """Root logger setup, called once from the app lifespan / scripts."""
    global _configured
    if _configured:
        return

    lvl = (level or config.LOG_LEVEL or "INFO").upper()
    logging.basicConfig(level=getattr(logging, lvl, logging.INFO), format=LOG_FORMAT)

    # SQL echo goes through sqlalchemy.engine only when DB_ECHO is on
    if not config.DB_ECHO:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    _configured = True
