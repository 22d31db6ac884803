# hobbylist/core/logging.py
import logging

from hobbylist.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    level_name = (level or settings.LOG_LEVEL or "INFO").upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
    # Resend SDK logs through requests/urllib3
    logging.getLogger("urllib3").setLevel(logging.WARNING)
