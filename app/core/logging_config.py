import logging

from app.core.config import settings

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=_FORMAT)
