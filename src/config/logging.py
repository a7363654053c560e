import logging
import sys
from logging import StreamHandler

from src.config.settings import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# third-party loggers that are too chatty at DEBUG
QUIET_LOGGERS = {
    # the engine echo flag already prints statements when LOG_DB is set
    "sqlalchemy.engine": logging.WARNING,
    # one line per Resend request
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "multipart": logging.INFO,
}


def setup_logging(level: int | None = None) -> None:
    if level is None:
        level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[StreamHandler(sys.stdout)],
    )
    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(max(level, quiet_level))
    logging.getLogger(__name__).debug(
        "Logging configured for %s at %s", settings.ENVIRONMENT, logging.getLevelName(level)
    )
