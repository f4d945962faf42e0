import logging
import sys

from splitledger.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None, dev_mode: bool | None = None) -> None:
    level = level or settings.LOG_LEVEL
    dev_mode = settings.DEV_MODE if dev_mode is None else dev_mode

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if dev_mode:
        handlers.append(logging.FileHandler(settings.DEV_LOG_FILE, encoding="utf-8"))

    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, handlers=handlers, force=True)

    if dev_mode:
        logging.getLogger(__name__).info("Dev logging enabled, writing to %s", settings.DEV_LOG_FILE)
