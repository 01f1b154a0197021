# qrorder/utils/logging.py
import logging

from qrorder.utils.settings import LOG_LEVEL

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO), format=_FORMAT)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
