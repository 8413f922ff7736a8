import logging

from route_errors.core.config import settings

logger = logging.getLogger("route-errors")
logger.setLevel(settings.LOG_LEVEL.upper())

handler = logging.StreamHandler()
formatter = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
handler.setFormatter(formatter)

if not logger.handlers:
    logger.addHandler(handler)
