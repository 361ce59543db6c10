"""Process-wide logging setup."""

import logging

from voicescribe.core.config import get_settings

_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger once, using ``log_level`` from settings.

    Uvicorn's loggers are left to propagate to the root handler so that
    server and application lines share one format.
    """
    level_name = (level or get_settings().log_level).upper()
    logging.basicConfig(level=level_name, format=_FORMAT, force=True)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uv_logger = logging.getLogger(name)
        uv_logger.handlers = []
        uv_logger.propagate = True

    # SDK HTTP chatter drowns out pipeline logs at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
