from __future__ import annotations

import logging
from typing import TextIO

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
PACKAGE_LOGGER = "blockshader"


def configure_logging(debug: bool = False, stream: TextIO | None = None) -> None:
    level = logging.DEBUG if debug else logging.INFO
    root_logger = logging.getLogger()

    # Under uvicorn the root logger already has handlers by the time the lifespan
    # runs, so basicConfig() would do nothing; only adjust levels in that case.
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT, stream=stream)

    root_logger.setLevel(level)
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
