"""Root logging from LOG_LEVEL / LOG_FILE. Called once from the app lifespan."""
from __future__ import annotations

import logging
import os

from app.config import Settings

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Settings) -> None:
    level = getattr(logging, (settings.LOG_LEVEL or "INFO").upper(), logging.INFO)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    log_file = (settings.LOG_FILE or "").strip()
    if log_file:
        directory = os.path.dirname(log_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(level=level, format=_FORMAT, handlers=handlers, force=True)
    # httpx logs every request at INFO; keep provider URLs out of the default output
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
