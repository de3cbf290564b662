import logging
from typing import Optional

from .config import Config


def setup_logging(level: Optional[str] = None) -> None:
    effective = (level or Config.LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, effective, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
