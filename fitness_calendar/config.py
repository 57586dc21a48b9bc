import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DATA_DIR = Path(os.getenv("FITNESS_DATA_DIR", "data"))
STORAGE_KEY = os.getenv("FITNESS_STORAGE_KEY", "fitnessTrackerLogs")
LOG_LEVEL = os.getenv("FITNESS_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)
