import logging
import os
import sys
from logging.handlers import RotatingFileHandler

FORMATTER = logging.Formatter(
    "%(asctime)s | %(levelname)-7s | %(name)-15s | %(message)s",
    datefmt="%H:%M:%S"
)

LOG_FILE_NAME = "universe.log"


def setup_logging(settings=None):
    """Konfiguriert den Root-Logger für Konsole und (optional) Logdatei."""
    debug = bool(getattr(settings, "debug", False))
    log_dir = getattr(settings, "log_dir", None)
    level = logging.DEBUG if debug else logging.INFO

    # 1. Root-Logger immer auf DEBUG, die Handler filtern dann
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    # 2. Konsole
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(FORMATTER)
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    # 3. Datei: speichert IMMER alles (DEBUG)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, LOG_FILE_NAME), maxBytes=10*1024*1024, backupCount=5, encoding="utf-8"
        )
        file_handler.setFormatter(FORMATTER)
        file_handler.setLevel(logging.DEBUG)
        root_logger.addHandler(file_handler)

    # 4. Drittanbieter etwas leiser
    third_party_level = logging.DEBUG if debug else logging.WARNING
    for l_name in ["uvicorn", "uvicorn.error", "uvicorn.access"]:
        l = logging.getLogger(l_name)
        l.setLevel(third_party_level)
        l.handlers = root_logger.handlers
        l.propagate = False

    logging.info(f"✨ Universe Logging initialisiert (Level: {'DEBUG' if debug else 'INFO'})")


def get_logger(name: str):
    return logging.getLogger(name)
