# config.py
import logging
import os

from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
_TRUE_VALUES = {"1", "true", "on", "yes", "si"}
_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def get_log_level() -> str:
    raw = os.getenv("ICP_LOG_LEVEL", "INFO").strip().upper()
    if raw not in _LEVELS:
        return "INFO"
    return raw


def get_page_title() -> str:
    return os.getenv("ICP_PAGE_TITLE", "").strip() or "Calculadora de Riesgo ICP"


def get_demo_default() -> bool:
    return os.getenv("ICP_DEMO_DEFAULT", "").strip().lower() in _TRUE_VALUES


def setup_logging(level: str | None = None) -> None:
    """Configure root logging once; later calls only adjust the level."""
    resolved = (level or get_log_level()).upper()
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(getattr(logging, resolved, logging.INFO))
