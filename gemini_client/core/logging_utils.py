import logging
from typing import Optional

from .config import LOG_LEVEL_FROM_ENV

LOG_FORMAT = '%(asctime)s %(levelname)-8s [%(name)s:%(module)s:%(lineno)d] - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

NOISY_LIBRARY_LOGGERS = ["httpx", "httpcore", "hpack", "h2"]


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger for command line use.

    Library code only creates named loggers; applications embedding the
    client configure logging themselves.
    """
    level_name = (level or LOG_LEVEL_FROM_ENV).upper()
    numeric_log_level = getattr(logging, level_name, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_log_level)

    if not any(getattr(h, "_gemini_client_console", False) for h in root_logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        console_handler._gemini_client_console = True  # type: ignore[attr-defined]
        root_logger.addHandler(console_handler)

    for lib_logger_name in NOISY_LIBRARY_LOGGERS:
        logging.getLogger(lib_logger_name).setLevel(logging.WARNING)

    return logging.getLogger("GeminiClient")


def mask_api_key(api_key: str) -> str:
    """Return a masked/fingerprinted representation of an API key for safe logging."""
    if not api_key:
        return "(empty)"
    head = api_key[:4]
    tail = api_key[-4:] if len(api_key) > 8 else "****"
    return f"{head}...{tail} (len={len(api_key)})"
