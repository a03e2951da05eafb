"""Logging setup and one-line log formats shared by handlers"""
import logging
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Libraries that are chatty at DEBUG
QUIET_LOGGERS = ("aiogram", "aiogram.event", "aiohttp.access", "PIL")


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a stdout handler to the root logger.

    Module loggers propagate to root, so this is called once at startup.
    Calling it again only updates the level.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not any(getattr(h, "_promptengine", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._promptengine = True
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.INFO))

    return root


def log_user_action(logger: logging.Logger, user_id: int, action: str, details: str = ""):
    """Log `User <id> | <action> | <details>`"""
    logger.info(" | ".join(part for part in (f"User {user_id}", action, details) if part))


def log_error_with_context(
    logger: logging.Logger,
    error: Exception,
    context: str,
    user_id: Optional[int] = None
):
    """Log an exception with traceback, prefixed by the user and where it happened"""
    prefix = f"User {user_id} | " if user_id else ""
    logger.error(f"{prefix}{context}: {type(error).__name__}: {error}", exc_info=True)
