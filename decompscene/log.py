"""
decompscene.log - Logging module with proper Python exception handling.

Usage:
    from decompscene import log

    log.info("[ModelLoader] Parsed 3 vertex arrays")
    log.warn("Collision file not found")

    try:
        do_something()
    except Exception as e:
        log.error(e, "Failed to do something")  # includes traceback

Records go to the standard "decompscene" logger. A host application (a level
browser, a status bar) can receive the formatted text through set_callback().
"""

import logging
import traceback
from typing import Callable, Optional

_logger = logging.getLogger("decompscene")
_logger.addHandler(logging.NullHandler())


def debug(msg_or_exc, context: str = ""):
    """Log debug message or exception with context."""
    if isinstance(msg_or_exc, BaseException):
        _log_exception(_logger.debug, msg_or_exc, context)
    else:
        _logger.debug(str(msg_or_exc))


def info(msg_or_exc, context: str = ""):
    """Log info message or exception with context."""
    if isinstance(msg_or_exc, BaseException):
        _log_exception(_logger.info, msg_or_exc, context)
    else:
        _logger.info(str(msg_or_exc))


def warn(msg_or_exc, context: str = ""):
    """Log warning message or exception with context."""
    if isinstance(msg_or_exc, BaseException):
        _log_exception(_logger.warning, msg_or_exc, context)
    else:
        _logger.warning(str(msg_or_exc))


def warning(msg_or_exc, context: str = ""):
    """Alias for warn()."""
    warn(msg_or_exc, context)


def error(msg_or_exc, context: str = ""):
    """Log error message or exception with context."""
    if isinstance(msg_or_exc, BaseException):
        _log_exception(_logger.error, msg_or_exc, context)
    else:
        _logger.error(str(msg_or_exc))


def exception(msg: str = ""):
    """Log error with current exception traceback."""
    _logger.exception(msg)


def _log_exception(log_func, exc: BaseException, context: str):
    """Format and log exception with traceback."""
    exc_type = type(exc).__name__
    exc_msg = str(exc)

    # Get traceback if available
    tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    if context:
        full_msg = f"{context}: {exc_type}: {exc_msg}\n{tb}"
    else:
        full_msg = f"{exc_type}: {exc_msg}\n{tb}"

    log_func(full_msg)


def set_level(level) -> None:
    """Set minimum level ("DEBUG", "INFO", ... or a logging constant)."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    _logger.setLevel(level)


class _CallbackHandler(logging.Handler):
    def __init__(self, callback: Callable[[str, str], None]):
        super().__init__()
        self.callback = callback

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.callback(record.levelname, self.format(record))
        except Exception:
            self.handleError(record)


_callback_handler: Optional[_CallbackHandler] = None


def set_callback(callback: Optional[Callable[[str, str], None]]) -> None:
    """Route every record to callback(level_name, message). None removes it."""
    global _callback_handler
    if _callback_handler is not None:
        _logger.removeHandler(_callback_handler)
        _callback_handler = None
    if callback is not None:
        _callback_handler = _CallbackHandler(callback)
        _logger.addHandler(_callback_handler)
