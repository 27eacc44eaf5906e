"""
Logging Configuration - Centralized logging setup

Cung cấp logging nhất quán cho toàn bộ package.
Console handler luôn bật; file log chỉ bật khi GLM_TOKENS_LOG_DIR được set.

File logging:
- Log rotation (max 5 files, 2MB each)
- Buffered writes (reduce disk I/O)
"""

import logging
import logging.handlers
import sys
from typing import Optional

from glm_tokens.config import paths
from glm_tokens.config.paths import APP_NAME

# Logger singleton
_logger: Optional[logging.Logger] = None

# Log rotation config
MAX_LOG_SIZE = 2 * 1024 * 1024  # 2MB per file
MAX_LOG_FILES = 5  # Keep 5 backup files
BUFFER_CAPACITY = 100  # Buffer 100 log records before flush


def _level() -> int:
    return logging.DEBUG if paths.DEBUG_MODE else logging.INFO


def get_logger() -> logging.Logger:
    """
    Get hoặc tạo logger singleton.

    Returns:
        Configured logger instance
    """
    global _logger

    if _logger is not None:
        return _logger

    _logger = logging.getLogger(APP_NAME)
    _logger.setLevel(_level())

    # Avoid duplicate handlers
    if _logger.handlers:
        return _logger

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(_level())
    console_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    _logger.addHandler(console_handler)

    if paths.LOG_DIR is None:
        return _logger

    try:
        paths.LOG_DIR.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            paths.LOG_DIR / f"{APP_NAME}.log",
            maxBytes=MAX_LOG_SIZE,
            backupCount=MAX_LOG_FILES,
            encoding="utf-8",
        )
        file_handler.setLevel(_level())
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s (%(threadName)s): %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

        # Wrap with MemoryHandler for buffered writes
        memory_handler = logging.handlers.MemoryHandler(
            capacity=BUFFER_CAPACITY,
            flushLevel=logging.ERROR,  # Flush immediately on ERROR
            target=file_handler,
        )
        memory_handler.setLevel(_level())
        _logger.addHandler(memory_handler)

    except OSError as e:
        _logger.warning(f"Could not create log file: {e}")

    return _logger


def flush_logs() -> None:
    """
    Flush buffered logs to disk.
    Call this before process exit to ensure all logs are written.
    """
    if _logger:
        for handler in _logger.handlers:
            try:
                handler.flush()
            except Exception:
                pass  # Ignore errors during shutdown


def set_debug_mode(enabled: bool) -> None:
    """
    Enable or disable debug mode at runtime.

    Args:
        enabled: True to enable DEBUG level logging
    """
    paths.DEBUG_MODE = enabled

    if _logger:
        new_level = _level()
        _logger.setLevel(new_level)
        for handler in _logger.handlers:
            handler.setLevel(new_level)


def log_error(message: str, exc: Optional[BaseException] = None) -> None:
    """Log error với optional exception details"""
    logger = get_logger()
    if exc:
        logger.error(f"{message}: {exc}", exc_info=paths.DEBUG_MODE)
    else:
        logger.error(message)


def log_warning(message: str) -> None:
    """Log warning"""
    get_logger().warning(message)


def log_info(message: str) -> None:
    """Log info"""
    get_logger().info(message)


def log_debug(message: str) -> None:
    """Log debug - only written if DEBUG_MODE is enabled"""
    if paths.DEBUG_MODE:
        get_logger().debug(message)
