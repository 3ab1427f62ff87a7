#!/usr/bin/env python3
"""
Centralized Logging Manager for docstore-query

Library code only creates loggers; handlers are attached when a log
directory is configured through DOCSTORE_QUERY_LOG_DIR.
"""

import os
import logging
import logging.handlers
import json
from pathlib import Path
from typing import Optional, Dict, Any

LOGGER_PREFIX = "docstore-query"


class LoggingManager:
    """
    Manages logging for all docstore-query components.

    Features:
    - Component-scoped logger names (docstore-query.<component>.<name>)
    - Optional file output with rotation when DOCSTORE_QUERY_LOG_DIR is set
    - Separate error.log for ERROR and above
    - Debug mode support via DOCSTORE_QUERY_DEBUG
    """

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize the logging manager (singleton)"""
        if not self._initialized:
            log_dir = os.environ.get('DOCSTORE_QUERY_LOG_DIR')
            self.log_dir = Path(log_dir) if log_dir else None
            self.debug_mode = os.environ.get('DOCSTORE_QUERY_DEBUG', '').lower() in ('1', 'true', 'yes')
            self.loggers = {}
            self._initialized = True

            if self.log_dir is not None:
                self.log_dir.mkdir(parents=True, exist_ok=True)

    def get_logger(self, name: str, component: Optional[str] = None) -> logging.Logger:
        """
        Get or create a logger for a specific component.

        Args:
            name: Logger name (e.g., 'PaginationService')
            component: Component category ('service', 'db', None for main)

        Returns:
            Configured logger instance
        """
        logger_key = f"{component}.{name}" if component else name

        if logger_key in self.loggers:
            return self.loggers[logger_key]

        logger = logging.getLogger(f"{LOGGER_PREFIX}.{logger_key}")
        if self.debug_mode:
            logger.setLevel(logging.DEBUG)

        if self.log_dir is not None:
            self._attach_file_handlers(logger, name)

        self.loggers[logger_key] = logger
        return logger

    def _attach_file_handlers(self, logger: logging.Logger, name: str):
        """Add rotating file and error handlers"""
        file_handler = logging.handlers.RotatingFileHandler(
            self.log_dir / f"{name.lower()}.log",
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )

        if self.debug_mode:
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
        else:
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            self.log_dir / 'error.log',
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )
        error_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d]\n%(message)s\n',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        error_handler.setLevel(logging.ERROR)
        logger.addHandler(error_handler)

    def log_with_context(self, logger: logging.Logger, level: int, message: str,
                         context: Optional[Dict[str, Any]] = None, exc_info: bool = False):
        """
        Log a message with additional context.

        Args:
            logger: Logger instance
            level: Log level
            message: Log message
            context: Additional context dict
            exc_info: Attach the active exception's traceback
        """
        if context:
            context_str = json.dumps(context, default=str)
            full_message = f"{message} | Context: {context_str}"
        else:
            full_message = message

        logger.log(level, full_message, exc_info=exc_info)


# Singleton instance
_logging_manager = None


def get_logging_manager() -> LoggingManager:
    """Get the singleton LoggingManager instance"""
    global _logging_manager
    if _logging_manager is None:
        _logging_manager = LoggingManager()
    return _logging_manager


def get_logger(name: str, component: Optional[str] = None) -> logging.Logger:
    """
    Convenience function to get a logger.

    Args:
        name: Logger name
        component: Component type ('service', 'db', or None)

    Returns:
        Configured logger
    """
    return get_logging_manager().get_logger(name, component)


# Library loggers stay silent unless the application configures output
logging.getLogger(LOGGER_PREFIX).addHandler(logging.NullHandler())
