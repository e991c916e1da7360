"""
Logging setup for the lutube video hosting service.

Console output is colored, the log file rotates by size, and lutube's own
loggers follow the configured level while uvicorn and fastapi stay quiet
unless running at DEBUG.
"""

import logging
import logging.handlers
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"

# Third-party loggers and their level outside DEBUG
QUIET_LOGGERS = {"uvicorn": logging.WARNING, "uvicorn.access": logging.WARNING, "fastapi": logging.WARNING}


class ColoredFormatter(logging.Formatter):
    """Wraps the level name in an ANSI color"""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)

        # The file handler formats the same record object
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


class LutubeLogger:
    """Installs lutube's console and rotating file handlers on the root logger"""

    def __init__(self, log_level: str = "INFO", log_file: Optional[str] = None,
                 max_bytes: int = 10 * 1024 * 1024, backup_count: int = 5):
        self.log_level = log_level.upper()
        level = logging.getLevelName(self.log_level)
        self.level = level if isinstance(level, int) else logging.INFO
        self.log_file = log_file
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.handlers: List[logging.Handler] = []

        self._install()

    def _install(self) -> None:
        root_logger = logging.getLogger()
        root_logger.setLevel(self.level)
        root_logger.handlers.clear()

        self.handlers.append(self._console_handler())
        if self.log_file:
            file_handler = self._file_handler()
            if file_handler is not None:
                self.handlers.append(file_handler)

        for handler in self.handlers:
            root_logger.addHandler(handler)

        self._tune_component_loggers()
        logging.getLogger(__name__).info(f"Logging initialized - Level: {self.log_level}, File: {self.log_file}")

    def _console_handler(self) -> logging.Handler:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(self.level)
        handler.setFormatter(ColoredFormatter(CONSOLE_FORMAT))
        return handler

    def _file_handler(self) -> Optional[logging.Handler]:
        """Rotating handler that records everything down to DEBUG"""
        path = Path(self.log_file)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.handlers.RotatingFileHandler(path, maxBytes=self.max_bytes, backupCount=self.backup_count, encoding="utf-8")
        except OSError as e:
            print(f"Warning: could not open log file {path}: {e}", file=sys.stderr)
            return None

        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(FILE_FORMAT))
        return handler

    def _tune_component_loggers(self) -> None:
        debugging = self.level <= logging.DEBUG
        logging.getLogger("lutube").setLevel(logging.DEBUG if debugging else logging.INFO)
        for name, quiet_level in QUIET_LOGGERS.items():
            logging.getLogger(name).setLevel(logging.INFO if debugging else quiet_level)


def install_exception_hook() -> None:
    """Send uncaught exceptions (except Ctrl+C) to the log"""

    def handle_exception(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logging.getLogger("uncaught_exception").critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))

    sys.excepthook = handle_exception


class PerformanceLogger:
    """Times named operations; several can be in flight at once"""

    def __init__(self, name: str):
        self.logger = logging.getLogger(f"performance.{name}")
        self._started: Dict[str, float] = {}

    def start_timer(self, operation: str) -> None:
        self._started[operation] = time.monotonic()
        self.logger.debug(f"Started: {operation}")

    def end_timer(self, operation: str, succeeded: bool = True) -> float:
        """Log how long an operation took and return the duration in seconds"""
        started = self._started.pop(operation, None)
        if started is None:
            self.logger.warning(f"Timer not started for: {operation}")
            return 0.0

        duration = time.monotonic() - started
        if succeeded:
            self.logger.info(f"Completed: {operation} in {duration:.3f}s")
        else:
            self.logger.warning(f"Failed: {operation} after {duration:.3f}s")
        return duration


class ErrorTracker:
    """Logs errors with context and counts them per context"""

    def __init__(self, component_name: str):
        self.component_name = component_name
        self.logger = logging.getLogger(f"errors.{component_name}")
        self.error_count = 0
        self.errors_by_context: Dict[str, int] = {}
        self.last_error_time: Optional[datetime] = None

    def _describe(self, kind: str, context: str, message) -> str:
        where = f"{self.component_name} ({context})" if context else self.component_name
        return f"{kind} in {where}: {message}"

    def log_error(self, error: Exception, context: str = "", additional_data: Optional[dict] = None) -> None:
        self.error_count += 1
        key = context or "unspecified"
        self.errors_by_context[key] = self.errors_by_context.get(key, 0) + 1
        self.last_error_time = datetime.now()

        message = self._describe("Error", context, error)
        if additional_data:
            message += f" | Data: {additional_data}"
        self.logger.error(message, exc_info=error)

    def log_warning(self, message: str, context: str = "") -> None:
        self.logger.warning(self._describe("Warning", context, message))

    def get_error_stats(self) -> dict:
        return {
            "component": self.component_name,
            "error_count": self.error_count,
            "errors_by_context": dict(self.errors_by_context),
            "last_error_time": self.last_error_time.isoformat() if self.last_error_time else None,
        }


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None,
                  max_bytes: int = 10 * 1024 * 1024, backup_count: int = 5) -> LutubeLogger:
    """Configure logging for the whole process"""
    logger_setup = LutubeLogger(log_level=log_level, log_file=log_file, max_bytes=max_bytes, backup_count=backup_count)
    install_exception_hook()
    return logger_setup


def get_performance_logger(component_name: str) -> PerformanceLogger:
    return PerformanceLogger(component_name)


def get_error_tracker(component_name: str) -> ErrorTracker:
    return ErrorTracker(component_name)
