"""
Logging configuration for the css_split library.

This module provides centralized logging configuration with support for:
- User-facing messages (what got split, where the files went)
- Developer debug logs (chunk boundaries, hook registration, timings)
- Console and rotating file output, as text or JSON lines
"""

import json
import logging
import logging.handlers
import sys
from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class LogLevel(Enum):
    """Logging levels with user-friendly names."""
    SILENT = "silent"      # Only critical errors
    MINIMAL = "minimal"    # Bare messages, no timestamps
    NORMAL = "normal"      # Standard logging for users
    VERBOSE = "verbose"    # Timings and per-asset details
    DEBUG = "debug"        # Full debugging information


@dataclass
class LogConfig:
    """Configuration for logging behavior."""
    level: LogLevel = LogLevel.NORMAL
    console_output: bool = True
    file_output: bool = False
    log_file: Optional[Path] = None
    collect_performance: bool = False
    format_json: bool = False
    include_module_names: bool = True
    max_file_size: int = 10 * 1024 * 1024
    backup_count: int = 3

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        result = asdict(self)
        result['level'] = self.level.value
        if self.log_file:
            result['log_file'] = str(self.log_file)
        return result


_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class SplitLogger:
    """Centralized logger for the css_split library."""

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._initialized = True
        self.config = LogConfig()
        self.performance_logs: List[Dict[str, Any]] = []
        self.session_id = datetime.now().strftime("%Y%m%d_%H%M%S")
        self._handlers: List[logging.Handler] = []

    def configure(self, config: Optional[LogConfig] = None, **kwargs) -> None:
        """
        Configure logging behavior.

        Args:
            config: LogConfig object with settings
            **kwargs: Individual config parameters
        """
        if config:
            self.config = config

        config_dict = {
            'level': self.config.level,
            'console_output': self.config.console_output,
            'file_output': self.config.file_output,
            'log_file': self.config.log_file,
            'collect_performance': self.config.collect_performance,
            'format_json': self.config.format_json,
            'include_module_names': self.config.include_module_names,
            'max_file_size': self.config.max_file_size,
            'backup_count': self.config.backup_count
        }

        for key, value in kwargs.items():
            if key not in config_dict:
                raise ValueError(f"Unknown logging option: {key}")
            if key == 'level' and isinstance(value, str):
                value = LogLevel(value.lower())
            elif key == 'log_file' and value:
                value = Path(value)
            config_dict[key] = value

        self.config = LogConfig(**config_dict)
        self._configure_logging()

    def _configure_logging(self) -> None:
        """Set up the package logger based on current configuration."""
        package_logger = logging.getLogger("css_split")
        for handler in self._handlers:
            package_logger.removeHandler(handler)
            handler.close()
        self._handlers = []

        level = self._get_python_log_level(self.config.level)
        package_logger.setLevel(level)

        if self.config.format_json:
            formatter: logging.Formatter = JsonFormatter()
        else:
            formatter = self._create_text_formatter()

        if self.config.console_output:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(formatter)
            console_handler.setLevel(level)
            self._handlers.append(console_handler)

        if self.config.file_output and self.config.log_file:
            self.config.log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                self.config.log_file,
                maxBytes=self.config.max_file_size,
                backupCount=self.config.backup_count,
                encoding='utf-8'
            )
            file_handler.setFormatter(formatter)
            file_handler.setLevel(level)
            self._handlers.append(file_handler)

        for handler in self._handlers:
            package_logger.addHandler(handler)

    def get_logger(self, name: str) -> logging.Logger:
        """
        Get a logger instance for the specified module.

        Args:
            name: Module name (usually __name__)

        Returns:
            Logger instance
        """
        return logging.getLogger(name)

    def user_info(self, message: str, **kwargs) -> None:
        """Log user-facing informational message."""
        if self.config.level != LogLevel.SILENT:
            logger = self.get_logger('css_split.user')
            logger.info(message, extra={'user_message': True, **kwargs})

    def user_success(self, message: str, **kwargs) -> None:
        """Log user-facing success message."""
        if self.config.level != LogLevel.SILENT:
            logger = self.get_logger('css_split.user')
            logger.info(f"✅ {message}", extra={'user_message': True, **kwargs})

    def user_warning(self, message: str, **kwargs) -> None:
        """Log user-facing warning message."""
        logger = self.get_logger('css_split.user')
        logger.warning(f"⚠️  {message}", extra={'user_message': True, **kwargs})

    def user_error(self, message: str, **kwargs) -> None:
        """Log user-facing error message."""
        logger = self.get_logger('css_split.user')
        logger.error(f"❌ {message}", extra={'user_message': True, **kwargs})

    def debug_operation(self, operation: str, details: Dict[str, Any], **kwargs) -> None:
        """Log detailed operation information for debugging."""
        if self.config.level == LogLevel.DEBUG:
            logger = self.get_logger('css_split.debug')
            logger.debug(f"🔧 {operation}: {details}", extra={'operation': operation, 'details': details, **kwargs})

    def performance_log(self, operation: str, duration: float, **kwargs) -> None:
        """Log and optionally collect timing information."""
        perf_data = {
            'timestamp': datetime.now().isoformat(),
            'operation': operation,
            'duration_seconds': duration,
            'session_id': self.session_id,
            **kwargs
        }
        if self.config.collect_performance:
            self.performance_logs.append(perf_data)

        if self.config.level in [LogLevel.VERBOSE, LogLevel.DEBUG]:
            logger = self.get_logger('css_split.performance')
            logger.info(f"⏱️  {operation}: {duration:.3f}s", extra=perf_data)

    def _get_python_log_level(self, level: LogLevel) -> int:
        """Convert our log level to Python logging level."""
        mapping = {
            LogLevel.SILENT: logging.CRITICAL,
            LogLevel.MINIMAL: logging.INFO,
            LogLevel.NORMAL: logging.INFO,
            LogLevel.VERBOSE: logging.INFO,
            LogLevel.DEBUG: logging.DEBUG,
        }
        return mapping.get(level, logging.INFO)

    def _create_text_formatter(self) -> logging.Formatter:
        """Create human-readable text formatter."""
        if self.config.level == LogLevel.MINIMAL:
            fmt = '%(message)s'
        elif self.config.include_module_names and self.config.level == LogLevel.DEBUG:
            fmt = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        elif self.config.include_module_names:
            fmt = '%(asctime)s - %(levelname)s - %(message)s'
        else:
            fmt = '%(asctime)s - %(message)s'

        return logging.Formatter(fmt, datefmt='%Y-%m-%d %H:%M:%S')


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging output."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'module': record.name,
            'message': record.getMessage(),
            'filename': record.filename,
            'line_number': record.lineno,
            'function': record.funcName
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        extra_fields = {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}
        if extra_fields:
            log_data.update(extra_fields)

        return json.dumps(log_data, default=str)


# Global logger instance
_logger = SplitLogger()


def get_logger(name: str = "css_split") -> logging.Logger:
    """
    Get a logger for the css_split library.

    Args:
        name: Module name (usually __name__)

    Returns:
        Logger instance
    """
    return _logger.get_logger(name)


def configure_logging(level: Union[str, LogLevel] = LogLevel.NORMAL, **kwargs) -> None:
    """
    Configure library-wide logging.

    Args:
        level: Logging level
        **kwargs: Additional LogConfig fields
    """
    if isinstance(level, str):
        level = LogLevel(level.lower())

    _logger.configure(level=level, **kwargs)


def user_info(message: str, **kwargs) -> None:
    """Log user-facing informational message."""
    _logger.user_info(message, **kwargs)


def user_success(message: str, **kwargs) -> None:
    """Log user-facing success message."""
    _logger.user_success(message, **kwargs)


def user_warning(message: str, **kwargs) -> None:
    """Log user-facing warning message."""
    _logger.user_warning(message, **kwargs)


def user_error(message: str, **kwargs) -> None:
    """Log user-facing error message."""
    _logger.user_error(message, **kwargs)


def debug_operation(operation: str, details: Dict[str, Any], **kwargs) -> None:
    """Log detailed operation information for debugging."""
    _logger.debug_operation(operation, details, **kwargs)


def performance_log(operation: str, duration: float, **kwargs) -> None:
    """Log timing information."""
    _logger.performance_log(operation, duration, **kwargs)
