#!/usr/bin/env python3
"""
Speller Configuration & Logging Module
======================================
Centralized configuration, structured logging, and error types.

Version: reads from version.json
"""

import os
import sys
import json
import logging
import uuid
import time
import functools
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Callable
from pathlib import Path
from dataclasses import dataclass, field
from contextlib import contextmanager
import threading

# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================
MAX_WORD_LENGTH = 45                # Longest word in the dictionary or the text
DEFAULT_BUCKETS = 65521             # Hash table size (prime, ~2 words/bucket at 143k)
DEFAULT_DICTIONARY = 'dictionaries/large'
DEFAULT_MAX_TEXT_MB = 5             # Max request body for the HTTP API
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024  # 5MB max per log file
LOG_BACKUP_COUNT = 5                # Number of log backup files to keep

DEFAULT_MAX_TEXT_BYTES = DEFAULT_MAX_TEXT_MB * 1024 * 1024

# =============================================================================
# VERSION - Read from version.json (Single Source of Truth)
# =============================================================================
def _load_version():
    """Load version from version.json file."""
    version_file = Path(__file__).parent / 'version.json'
    try:
        with open(version_file, 'r', encoding='utf-8') as f:
            return json.load(f).get('version', '1.0.0')
    except (OSError, ValueError):
        return '1.0.0'

__version__ = _load_version()
VERSION = __version__
APP_NAME = "Speller"

# =============================================================================
# ENVIRONMENT CONFIGURATION
# =============================================================================

def _env_flag(name: str, default: str = 'false') -> bool:
    return os.environ.get(name, default).lower() == 'true'


@dataclass
class SpellerConfig:
    """Speller configuration with sensible defaults."""

    # Dictionary
    dictionary_path: str = DEFAULT_DICTIONARY
    n_buckets: int = DEFAULT_BUCKETS

    # HTTP API
    host: str = "127.0.0.1"  # Localhost only by default
    port: int = 5060
    max_text_bytes: int = DEFAULT_MAX_TEXT_BYTES

    # Paths
    base_dir: Path = field(default_factory=lambda: Path(__file__).parent)
    log_dir: Path = field(default_factory=lambda: Path(__file__).parent / 'logs')

    # Logging
    log_level: str = "WARNING"
    log_format: str = "text"  # Options: json, text
    log_to_file: bool = False
    log_to_console: bool = True

    def __post_init__(self):
        if self.log_to_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_env(cls) -> 'SpellerConfig':
        """Load configuration from environment variables."""
        return cls(
            dictionary_path=os.environ.get('SPELLER_DICTIONARY', DEFAULT_DICTIONARY),
            n_buckets=int(os.environ.get('SPELLER_BUCKETS', str(DEFAULT_BUCKETS))),
            host=os.environ.get('SPELLER_HOST', '127.0.0.1'),
            port=int(os.environ.get('SPELLER_PORT', '5060')),
            max_text_bytes=int(os.environ.get('SPELLER_MAX_TEXT', str(DEFAULT_MAX_TEXT_BYTES))),
            log_level=os.environ.get('SPELLER_LOG_LEVEL', 'WARNING'),
            log_format=os.environ.get('SPELLER_LOG_FORMAT', 'text'),
            log_to_file=_env_flag('SPELLER_LOG_FILE'),
        )

    def resolve_dictionary(self, path: Optional[str] = None) -> Path:
        """Resolve a dictionary path; relative paths fall back to base_dir."""
        candidate = Path(path or self.dictionary_path)
        if candidate.is_absolute() or candidate.exists():
            return candidate
        return self.base_dir / candidate

    def validate(self) -> tuple:
        """Validate configuration and return (is_valid, errors)."""
        errors = []

        if self.n_buckets < 1:
            errors.append("Bucket count must be at least 1")

        if self.log_format not in ('json', 'text'):
            errors.append(f"Invalid log_format: {self.log_format}. Must be 'json' or 'text'")

        if not isinstance(getattr(logging, self.log_level.upper(), None), int):
            errors.append(f"Invalid log_level: {self.log_level}")

        if self.max_text_bytes <= 0:
            errors.append("Max text size must be positive")

        return (len(errors) == 0, errors)


# Global config instance
_config: Optional[SpellerConfig] = None

def get_config() -> SpellerConfig:
    """Get or create the global configuration."""
    global _config
    if _config is None:
        _config = SpellerConfig.from_env()
    return _config


def reset_config():
    """Reset the global configuration (for testing)."""
    global _config
    _config = None


# =============================================================================
# STRUCTURED LOGGING
# =============================================================================

class StructuredLogger:
    """Thread-safe structured logger with correlation IDs."""

    _local = threading.local()

    def __init__(self, name: str, config: Optional[SpellerConfig] = None):
        self.name = name
        self.config = config or get_config()
        self._setup_logger()

    def _setup_logger(self):
        """Configure the underlying Python logger."""
        self.logger = logging.getLogger(self.name)
        self.logger.setLevel(getattr(logging, self.config.log_level.upper()))
        self.logger.handlers.clear()

        if self.config.log_format == 'json':
            formatter = JsonFormatter()
        else:
            formatter = logging.Formatter(
                '%(asctime)s [%(levelname)s] %(name)s - %(message)s'
            )

        # Console goes to stderr so stdout stays clean for reports
        if self.config.log_to_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        if self.config.log_to_file:
            from logging.handlers import RotatingFileHandler
            log_file = self.config.log_dir / f"{self.name.lower()}.log"
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_BACKUP_COUNT,
                encoding='utf-8'
            )
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    @classmethod
    def set_correlation_id(cls, correlation_id: str):
        """Set correlation ID for current thread."""
        cls._local.correlation_id = correlation_id

    @classmethod
    def get_correlation_id(cls) -> str:
        """Get correlation ID for current thread."""
        return getattr(cls._local, 'correlation_id', None) or str(uuid.uuid4())[:8]

    @classmethod
    def new_correlation_id(cls) -> str:
        """Generate and set a new correlation ID."""
        correlation_id = str(uuid.uuid4())[:12]
        cls.set_correlation_id(correlation_id)
        return correlation_id

    def _build_log_record(self, level: str, message: str, **kwargs) -> Dict[str, Any]:
        """Build a structured log record."""
        return {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': level,
            'logger': self.name,
            'correlation_id': self.get_correlation_id(),
            'message': message,
            **kwargs
        }

    def _render(self, level: str, message: str, **kwargs) -> str:
        if self.config.log_format == 'json':
            return json.dumps(self._build_log_record(level, message, **kwargs), default=str)
        return message

    def debug(self, message: str, **kwargs):
        """Log debug message."""
        self.logger.debug(self._render('DEBUG', message, **kwargs), extra=kwargs)

    def info(self, message: str, **kwargs):
        """Log info message."""
        self.logger.info(self._render('INFO', message, **kwargs), extra=kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message."""
        self.logger.warning(self._render('WARNING', message, **kwargs), extra=kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs):
        """Log error message with optional exception info."""
        if exc_info and self.config.log_format == 'json':
            import traceback
            kwargs['traceback'] = traceback.format_exc()
        self.logger.error(self._render('ERROR', message, **kwargs), exc_info=exc_info, extra=kwargs)

    def exception(self, message: str, **kwargs):
        """Log exception with full traceback."""
        self.error(message, exc_info=True, **kwargs)

    @contextmanager
    def log_operation(self, operation: str, **context):
        """Context manager for logging operation start/end with timing."""
        start_time = time.time()
        self.debug(f"{operation} started", operation=operation, status='started', **context)
        try:
            yield
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            self.error(f"{operation} failed: {e}", operation=operation, status='failed',
                       duration_ms=round(duration_ms, 2), **context)
            raise
        duration_ms = (time.time() - start_time) * 1000
        self.info(f"{operation} completed", operation=operation, status='completed',
                  duration_ms=round(duration_ms, 2), **context)


class JsonFormatter(logging.Formatter):
    """JSON log formatter for records not built by StructuredLogger."""

    _RESERVED = frozenset((
        'name', 'msg', 'args', 'created', 'filename', 'funcName',
        'levelname', 'levelno', 'lineno', 'module', 'msecs',
        'pathname', 'process', 'processName', 'relativeCreated',
        'stack_info', 'thread', 'threadName', 'exc_info', 'exc_text',
        'message', 'taskName',
    ))

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if message.startswith('{'):
            # Already structured by StructuredLogger
            return message

        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': message,
        }

        if record.exc_info:
            log_data['traceback'] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in self._RESERVED:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance."""
    return StructuredLogger(name, get_config())


# =============================================================================
# ERROR HANDLING UTILITIES
# =============================================================================

class SpellerError(Exception):
    """Base exception for Speller."""

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR",
                 status_code: int = 500, details: Optional[Dict] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to API response dict."""
        return {
            'success': False,
            'error': {
                'code': self.code,
                'message': self.message,
                'details': self.details
            }
        }


class SourceUnavailableError(SpellerError):
    """Dictionary or text source cannot be opened or read."""
    def __init__(self, message: str, source: Optional[str] = None, **kwargs):
        super().__init__(message, code="SOURCE_UNAVAILABLE", status_code=503,
                         details={'source': source, **kwargs})


class AllocationError(SpellerError):
    """Backing storage for the dictionary could not be obtained."""
    def __init__(self, message: str, loaded: int = 0, **kwargs):
        super().__init__(message, code="ALLOCATION_FAILURE", status_code=507,
                         details={'loaded': loaded, **kwargs})


class TeardownError(SpellerError):
    """Dictionary storage could not be fully released."""
    def __init__(self, message: str, **kwargs):
        super().__init__(message, code="TEARDOWN_FAILURE", status_code=500, details=kwargs)


class DictionaryStateError(SpellerError):
    """Dictionary used out of its load/unload lifecycle."""
    def __init__(self, message: str, **kwargs):
        super().__init__(message, code="DICTIONARY_STATE", status_code=409, details=kwargs)


class ValidationError(SpellerError):
    """Input validation error."""
    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        super().__init__(message, code="VALIDATION_ERROR", status_code=400,
                         details={'field': field, **kwargs})


def handle_errors(logger: Optional[StructuredLogger] = None):
    """Decorator for standardized error handling."""
    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            _logger = logger or get_logger(func.__module__)
            try:
                return func(*args, **kwargs)
            except SpellerError:
                raise
            except (FileNotFoundError, PermissionError, UnicodeDecodeError) as e:
                _logger.error(f"Source unavailable: {e}")
                raise SourceUnavailableError(f"Source unavailable: {e}") from e
            except MemoryError as e:
                _logger.error("Out of memory", exc_info=True)
                raise AllocationError("Out of memory") from e
            except ValueError as e:
                _logger.warning(f"Validation error: {e}")
                raise ValidationError(str(e)) from e
        return wrapper
    return decorator
