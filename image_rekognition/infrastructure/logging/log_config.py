"""
Unified logging configuration for the image recognition service.
Provides singleton pattern to ensure single configuration.
"""
import logging
import sys
import json
from typing import Optional
from datetime import datetime, timezone

from image_rekognition.config.settings import runtime_settings

LOGGER_NAMESPACE = "image-rekognition"


class JSONFormatter(logging.Formatter):
    """JSON formatter for CloudWatch structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "service": runtime_settings.service_name,
            "environment": runtime_settings.environment
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        if hasattr(record, 'extra_fields'):
            log_entry.update(record.extra_fields)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Human-readable formatter for development."""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'RESET': '\033[0m'
    }

    def format(self, record: logging.LogRecord) -> str:
        level_color = self.COLORS.get(record.levelname, '')
        reset_color = self.COLORS['RESET']
        colored_level = f"{level_color}{record.levelname}{reset_color}"

        formatter = logging.Formatter(f"%(asctime)s - %(name)s - {colored_level} - %(message)s")
        line = formatter.format(record)

        # Appended after formatting so values containing % are left alone
        if hasattr(record, 'extra_fields'):
            extra_str = " | ".join([f"{k}={v}" for k, v in record.extra_fields.items()])
            line += f" | {extra_str}"
        return line


class LoggingManager:
    """Singleton manager for logging configuration."""

    _instance: Optional['LoggingManager'] = None
    _configured: bool = False

    def __new__(cls) -> 'LoggingManager':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def _configure_logging(self) -> None:
        """Unified logging configuration."""
        if self._configured:
            return

        log_level = getattr(logging, runtime_settings.log_level.upper(), logging.INFO)

        if runtime_settings.is_production:
            formatter: logging.Formatter = JSONFormatter()
        else:
            formatter = DevelopmentFormatter()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)

        app_logger = logging.getLogger(LOGGER_NAMESPACE)
        app_logger.setLevel(log_level)
        app_logger.addHandler(console_handler)
        app_logger.propagate = False

        self._configure_third_party_loggers()

        self._configured = True

        app_logger.debug("Logging configuration initialized", extra={
            'extra_fields': {
                "environment": runtime_settings.environment,
                "log_level": logging.getLevelName(log_level),
                "formatter": "json" if runtime_settings.is_production else "development"
            }
        })

    def _configure_third_party_loggers(self) -> None:
        """Reduce noise from AWS SDK and HTTP libraries."""
        for logger_name in ["boto3", "botocore", "urllib3", "s3transfer"]:
            logger = logging.getLogger(logger_name)
            if logger.level < logging.WARNING:
                logger.setLevel(logging.WARNING)

    def get_logger(self, name: str) -> logging.Logger:
        """Get a configured logger instance under the service namespace."""
        self._configure_logging()

        if not name.startswith(LOGGER_NAMESPACE):
            name = f"{LOGGER_NAMESPACE}.{name}"

        return logging.getLogger(name)


# Singleton instance
logging_manager = LoggingManager()


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically __name__ or component name)

    Returns:
        Configured logger instance under the image-rekognition namespace

    Example:
        logger = get_logger("DetectionWorker")
        # Results in logger named: "image-rekognition.DetectionWorker"
    """
    return logging_manager.get_logger(name)
