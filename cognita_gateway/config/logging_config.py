"""
Logging configuration.

Console logging for every environment: a human readable format during local
development and one JSON object per line everywhere else so log shippers can
index the provider/model/user fields the gateway attaches via ``extra``.
"""

import json
import logging
import sys

from cognita_gateway.config.config import Config

logger = logging.getLogger(__name__)

# Record attributes copied into the JSON payload when present
_EXTRA_FIELDS = ("provider", "model", "strategy", "user_id", "latency_ms", "status")


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Formats log records as JSON with the gateway's request metadata.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field_name in _EXTRA_FIELDS:
            value = getattr(record, field_name, None)
            if value is not None:
                log_data[field_name] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def configure_logging(level: str | None = None) -> None:
    """
    Configure application logging.

    Sets up:
    - Console handler on stdout
    - Plain format in development, JSON elsewhere
    - Quieter levels for noisy HTTP libraries

    Args:
        level: Root log level name; defaults to Config.LOG_LEVEL
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level or Config.LOG_LEVEL)

    # Clear existing handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)

    if Config.IS_DEVELOPMENT:
        console_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    else:
        console_formatter = StructuredFormatter()

    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    # Set log levels for noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("hpack").setLevel(logging.WARNING)

    logger.info(f"Console logging configured (environment: {Config.APP_ENV})")
