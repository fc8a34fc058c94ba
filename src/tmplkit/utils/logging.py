"""
Logging utilities with structured formatting.
"""
import json
import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def __init__(self, **kwargs):
        """Initialize with optional fields."""
        self.additional_fields = kwargs
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }

        # Render context if available
        if hasattr(record, "template"):
            log_data["template"] = record.template
        if hasattr(record, "templater"):
            log_data["templater"] = record.templater

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info)
            }

        log_data.update(self.additional_fields)

        return json.dumps(log_data)


class TemplaterLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds render context to log records."""

    def process(self, msg, kwargs):
        """Add context to log records."""
        kwargs.setdefault("extra", {}).update(self.extra)
        return msg, kwargs


def configure_logging(config: Union[Dict[str, Any], Any]) -> None:
    """
    Configure root logging with plain or structured formatting.

    Args:
        config: Configuration dictionary or TemplaterConfiguration
    """
    if not isinstance(config, dict):
        config = config.model_dump()

    log_level = getattr(logging, str(config.get("log_level", "INFO")).upper(), logging.INFO)
    log_file = config.get("log_file")
    use_json = config.get("structured_logging", False)
    max_bytes = config.get("log_max_bytes", 10 * 1024 * 1024)  # 10 MB
    backup_count = config.get("log_backup_count", 5)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handlers = [logging.StreamHandler(sys.stderr)]

    if log_file:
        log_path = Path(log_file)
        if log_path.parent != Path("."):
            log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count
        ))

    if use_json:
        formatter = JsonFormatter(application="tmplkit")
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
        )

    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    logging.debug(f"Logging configured with level: {logging.getLevelName(log_level)}")


def get_logger(name: str, **context) -> Union[logging.Logger, logging.LoggerAdapter]:
    """
    Get a logger with context.

    Args:
        name: Logger name
        **context: Additional context fields

    Returns:
        Logger with context
    """
    logger = logging.getLogger(name)

    if context:
        return TemplaterLoggerAdapter(logger, context)

    return logger


def get_render_logger(
    name: str,
    template: Optional[str] = None,
    templater: Optional[str] = None,
    **context
) -> logging.LoggerAdapter:
    """
    Get a logger carrying the template being rendered.

    Args:
        name: Logger name
        template: Template name
        templater: Identifier of the owning templater
        **context: Additional context fields

    Returns:
        Logger with render context
    """
    extra = {}

    if template:
        extra["template"] = template
    if templater:
        extra["templater"] = templater

    extra.update(context)

    return TemplaterLoggerAdapter(logging.getLogger(name), extra)
