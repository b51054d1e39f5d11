import logging
from dataclasses import dataclass, field
from enum import StrEnum

import orjson
import structlog
from asgi_correlation_id import correlation_id
from beartype import beartype

from upload_intake.core.settings import settings


class LoggerError(Exception):
    """Exception for logger related issues."""


class LogLevel(StrEnum):
    """LogLevel types for logger configuration."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogIcon(StrEnum):
    """Icon mappings for intake log categories."""

    DEFAULT = "📋"

    # Status & Results
    SUCCESS = "✅"
    ERROR = "❌"
    WARNING = "⚠️"

    # Operations
    START = "🚀"
    DETECTION = "🔍"
    VALIDATION = "✓"
    CONFIG = "🔧"

    # Data & Content
    IMAGE = "🖼️"
    FILE = "📄"
    JSON = "📝"
    UPLOAD = "📤"
    DATA_URI = "🔗"

    # Security
    SECURITY = "🔒"
    SANITIZE = "🧹"


@dataclass
class LoggerConfig:
    """Logger configuration with debug-specific settings."""
    debug: bool = field(default_factory=lambda: settings.DEBUG)
    app_name: str = field(default=settings.SERVICE_NAME)
    log_level: LogLevel = field(default_factory=lambda: LogLevel(settings.LOG_LEVEL))


def add_correlation_id(logger, method_name: str, event_dict: dict) -> dict:
    """Add correlation_id to event_dict when the caller runs inside a request."""
    request_id = correlation_id.get()
    if request_id:
        event_dict["correlation_id"] = request_id
    return event_dict


def add_service(app_name: str):
    """Build a processor stamping every event with the service name and version."""

    def _processor(logger, method_name: str, event_dict: dict) -> dict:
        event_dict.setdefault("service", app_name)
        event_dict.setdefault("version", settings.SERVICE_VERSION)
        return event_dict

    return _processor


class EventShapeProcessor:
    """
    Normalize log events before rendering.

    - Event messages are upper-cased and cut at 80 characters.
    - The `icon` kwarg, if given, must be a LogIcon member.
    - Icons are only prepended in debug mode.
    """

    max_length = 80

    def __init__(self, debug: bool) -> None:
        self.debug = debug

    @beartype
    def __call__(self, logger, name: str, event_dict: dict) -> dict:
        try:
            event = str(event_dict.get("event", ""))[: self.max_length].upper()
            icon = LogIcon(event_dict.pop("icon", LogIcon.DEFAULT))
        except ValueError as err:
            raise LoggerError("Wrong icon chosen, please choose a valid LogIcon member") from err

        event_dict["event"] = f"{icon.value} {event}" if self.debug else event
        return event_dict


def dev_pipeline_renderer(logger, name: str, event_dict: dict) -> str:
    """Render log events in human-readable format with pipe-separated fields."""
    reserved_keys = {"timestamp", "level", "event", "filename", "lineno"}

    timestamp = event_dict.get("timestamp", "")
    level = event_dict.get("level", LogLevel.INFO.value).upper()
    event = event_dict.get("event", "")
    filename = event_dict.get("filename", "")
    lineno = event_dict.get("lineno", "")

    location = f"{filename}:{lineno}" if filename else ""
    extra = " | ".join(f"{k}={v}" for k, v in event_dict.items() if k not in reserved_keys)

    return " | ".join(filter(None, [timestamp, level, event, extra, location]))


def setup_logging(config: LoggerConfig) -> None:
    """Configure structlog for the intake layer."""
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
            additional_ignores=["logger"],
        ),
        EventShapeProcessor(debug=config.debug),
    ]

    if config.debug:
        processors = shared_processors + [dev_pipeline_renderer]
    else:
        processors = shared_processors + [
            add_correlation_id,
            add_service(config.app_name),
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(serializer=orjson.dumps),
        ]

    structlog.configure(
        processors=processors,
        logger_factory=structlog.PrintLoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelNamesMapping()[config.log_level]),
        cache_logger_on_first_use=True,
    )


setup_logging(LoggerConfig())

logger = structlog.get_logger()
