"""Logging helpers for femtologging integration.

All tether modules log through these helpers so that messages are
pre-formatted with percent-style interpolation before reaching femtologging.
Event handlers receive an :class:`EventLogger`, which tags every line with the
webhook event name and delivery id.

Example:
>>> from tether.logging import get_logger, log_info
>>> logger = get_logger(__name__)
>>> log_info(logger, "Handled %s", "issues.opened")

"""

from __future__ import annotations

import enum
import typing as typ

from femtologging import basicConfig, get_logger


class LogLevel(enum.StrEnum):
    """Supported log levels for femtologging."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def normalize_log_level(level: str | None) -> tuple[str, bool]:
    """Normalize a log level string and report invalid inputs.

    Parameters
    ----------
    level : str | None
        Raw log level string to normalize.

    Returns
    -------
    tuple[str, bool]
        The normalized log level and a flag indicating invalid input.

    """
    if not level:
        return ("INFO", True)

    normalized = level.strip().upper()
    if normalized in LogLevel.__members__:
        return (normalized, False)

    return ("INFO", True)


def configure_logging(level: str, *, force: bool = False) -> tuple[str, bool]:
    """Configure femtologging and return the normalized level.

    Parameters
    ----------
    level : str
        Raw log level string to normalize.
    force : bool, optional
        Whether to replace any existing handler configuration.

    Returns
    -------
    tuple[str, bool]
        The normalized log level and a flag indicating invalid input.

    """
    normalized, invalid = normalize_log_level(level)
    basicConfig(level=normalized, force=force)
    return (normalized, invalid)


def format_log_message(template: str, *args: object) -> str:
    """Format a log message using percent-style interpolation.

    Without arguments the template is returned untouched, so literal ``%``
    characters in pre-formatted messages survive.
    """
    if not args:
        return template
    return template % args


class SupportsLog(typ.Protocol):
    """Protocol for femtologging-compatible loggers."""

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str | None: ...


def _log_at_level(
    logger: SupportsLog,
    level: str,
    message: str,
    *,
    exc_info: object | None = None,
) -> None:
    logger.log(level, message, exc_info=exc_info, stack_info=False)


def log_debug(
    logger: SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log a DEBUG message with percent-style formatting."""
    _log_at_level(
        logger, "DEBUG", format_log_message(template, *args), exc_info=exc_info
    )


def log_info(
    logger: SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log an INFO message with percent-style formatting.

    Parameters
    ----------
    logger : SupportsLog
        Logger that receives the formatted message.
    template : str
        Message template using percent-style placeholders.
    *args : object
        Values to interpolate into the template.
    exc_info : object | None, optional
        Exception information to attach to the log record.

    """
    _log_at_level(
        logger, "INFO", format_log_message(template, *args), exc_info=exc_info
    )


def log_warning(
    logger: SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log a WARNING message with percent-style formatting."""
    _log_at_level(
        logger, "WARNING", format_log_message(template, *args), exc_info=exc_info
    )


def log_error(
    logger: SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log an ERROR message with percent-style formatting."""
    _log_at_level(
        logger, "ERROR", format_log_message(template, *args), exc_info=exc_info
    )


def log_exception(logger: SupportsLog, message: str, exc: BaseException) -> None:
    """Log an exception at ERROR level with exc_info wired into femtologging."""
    _log_at_level(logger, "ERROR", message, exc_info=exc)


class EventLogger:
    """Logger bound to a single webhook delivery.

    Every message is prefixed with ``[<event name> <delivery id>]`` so log
    lines emitted by handler code can be correlated with the delivery that
    triggered them.

    Examples
    --------
    >>> log = EventLogger(get_logger("tether.app"), event="push", delivery_id="42")
    >>> log.info("received %d commits", 3)

    """

    def __init__(
        self,
        logger: SupportsLog,
        *,
        event: str,
        delivery_id: str,
    ) -> None:
        """Bind the wrapped logger to an event name and delivery id."""
        self._logger = logger
        self.event = event
        self.delivery_id = delivery_id

    @property
    def target(self) -> str:
        """Return the prefix attached to every message."""
        return f"[{self.event} {self.delivery_id}]"

    def _emit(
        self,
        level: str,
        template: str,
        args: tuple[object, ...],
        exc_info: object | None,
    ) -> None:
        message = f"{self.target} {format_log_message(template, *args)}"
        _log_at_level(self._logger, level, message, exc_info=exc_info)

    def debug(
        self, template: str, *args: object, exc_info: object | None = None
    ) -> None:
        """Log a DEBUG message for this delivery."""
        self._emit("DEBUG", template, args, exc_info)

    def info(
        self, template: str, *args: object, exc_info: object | None = None
    ) -> None:
        """Log an INFO message for this delivery."""
        self._emit("INFO", template, args, exc_info)

    def warning(
        self, template: str, *args: object, exc_info: object | None = None
    ) -> None:
        """Log a WARNING message for this delivery."""
        self._emit("WARNING", template, args, exc_info)

    def error(
        self, template: str, *args: object, exc_info: object | None = None
    ) -> None:
        """Log an ERROR message for this delivery."""
        self._emit("ERROR", template, args, exc_info)

    def exception(self, message: str, exc: BaseException) -> None:
        """Log an exception for this delivery."""
        self._emit("ERROR", message, (), exc)

    __call__ = info


__all__ = [
    "EventLogger",
    "LogLevel",
    "SupportsLog",
    "configure_logging",
    "format_log_message",
    "get_logger",
    "log_debug",
    "log_error",
    "log_exception",
    "log_info",
    "log_warning",
    "normalize_log_level",
]
