"""
Simple component-bound logging for mountconfig.
"""

import os
import sys
import time
import traceback
from contextlib import contextmanager
from typing import Optional

from loguru import logger as loguru_logger


LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {extra[component]} | {message}"


def _get_debug_mode() -> bool:
    """Read debug mode from the environment."""
    return os.getenv("MOUNTCONFIG_DEBUG", "false").lower() == "true"


def _get_level() -> str:
    if _get_debug_mode():
        return "DEBUG"
    return os.getenv("MOUNTCONFIG_LOG_LEVEL", "WARNING").upper()


class ComponentLogger:
    """
    Logger bound to a component name.

    Format: timestamp | level | component | message
    Plain text, no emojis, no JSON.
    """

    # Single sink shared by every instance
    _handler_id: Optional[int] = None

    def __init__(self, component: str, debug_mode: bool = False):
        self.component = component
        self.debug_mode = debug_mode
        self._setup_handler()

    def _setup_handler(self):
        """
        Install the stderr sink once per process.

        Only messages bound to a component are accepted so the sink does not
        pick up logs of host applications that also use loguru.
        """
        if ComponentLogger._handler_id is None:
            ComponentLogger._handler_id = loguru_logger.add(
                sys.stderr,
                format=LOG_FORMAT,
                level=_get_level(),
                filter=lambda record: "component" in record["extra"],
            )

    def log(self, level: str, message: str, **context):
        loguru_logger.bind(component=self.component, **context).log(level, message)

    def debug(self, message: str, **context):
        """Log at DEBUG."""
        self.log("DEBUG", message, **context)

    def info(self, message: str, **context):
        """Log at INFO."""
        self.log("INFO", message, **context)

    def warning(self, message: str, **context):
        """Log at WARNING."""
        self.log("WARNING", message, **context)

    def error(self, message: str, include_trace: Optional[bool] = None, **context):
        """
        Log at ERROR with an optional stack trace.

        Args:
            message: Error message
            include_trace: Attach the current traceback (None = follow debug_mode)
            **context: Extra context
        """
        should_include_trace = include_trace if include_trace is not None else self.debug_mode

        if should_include_trace:
            context["stack_trace"] = traceback.format_exc()

        self.log("ERROR", message, **context)


class PerformanceLogger:
    """
    Logger for timing operations.

    Records the duration of the wrapped block at DEBUG.
    """

    def __init__(self):
        self.logger = ComponentLogger("performance")

    @contextmanager
    def measure(self, operation: str, **context):
        """
        Context manager that times an operation.

        Usage:
        ```
        with perf_logger.measure("load_file", file_name="appsettings.json"):
            provider.load()
        ```
        """
        start = time.perf_counter()
        try:
            yield
        finally:
            duration = time.perf_counter() - start
            self.logger.debug(
                "Operation completed", operation=operation, duration_ms=duration * 1000, **context
            )


logger = ComponentLogger("mountconfig", debug_mode=_get_debug_mode())
perf_logger = PerformanceLogger()
