"""
Elfscope Structured Logger
==========================

:class:`ToolLogger` binds a stdlib :class:`logging.Logger` named
``elfscope.<tool>`` to two optional sinks:

* a Rich console handler on stderr, and
* a size-rotated log file, written as plain text or as JSON lines.

Each record is stamped with the tool name and the operation that was
active when it was emitted (``"load"``, ``"decode"``, ...).  The active
operation is tracked per thread, since the engine decodes several files
at once in executor threads.

References:
    - Python logging HOWTO. https://docs.python.org/3/howto/logging.html
    - Rich library. https://github.com/Textualize/rich
"""

from __future__ import annotations

import json
import logging
import threading
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterator

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

_STDERR_THEME = Theme(
    {
        "log.level.debug": "dim cyan",
        "log.level.info": "bold bright_blue",
        "log.level.warning": "bold yellow",
        "log.level.error": "bold red",
    }
)

_TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(operation)s | %(message)s"


class JsonLinesFormatter(logging.Formatter):
    """One JSON object per record.

    Keys: ``timestamp``, ``level``, ``logger``, ``message``, ``tool_name``,
    ``operation`` and, for records logged with keyword context, ``context``.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "tool_name": getattr(record, "tool_name", None),
            "operation": getattr(record, "operation", None),
        }
        context = getattr(record, "context", None)
        if context:
            payload["context"] = context
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _stderr_handler(level: int) -> logging.Handler:
    handler = RichHandler(
        console=Console(theme=_STDERR_THEME, stderr=True),
        level=level,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    return handler


def _file_handler(
    path: Path, level: int, *, json_lines: bool, max_bytes: int, backup_count: int
) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    handler.setLevel(level)
    if json_lines:
        handler.setFormatter(JsonLinesFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z"))
    return handler


class ToolLogger:
    """Logging facade for one elfscope component.

    Usage::

        log = ToolLogger("engine", log_file="elfscope.log", json_logs=True)
        with log.operation("decode"):
            log.info("Decoded %s", path, phnum=3)

    Keyword arguments other than ``exc_info`` / ``stack_info`` given to
    the log methods are attached to the record as ``context``.

    Args:
        tool_name: Component name, appended to the ``elfscope.`` logger.
        log_level: Minimum severity name.
        log_file: Rotating log file; ``None`` disables file logging.
        json_logs: Write the log file as JSON lines.
        max_bytes: Rotation threshold of the log file.
        backup_count: Rotated files kept.
        console_output: Attach the Rich stderr handler.
    """

    def __init__(
        self,
        tool_name: str,
        *,
        log_level: str = "INFO",
        log_file: str | Path | None = None,
        json_logs: bool = False,
        max_bytes: int = 10_485_760,
        backup_count: int = 5,
        console_output: bool = True,
    ) -> None:
        self._tool_name = tool_name
        self._local = threading.local()

        level = logging.getLevelName(log_level.upper())
        if not isinstance(level, int):
            level = logging.INFO

        self._logger = logging.getLogger(f"elfscope.{tool_name}")
        self._logger.setLevel(level)
        self._logger.propagate = False
        for old in list(self._logger.handlers):
            self._logger.removeHandler(old)
            old.close()

        if console_output:
            self._logger.addHandler(_stderr_handler(level))
        if log_file is not None:
            self._logger.addHandler(
                _file_handler(
                    Path(log_file), level,
                    json_lines=json_logs, max_bytes=max_bytes, backup_count=backup_count,
                )
            )

    # ------------------------------------------------------------------ #
    #  Context
    # ------------------------------------------------------------------ #

    @contextmanager
    def operation(self, name: str) -> Iterator[ToolLogger]:
        """Stamp records emitted inside the block with *name*."""
        previous = getattr(self._local, "operation", None)
        self._local.operation = name
        try:
            yield self
        finally:
            self._local.operation = previous

    @contextmanager
    def timed(self, label: str) -> Iterator[None]:
        """Log *label* at DEBUG on entry and with its duration on exit."""
        start = time.perf_counter()
        self.debug("Started: %s", label)
        try:
            yield
        finally:
            self.debug("Completed: %s (%.3f sec)", label, time.perf_counter() - start)

    # ------------------------------------------------------------------ #
    #  Emitters
    # ------------------------------------------------------------------ #

    def _log(self, level: int, msg: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        exc_info = kwargs.pop("exc_info", None)
        stack_info = kwargs.pop("stack_info", False)
        extra = {
            "tool_name": self._tool_name,
            "operation": getattr(self._local, "operation", None),
            "context": kwargs or None,
        }
        self._logger.log(
            level, msg, *args,
            exc_info=exc_info, stack_info=stack_info, extra=extra, stacklevel=3,
        )

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, args, kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, args, kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, args, kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, args, kwargs)
