"""
Logging configuration using Loguru.

Store code logs fixed message templates and passes caller data as
positional arguments or bound context, never pre-formatted into the
message. Bound note context (user_id, thread_id, note_id, note_ids) is
rendered after the message on every sink.
"""

import sys
from pathlib import Path

from loguru import logger

# Bound keys rendered in the console/file line, in this order
CONTEXT_KEYS = ("user_id", "thread_id", "note_id", "note_ids")

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[module]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[module]}:{function}:{line} - {message}"
)


def _render_context(record) -> None:
    """Patcher: collapse bound note context into extra["context"]."""
    extra = record["extra"]
    extra.setdefault("module", record["name"])
    parts = [f"{key}={extra[key]}" for key in CONTEXT_KEYS if key in extra]
    extra["context"] = " ".join(parts)


def _formatter(template: str):
    def format_record(record) -> str:
        # Records from loggers not created by get_logger have no context yet
        if "context" not in record["extra"]:
            _render_context(record)
        # Markup is stripped on sinks without colorize
        suffix = " <dim>[{extra[context]}]</dim>" if record["extra"]["context"] else ""
        return template + suffix + "\n{exception}"

    return format_record


def setup_logging(
    level: str = "INFO",
    log_to_file: bool = True,
    log_dir: str = "logs",
    file_rotation: str = "10 MB",
    file_retention: str = "7 days",
    compression: str = "zip",
    serialize: bool = True,
) -> None:
    """
    Configure Loguru sinks for ThreadNotes.

    The console sink shows bound note context after each message. The file
    sink rotates and, when serialize is set, writes JSON records whose
    "extra" carries the same context as structured fields.
    """
    logger.remove()

    logger.add(
        sys.stderr,
        level=level,
        format=_formatter(CONSOLE_FORMAT),
        colorize=True,
    )

    if log_to_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path / "threadnotes_{time:YYYY-MM-DD}.log",
            level=level,
            format=_formatter(FILE_FORMAT),
            rotation=file_rotation,
            retention=file_retention,
            compression=compression,
            serialize=serialize,
            enqueue=True,
        )


def get_logger(name: str, **context):
    """
    Get a logger for a module, optionally with note context bound.

    Args:
        name: Module name
        **context: Initial bound fields (user_id, note_id, ...)

    Returns:
        Loguru logger; further .bind() calls keep the context rendering
    """
    return logger.bind(module=name, **context).patch(_render_context)
