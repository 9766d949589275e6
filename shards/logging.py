"""Logging utilities for shards commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "shards"
_NO_DOCUMENT = "-"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the shards hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def document_logger(name: str, document: str) -> logging.LoggerAdapter:
    """Return a logger whose records carry the document being processed."""
    return logging.LoggerAdapter(get_logger(name), {"document": document})


class _DocumentFilter(logging.Filter):
    """Give every record a ``document`` attribute so formats can rely on it."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "document", None):
            record.document = _NO_DOCUMENT
        return True


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the shards logger with console output and optional file sink.

    Console lines read ``[shards] LEVEL document: message``; the file sink adds
    timestamps and logger names. Records logged without a document show ``-``.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    document_filter = _DocumentFilter()
    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.addFilter(document_filter)
    stream_handler.setFormatter(
        logging.Formatter("[shards] %(levelname)s %(document)s: %(message)s")
    )
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.addFilter(document_filter)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s [%(document)s]: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "document_logger", "get_logger"]
