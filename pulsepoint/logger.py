"""Central logging setup for PulsePoint."""

from __future__ import annotations

import gzip
import json
import logging
import os
import shutil
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, NoReturn

_LOGGER_NAME = "pulsepoint"
_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "dpanic": logging.CRITICAL,
    "panic": logging.CRITICAL,
    "fatal": logging.CRITICAL,
}

_logger: "_FieldAdapter | None" = None


def _default_output_path() -> str:
    return str(Path.home() / ".pulsepoint" / "logs" / "pulsepoint.log")


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"
    output_path: str = field(default_factory=_default_output_path)
    max_size: int = 100  # megabytes
    max_backups: int = 5
    max_age: int = 30  # days
    compress: bool = True
    development: bool = False
    enable_json: bool = False


def default_config() -> LogConfig:
    """Return the default logging configuration."""
    return LogConfig()


class _FieldAdapter(logging.LoggerAdapter):
    """Adapter that carries structured fields with each record."""

    def process(self, msg, kwargs):
        fields = dict(self.extra or {})
        fields.update(kwargs.pop("fields", None) or {})
        kwargs["extra"] = {"fields": fields}
        kwargs.setdefault("stacklevel", 3)
        return msg, kwargs


def _iso_time(record: logging.LogRecord) -> str:
    return datetime.fromtimestamp(record.created, timezone.utc).astimezone().isoformat(timespec="milliseconds")


class _ConsoleFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        parts = [
            _iso_time(record),
            record.levelname,
            f"{record.filename}:{record.lineno}",
            record.getMessage(),
        ]
        fields = getattr(record, "fields", None)
        if fields:
            parts.append(json.dumps(fields, default=str))
        text = "\t".join(parts)
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


class _JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "level": record.levelname,
            "timestamp": _iso_time(record),
            "logger": record.name,
            "caller": f"{record.filename}:{record.lineno}",
            "msg": record.getMessage(),
        }
        data.update(getattr(record, "fields", None) or {})
        if record.exc_info:
            data["stacktrace"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


def _gzip_rotator(source: str, dest: str) -> None:
    with open(source, "rb") as src, gzip.open(dest, "wb") as dst:
        shutil.copyfileobj(src, dst)
    os.remove(source)


def initialize(cfg: LogConfig) -> None:
    """Configure the global logger from ``cfg``."""
    global _logger
    level = _LEVELS.get(cfg.level.strip().lower(), logging.INFO)

    if cfg.enable_json:
        formatter: logging.Formatter = _JSONFormatter()
    else:
        formatter = _ConsoleFormatter()

    Path(cfg.output_path).parent.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        cfg.output_path,
        maxBytes=max(cfg.max_size, 0) * 1024 * 1024,
        backupCount=cfg.max_backups,
        encoding="utf-8",
    )
    if cfg.compress:
        file_handler.namer = lambda name: name + ".gz"
        file_handler.rotator = _gzip_rotator
    handlers: list[logging.Handler] = [file_handler]
    if cfg.development:
        handlers.append(logging.StreamHandler(sys.stdout))

    base = logging.getLogger(_LOGGER_NAME)
    for old in list(base.handlers):
        base.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        base.addHandler(handler)
    base.setLevel(level)
    base.propagate = False

    _logger = _FieldAdapter(base, {})


def get_logger() -> logging.LoggerAdapter:
    """Return the global logger, initialising it with defaults if needed."""
    if _logger is None:
        initialize(default_config())
    assert _logger is not None
    return _logger


def sync() -> None:
    """Flush buffered log entries."""
    if _logger is not None:
        for handler in _logger.logger.handlers:
            handler.flush()


def debug(msg: str, **kwargs: Any) -> None:
    get_logger().debug(msg, fields=kwargs)


def info(msg: str, **kwargs: Any) -> None:
    get_logger().info(msg, fields=kwargs)


def warn(msg: str, **kwargs: Any) -> None:
    get_logger().warning(msg, fields=kwargs)


def error(msg: str, **kwargs: Any) -> None:
    get_logger().error(msg, fields=kwargs)


def fatal(msg: str, **kwargs: Any) -> NoReturn:
    """Log at the highest level and exit the program."""
    get_logger().critical(msg, fields=kwargs)
    sync()
    raise SystemExit(1)


def with_correlation_id(correlation_id: str) -> logging.LoggerAdapter:
    """Return a logger that adds a correlation_id field to every entry."""
    base = get_logger()
    return _FieldAdapter(base.logger, {"correlation_id": correlation_id})