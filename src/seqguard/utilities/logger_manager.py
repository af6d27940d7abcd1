"""Logger manager with colored console output, structured records, and counters.

Every seqguard component logs through a ``LoggerManager`` so guard firings,
step progress, and detached-task failures land in one place with the same
format. Metrics are simple in-process counters and gauges; they exist so tests
and the CLI can observe how many steps and sequences completed.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
import datetime
from enum import Enum
import json
import logging
from logging import Handler, Logger, LogRecord, getLevelName
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys
import threading
from typing import Any, ClassVar

import colorlog


class MetricType(Enum):
    """Enum for supported metric types."""

    COUNTER = "counter"
    GAUGE = "gauge"


@dataclass
class LoggerConfig:
    """Configuration for LoggerManager."""

    log_dir: Path | None = None
    log_level: str = "INFO"
    log_file_name: str = "seqguard.log"
    max_file_size_mb: int = 10
    backup_count: int = 3
    structured_logging: bool = False
    telemetry_enabled: bool = True
    log_colors: dict[str, str] = field(default_factory=dict)

    DEFAULT_LOG_COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "cyan",
        "INFO": "green",
        "WARNING": "yellow",
        "ERROR": "red",
        "CRITICAL": "red,bg_white",
    }

    def __post_init__(self) -> None:
        self.log_level = self.log_level.upper()
        if self.log_dir is not None:
            self.log_dir = Path(self.log_dir).resolve()
            self.log_dir.mkdir(parents=True, exist_ok=True)
        self.log_colors = self.log_colors or dict(self.DEFAULT_LOG_COLORS)


class StructuredFormatter(logging.Formatter):
    """Render records as single-line JSON including the ``context`` extra."""

    def format(self, record: LogRecord) -> str:
        log_data = {
            "timestamp": datetime.datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
            "context": getattr(record, "context", {}),
        }
        return json.dumps(log_data, ensure_ascii=False, default=str)


class LoggerManager:
    """Owns one configured ``logging.Logger`` plus in-process metrics."""

    def __init__(
        self,
        name: str | LoggerConfig = "seqguard",
        config: LoggerConfig | None = None,
    ) -> None:
        if isinstance(name, LoggerConfig):
            config = name
            name = "seqguard"
        self.name = name
        self.config = config or LoggerConfig()
        self._metrics: dict[str, dict[str, Any]] = defaultdict(
            lambda: {"type": MetricType.COUNTER.value, "value": 0, "tags": {}}
        )
        self._metrics_lock = threading.Lock()
        self._logger = self._configure_logger()

    def get_logger(self) -> Logger:
        """Return the configured logger."""
        return self._logger

    def _console_handler(self) -> Handler:
        handler = colorlog.StreamHandler(sys.stderr)
        if self.config.structured_logging:
            handler.setFormatter(StructuredFormatter())
        else:
            handler.setFormatter(
                colorlog.ColoredFormatter(
                    "%(log_color)s%(asctime)s - [%(levelname)s] %(name)s: %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                    log_colors=self.config.log_colors,
                )
            )
        return handler

    def _file_handler(self) -> Handler | None:
        if self.config.log_dir is None:
            return None
        file_path = self.config.log_dir / self.config.log_file_name
        try:
            handler = RotatingFileHandler(
                file_path,
                maxBytes=self.config.max_file_size_mb * 1024 * 1024,
                backupCount=self.config.backup_count,
                encoding="utf-8",
            )
        except OSError as e:
            print(f"Failed to create RotatingFileHandler: {e}", file=sys.stderr)
            return None
        handler.setFormatter(
            StructuredFormatter()
            if self.config.structured_logging
            else logging.Formatter(
                "%(asctime)s - [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        return handler

    def _configure_logger(self) -> Logger:
        logger = logging.getLogger(self.name)
        logger.setLevel(getLevelName(self.config.log_level))
        if getattr(logger, "_seqguard_configured", False):
            return logger

        logger.addHandler(self._console_handler())
        file_handler = self._file_handler()
        if file_handler:
            logger.addHandler(file_handler)
        logger.propagate = False
        logger._seqguard_configured = True  # type: ignore[attr-defined]
        return logger

    @contextmanager
    def context(self, **context_kwargs: Any) -> Iterator[logging.LoggerAdapter[Logger]]:
        """Yield an adapter that attaches ``context_kwargs`` to every record."""
        yield logging.LoggerAdapter(self._logger, {"context": context_kwargs})

    def log_metric(
        self,
        metric_name: str,
        value: int | float = 1,
        metric_type: MetricType = MetricType.COUNTER,
        tags: Mapping[str, str] | None = None,
    ) -> None:
        """Record a counter increment or gauge value."""
        if not self.config.telemetry_enabled:
            return
        tags_dict = dict(tags or {})
        with self._metrics_lock:
            metric = self._metrics[metric_name]
            metric["type"] = metric_type.value
            metric["tags"] = tags_dict
            if metric_type == MetricType.COUNTER:
                metric["value"] += value
            else:
                metric["value"] = value
        self._logger.debug(
            f"Metric recorded: {metric_name} = {value}",
            extra={"context": {"metric": metric_name, "tags": tags_dict}},
        )

    def get_metrics(self) -> dict[str, dict[str, Any]]:
        """Return a snapshot of collected metrics."""
        with self._metrics_lock:
            return {name: dict(data) for name, data in self._metrics.items()}

    def metric_value(self, metric_name: str) -> int | float:
        with self._metrics_lock:
            if metric_name not in self._metrics:
                return 0
            return self._metrics[metric_name]["value"]

    def reset_metrics(self) -> None:
        """Reset all metrics."""
        with self._metrics_lock:
            self._metrics.clear()
        self._logger.debug("Metrics reset", extra={"context": {"stage": "reset"}})

    def set_level(self, log_level: str) -> None:
        """Change the level of the managed logger."""
        self.config.log_level = log_level.upper()
        self._logger.setLevel(getLevelName(self.config.log_level))

    def flush(self) -> None:
        """Flush all handlers so pending records reach their sinks."""
        for handler in self._logger.handlers:
            handler.flush()


_default_manager: LoggerManager | None = None
_default_lock = threading.Lock()


def get_default_logger_manager(log_level: str | None = None) -> LoggerManager:
    """Return the process-wide manager, creating it on first use.

    ``log_level`` only applies when the manager is created; an existing
    manager keeps whatever level it was given.
    """
    global _default_manager
    with _default_lock:
        if _default_manager is None:
            _default_manager = LoggerManager(
                "seqguard", LoggerConfig(log_level=log_level or "INFO")
            )
        return _default_manager
