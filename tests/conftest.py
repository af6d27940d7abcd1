from __future__ import annotations

from collections.abc import Iterator
import logging
from pathlib import Path

import pytest

from seqguard.config.env import OVERRIDE_REGISTRY
from seqguard.utilities.logger_manager import LoggerConfig, LoggerManager


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep SEQGUARD_* variables from the developer shell out of tests."""
    for spec in OVERRIDE_REGISTRY:
        monkeypatch.delenv(spec.env_var, raising=False)


@pytest.fixture
def logger_manager(
    tmp_path: Path, request: pytest.FixtureRequest
) -> Iterator[LoggerManager]:
    name = f"seqguard.test.{request.node.name}"
    manager = LoggerManager(
        name, LoggerConfig(log_dir=tmp_path / "logs", log_level="DEBUG")
    )
    yield manager
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger._seqguard_configured = False  # type: ignore[attr-defined]
