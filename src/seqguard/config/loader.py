"""Builds validated ``SequenceSettings`` from defaults, YAML and environment."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from seqguard.config.defaults import SEQUENCE_DEFAULTS
from seqguard.config.env import env_overrides
from seqguard.schema.models import SequenceSettings

logger = logging.getLogger("seqguard.config")


def load_config_file(config_path: str | Path) -> dict[str, Any]:
    """Read the ``sequence`` section of a YAML config file.

    A missing file yields an empty mapping. A file may either hold the
    settings at top level or nest them under a ``sequence`` key.
    """
    path = Path(config_path)
    if not path.exists():
        logger.warning(f"Config file not found at {config_path}, using defaults")
        return {}
    with open(path, encoding="utf-8") as file:
        config = yaml.safe_load(file) or {}
    if not isinstance(config, dict):
        raise ValueError(
            f"Config file must contain a mapping, got {type(config).__name__}"
        )
    section = config.get("sequence", config)
    if not isinstance(section, dict):
        raise ValueError("The 'sequence' section must be a mapping")
    return dict(section)


def load_settings(
    config_path: str | Path | None = None,
    **overrides: Any,
) -> SequenceSettings:
    """Merge defaults, the optional config file, environment and overrides.

    Later sources win: defaults < file < ``SEQGUARD_*`` variables < keyword
    overrides. ``None`` keyword values are ignored.
    """
    merged: dict[str, Any] = dict(SEQUENCE_DEFAULTS)
    if config_path is not None:
        merged.update(load_config_file(config_path))
    merged.update(env_overrides())
    merged.update({key: value for key, value in overrides.items() if value is not None})
    return SequenceSettings(**merged)
