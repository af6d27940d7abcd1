"""Loads sequence overrides from the environment and optional `.env` files."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from seqguard.constants import ENV_PREFIX

logger = logging.getLogger("seqguard.config")


@dataclass(frozen=True)
class EnvOverrideSpec:
    """Maps one environment variable onto a settings field."""

    field: str
    env_var: str
    description: str


OVERRIDE_REGISTRY: tuple[EnvOverrideSpec, ...] = (
    EnvOverrideSpec("step_count", f"{ENV_PREFIX}STEP_COUNT", "Steps per sequence"),
    EnvOverrideSpec("step_delay", f"{ENV_PREFIX}STEP_DELAY", "Seconds per step"),
    EnvOverrideSpec(
        "fatal_action", f"{ENV_PREFIX}FATAL_ACTION", "raise or abort on interruption"
    ),
    EnvOverrideSpec("log_level", f"{ENV_PREFIX}LOG_LEVEL", "Logger level name"),
)


def load_environment(dotenv_path: str | Path | None = None) -> bool:
    """Load a `.env` file when available; return whether one was loaded.

    A missing default `.env` is normal; a missing explicit path is logged.
    """
    path = Path(dotenv_path) if dotenv_path else Path(".env")
    if not path.exists():
        if dotenv_path:
            logger.warning(f"Env file not found at {dotenv_path}, skipping")
        return False
    return load_dotenv(dotenv_path=path)


def env_overrides() -> dict[str, Any]:
    """Return the settings fields set through ``SEQGUARD_*`` variables.

    Values are returned as raw strings; validation happens when they are
    merged into ``SequenceSettings``.
    """
    overrides: dict[str, Any] = {}
    for spec in OVERRIDE_REGISTRY:
        value = os.getenv(spec.env_var)
        if value is not None and value.strip():
            overrides[spec.field] = value.strip()
    return overrides


__all__ = [
    "OVERRIDE_REGISTRY",
    "EnvOverrideSpec",
    "env_overrides",
    "load_environment",
]
