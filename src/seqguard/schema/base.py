"""Shared Pydantic base class with consistent configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class FrozenModel(BaseModel):
    """Immutable base for settings and trace records.

    Unknown fields are rejected so a typo in a config file or environment
    override fails validation instead of being silently ignored.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")
