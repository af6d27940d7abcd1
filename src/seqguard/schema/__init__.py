"""Schema package exposing settings and trace models."""

from __future__ import annotations

from .base import FrozenModel
from .models import SequenceSettings, StepRecord

__all__ = ["FrozenModel", "SequenceSettings", "StepRecord"]
