"""Shared constants for seqguard."""

from __future__ import annotations

EXPECTED_STEP_COUNT = 3
INCOMPLETE_SEQUENCE_MESSAGE = "Transaction dropped before completion"
ENV_PREFIX = "SEQGUARD_"
