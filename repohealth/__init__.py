"""Deterministic repository health scoring and policy evaluation."""

from __future__ import annotations

__version__ = "0.1.0"
