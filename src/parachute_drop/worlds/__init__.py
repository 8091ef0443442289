"""Scene generation package."""

from __future__ import annotations

from .meadow import (
    MeadowConfig,
    MeadowGenerator,
    create_meadow_scene,
)

__all__ = [
    "MeadowConfig",
    "MeadowGenerator",
    "create_meadow_scene",
]
