"""Autopilot module lifecycle."""

from autopilot.modules.base import AutopilotModule

__all__ = [
    "AutopilotModule",
]
