"""Application layer: pipeline orchestration."""

from .process import ReturnNotificationOperation

__all__ = ["ReturnNotificationOperation"]
