"""Shared enums and aliases used across batchline."""

from batchline.types.base import LineControl, SessionPhase

__all__ = ["LineControl", "SessionPhase"]
