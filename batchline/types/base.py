"""Base enums and type aliases for the reporting pipeline."""

from __future__ import annotations

from enum import IntEnum
from typing import Union

from rich.text import Text

#: Identifier of a connected agent (typically a browser user-agent string).
AgentId = str

#: A single printable fragment: plain text or a styled ``rich.text.Text``.
Part = Union[str, Text]

#: Literal result marker carried by a failing test leaf.
FAIL_MARKER = "fail"


class LineControl(IntEnum):
    """Control requests understood by a rewritable line handle."""

    #: Erase the current terminal line and return the cursor to column zero.
    CLEAR_LINE = 1


class SessionPhase(IntEnum):
    """Lifecycle of a reporting session.

    ``IDLE -> DISPATCHED -> RUNNING -> COMPLETED``; ``ABORTED`` is entered
    instead of ``DISPATCHED`` when no agents connected.
    """

    IDLE = 1
    DISPATCHED = 2
    RUNNING = 3
    COMPLETED = 4
    ABORTED = 5

    @property
    def is_terminal(self) -> bool:
        """True when no further events are meaningful."""
        return self in (SessionPhase.COMPLETED, SessionPhase.ABORTED)
