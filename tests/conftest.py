"""Global pytest configuration.

Provides a recording ``Output`` sink and a manual clock so reporter tests can
assert on exact printed lines and deterministic durations.
"""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

import pytest

from batchline.model.batch import Batch
from batchline.report.session import SessionController
from batchline.types.base import LineControl
from batchline.utils.clock import ManualClock


class RecordingLine:
    """Line handle that records every write."""

    def __init__(self, is_terminal: bool = False):
        self.is_terminal = is_terminal
        self.writes: List[Tuple[Optional[str], Optional[LineControl]]] = []

    def write(self, text: Optional[str], control: Optional[LineControl] = None) -> None:
        self.writes.append((text, control))

    @property
    def texts(self) -> List[str]:
        return [text for text, _ in self.writes if text]


class RecordingOutput:
    """Output sink that keeps printed lines as plain strings.

    ``panic`` and ``exit`` record instead of terminating so tests can check
    what happens afterwards.
    """

    def __init__(self, is_terminal: bool = False):
        self.line = RecordingLine(is_terminal)
        self.lines: List[str] = []
        self.panics: List[str] = []
        self.exit_codes: List[int] = []

    def puts(self, *parts: Any) -> None:
        self.lines.append(" ".join(str(p) for p in parts))

    def panic(self, *parts: Any) -> None:
        self.puts(*parts)
        self.panics.append(self.lines[-1])

    def exit(self, code: int) -> None:
        self.exit_codes.append(code)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


@pytest.fixture
def output() -> RecordingOutput:
    """Non-interactive recording output."""
    return RecordingOutput(is_terminal=False)


@pytest.fixture
def tty_output() -> RecordingOutput:
    """Recording output that reports an interactive terminal."""
    return RecordingOutput(is_terminal=True)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(start=100.0)


@pytest.fixture
def make_session(output, clock):
    """Factory for sessions over a batch of ``tests`` scripts."""

    def _make(tests: int = 2, out=None, **kwargs) -> SessionController:
        return SessionController(
            out if out is not None else output,
            Batch.of_size(tests),
            clock=clock,
            **kwargs,
        )

    return _make
