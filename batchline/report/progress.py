"""Live progress line: percent complete, throughput, spinner and coverage.

The line is drawn through a ``RenderTarget`` picked once from the output's
line handle:

- ``InteractiveTarget`` clears the terminal line and redraws in place, so
  repeated renders do not scroll.
- ``StreamedTarget`` appends each render as its own line and never emits
  control sequences, which would corrupt files and pipes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from batchline.config import DEFAULT_CONFIG, ReporterConfig
from batchline.model.batch import BatchState
from batchline.output import LineHandle
from batchline.report.coverage import CoverageAccumulator, format_percent
from batchline.types.base import LineControl
from batchline.utils.clock import Clock


@dataclass(frozen=True)
class RenderState:
    """Values shown by one render; recomputed every time, never stored."""

    spinner: str
    percent: float
    current: int
    total: int
    throughput: float
    coverage: str

    def format(self, prefix: str = DEFAULT_CONFIG.status_prefix) -> str:
        parts = [
            prefix,
            self.spinner,
            f"{format_percent(self.percent)}% complete ({self.current}/{self.total})",
            f"{self.throughput:.2f} tests/sec",
        ]
        if self.coverage:
            parts.append(self.coverage)
        return " ".join(parts)


class RenderTarget(Protocol):
    def draw(self, text: str) -> None: ...

    def finish(self) -> None: ...


class InteractiveTarget:
    """Rewrite the status line in place on a terminal."""

    def __init__(self, line: LineHandle):
        self.line = line

    def draw(self, text: str) -> None:
        self.line.write(None, LineControl.CLEAR_LINE)
        self.line.write(text)

    def finish(self) -> None:
        # Keep the last status visible below which the summary is printed
        self.line.write("\n")


class StreamedTarget:
    """Append each status as a plain line."""

    def __init__(self, line: LineHandle):
        self.line = line

    def draw(self, text: str) -> None:
        self.line.write(text + "\n")

    def finish(self) -> None:
        pass


def select_target(line: LineHandle) -> RenderTarget:
    """Pick the render target matching the capability of ``line``."""
    if line.is_terminal:
        return InteractiveTarget(line)
    return StreamedTarget(line)


class ProgressRenderer:
    """Compute and draw the status line for a ``BatchState``.

    Args:
        state: Batch counters to read.
        target: Where the line is drawn.
        clock: Time source for elapsed time and throughput.
        coverage: Accumulator providing the coverage fragment.
        config: Spinner frames and status prefix.
    """

    def __init__(
        self,
        state: BatchState,
        target: RenderTarget,
        clock: Clock,
        coverage: CoverageAccumulator,
        config: ReporterConfig = DEFAULT_CONFIG,
    ):
        self.state = state
        self.target = target
        self.clock = clock
        self.coverage = coverage
        self.config = config

    def elapsed_ms(self) -> float:
        return (self.clock.now() - self.state.start_time) * 1000.0

    def percent_complete(self) -> float:
        """``current_index / total * 100``; may exceed 100, 0 for an empty batch."""
        if self.state.total == 0:
            return 0.0
        return self.state.current_index / self.state.total * 100

    def throughput(self) -> float:
        """Heartbeats per second since the session started."""
        elapsed = self.elapsed_ms()
        if elapsed <= 0:
            return 0.0
        return self.state.beats * 1000 / elapsed

    def snapshot(self) -> RenderState:
        """Current render values without drawing or advancing the spinner."""
        frames = self.config.spinner_frames
        return RenderState(
            spinner=frames[self.state.spin_index % len(frames)],
            percent=self.percent_complete(),
            current=self.state.current_index,
            total=self.state.total,
            throughput=self.throughput(),
            coverage=self.coverage.summary(),
        )

    def render(self) -> RenderState:
        """Draw the status line and advance the spinner one frame."""
        snapshot = self.snapshot()
        self.target.draw(snapshot.format(self.config.status_prefix))
        self.state.spin_index = (self.state.spin_index + 1) % len(
            self.config.spinner_frames
        )
        return snapshot

    def finish(self) -> None:
        self.target.finish()
