"""Line-coverage accumulation across agents and tests."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from batchline.logging import get_logger
from batchline.model.batch import BatchState
from batchline.model.results import CoverageSample

logger = get_logger(__name__)


def format_percent(value: float) -> str:
    """Format ``value`` as a whole number, rounding halves away from zero."""
    return str(Decimal(repr(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class CoverageAccumulator:
    """Fold coverage samples into the two running totals of a ``BatchState``.

    Totals are flattened across files and samples; the per-file breakdown is
    not kept beyond the ordered sample log.
    """

    def __init__(self, state: BatchState):
        self.state = state

    def add(self, sample: CoverageSample) -> None:
        """Add every file entry of ``sample`` to the running totals."""
        called = sum(entry.called_lines for entry in sample.values())
        covered = sum(entry.covered_lines for entry in sample.values())
        self.state.coverage_samples.append(sample)
        self.state.called_lines += called
        self.state.covered_lines += covered
        logger.debug(
            "Merged coverage for %d file(s): +%d called, +%d covered",
            len(sample),
            called,
            covered,
        )

    def percent(self) -> Optional[float]:
        """Coverage percentage, or ``None`` until any line has been called.

        Computed as ``called_lines / covered_lines * 100``.
        """
        # Ratio looks inverted next to executed / instrumented; kept until the
        # agents' field semantics are confirmed.
        if self.state.called_lines <= 0:
            return None
        if self.state.covered_lines == 0:
            logger.warning(
                "Coverage reports %d called line(s) but no covered lines",
                self.state.called_lines,
            )
            return None
        return self.state.called_lines / self.state.covered_lines * 100

    def summary(self) -> str:
        """Status-line fragment such as ``"33% line coverage"``, or ``""``."""
        percent = self.percent()
        if percent is None:
            return ""
        return f"{format_percent(percent)}% line coverage"
