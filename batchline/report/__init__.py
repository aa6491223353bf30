"""Aggregation and terminal rendering of streamed agent results.

- ``SessionController``: event-handler surface for the dispatcher.
- ``ResultAggregator``: batch counters and per-event coordination.
- ``ProgressRenderer``: the live status line.
- ``CoverageAccumulator``: running line-coverage totals.
- ``FailureWalker``: verbose output for failing tests.
"""

from batchline.report.aggregator import ResultAggregator
from batchline.report.coverage import CoverageAccumulator
from batchline.report.failures import FailureWalker
from batchline.report.progress import (
    InteractiveTarget,
    ProgressRenderer,
    RenderState,
    RenderTarget,
    StreamedTarget,
    select_target,
)
from batchline.report.session import ResultReporter, SessionController

__all__ = [
    "CoverageAccumulator",
    "FailureWalker",
    "InteractiveTarget",
    "ProgressRenderer",
    "RenderState",
    "RenderTarget",
    "ResultAggregator",
    "ResultReporter",
    "SessionController",
    "StreamedTarget",
    "select_target",
]
