"""batchline: live progress and summaries for distributed test batches.

batchline consumes the events a dispatcher receives from remote test agents
(browsers and similar) running a shared batch of scripts, and renders a
single rewritable progress line plus a final pass/fail summary and exit
status. It neither runs tests nor talks to agents.

Primary API:
    SessionController - Event handlers bound to one batch and one output
    ConsoleOutput - Output sink on a rich console
    Batch - Batch descriptor
    ReporterConfig - Presentation and exit-status settings

Example:
    from batchline import Batch, ConsoleOutput, SessionController

    session = SessionController(ConsoleOutput(), Batch.of_size(2))
    session.on_dispatch(["Chrome", "Firefox"])
    session.on_agent_result("Chrome", {"name": "a.html", "passed": 3, "failed": 0})
    ...
    session.on_complete()  # exits 0 or 1
"""

from __future__ import annotations

from batchline import cli, logging
from batchline._version import __version__
from batchline.config import DEFAULT_CONFIG, ReporterConfig, load_config
from batchline.events import Event, load_events, parse_events, replay
from batchline.model.batch import Batch, BatchState
from batchline.model.results import (
    AgentResult,
    CoverageSample,
    FileCoverage,
    ResultNode,
    Suite,
    TestLeaf,
)
from batchline.output import ConsoleOutput, LineHandle, Output
from batchline.report import (
    CoverageAccumulator,
    FailureWalker,
    ProgressRenderer,
    ResultAggregator,
    ResultReporter,
    SessionController,
)
from batchline.types.base import LineControl, SessionPhase
from batchline.utils.clock import Clock, ManualClock, MonotonicClock

__all__ = [
    # Version
    "__version__",
    # Session
    "SessionController",
    "ResultReporter",
    "ResultAggregator",
    "ProgressRenderer",
    "CoverageAccumulator",
    "FailureWalker",
    # Model
    "Batch",
    "BatchState",
    "AgentResult",
    "CoverageSample",
    "FileCoverage",
    "ResultNode",
    "Suite",
    "TestLeaf",
    # Output
    "Output",
    "LineHandle",
    "LineControl",
    "ConsoleOutput",
    # Configuration
    "ReporterConfig",
    "DEFAULT_CONFIG",
    "load_config",
    # Events
    "Event",
    "load_events",
    "parse_events",
    "replay",
    # Types and clocks
    "SessionPhase",
    "Clock",
    "ManualClock",
    "MonotonicClock",
    # Utilities
    "cli",
    "logging",
]
