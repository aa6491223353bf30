"""Batch-wide counters and per-event coordination."""

from __future__ import annotations

from typing import Optional, Sequence

from rich.text import Text

from batchline.config import DEFAULT_CONFIG, ReporterConfig
from batchline.logging import get_logger
from batchline.model.batch import Batch, BatchState
from batchline.model.results import AgentResult
from batchline.output import Output
from batchline.report.coverage import CoverageAccumulator
from batchline.report.failures import FailureWalker
from batchline.report.progress import ProgressRenderer, select_target
from batchline.types.base import AgentId
from batchline.utils.clock import Clock, MonotonicClock

logger = get_logger(__name__)


class ResultAggregator:
    """Single owner of the ``BatchState`` for one session.

    Updates counters on every event and drives the coverage accumulator,
    progress renderer and failure walker.

    Args:
        output: Sink for all printed lines.
        batch: Batch descriptor; its size seeds ``total``.
        clock: Time source, ``MonotonicClock`` when omitted.
        config: Reporter configuration.
    """

    def __init__(
        self,
        output: Output,
        batch: Batch,
        clock: Optional[Clock] = None,
        config: ReporterConfig = DEFAULT_CONFIG,
    ):
        self.output = output
        self.config = config
        self.clock = clock or MonotonicClock()
        self.state = BatchState(total=len(batch), start_time=self.clock.now())
        self.coverage = CoverageAccumulator(self.state)
        self.renderer = ProgressRenderer(
            self.state,
            select_target(output.line),
            self.clock,
            self.coverage,
            config,
        )
        self.walker = FailureWalker(output, config)

    @property
    def good(self) -> Text:
        return Text(self.config.good_glyph, style="green")

    @property
    def bad(self) -> Text:
        return Text(self.config.bad_glyph, style="red")

    def on_dispatch(self, agents: Sequence[AgentId]) -> bool:
        """Record the connected agents and scale ``total`` by their count.

        Returns:
            False when no agents connected; the output has been told to panic.
        """
        if not agents:
            logger.error("Dispatch reported no connected agents")
            self.output.panic(self.bad, "No browsers connected, exiting.")
            return False
        self.state.agents = [str(a) for a in agents]
        self.state.total *= len(agents)
        logger.debug(
            "Dispatched to %d agent(s); expecting %d result(s)",
            len(agents),
            self.state.total,
        )
        self.output.puts(self.good, "Testing started on", ", ".join(self.state.agents))
        return True

    def on_agent_result(self, agent: AgentId, result: AgentResult) -> None:
        self.state.current_index += 1
        self.state.passed += result.passed
        self.state.failed += result.failed

        if result.coverage is not None:
            self.coverage.add(result.coverage)
            self.renderer.render()

        if result.failed:
            self.output.puts(
                self.bad, Text(result.name, style="bold"), "on", str(agent)
            )
            self.walker.walk(result)

    def on_error(self) -> None:
        self.state.errors += 1

    def on_beat(self, agent: AgentId) -> None:
        self.state.beats += 1
        self.renderer.render()

    def elapsed_ms(self) -> int:
        return int(round(self.renderer.elapsed_ms()))

    def exit_code(self) -> int:
        """1 when any test failed (or errors fail the batch), else 0."""
        if self.state.failed > 0:
            return 1
        if self.config.errors_fail_batch and self.state.errors > 0:
            return 1
        return 0

    def on_complete(self) -> int:
        """Draw the final status, print the summary and return the exit code."""
        self.renderer.render()
        self.renderer.finish()

        tested = self.state.tested
        duration = f"({self.elapsed_ms()}ms)"
        if self.state.failed:
            self.output.puts(
                Text("Failures", style="red") + ":",
                str(self.state.failed),
                "of",
                str(tested),
                "tests failed.",
                duration,
            )
        else:
            self.output.puts(Text(f"{tested} tests passed!", style="green"), duration)
            if self.state.errors:
                self.output.puts(
                    self.bad,
                    f"{self.state.errors} agent error(s) reported.",
                )

        code = self.exit_code()
        logger.debug(
            "Batch complete: %d passed, %d failed, %d error(s), exit %d",
            self.state.passed,
            self.state.failed,
            self.state.errors,
            code,
        )
        return code
