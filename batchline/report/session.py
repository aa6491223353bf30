"""Public event-handler surface driven by the agent dispatcher.

A ``SessionController`` is bound to one batch and one output sink. The
dispatcher calls its handlers as agent events arrive; the controller tracks
the session phase and delegates all counting to ``ResultAggregator``.

Call contract: ``on_dispatch`` once before any agent event, ``on_complete``
once after the last one. Events after completion, or after an aborted
dispatch, are logged and ignored.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Protocol, Union

from rich.text import Text

from batchline.config import DEFAULT_CONFIG, ReporterConfig
from batchline.logging import get_logger
from batchline.model.batch import Batch, BatchState
from batchline.model.results import AgentResult
from batchline.output import Output
from batchline.report.aggregator import ResultAggregator
from batchline.types.base import AgentId, SessionPhase
from batchline.utils.clock import Clock

logger = get_logger(__name__)

Details = Optional[Mapping[str, Any]]


class ResultReporter(Protocol):
    """Handlers a dispatcher invokes while a batch runs."""

    def on_dispatch(self, agents: Iterable[AgentId]) -> None: ...

    def on_agent_result(
        self, agent: AgentId, details: Union[Mapping[str, Any], AgentResult]
    ) -> None: ...

    def on_agent_script_error(self, agent: AgentId, details: Details) -> None: ...

    def on_agent_error(self, agent: AgentId, details: Details) -> None: ...

    def on_agent_complete(self, agent: AgentId) -> None: ...

    def on_beat(self, agent: AgentId) -> None: ...

    def on_complete(self) -> int: ...


class SessionController:
    """Sequence dispatch, agent events and completion for one batch.

    Args:
        output: Sink for printed lines, panic and exit.
        batch: Batch descriptor; its size seeds the expected total.
        clock: Optional time source.
        config: Optional reporter configuration.
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
        self.aggregator = ResultAggregator(output, batch, clock=clock, config=config)
        self.phase = SessionPhase.IDLE

    @property
    def state(self) -> BatchState:
        return self.aggregator.state

    def on_dispatch(self, agents: Iterable[AgentId]) -> None:
        if self.phase is not SessionPhase.IDLE:
            logger.warning("Ignoring repeated dispatch in phase %s", self.phase.name)
            return
        agents = list(agents)
        if not agents:
            # Set before delegating: panic normally does not return
            self.phase = SessionPhase.ABORTED
        if self.aggregator.on_dispatch(agents):
            self.phase = SessionPhase.DISPATCHED

    def on_agent_result(
        self, agent: AgentId, details: Union[Mapping[str, Any], AgentResult]
    ) -> None:
        if not self._accepts("result", agent):
            return
        if isinstance(details, AgentResult):
            result = details
        else:
            result = AgentResult.from_mapping(details or {})
        self.aggregator.on_agent_result(agent, result)

    def on_agent_script_error(self, agent: AgentId, details: Details) -> None:
        if not self._accepts("script error", agent):
            return
        details = details or {}
        self.aggregator.on_error()
        self.output.puts(
            Text(f"{self.config.bad_glyph} Script error", style="red")
            + f": {details.get('message', '')}"
        )
        self.output.puts(f"  URL: {details.get('url', '')}")
        self.output.puts(f"  Line: {details.get('line', '')}")
        self.output.puts(f"  User-Agent: {agent}")

    def on_agent_error(self, agent: AgentId, details: Details) -> None:
        if not self._accepts("agent error", agent):
            return
        details = details or {}
        self.aggregator.on_error()
        self.output.puts(
            Text(f"{self.config.bad_glyph} Error", style="red")
            + f": {details.get('message', '')}"
        )
        self.output.puts(f"  User-Agent: {agent}")

    def on_agent_complete(self, agent: AgentId) -> None:
        if not self._accepts("agent completion", agent):
            return
        self.output.puts(self.aggregator.good, "Agent completed:", str(agent))

    def on_beat(self, agent: AgentId) -> None:
        if not self._accepts("beat", agent):
            return
        self.aggregator.on_beat(agent)

    def on_complete(self) -> int:
        """Print the final summary and hand the exit code to the output.

        Returns:
            The exit code, for outputs whose ``exit`` returns.
        """
        if self.phase is SessionPhase.ABORTED:
            logger.warning("Ignoring completion of an aborted session")
            return 1
        if self.phase is SessionPhase.COMPLETED:
            logger.warning("Ignoring repeated completion")
            return self.aggregator.exit_code()
        if self.phase is SessionPhase.IDLE:
            logger.warning("Completing a session that was never dispatched")

        code = self.aggregator.on_complete()
        self.phase = SessionPhase.COMPLETED
        self.output.exit(code)
        return code

    def _accepts(self, event: str, agent: AgentId) -> bool:
        if self.phase.is_terminal:
            logger.warning(
                "Ignoring %s from %s: session %s", event, agent, self.phase.name.lower()
            )
            return False
        if self.phase is SessionPhase.IDLE:
            logger.warning("Received %s from %s before dispatch", event, agent)
        elif self.phase is SessionPhase.DISPATCHED:
            self.phase = SessionPhase.RUNNING
        return True
