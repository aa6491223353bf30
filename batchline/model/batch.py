"""Batch descriptor and mutable batch-wide state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from batchline.model.results import CoverageSample


@dataclass(frozen=True)
class Batch:
    """The set of test scripts submitted for one run.

    Every connected agent runs the whole batch, so the expected number of
    results is ``len(batch) * agent_count``.
    """

    tests: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "tests", tuple(str(t) for t in self.tests))

    def __len__(self) -> int:
        return len(self.tests)

    @classmethod
    def from_tests(cls, tests: Iterable[str]) -> "Batch":
        return cls(tests=tuple(tests))

    @classmethod
    def of_size(cls, count: int) -> "Batch":
        """Batch of ``count`` anonymous scripts, for when only the size is known."""
        if count < 0:
            raise ValueError("Batch size must be non-negative")
        return cls(tests=tuple(f"test-{i + 1}" for i in range(count)))


@dataclass
class BatchState:
    """Counters for one reporting session.

    Attributes:
        total: Expected results, ``tests * agents`` once dispatched.
        current_index: Results received so far.
        passed: Passing tests summed over all results.
        failed: Failing tests summed over all results.
        beats: Heartbeats received, used for throughput only.
        start_time: Clock reading when the session was created.
        spin_index: Next spinner frame to draw.
        coverage_samples: Coverage samples in arrival order.
        called_lines: Running total of executed lines.
        covered_lines: Running total of instrumented lines.
        errors: Agent and script errors reported.
        agents: Agents named at dispatch.
    """

    total: int
    start_time: float
    current_index: int = 0
    passed: int = 0
    failed: int = 0
    beats: int = 0
    spin_index: int = 0
    coverage_samples: List[CoverageSample] = field(default_factory=list)
    called_lines: int = 0
    covered_lines: int = 0
    errors: int = 0
    agents: List[str] = field(default_factory=list)

    @property
    def tested(self) -> int:
        """Number of individual tests reported, passed plus failed."""
        return self.passed + self.failed
