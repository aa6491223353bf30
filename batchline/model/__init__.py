"""Data model for batches, agent results and coverage samples."""

from batchline.model.batch import Batch, BatchState
from batchline.model.results import (
    AgentResult,
    CoverageSample,
    FileCoverage,
    ResultNode,
    Suite,
    TestLeaf,
    parse_coverage,
    parse_tree,
)

__all__ = [
    "AgentResult",
    "Batch",
    "BatchState",
    "CoverageSample",
    "FileCoverage",
    "ResultNode",
    "Suite",
    "TestLeaf",
    "parse_coverage",
    "parse_tree",
]
