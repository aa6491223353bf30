"""Typed views of the result payloads agents report.

Agents send untyped nested mappings. This module converts them, once, into a
tagged recursive tree so that downstream code can pattern-match on node kind
instead of sniffing fields:

- ``TestLeaf``: a mapping carrying ``passed``, ``failed`` and ``type``.
- ``Suite``: any other mapping (or list); its mapping/list-valued fields become
  children in their original order. Scalar fields of a suite are dropped.

Malformed numbers and coverage entries are logged and replaced or skipped
rather than raised, so a single bad payload never stops a batch.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from batchline.logging import get_logger
from batchline.types.base import FAIL_MARKER

logger = get_logger(__name__)

#: Fields whose joint presence marks a mapping as a test leaf.
LEAF_FIELDS = frozenset({"passed", "failed", "type"})

#: Top-level result fields that are never part of the result tree.
RESERVED_FIELDS = frozenset({"coverage"})


@dataclass(frozen=True, slots=True)
class FileCoverage:
    """Line counts reported for one source file.

    Args:
        called_lines: Lines executed during the test.
        covered_lines: Instrumented lines in the file.
    """

    called_lines: int
    covered_lines: int

    def __post_init__(self) -> None:
        for name in ("called_lines", "covered_lines"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"FileCoverage.{name} must be an int")
            if value < 0:
                raise ValueError(f"FileCoverage.{name} must be non-negative")


#: Per-file coverage contributed alongside one test result.
CoverageSample = Dict[str, FileCoverage]


@dataclass(frozen=True, slots=True)
class TestLeaf:
    """One concrete test outcome."""

    __test__ = False  # keep pytest from collecting this class

    name: str
    passed: int
    failed: int
    type: str
    result: Optional[str] = None
    message: str = ""

    def is_failure(self, fail_marker: str = FAIL_MARKER) -> bool:
        """Return True when this leaf represents a failed test.

        The ``result`` field decides when present; leaves without it are
        judged by their ``failed`` count.
        """
        if self.result is not None:
            return self.result == fail_marker
        return self.failed > 0

    @property
    def message_lines(self) -> list[str]:
        return self.message.split("\n")


@dataclass(frozen=True, slots=True)
class Suite:
    """Named grouping of result nodes."""

    name: str
    children: Dict[str, "ResultNode"] = field(default_factory=dict)


ResultNode = Union[Suite, TestLeaf]


@dataclass(frozen=True, slots=True)
class AgentResult:
    """Result of one dispatched unit on one agent.

    Attributes:
        name: Name of the test script.
        passed: Passing tests reported for the script.
        failed: Failing tests reported for the script.
        coverage: Optional coverage sample.
        tree: Root suite holding every nested result node.
    """

    name: str
    passed: int = 0
    failed: int = 0
    coverage: Optional[CoverageSample] = None
    tree: Suite = field(default_factory=lambda: Suite(name=""))

    @classmethod
    def from_mapping(cls, details: Mapping[str, Any]) -> "AgentResult":
        """Parse a raw agent payload into an ``AgentResult``."""
        name = _as_name(details.get("name"), default="")
        coverage = None
        raw_coverage = details.get("coverage")
        if raw_coverage is not None:
            coverage = parse_coverage(raw_coverage)
        children = _parse_children(
            (k, v) for k, v in details.items() if k not in RESERVED_FIELDS
        )
        return cls(
            name=name,
            passed=_as_count(details.get("passed"), "passed"),
            failed=_as_count(details.get("failed"), "failed"),
            coverage=coverage,
            tree=Suite(name=name, children=children),
        )


def is_leaf_mapping(value: Any) -> bool:
    """True when ``value`` is a mapping with all of ``LEAF_FIELDS``."""
    return isinstance(value, Mapping) and LEAF_FIELDS.issubset(value.keys())


def parse_node(key: str, value: Any) -> Optional[ResultNode]:
    """Convert one raw value to a ``ResultNode``; scalars yield ``None``."""
    if is_leaf_mapping(value):
        raw_result = value.get("result")
        message = value.get("message")
        return TestLeaf(
            name=_as_name(value.get("name"), default=key),
            passed=_as_count(value.get("passed"), "passed"),
            failed=_as_count(value.get("failed"), "failed"),
            type=str(value.get("type")),
            result=None if raw_result is None else str(raw_result),
            message="" if message is None else str(message),
        )
    if isinstance(value, Mapping):
        return Suite(
            name=_as_name(value.get("name"), default=key),
            children=_parse_children(value.items()),
        )
    if isinstance(value, list):
        return Suite(
            name=key,
            children=_parse_children((str(i), v) for i, v in enumerate(value)),
        )
    return None


def parse_tree(name: str, data: Mapping[str, Any]) -> Suite:
    """Parse an arbitrary nested mapping into a root ``Suite`` named ``name``."""
    return Suite(name=name, children=_parse_children(data.items()))


def parse_coverage(raw: Any) -> CoverageSample:
    """Parse a ``{path: {calledLines, coveredLines}}`` mapping.

    Entries that are not mappings or carry invalid counts are logged and
    skipped.
    """
    sample: CoverageSample = {}
    if not isinstance(raw, Mapping):
        logger.warning("Ignoring coverage payload that is not a mapping: %r", raw)
        return sample
    for path, entry in raw.items():
        if not isinstance(entry, Mapping):
            logger.warning("Ignoring coverage entry for %s: not a mapping", path)
            continue
        try:
            sample[str(path)] = FileCoverage(
                called_lines=entry.get("calledLines", 0),
                covered_lines=entry.get("coveredLines", 0),
            )
        except (TypeError, ValueError) as exc:
            logger.warning("Ignoring coverage entry for %s: %s", path, exc)
    return sample


def _parse_children(items) -> Dict[str, ResultNode]:
    children: Dict[str, ResultNode] = {}
    for key, value in items:
        node = parse_node(str(key), value)
        if node is not None:
            children[str(key)] = node
    return children


def _as_name(value: Any, default: str) -> str:
    if isinstance(value, str) and value:
        return value
    return default


def _as_count(value: Any, label: str) -> int:
    """Coerce a reported count to a non-negative int, defaulting to zero."""
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        logger.warning("Ignoring non-numeric %s count: %r", label, value)
        return 0
    if not math.isfinite(value) or value < 0 or value != int(value):
        logger.warning("Ignoring invalid %s count: %r", label, value)
        return 0
    return int(value)
