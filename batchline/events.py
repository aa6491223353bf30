"""Recorded event streams and their replay against a reporter.

A stream is a sequence of records, each a mapping with an ``event`` key:

- ``batch``: ``tests`` (list of script names); optional, first record only.
- ``dispatch``: ``agents`` (list of agent ids).
- ``result``, ``script_error``, ``agent_error``: ``agent`` and ``details``.
- ``agent_complete``, ``beat``: ``agent``.
- ``complete``: no fields.

Streams are read as NDJSON (one JSON object per line), a JSON array, or a
YAML list.
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import yaml

from batchline.logging import get_logger
from batchline.model.batch import Batch
from batchline.report.session import ResultReporter
from batchline.utils.yaml_utils import normalize_yaml_tree

logger = get_logger(__name__)

AGENT_EVENTS = frozenset(
    {"result", "script_error", "agent_error", "agent_complete", "beat"}
)
EVENT_KINDS = AGENT_EVENTS | {"batch", "dispatch", "complete"}


@dataclass(frozen=True)
class Event:
    """One recorded dispatcher event."""

    kind: str
    agent: Optional[str] = None
    agents: Tuple[str, ...] = ()
    tests: Tuple[str, ...] = ()
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, record: Any, position: int = 0) -> "Event":
        """Validate and convert a raw record.

        Raises:
            ValueError: If the record is not a mapping, names an unknown
                event, or lacks the fields its event needs.
        """
        if not isinstance(record, dict):
            raise ValueError(f"Event #{position} must be a mapping, got {type(record).__name__}")
        kind = record.get("event")
        if kind not in EVENT_KINDS:
            valid = ", ".join(sorted(EVENT_KINDS))
            raise ValueError(f"Event #{position} has unknown type {kind!r}. Valid types are: {valid}")

        agent = record.get("agent")
        if kind in AGENT_EVENTS and (agent is None or agent == ""):
            raise ValueError(f"Event #{position} ({kind}) requires 'agent'")

        agents = record.get("agents", [])
        if kind == "dispatch" and not isinstance(agents, list):
            raise ValueError(f"Event #{position} (dispatch) requires an 'agents' list")

        tests = record.get("tests", [])
        if kind == "batch" and not isinstance(tests, list):
            raise ValueError(f"Event #{position} (batch) requires a 'tests' list")

        details = record.get("details") or {}
        if not isinstance(details, dict):
            raise ValueError(f"Event #{position} ({kind}) 'details' must be a mapping")

        return cls(
            kind=kind,
            agent=None if agent is None else str(agent),
            agents=tuple(str(a) for a in agents),
            tests=tuple(str(t) for t in tests),
            details=details,
        )


def parse_events(text: str, fmt: Optional[str] = None) -> List[Event]:
    """Parse an event stream.

    Args:
        text: Stream contents.
        fmt: ``"ndjson"``, ``"json"`` or ``"yaml"``; detected when ``None``.

    Returns:
        Validated events in stream order.
    """
    if fmt is None:
        fmt = _detect_format(text)
    if fmt == "ndjson":
        records = []
        for lineno, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as exc:
                logger.error("Invalid JSON on line %d: %s", lineno, exc)
                raise ValueError(f"Invalid JSON on line {lineno}: {exc.msg}") from exc
    elif fmt == "json":
        records = json.loads(text)
    elif fmt == "yaml":
        try:
            records = normalize_yaml_tree(yaml.safe_load(text))
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML event stream: {exc}") from exc
    else:
        raise ValueError(f"Unknown event stream format {fmt!r}")

    if records is None:
        records = []
    if not isinstance(records, list):
        raise ValueError("The event stream must be a list of event records.")
    return [Event.from_dict(record, i) for i, record in enumerate(records)]


def load_events(source: Union[str, Path]) -> List[Event]:
    """Read and parse events from a file path, or stdin when ``source`` is ``"-"``."""
    if str(source) == "-":
        return parse_events(sys.stdin.read())
    path = Path(source)
    fmt = {".ndjson": "ndjson", ".jsonl": "ndjson", ".json": "json", ".yaml": "yaml", ".yml": "yaml"}.get(
        path.suffix.lower()
    )
    logger.info("Loading events from: %s", path)
    return parse_events(path.read_text(encoding="utf-8"), fmt)


def batch_from_events(events: Iterable[Event]) -> Optional[Batch]:
    """Batch described by a leading ``batch`` record, if any."""
    first = next(iter(events), None)
    if first is not None and first.kind == "batch":
        return Batch.from_tests(first.tests)
    return None


def replay(events: Iterable[Event], reporter: ResultReporter) -> Optional[int]:
    """Feed ``events`` to ``reporter`` in order.

    Returns:
        The exit code from ``complete``, or ``None`` when the stream has no
        completion record.
    """
    code: Optional[int] = None
    count = 0
    for event in events:
        count += 1
        match event.kind:
            case "batch":
                continue
            case "dispatch":
                reporter.on_dispatch(event.agents)
            case "result":
                reporter.on_agent_result(event.agent, event.details)
            case "script_error":
                reporter.on_agent_script_error(event.agent, event.details)
            case "agent_error":
                reporter.on_agent_error(event.agent, event.details)
            case "agent_complete":
                reporter.on_agent_complete(event.agent)
            case "beat":
                reporter.on_beat(event.agent)
            case "complete":
                code = reporter.on_complete()
    logger.debug("Replayed %d event(s)", count)
    return code


def _detect_format(text: str) -> str:
    stripped = text.lstrip()
    if stripped.startswith("["):
        return "json"
    if stripped.startswith("{"):
        return "ndjson"
    return "yaml"
