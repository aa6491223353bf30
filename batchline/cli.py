"""Command-line interface for batchline."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from batchline.config import DEFAULT_CONFIG, load_config
from batchline.events import batch_from_events, load_events, replay
from batchline.logging import get_logger, set_global_log_level
from batchline.model.batch import Batch
from batchline.output import ConsoleOutput
from batchline.report.session import SessionController

logger = get_logger(__name__)


def _read_batch_file(path: Path) -> Batch:
    """Batch listing one test script per non-empty line."""
    lines = path.read_text(encoding="utf-8").splitlines()
    return Batch.from_tests(line.strip() for line in lines if line.strip())


def _replay_events(
    source: str,
    tests: Optional[int] = None,
    batch_file: Optional[Path] = None,
    config_path: Optional[Path] = None,
    force_terminal: Optional[bool] = None,
) -> None:
    """Replay a recorded event stream through a console reporter.

    The batch comes from ``batch_file``, then ``tests``, then a leading
    ``batch`` record in the stream; an empty batch is used otherwise.

    Raises:
        SystemExit: With the session's exit status.
    """
    try:
        events = load_events(source)
        config = load_config(config_path) if config_path else DEFAULT_CONFIG
        if batch_file is not None:
            batch = _read_batch_file(batch_file)
        elif tests is not None:
            batch = Batch.of_size(tests)
        else:
            batch = batch_from_events(events) or Batch()
    except FileNotFoundError as e:
        logger.error(f"File not found: {e.filename}")
        print(f"❌ ERROR: File not found: {e.filename}", file=sys.stderr)
        sys.exit(1)
    except (TypeError, ValueError) as e:
        logger.error(f"Invalid input: {type(e).__name__}: {e}")
        print(f"❌ ERROR: Invalid input: {e}", file=sys.stderr)
        sys.exit(1)

    logger.debug("Replaying %d event(s) against a batch of %d test(s)", len(events), len(batch))
    output = ConsoleOutput(force_terminal=force_terminal)
    session = SessionController(output, batch, config=config)
    code = replay(events, session)
    if code is None:
        logger.warning("Event stream ended without a completion record")
        raise SystemExit(1)


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``batchline`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="batchline",
        description="Report progress and results of distributed test batches.",
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{replay}",
        help="Available commands",
    )

    replay_parser = subparsers.add_parser(
        "replay", help="Replay a recorded agent event stream"
    )
    replay_parser.add_argument(
        "events", help="Event stream (NDJSON, JSON or YAML); '-' reads stdin"
    )
    batch_group = replay_parser.add_mutually_exclusive_group()
    batch_group.add_argument(
        "--tests", "-n", type=int, default=None, help="Number of test scripts in the batch"
    )
    batch_group.add_argument(
        "--batch", "-b", type=Path, default=None, help="File listing one test script per line"
    )
    replay_parser.add_argument(
        "--config", "-c", type=Path, default=None, help="Reporter config YAML"
    )
    tty_group = replay_parser.add_mutually_exclusive_group()
    tty_group.add_argument(
        "--tty",
        dest="force_terminal",
        action="store_true",
        default=None,
        help="Treat output as an interactive terminal",
    )
    tty_group.add_argument(
        "--no-tty",
        dest="force_terminal",
        action="store_false",
        default=None,
        help="Treat output as a plain stream",
    )

    effective_args = sys.argv[1:] if argv is None else argv

    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    if args.verbose:
        set_global_log_level(logging.DEBUG)
        logger.debug("Debug logging enabled")
    elif args.quiet:
        set_global_log_level(logging.WARNING)
    else:
        set_global_log_level(logging.INFO)

    if args.command == "replay":
        _replay_events(
            source=args.events,
            tests=args.tests,
            batch_file=args.batch,
            config_path=args.config,
            force_terminal=args.force_terminal,
        )


if __name__ == "__main__":
    main()
