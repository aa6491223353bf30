"""Verbose reporting of failing tests inside a nested result tree."""

from __future__ import annotations

from typing import Optional, Tuple, Union

from rich.text import Text

from batchline.config import DEFAULT_CONFIG, ReporterConfig
from batchline.logging import get_logger
from batchline.model.results import AgentResult, Suite, TestLeaf
from batchline.output import Output

logger = get_logger(__name__)

SUITE_INDENT = "   "
TEST_INDENT = "    "
CONTINUATION_INDENT = "       "


class FailureWalker:
    """Find and print every failing ``TestLeaf`` below a result tree.

    A suite header is printed once per contiguous run of failures from that
    suite; consecutive failures from the same suite share one header. Each
    walk ends with a blank separator line.

    Args:
        output: Sink receiving the printed lines.
        config: Reporter configuration (fail marker).
    """

    def __init__(self, output: Output, config: ReporterConfig = DEFAULT_CONFIG):
        self.output = output
        self.config = config
        self._last_suite: Optional[Tuple[str, ...]] = None

    def walk(self, result: Union[AgentResult, Suite]) -> int:
        """Print all failing leaves of ``result``.

        Args:
            result: Agent result or bare suite to inspect.

        Returns:
            Number of failing leaves printed.
        """
        root = result.tree if isinstance(result, AgentResult) else result
        self._last_suite = None
        printed = self._walk_suite(root, (root.name,))
        self.output.puts("")
        logger.debug("Reported %d failing test(s) under %r", printed, root.name)
        return printed

    def _walk_suite(self, suite: Suite, path: Tuple[str, ...]) -> int:
        printed = 0
        for key, child in suite.children.items():
            match child:
                case TestLeaf() if child.is_failure(self.config.fail_marker):
                    self._report(child, suite, path)
                    printed += 1
                case TestLeaf():
                    pass
                case Suite():
                    printed += self._walk_suite(child, path + (key,))
        return printed

    def _report(self, leaf: TestLeaf, suite: Suite, path: Tuple[str, ...]) -> None:
        if self._last_suite != path:
            self.output.puts(SUITE_INDENT + "in", Text(suite.name, style="bold"))
            self._last_suite = path

        first, *rest = leaf.message_lines
        self.output.puts(
            TEST_INDENT, Text.assemble((leaf.name, "bold red"), ":"), first
        )
        for line in rest:
            self.output.puts(CONTINUATION_INDENT + line)
