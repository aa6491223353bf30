"""Output sinks for the reporter.

The reporter only talks to the ``Output`` protocol: print a line, panic,
exit, and a rewritable ``line`` handle for the status line. ``ConsoleOutput``
is the stock implementation on top of ``rich.console.Console``.
"""

from __future__ import annotations

from typing import IO, NoReturn, Optional, Protocol

from rich.console import Console
from rich.control import Control, ControlType

from batchline.logging import get_logger
from batchline.types.base import LineControl, Part

logger = get_logger(__name__)


class LineHandle(Protocol):
    """A single line that can be rewritten in place on a terminal."""

    @property
    def is_terminal(self) -> bool: ...

    def write(
        self, text: Optional[str], control: Optional[LineControl] = None
    ) -> None: ...


class Output(Protocol):
    """Destination for everything the reporter prints."""

    @property
    def line(self) -> LineHandle: ...

    def puts(self, *parts: Part) -> None: ...

    def panic(self, *parts: Part) -> NoReturn: ...

    def exit(self, code: int) -> None: ...


class ConsoleLine:
    """Rewritable status line on a rich console.

    On a terminal, ``LineControl.CLEAR_LINE`` returns to column zero and
    erases the line. Elsewhere control requests are dropped so piped output
    stays free of escape sequences.
    """

    def __init__(self, console: Console):
        self.console = console
        self.pending = False

    @property
    def is_terminal(self) -> bool:
        return self.console.is_terminal

    def write(self, text: Optional[str], control: Optional[LineControl] = None) -> None:
        if control is LineControl.CLEAR_LINE:
            if self.is_terminal:
                self.console.control(
                    Control(ControlType.CARRIAGE_RETURN, (ControlType.ERASE_IN_LINE, 2))
                )
                self.pending = False
            else:
                logger.debug("Dropping line control on non-terminal output")
        if text:
            self.console.out(text, end="", highlight=False)
            self.pending = not text.endswith("\n")

    def release(self) -> None:
        """Get a partially written status line out of the way of a full line."""
        if not self.pending:
            return
        if self.is_terminal:
            self.write(None, LineControl.CLEAR_LINE)
        else:
            self.console.out("", highlight=False)
        self.pending = False


class ConsoleOutput:
    """``Output`` implementation writing to a rich ``Console``.

    Args:
        file: Destination stream; defaults to ``sys.stdout``.
        force_terminal: Override terminal detection.
        color_system: Rich color system, ``None`` disables colour.
        console: Pre-built console; other arguments are ignored when given.
    """

    def __init__(
        self,
        file: Optional[IO[str]] = None,
        force_terminal: Optional[bool] = None,
        color_system: Optional[str] = "auto",
        console: Optional[Console] = None,
    ):
        self.console = console or Console(
            file=file,
            force_terminal=force_terminal,
            color_system=color_system,
            markup=False,
            emoji=False,
            highlight=False,
            soft_wrap=True,
        )
        self._line = ConsoleLine(self.console)

    @property
    def line(self) -> ConsoleLine:
        return self._line

    def puts(self, *parts: Part) -> None:
        self._line.release()
        self.console.print(*parts, sep=" ")

    def panic(self, *parts: Part) -> NoReturn:
        self.puts(*parts)
        logger.debug("Panic: terminating with status 1")
        raise SystemExit(1)

    def exit(self, code: int) -> None:
        self._line.release()
        logger.debug("Exiting with status %d", code)
        raise SystemExit(code)
