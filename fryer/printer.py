# fryer/printer.py
# Console output for the deep-fry CLI: stage lines, results, errors.

import os
import sys
from typing import Optional, TextIO


class OutputPrinter:
    """
    Formats everything the CLI shows the user.

    Stage and result lines go to stdout and are silenced by ``quiet``.
    Errors always go to stderr. Colour is dropped when ``no_color`` is set
    or the NO_COLOR environment variable is present.
    """

    SYMBOLS : dict[str, str] = {
        "success" : "✅",
        "error"   : "❌",
        "warning" : "⚠️ ",
        "stage"   : "-",
        "hint"    : "→",
    }

    COLORS : dict[str, str] = {
        "green"  : "32",
        "red"    : "31",
        "yellow" : "33",
        "cyan"   : "36",
        "dim"    : "90",
    }

    COL_WIDTH : int = 10

    def __init__(
        self,
        quiet      : bool = False,
        no_color   : bool = False,
        stream     : Optional[TextIO] = None,
    ) -> None:
        self.quiet    : bool = quiet
        self.no_color : bool = no_color or bool(os.environ.get("NO_COLOR", ""))
        self._stream  : Optional[TextIO] = stream

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so pytest's capsys sees the writes
        return self._stream or sys.stdout

    def _colorize(self, text : str, code : str) -> str:
        if self.no_color:
            return text
        return f"\033[{code}m{text}\033[0m"

    def _hint_lines(self, message : str) -> tuple[str, list[str]]:
        """Split a multi-line error into its headline and indented hint lines."""
        lines = message.splitlines() or [""]
        return lines[0], [line.strip() for line in lines[1:] if line.strip()]

    # ── Stage output ─────────────────────────────────────────────

    def usage(self, text : str) -> None:
        """Usage goes out even in quiet mode: the user asked for nothing else."""
        print(text, file=self.stream)

    def stage(self, message : str) -> None:
        """One status line per pipeline stage, e.g. ``- decoding: song.mp3``."""
        if self.quiet:
            return
        symbol : str = self._colorize(self.SYMBOLS["stage"], self.COLORS["dim"])
        print(f"{symbol} {message}", file=self.stream)

    # ── Results ──────────────────────────────────────────────────

    def success(self, title : str, details : Optional[dict[str, str]] = None) -> None:
        if self.quiet:
            return
        symbol : str = self._colorize(self.SYMBOLS["success"], self.COLORS["green"])
        label  : str = self._colorize(title, self.COLORS["green"])
        print(f"\n{symbol}  {label}", file=self.stream)
        if details:
            for key, value in details.items():
                dim_key : str = self._colorize(f"{key:<{self.COL_WIDTH}}", self.COLORS["dim"])
                print(f"    {dim_key}: {value}", file=self.stream)

    def error(self, message : str, hint : Optional[str] = None) -> None:
        """Print an error to stderr. Extra lines of ``message`` are shown as hints."""
        headline, hints = self._hint_lines(message)
        if hint:
            hints.append(f"{self.SYMBOLS['hint']} {hint}")

        symbol : str = self._colorize(self.SYMBOLS["error"], self.COLORS["red"])
        print(f"\n{symbol}  {self._colorize(headline, self.COLORS['red'])}", file=sys.stderr)
        for line in hints:
            if not line.startswith(self.SYMBOLS["hint"]):
                print(f"    {line}", file=sys.stderr)
                continue
            print(f"    {self._colorize(line, self.COLORS['cyan'])}", file=sys.stderr)

    def warning(self, message : str, hint : Optional[str] = None) -> None:
        if self.quiet:
            return
        symbol : str = self._colorize(self.SYMBOLS["warning"], self.COLORS["yellow"])
        print(f"\n{symbol} {self._colorize(message, self.COLORS['yellow'])}", file=self.stream)
        if hint:
            h : str = self._colorize(f"{self.SYMBOLS['hint']} {hint}", self.COLORS["cyan"])
            print(f"    {h}", file=self.stream)
