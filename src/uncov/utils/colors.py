"""ANSI colour helpers for plain-text report output."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

import click


def is_color_supported(*, no_color: bool = False) -> bool:
    """Return True when coloured output should be emitted.

    Colour is disabled by *no_color*, by a set ``NO_COLOR`` environment
    variable, or when stdout is not a terminal.
    """
    if no_color:
        return False
    if "NO_COLOR" in os.environ:
        return False
    return sys.stdout.isatty()


@dataclass(frozen=True)
class Colors:
    """Text decorators that wrap strings in ANSI escape codes when enabled."""

    enabled: bool = True

    def _style(
        self,
        text: str,
        *,
        fg: str | None = None,
        bold: bool | None = None,
        dim: bool | None = None,
    ) -> str:
        if not self.enabled:
            return text
        return click.style(text, fg=fg, bold=bold, dim=dim)

    def red(self, text: str) -> str:
        return self._style(text, fg="red")

    def green(self, text: str) -> str:
        return self._style(text, fg="green")

    def yellow(self, text: str) -> str:
        return self._style(text, fg="yellow")

    def cyan(self, text: str) -> str:
        return self._style(text, fg="cyan")

    def bold(self, text: str) -> str:
        return self._style(text, bold=True)

    def dim(self, text: str) -> str:
        return self._style(text, dim=True)


def create_colors(*, no_color: bool = False) -> Colors:
    """Build a :class:`Colors` instance for the current terminal."""
    return Colors(enabled=is_color_supported(no_color=no_color))
