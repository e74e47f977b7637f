from __future__ import annotations

import curses
import locale
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator

from .theme import Palette, Theme

logger = logging.getLogger(__name__)

UI_LOCALE = "C.UTF-8"

_PAIR_BANNER_EDGE = 1
_PAIR_BANNER_TEXT = 2
_PAIR_SELECTED = 3


class TerminalInitError(RuntimeError):
    pass


@dataclass(frozen=True)
class TerminalSession:
    stdscr: Any
    palette: Palette


def _resolve_colors(theme: Theme) -> dict[str, int]:
    """Pick concrete color numbers for each theme role.

    Recolor the basic slots when the terminal allows it, else fall back to
    256-color codes, else to the basic colors as they are.
    """

    can_change = curses.can_change_color()
    logger.debug("can_change_color [%s] COLORS [%d]", can_change, curses.COLORS)

    resolved: dict[str, int] = {}
    for role, color in theme.colors().items():
        if can_change:
            curses.init_color(color.slot, *color.curses_rgb())
            resolved[role] = color.slot
        elif curses.COLORS >= 256:
            resolved[role] = color.xterm256
        else:
            resolved[role] = color.slot
    return resolved


def init_palette(theme: Theme) -> Palette:
    colors = _resolve_colors(theme)
    curses.init_pair(_PAIR_BANNER_EDGE, colors["shadow"], colors["accent"])
    curses.init_pair(_PAIR_BANNER_TEXT, colors["text"], colors["accent"])
    curses.init_pair(_PAIR_SELECTED, colors["text"], colors["highlight"])
    return Palette(
        banner_edge=curses.color_pair(_PAIR_BANNER_EDGE),
        banner_text=curses.color_pair(_PAIR_BANNER_TEXT),
        selected=curses.color_pair(_PAIR_SELECTED),
        normal=curses.A_NORMAL,
    )


def _set_locale() -> None:
    try:
        locale.setlocale(locale.LC_ALL, UI_LOCALE)
    except locale.Error as e:
        logger.warning("Cannot set locale %s (%s); box drawing may be garbled", UI_LOCALE, e)


@contextmanager
def terminal_session(theme: Theme) -> Iterator[TerminalSession]:
    """Enter curses once and always restore the terminal on the way out."""

    _set_locale()

    try:
        stdscr = curses.initscr()
    except curses.error as e:
        raise TerminalInitError(f"initscr failure: {e}") from e

    try:
        curses.noecho()

        if not curses.has_colors():
            raise TerminalInitError("has_colors failure: terminal has no color support")
        try:
            curses.start_color()
        except curses.error as e:
            raise TerminalInitError(f"start_color failure: {e}") from e

        stdscr.keypad(True)
        curses.cbreak()
        try:
            curses.curs_set(0)
        except curses.error:
            logger.debug("Terminal cannot hide the cursor")

        try:
            palette = init_palette(theme)
        except curses.error as e:
            raise TerminalInitError(f"color initialization failure: {e}") from e

        yield TerminalSession(stdscr=stdscr, palette=palette)
    finally:
        stdscr.erase()
        stdscr.refresh()
        stdscr.keypad(False)
        curses.nocbreak()
        curses.echo()
        curses.endwin()
        logger.debug("Terminal restored")
