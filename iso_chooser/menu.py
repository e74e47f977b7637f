from __future__ import annotations

import curses
import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from rich.cells import cell_len, set_cell_size

from .lib.image import ImageRecord
from .terminal import TerminalInitError
from .theme import BUTTON_ARROW, LOWER_HALF_BLOCK, UPPER_HALF_BLOCK, Palette, Theme

logger = logging.getLogger(__name__)

# "[ " + label + " ▸ ]"
BUTTON_PADDING = 6
BORDER = 1

KEYS_UP = {curses.KEY_UP, ord("k")}
KEYS_DOWN = {curses.KEY_DOWN, ord("j")}
KEYS_PAGE_UP = {curses.KEY_PPAGE}
KEYS_PAGE_DOWN = {curses.KEY_NPAGE}
KEYS_HOME = {curses.KEY_HOME}
KEYS_END = {curses.KEY_END}
KEYS_CONFIRM = {curses.KEY_ENTER, ord("\r"), ord("\n"), ord(" ")}


class TerminalTooSmall(TerminalInitError):
    pass


class MenuEvent(enum.Enum):
    IGNORED = "ignored"
    MOVED = "moved"
    RESIZED = "resized"
    CONFIRMED = "confirmed"


def button_text(label: str, width: int) -> str:
    """Render a label the way Subiquity renders a button.

    width is in terminal cells, so wide (CJK) characters pad correctly.
    """
    return f"[ {set_cell_size(label, max(width, cell_len(label)))} {BUTTON_ARROW} ]"


def fit_cells(text: str, width: int) -> str:
    """Crop text to at most width terminal cells."""
    if cell_len(text) <= width:
        return text
    return set_cell_size(text, max(0, width))


@dataclass(frozen=True)
class MenuLayout:
    y: int
    x: int
    height: int
    width: int
    visible: int
    label_width: int


def compute_layout(
    *,
    rows: int,
    cols: int,
    banner_height: int,
    count: int,
    label_width: int,
) -> MenuLayout:
    """Center the bordered box in the area below the banner.

    The box shrinks to the rows available and scrolls when the list is longer.
    """

    available = rows - banner_height
    if available < 1 + 2 * BORDER or cols < BUTTON_PADDING + 2 * BORDER:
        raise TerminalTooSmall(f"terminal too small ({cols}x{rows})")

    visible = max(1, min(count, available - 2 * BORDER))
    height = visible + 2 * BORDER
    width = min(label_width + BUTTON_PADDING + 2 * BORDER, cols)

    y = banner_height + (available - height) // 2
    x = (cols - width) // 2
    return MenuLayout(y=y, x=x, height=height, width=width, visible=visible, label_width=label_width)


@dataclass
class MenuState:
    """Highlight position and scroll offset of the menu.

    Movement clamps at both ends; there is no wraparound.
    """

    count: int
    visible: int
    index: int = 0
    top: int = 0

    def __post_init__(self) -> None:
        if self.count < 1:
            raise ValueError("menu needs at least one entry")
        self.visible = max(1, self.visible)

    def move(self, delta: int) -> None:
        self.index = max(0, min(self.count - 1, self.index + delta))
        self._scroll()

    def resize(self, visible: int) -> None:
        self.visible = max(1, visible)
        self.top = min(self.top, max(0, self.count - self.visible))
        self._scroll()

    def _scroll(self) -> None:
        if self.index < self.top:
            self.top = self.index
        elif self.index >= self.top + self.visible:
            self.top = self.index - self.visible + 1

    def visible_range(self) -> range:
        return range(self.top, min(self.count, self.top + self.visible))

    def handle_key(self, key: int) -> MenuEvent:
        if key in KEYS_CONFIRM:
            return MenuEvent.CONFIRMED
        if key == curses.KEY_RESIZE:
            return MenuEvent.RESIZED

        before = self.index
        if key in KEYS_UP:
            self.move(-1)
        elif key in KEYS_DOWN:
            self.move(1)
        elif key in KEYS_PAGE_UP:
            self.move(-self.visible)
        elif key in KEYS_PAGE_DOWN:
            self.move(self.visible)
        elif key in KEYS_HOME:
            self.move(-self.count)
        elif key in KEYS_END:
            self.move(self.count)
        else:
            return MenuEvent.IGNORED
        return MenuEvent.MOVED if self.index != before else MenuEvent.IGNORED


class MenuPresenter:
    """Single-select menu under the banner; blocks until a choice is confirmed."""

    def __init__(
        self,
        stdscr: Any,
        choices: Sequence[ImageRecord],
        *,
        theme: Theme,
        palette: Palette,
        window_factory: Callable[[int, int, int, int], Any] = curses.newwin,
    ) -> None:
        if not choices:
            raise ValueError("no choices to present")
        self.stdscr = stdscr
        self.choices = list(choices)
        self.theme = theme
        self.palette = palette
        self._window_factory = window_factory
        self._label_width = max(cell_len(c.label) for c in self.choices)

    def layout(self) -> MenuLayout:
        rows, cols = self.stdscr.getmaxyx()
        return compute_layout(
            rows=rows,
            cols=cols,
            banner_height=self.theme.banner_height,
            count=len(self.choices),
            label_width=self._label_width,
        )

    def draw_banner(self) -> None:
        _, cols = self.stdscr.getmaxyx()
        height = self.theme.banner_height

        for y in range(height):
            if height >= 3 and y == 0:
                self.stdscr.addstr(y, 0, UPPER_HALF_BLOCK * cols, self.palette.banner_edge)
            elif height >= 3 and y == height - 1:
                self.stdscr.addstr(y, 0, LOWER_HALF_BLOCK * cols, self.palette.banner_edge)
            else:
                self.stdscr.addstr(y, 0, " " * cols, self.palette.banner_text)

        title = self.theme.title
        x = max(0, (cols - cell_len(title)) // 2)
        self.stdscr.addstr(height // 2, x, fit_cells(title, cols - x), self.palette.banner_text)

    def _open_window(self, layout: MenuLayout) -> Any:
        self.stdscr.erase()
        self.draw_banner()
        self.stdscr.refresh()

        window = self._window_factory(layout.height, layout.width, layout.y, layout.x)
        window.keypad(True)
        return window

    def draw_items(self, window: Any, state: MenuState, layout: MenuLayout) -> None:
        window.erase()
        window.box()
        inner = layout.width - 2 * BORDER
        for row, idx in enumerate(state.visible_range()):
            attr = self.palette.selected if idx == state.index else self.palette.normal
            text = button_text(self.choices[idx].label, layout.label_width)
            window.addstr(BORDER + row, BORDER, fit_cells(text, inner), attr)

    def run(self) -> ImageRecord:
        layout = self.layout()
        state = MenuState(count=len(self.choices), visible=layout.visible)
        window = self._open_window(layout)

        try:
            while True:
                self.draw_items(window, state, layout)
                window.refresh()
                event = state.handle_key(window.getch())
                if event is MenuEvent.CONFIRMED:
                    break
                if event is MenuEvent.RESIZED:
                    layout = self.layout()
                    state.resize(layout.visible)
                    window.erase()
                    window = self._open_window(layout)
        finally:
            window.erase()
            window.refresh()

        logger.info("Selected entry %d: %s", state.index, self.choices[state.index].label)
        return self.choices[state.index]
