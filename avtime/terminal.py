""" Terminal renderer """

from __future__ import annotations
from typing import Dict, Literal, Optional
from dataclasses import dataclass, field
import curses

import avtime
from avtime.presentation import Severity, Freshness

# Quit keys, `q`, `Q` and `ctrl-c` when the terminal does not translate it into an interrupt
QUIT_KEYS = [ord('q'), ord('Q'), 3]

# Color-pair numbers
COLOR_PAIRS: Dict[str, int] = {
    'nominal': 1,
    'caution': 2,
    'warning': 3,
    'critical': 4,
    'title': 5,
    'text': 6,
}

GAUGE_FILL = '█'
GAUGE_EMPTY = '░'
PANEL_WIDTH = 48


class TerminalError(Exception):
    """ The terminal could not enter or leave the curses screen mode. """
    code: int = avtime.errors.DEVICE_ERROR


@dataclass
class Frame():
    """ A `class` that represents the labeled regions of a single rendered frame.

    Attributes
    ----------
    server: `str`
        The network time protocol server.
    synchronizing: `bool`
        Whether the initial synchronization is still in progress, in which case only the
            title and the server are shown.
    date: `str`
        The local calendar date.
    time: `str`
        The local clock time with milliseconds.
    local: `str`
        The local date and time.
    utc: `str`
        The coordinated universal date and time.
    offset: `str`
        The signed offset in milliseconds.
    offset_severity: `Severity`
        The color of the offset.
    sync: `str`
        The time since the last synchronization and until the next one.
    freshness: `Freshness`
        Whether the last synchronization is `fresh` or `stale`.
    freshness_severity: `Severity`
        The color of the synchronization age.
    gauge: `float`
        The fill ratio of the freshness gauge from 0.0 to 1.0.
    """
    server: str
    synchronizing: bool = field(default=False)
    date: str = field(default='')
    time: str = field(default='')
    local: str = field(default='')
    utc: str = field(default='')
    offset: str = field(default='')
    offset_severity: Severity = field(default='nominal')
    sync: str = field(default='')
    freshness: Freshness = field(default='stale')
    freshness_severity: Severity = field(default='critical')
    gauge: float = field(default=0.0)


def gauge_bar(ratio: float, width: int) -> str:
    """ Returns a text gauge of `width` characters filled to `ratio`. """
    width = max(width, 0)
    filled = round(min(max(ratio, 0.0), 1.0) * width)
    return GAUGE_FILL * filled + GAUGE_EMPTY * (width - filled)


class Terminal():
    """ A `class` that represents the curses terminal session of the clock.

    The session is a context manager. Entering it switches the terminal to the alternate
    screen with unbuffered, non-echoed and non-blocking key input, and exiting it restores the
    terminal on every exit path.

    ``` python
    with avtime.terminal.Terminal() as terminal:
        terminal.draw(avtime.terminal.Frame(server='pool.ntp.org', synchronizing=True))
    ```
    """

    def __init__(
        self,
        layout: Literal['dashboard', 'log'] = 'dashboard'
    ):
        """ Initializes an instance of the terminal session.

        Parameters
        ----------
        layout: `Literal['dashboard', 'log']`
            The arrangement of the frame, a boxed multi-panel `dashboard` or a line-per-field `log`.
        """
        if layout not in avtime.LAYOUTS:
            raise ValueError(
                "Invalid layout {%s}. Layout must be either [%s]." % (
                    layout,
                    ', '.join(avtime.LAYOUTS)
                )
            )

        self.layout = layout
        self.screen: Optional[curses.window] = None
        self.colors: bool = False

    def __enter__(self) -> Terminal:
        try:
            self.screen = curses.initscr()
            curses.noecho()
            curses.cbreak()
            self.screen.keypad(True)
            self.screen.nodelay(True)

            if curses.has_colors():
                curses.start_color()
                curses.use_default_colors()
                curses.init_pair(COLOR_PAIRS['nominal'], curses.COLOR_GREEN, -1)
                curses.init_pair(COLOR_PAIRS['caution'], curses.COLOR_YELLOW, -1)
                curses.init_pair(COLOR_PAIRS['warning'], curses.COLOR_MAGENTA, -1)
                curses.init_pair(COLOR_PAIRS['critical'], curses.COLOR_RED, -1)
                curses.init_pair(COLOR_PAIRS['title'], curses.COLOR_CYAN, -1)
                curses.init_pair(COLOR_PAIRS['text'], curses.COLOR_WHITE, -1)
                self.colors = True

        except curses.error as e:
            self.restore()
            raise TerminalError(
                'Unable to initialize the terminal, %s.' % e
            ) from e

        # Cursor visibility is not supported by every terminal
        try:
            curses.curs_set(0)
        except curses.error:
            pass

        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        self.restore()
        return False

    def restore(self):
        """ Restores the terminal to the mode it was in before the session. """
        if self.screen is None:
            return

        try:
            self.screen.keypad(False)
            curses.nocbreak()
            curses.echo()
            curses.endwin()
        except curses.error as e:
            raise TerminalError(
                'Unable to restore the terminal, %s.' % e
            ) from e
        finally:
            self.screen = None
            self.colors = False

    def attribute(self, name: str, bold: bool = False) -> int:
        """ Returns the curses attribute of a color-pair name, e.g. a `Severity`. """
        attr = curses.A_BOLD if bold else curses.A_NORMAL
        if self.colors:
            attr |= curses.color_pair(COLOR_PAIRS[name])
        elif name == 'critical':
            attr |= curses.A_REVERSE
        return attr

    def text(self, y: int, x: int, text: str, attr: int = curses.A_NORMAL):
        """ Draws `text` at row `y` and column `x`, clipped to the window. """
        height, width = self.screen.getmaxyx()
        if y < 0 or y >= height or x < 0 or x >= width:
            return

        # Writing the bottom-right cell of the window raises after the text is drawn
        try:
            self.screen.addnstr(y, x, text, width - x, attr)
        except curses.error:
            pass

    def draw(self, frame: Frame):
        """ Paints one frame to the terminal.

        Parameters
        ----------
        frame: `Frame`
            The labeled regions to paint.
        """
        if self.screen is None:
            raise TerminalError('The terminal session is not active.')

        self.screen.erase()
        if self.layout == 'log':
            self.draw_log(frame)
        else:
            self.draw_dashboard(frame)
        self.screen.refresh()

    def draw_dashboard(self, frame: Frame):
        height, width = self.screen.getmaxyx()
        panel = min(PANEL_WIDTH, width)
        x = max((width - panel) // 2, 0)
        y = max((height - 14) // 2, 0)
        rule = '─' * panel

        self.text(y, x, avtime.NAME, self.attribute('title', bold=True))
        self.text(y, x + panel - len('[q] quit'), '[q] quit', self.attribute('text'))
        self.text(y + 1, x, rule, self.attribute('text'))

        if frame.synchronizing:
            self.text(
                y + 3,
                x,
                'Synchronizing with the ntp server {%s} ...' % frame.server,
                self.attribute('caution', bold=True)
            )
            return

        self.text(y + 3, x, frame.date, self.attribute('text'))
        self.text(y + 4, x, frame.time, self.attribute('title', bold=True))
        self.text(y + 5, x, 'UTC %s' % frame.utc, self.attribute('text'))
        self.text(y + 7, x, rule, self.attribute('text'))

        self.text(y + 8, x, 'Server   %s' % frame.server, self.attribute('text'))
        self.text(y + 9, x, 'Offset   ', self.attribute('text'))
        self.text(y + 9, x + 9, frame.offset, self.attribute(frame.offset_severity, bold=True))
        self.text(y + 10, x, 'Sync     ', self.attribute('text'))
        self.text(y + 10, x + 9, frame.sync, self.attribute(frame.freshness_severity))

        label = ' %s' % frame.freshness
        bar = gauge_bar(frame.gauge, max(panel - 9 - len(label), 0))
        self.text(y + 11, x, 'Fresh    ', self.attribute('text'))
        self.text(y + 11, x + 9, bar, self.attribute(frame.freshness_severity))
        self.text(y + 11, x + 9 + len(bar), label, self.attribute(frame.freshness_severity, bold=True))
        self.text(y + 12, x, rule, self.attribute('text'))

    def draw_log(self, frame: Frame):
        if frame.synchronizing:
            self.text(0, 0, 'Synchronizing with NTP server...', self.attribute('caution'))
            self.text(1, 0, 'Server: %s' % frame.server, self.attribute('text'))
            return

        self.text(0, 0, 'Server: %s' % frame.server, self.attribute('text'))
        self.text(1, 0, 'UTC:    %s' % frame.utc, self.attribute('text'))
        self.text(2, 0, 'Local:  %s' % frame.local, self.attribute('title', bold=True))
        self.text(3, 0, 'Sync:   %s [%s]' % (frame.sync, frame.freshness), self.attribute(frame.freshness_severity))
        self.text(4, 0, 'Offset: %s' % frame.offset, self.attribute(frame.offset_severity))

    def poll(self) -> Optional[int]:
        """ Returns the next pending key code without blocking, or `None`. """
        if self.screen is None:
            raise TerminalError('The terminal session is not active.')

        key = self.screen.getch()
        return None if key == -1 else key

    def quit_requested(self) -> bool:
        """ Drains the pending keys and returns whether any of them requests to quit. """
        while True:
            key = self.poll()
            if key is None:
                return False
            if key in QUIT_KEYS:
                return True
