"""
Terminal output for the tracewise CLI.

Colors come from the Flexoki palette by Steph Ango (https://stephango.com/flexoki),
with extra styles for drawing span trees.
"""

import os
from contextlib import contextmanager
from typing import Optional

from rich.console import Console as RichConsole
from rich.live import Live
from rich.measure import Measurement
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)
from rich.style import Style
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from tracewise_core.models.config import TracewiseConfig

# Flexoki color palette (dark theme - 400 series)
COLORS_DARK = {
    'bg': '#1C1B1A',
    'bg_2': '#282726',
    'ui': '#343331',
    'ui_2': '#403E3C',
    'ui_3': '#575653',
    'tx_3': '#B7B5AC',
    'tx_2': '#CECDC3',
    'tx': '#E6E4D9',
    'black': '#100F0F',
    'white': '#FFFCF0',
    'red': '#D14D41',
    'orange': '#DA702C',
    'yellow': '#D0A215',
    'green': '#879A39',
    'cyan': '#3AA99F',
    'blue': '#4385BE',
    'purple': '#8B7EC8',
    'magenta': '#CE5D97',
}

# Flexoki color palette (light theme - 600 series)
COLORS_LIGHT = {
    'bg': '#FFFCF0',
    'bg_2': '#F2F0E5',
    'ui': '#E6E4D9',
    'ui_2': '#DAD8CE',
    'ui_3': '#B7B5AC',
    'tx_3': '#6F6E69',
    'tx_2': '#403E3C',
    'tx': '#100F0F',
    'black': '#100F0F',
    'white': '#FFFCF0',
    'red': '#AF3029',
    'orange': '#BC5215',
    'yellow': '#AD8301',
    'green': '#66800B',
    'cyan': '#24837B',
    'blue': '#205EA6',
    'purple': '#5E409D',
    'magenta': '#A02F6F',
}

ACCENTS = ('red', 'orange', 'yellow', 'green', 'cyan', 'blue', 'purple', 'magenta')

# COLORFGBG background codes, as set by rxvt and konsole
LIGHT_BACKGROUNDS = {7, 15}

# Message kind -> default icon
ICONS = {
    'success': '✓',
    'info': 'ℹ',
    'warning': '⚠',
    'error': '✗',
}


def build_theme(colors: dict) -> Theme:
    """Rich theme with the message, span tree and progress styles."""
    return Theme(
        {
            'default': colors['tx'],
            'muted': colors['tx_2'],
            'faint': colors['tx_3'],
            **{name: colors[name] for name in ACCENTS},
            'success': f'bold {colors["green"]}',
            'info': colors['cyan'],
            'warning': f'bold {colors["orange"]}',
            'error': f'bold {colors["red"]}',
            'highlight': f'bold {colors["yellow"]}',
            'link': f'underline {colors["blue"]}',
            'repr.number': Style(color=colors['blue'], bold=True, italic=False),
            'span.name': f'bold {colors["tx"]}',
            'span.error': f'bold {colors["red"]}',
            'span.duration': colors['cyan'],
            'span.attribute': colors['tx_3'],
            'span.event': colors['purple'],
            'tree.line': colors['ui_3'],
            'bar.complete': colors['blue'],
            'bar.finished': colors['blue'],
            'bar.pulse': colors['blue'],
            'progress.description': colors['tx_2'],
            'progress.percentage': colors['tx_2'],
            'progress.remaining': colors['tx_2'],
            'progress.spinner': colors['tx_3'],
            'status.spinner': colors['tx_3'],
        }
    )


class Shimmer:
    """Text with a dimmed spot sweeping back and forth across it.

    Every render moves the spot, so a `Live` display animates it.
    """

    def __init__(
        self,
        text: str,
        normal_color: str,
        dim_color: str,
        mid_color: str,
        speed: float = 1.0,
    ):
        self.text = text
        self.normal_color = normal_color
        self.dim_color = dim_color
        self.mid_color = mid_color
        self.frames_per_step = max(1, int(1.0 / speed))

        self.position = 0
        self.direction = 1
        self._frame_count = 0

    def _advance(self):
        if self._frame_count % self.frames_per_step == 0:
            self.position += self.direction
            if self.position >= len(self.text) - 1:
                self.direction = -1
            elif self.position <= 0:
                self.direction = 1
        self._frame_count += 1

    def _color_at(self, index: int) -> str:
        distance = abs(index - self.position)
        if distance == 0:
            return self.dim_color
        if distance == 1:
            return self.mid_color
        return self.normal_color

    def __rich_console__(self, console, options):
        self._advance()
        text = Text()
        for index, char in enumerate(self.text):
            text.append(char, style=self._color_at(index))
        yield text

    def __rich_measure__(self, console, options):
        return Measurement(len(self.text), len(self.text))


class Console:
    """Themed wrapper around a Rich console used by every tracewise command."""

    @staticmethod
    def detect_terminal_background(config: Optional[TracewiseConfig] = None) -> str:
        """Return 'light' or 'dark'.

        The configured theme wins. Otherwise the background code at the end of
        COLORFGBG (e.g. "15;0") decides, and anything unknown means 'dark'.
        """
        if config is not None and config.theme is not None:
            return config.theme

        background = os.environ.get('COLORFGBG', '').split(';')[-1]
        if background.isdigit() and int(background) in LIGHT_BACKGROUNDS:
            return 'light'

        return 'dark'

    def __init__(
        self,
        theme_mode: Optional[str] = None,
        config: Optional[TracewiseConfig] = None,
    ):
        if theme_mode is None:
            theme_mode = self.detect_terminal_background(config or TracewiseConfig())

        self.theme_mode = theme_mode
        self.COLORS = COLORS_LIGHT if theme_mode == 'light' else COLORS_DARK
        self.theme = build_theme(self.COLORS)
        self.console = RichConsole(theme=self.theme)

    def print(self, *args, style=None, **kwargs):
        self.console.print(*args, style=style, **kwargs)

    def _message(self, kind: str, message: str, prefix: Optional[str] = None):
        # The message is a Text, not markup: exception texts contain [sku]s
        grid = Table.grid(padding=(0, 1), expand=False)
        grid.add_column(width=1)
        grid.add_column()
        grid.add_row(Text(prefix or ICONS[kind], style=kind), Text(message))
        self.print(grid)

    def success(self, message: str, prefix: Optional[str] = None):
        self._message('success', message, prefix)

    def info(self, message: str, prefix: Optional[str] = None):
        self._message('info', message, prefix)

    def warning(self, message: str, prefix: Optional[str] = None):
        self._message('warning', message, prefix)

    def error(self, message: str, prefix: Optional[str] = None):
        self._message('error', message, prefix)

    def muted(self, message: str):
        self.print(message, style='muted')

    def faint(self, message: str):
        self.print(message, style='faint')

    def highlight(self, message: str):
        self.print(message, style='highlight')

    def action(self, message: str, style: str = 'faint', space_before: bool = False):
        """Print the step a command is about to take, followed by a blank line."""
        if space_before:
            self.newline()
        self.print(f'[{style}]▣[/{style}] {message}')
        self.newline()

    def separator(self, title: Optional[str] = None):
        """Left-aligned horizontal rule, e.g. above a list of traces."""
        self.console.rule(title, style=self.COLORS['ui_2'], align='left')

    @contextmanager
    def progress(self, description: str = 'Working...'):
        """Transient progress bar; yields the Rich `Progress` to add tasks to.

        Usage:
            with console.progress('Checking out') as progress:
                task = progress.add_task('Checking out', total=len(orders))
                ...
                progress.update(task, advance=1)
        """
        progress = Progress(
            TextColumn('[progress.description]{task.description}'),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=self.console,
            transient=True,
        )

        with progress:
            yield progress

    @contextmanager
    def shimmer(self, message: str = 'Loading...', speed: float = 1.0):
        """Show `message` shimmering while the block runs, then clear it."""
        shimmer = Shimmer(
            text=message,
            normal_color=self.COLORS['tx'],
            dim_color=self.COLORS['tx_3'],
            mid_color=self.COLORS['tx_2'],
            speed=speed,
        )

        with Live(shimmer, console=self.console, refresh_per_second=20, transient=True):
            yield

    def newline(self, count: int = 1):
        self.console.print('\n' * (count - 1))
