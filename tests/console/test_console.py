"""
Unit tests for the Console class.

Tests cover:
- Theme detection
- Message types (success, info, warning, error)
- Text styles (muted, faint, highlight)
- Trace tree styles
- Separators
- Context managers (progress, shimmer)
"""

import os
from unittest.mock import patch

from rich.console import Console as RichConsole
from rich.table import Table

from tracewise_cli.console.console import Console, COLORS_DARK, COLORS_LIGHT, Shimmer
from tracewise_core.models.config import TracewiseConfig


class TestConsoleThemeDetection:
    """Tests for terminal background detection and theme selection."""

    def test_detect_terminal_background_from_config(self):
        """Test theme detection from TracewiseConfig."""
        assert Console.detect_terminal_background(TracewiseConfig(theme='dark')) == 'dark'
        assert Console.detect_terminal_background(TracewiseConfig(theme='light')) == 'light'

    @patch.dict(os.environ, {'COLORFGBG': '15;0'})
    def test_detect_terminal_background_from_colorfgbg_dark(self):
        assert Console.detect_terminal_background() == 'dark'

    @patch.dict(os.environ, {'COLORFGBG': '0;7'})
    def test_detect_terminal_background_from_colorfgbg_light(self):
        assert Console.detect_terminal_background() == 'light'

    @patch.dict(os.environ, {'COLORFGBG': '0;default'})
    def test_detect_terminal_background_unparsable_colorfgbg(self):
        assert Console.detect_terminal_background() == 'dark'

    @patch.dict(os.environ, {}, clear=True)
    def test_detect_terminal_background_default_dark(self):
        """Test default theme when no detection method works."""
        assert Console.detect_terminal_background() == 'dark'

    def test_detect_terminal_background_config_overrides_env(self):
        """Test that config theme takes precedence over environment variables."""
        with patch.dict(os.environ, {'COLORFGBG': '0;7'}):
            config = TracewiseConfig(theme='dark')
            assert Console.detect_terminal_background(config) == 'dark'


class TestConsoleInitialization:
    """Tests for Console initialization and configuration."""

    @patch.dict(os.environ, {}, clear=True)
    def test_console_initialization_default(self):
        console = Console()
        assert console.theme_mode == 'dark'
        assert console.COLORS == COLORS_DARK
        assert isinstance(console.console, RichConsole)

    def test_console_initialization_light_theme(self):
        console = Console(theme_mode='light')
        assert console.theme_mode == 'light'
        assert console.COLORS == COLORS_LIGHT

    def test_console_initialization_with_config(self):
        console = Console(config=TracewiseConfig(theme='light'))
        assert console.theme_mode == 'light'

    def test_console_theme_has_trace_styles(self):
        """Test that console theme includes the styles used by trace trees."""
        theme_styles = Console().theme.styles

        for style in [
            'success',
            'info',
            'warning',
            'error',
            'muted',
            'faint',
            'highlight',
            'span.name',
            'span.error',
            'span.duration',
            'span.attribute',
            'span.event',
            'tree.line',
        ]:
            assert style in theme_styles


class TestConsoleMessageTypes:
    """Tests for styled message output methods."""

    @patch('tracewise_cli.console.console.RichConsole.print')
    def test_messages_print_a_grid(self, mock_print):
        console = Console()

        for method in (console.success, console.info, console.warning, console.error):
            mock_print.reset_mock()
            method('Message')

            mock_print.assert_called_once()
            assert isinstance(mock_print.call_args[0][0], Table)

    @patch('tracewise_cli.console.console.RichConsole.print')
    def test_message_with_custom_prefix(self, mock_print):
        console = Console()
        console.info('Traces written', prefix='→')

        grid = mock_print.call_args[0][0]
        icon = grid.columns[0]._cells[0]
        assert icon.plain == '→'
        assert icon.style == 'info'

    @patch('tracewise_cli.console.console.RichConsole.print')
    def test_message_with_square_brackets(self, mock_print):
        """Messages are not parsed as markup, e.g. exception texts with SKUs."""
        console = Console()
        console.error('Unknown item [unicorn]')

        grid = mock_print.call_args[0][0]
        cell = grid.columns[1]._cells[0]
        assert cell.plain == 'Unknown item [unicorn]'


class TestConsoleTextStyles:
    """Tests for text styling methods."""

    @patch('tracewise_cli.console.console.RichConsole.print')
    def test_text_styles(self, mock_print):
        console = Console()

        for method, style in (
            (console.muted, 'muted'),
            (console.faint, 'faint'),
            (console.highlight, 'highlight'),
        ):
            mock_print.reset_mock()
            method('Styled message')

            assert mock_print.call_args[0][0] == 'Styled message'
            assert mock_print.call_args[1]['style'] == style

    @patch('tracewise_cli.console.console.RichConsole.print')
    def test_action_method(self, mock_print):
        console = Console()
        console.action('Checking out 3 orders')

        assert 'Checking out 3 orders' in str(mock_print.call_args_list)

    @patch('tracewise_cli.console.console.RichConsole.print')
    def test_action_method_with_space_before(self, mock_print):
        console = Console()
        console.action('Action with space', space_before=True)

        assert mock_print.call_count >= 3


class TestConsoleSeparators:
    @patch('tracewise_cli.console.console.RichConsole.rule')
    def test_separator(self, mock_rule):
        console = Console()
        console.separator('Traces')

        mock_rule.assert_called_once()
        assert mock_rule.call_args[0][0] == 'Traces'


class TestConsoleContextManagers:
    def test_progress_yields_a_progress(self):
        console = Console()

        with console.progress('Checking out') as progress:
            task = progress.add_task('Checking out', total=2)
            progress.update(task, advance=2)

            assert progress.tasks[0].completed == 2

    def test_shimmer_runs_the_block(self):
        console = Console()
        ran = []

        with console.shimmer('Checking installed exporters...'):
            ran.append(True)

        assert ran == [True]


class TestShimmer:
    def test_shimmer_moves_and_bounces(self):
        shimmer = Shimmer('abc', normal_color='white', dim_color='grey', mid_color='red')
        console = RichConsole()

        positions = []
        for _ in range(4):
            list(shimmer.__rich_console__(console, console.options))
            positions.append(shimmer.position)

        assert positions == [1, 2, 1, 0]

    def test_shimmer_measure(self):
        shimmer = Shimmer('Loading', normal_color='white', dim_color='grey', mid_color='red')
        console = RichConsole()

        measurement = shimmer.__rich_measure__(console, console.options)

        assert measurement.minimum == 7
        assert measurement.maximum == 7
