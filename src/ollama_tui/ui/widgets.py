"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Model list highlighting
- Conversation scrolling
- Prompt box titles while editing
- Status bar colouring
- Trace log filtering

Every widget is passive: it shows whatever the latest ``Frame`` holds.
"""

from datetime import datetime

from rich.console import Group
from rich.text import Text
from textual.app import ComposeResult
from textual.color import Color
from textual.containers import VerticalScroll
from textual.widgets import RichLog, Static

from .config import LogLevel
from .frame import Frame


class ModelListPanel(Static):
    """List of installed models with the selection highlighted."""

    BORDER_TITLE = "Models (j/k)"

    def show_frame(self, frame: Frame) -> None:
        if frame.model_items:
            self.update(Group(*frame.model_items))
        else:
            self.update(Text("No models", style="dim"))


class ConversationView(VerticalScroll):
    """Scrollable conversation log driven by the state's scroll offset."""

    BORDER_TITLE = "Conversation (PgUp/PgDn)"
    can_focus = False

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._body = Static(id="conversation-body")

    def compose(self) -> ComposeResult:
        yield self._body

    def show_frame(self, frame: Frame, scroll_offset: int) -> int:
        """Draw the conversation and scroll to ``scroll_offset``.

        Returns:
            The largest offset the content allows, for clamping
        """
        self._body.update(Group(*frame.conversation))
        self.scroll_to(y=scroll_offset, animate=False)
        return int(self.max_scroll_y)


class PromptBox(Static):
    """Multi-line prompt editor display."""

    def show_frame(self, frame: Frame) -> None:
        self.border_title = frame.input_title
        self.set_class(frame.editing, "-editing")
        self.update(frame.input_text)


class StatusBar(Static):
    """Single status line coloured by severity."""

    def show_frame(self, frame: Frame) -> None:
        bgcolor = frame.status.style.bgcolor
        self.styles.background = Color.from_rich_color(bgcolor) if bgcolor else None
        self.update(frame.status)


class TraceLog(RichLog):
    """Timestamped trace of state changes, worker progress and HTTP failures.

    Entries below ``threshold`` are dropped when written, so raising the
    threshold later does not bring them back. Hidden until the app starts
    with ``--log-level`` or the user presses Ctrl+D.
    """

    BORDER_TITLE = "Trace"

    LEVEL_STYLES = {
        LogLevel.DEBUG: "dim white",
        LogLevel.INFO: "cyan",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "red",
    }
    COMPONENT_STYLES = {
        "TUI": "cyan",
        "State": "green",
        "Worker": "bright_yellow",
        "HTTP": "magenta",
    }

    def __init__(self, *args, threshold: LogLevel = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(*args, markup=False, highlight=False, wrap=True, **kwargs)
        self._threshold = threshold

    @property
    def threshold(self) -> LogLevel:
        return self._threshold

    @threshold.setter
    def threshold(self, level: LogLevel) -> None:
        self._threshold = level
        self._refresh_subtitle()

    def on_mount(self) -> None:
        self.display = False
        self._refresh_subtitle()

    def _refresh_subtitle(self) -> None:
        self.border_subtitle = f">= {self._threshold.name}" if self.display else "Hidden"

    def record(self, level: LogLevel, component: str, message: str) -> None:
        """Append one entry unless it is below the threshold."""
        if level < self._threshold:
            return
        self.write(Text.assemble(
            (datetime.now().strftime("%H:%M:%S"), "dim"),
            " ",
            (f"{level.name:<7}", self.LEVEL_STYLES[level]),
            " ",
            (f"[{component}]", self.COMPONENT_STYLES.get(component, "white")),
            " ",
            message,
        ))

    def set_visible(self, visible: bool) -> None:
        self.display = visible
        self._refresh_subtitle()

    def toggle(self) -> bool:
        """Flip visibility and return the new state."""
        self.set_visible(not self.display)
        return self.display
