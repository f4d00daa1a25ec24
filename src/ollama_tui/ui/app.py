"""Main Textual TUI application.

Orchestrates the frame loop: key presses and channel events are applied to
the state machine, and the screen is redrawn from a fresh ``Frame`` at a
fixed cadence.
"""

import asyncio
import contextlib

from textual import work
from textual.app import App, ComposeResult, ScreenStackError
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.timer import Timer
from textual.widgets import Header

from ..llm.base import GenerationClient
from .channel import ChannelDisconnected, EventChannel, EventSender
from .config import MAX_EVENTS_PER_TICK, TICK_INTERVAL, LogLevel
from .frame import build_frame
from .keymap import translate_key
from .state import STATUS_DISCONNECTED, AppState
from .styles import APP_CSS
from .themes import CATPPUCCIN_MOCHA
from .widgets import ConversationView, ModelListPanel, PromptBox, StatusBar, TraceLog
from .workers import fetch_models, stream_generation


class OllamaTextualApp(App):
    """Textual TUI for chatting with local Ollama models."""

    CSS = APP_CSS
    TITLE = "Ollama TUI"
    ENABLE_COMMAND_PALETTE = False

    BINDINGS = [
        Binding("ctrl+d", "toggle_debug", "Trace", show=False),
    ]

    def __init__(
        self,
        client: GenerationClient,
        log_level: str | None = None,
        tick_interval: float = TICK_INTERVAL,
    ) -> None:
        super().__init__()
        self._client = client
        self._log_level = log_level
        self._tick_interval = tick_interval
        self._channel = EventChannel()
        self._frame_timer: Timer | None = None
        # Held for the app's lifetime so the channel only disconnects on a defect
        self._sender = self._channel.sender()
        self._state = AppState(
            spawn_generation=self._run_generation,
            debug_callback=self._debug,
        )

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def channel(self) -> EventChannel:
        return self._channel

    @property
    def root_sender(self) -> EventSender:
        """Sender held for the app's lifetime; closing it disconnects the channel."""
        return self._sender

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        with Horizontal(id="main"):
            yield ModelListPanel(id="model-list")
            with Vertical(id="right-panel"):
                yield ConversationView(id="conversation")
                yield PromptBox(id="prompt")
                yield StatusBar(id="status")

        yield TraceLog(id="trace-log")

    def on_mount(self) -> None:
        """Register the theme, start the model fetch and the frame loop."""
        self.register_theme(CATPPUCCIN_MOCHA)
        self.theme = "catppuccin-mocha"

        if self._log_level is not None:
            trace = self.query_one("#trace-log", TraceLog)
            trace.threshold = LogLevel.parse(self._log_level)
            trace.set_visible(True)
            self._debug("info", "TUI", f"Trace enabled at {trace.threshold.name}")

        self._run_fetch_models()
        self._frame_timer = self.set_interval(self._tick_interval, self._tick)
        self._redraw()

    def on_unmount(self) -> None:
        self._stop_frame_loop()
        self._channel.close()
        self._sender.close()

    def on_key(self, event: Key) -> None:
        """Translate a key press and hand it to the state machine."""
        press = translate_key(self._state.input_mode, event.key, event.character)
        if press is None:
            return
        event.stop()
        event.prevent_default()
        self._state.handle_key(press)
        if self._state.should_quit:
            self._stop_frame_loop()
            self.exit()
            return
        self._redraw()

    def _stop_frame_loop(self) -> None:
        if self._frame_timer is not None:
            self._frame_timer.stop()
            self._frame_timer = None

    def _tick(self) -> None:
        """Apply pending channel events, then redraw."""
        # A tick already queued when the loop stopped must not touch the screen
        if self._frame_timer is None:
            return
        for _ in range(MAX_EVENTS_PER_TICK):
            try:
                app_event = self._channel.try_recv()
            except ChannelDisconnected:
                self._debug("error", "TUI", STATUS_DISCONNECTED)
                self._state.disconnect()
                self._redraw()
                self._stop_frame_loop()
                self.exit(return_code=1, message=STATUS_DISCONNECTED)
                return
            if app_event is None:
                break
            self._state.handle_event(app_event)
        self._redraw()

    def _redraw(self) -> None:
        frame = build_frame(self._state)
        try:
            model_list = self.query_one("#model-list", ModelListPanel)
            conversation = self.query_one("#conversation", ConversationView)
            prompt = self.query_one("#prompt", PromptBox)
            status = self.query_one("#status", StatusBar)
        except (NoMatches, ScreenStackError):
            # Widgets are gone once the screen is torn down
            return
        model_list.show_frame(frame)
        self._state.clamp_scroll(conversation.show_frame(frame, self._state.scroll_offset))
        prompt.show_frame(frame)
        status.show_frame(frame)

    def _debug(self, level: str, component: str, message: str) -> None:
        """Route trace messages from state and workers to the trace log."""
        try:
            trace = self.query_one("#trace-log", TraceLog)
        except (NoMatches, ScreenStackError):
            return
        trace.record(LogLevel.parse(level), component, message)

    @work(group="models")
    async def _run_fetch_models(self) -> None:
        with self._sender.clone() as sender:
            await fetch_models(self._client, sender, self._debug)

    @work(group="generation")
    async def _run_generation(self, model: str, prompt: str) -> None:
        """Stream one reply as a background async worker; never cancelled by the UI."""
        with self._sender.clone() as sender:
            await stream_generation(self._client, model, prompt, sender, self._debug)

    def action_toggle_debug(self) -> None:
        """Toggle the trace log visibility."""
        is_visible = self.query_one("#trace-log", TraceLog).toggle()
        self.notify(f"Trace log {'shown' if is_visible else 'hidden'}", timeout=2)


async def run_textual_tui(
    client: GenerationClient,
    log_level: str | None = None,
) -> int:
    """Run the Textual TUI.

    Args:
        client: Generation API client; closed when the app exits
        log_level: Trace threshold (debug/info/warning/error), None to hide the trace

    Returns:
        The app's return code (non-zero after a fatal channel error)
    """
    app = OllamaTextualApp(client=client, log_level=log_level)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        with contextlib.suppress(RuntimeError):
            await client.close()
    return app.return_code or 0
