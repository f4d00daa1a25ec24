"""Terminal UI module for ollama-tui.

Provides a Textual-based TUI for chatting with local models.

Module structure (each module hides a design decision):
- models.py: Data structures (turns, input modes, worker events)
- formatting.py: Markdown to styled lines
- channel.py: Bounded event queue between workers and the frame loop
- keymap.py: Key bindings per input mode
- state.py: Application state machine
- frame.py: Layout of one redraw from the state
- workers.py: Network work feeding the event channel
- widgets.py: Custom widgets (model list, conversation, prompt, status, trace)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- app.py: Application orchestration (frame loop)
"""

from .app import OllamaTextualApp, run_textual_tui
from .channel import ChannelClosed, ChannelDisconnected, EventChannel, EventSender
from .config import LogLevel
from .formatting import StyledLine, StyledSpan, render_markdown
from .frame import Frame, build_frame
from .keymap import Command, KeyPress, translate_key
from .models import (
    AppEvent,
    Chunk,
    ConversationTurn,
    Done,
    InputMode,
    ModelsFetched,
    StreamError,
)
from .state import AppState
from .workers import fetch_models, stream_generation

__all__ = [
    "AppEvent",
    "AppState",
    "ChannelClosed",
    "ChannelDisconnected",
    "Chunk",
    "Command",
    "ConversationTurn",
    "Done",
    "EventChannel",
    "EventSender",
    "Frame",
    "InputMode",
    "KeyPress",
    "LogLevel",
    "ModelsFetched",
    "OllamaTextualApp",
    "StreamError",
    "StyledLine",
    "StyledSpan",
    "build_frame",
    "fetch_models",
    "render_markdown",
    "run_textual_tui",
    "stream_generation",
    "translate_key",
]
