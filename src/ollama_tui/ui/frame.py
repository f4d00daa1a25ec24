"""Frame layout for one redraw.

Hides how the state machine's view model becomes screen content. A
``Frame`` is an immutable snapshot built from ``AppState`` each tick; the
widgets only copy it onto the screen.
"""

from dataclasses import dataclass

from rich.style import Style
from rich.text import Text

from .config import ERROR_SENDER, SYSTEM_ERROR_SENDER, USER_SENDER
from .formatting import render_markdown
from .models import ConversationTurn, InputMode
from .state import AppState

USER_HEADER_STYLE = Style(color="green", bold=True)
ERROR_HEADER_STYLE = Style(color="red", bold=True)
MODEL_HEADER_STYLE = Style(color="cyan", bold=True)

USER_TEXT_STYLE = Style.null()
ERROR_TEXT_STYLE = Style(color="red")
MODEL_TEXT_STYLE = Style(color="cyan")

SELECTED_MODEL_STYLE = Style(bold=True, bgcolor="blue")
HIGHLIGHT_SYMBOL = "> "

STATUS_ERROR_STYLE = Style(color="white", bgcolor="red")
STATUS_LOADING_STYLE = Style(color="black", bgcolor="yellow")
STATUS_IDLE_STYLE = Style(color="white", bgcolor="grey23")

EDITING_TITLE = "Input (Enter: Newline, Ctrl+S: Send, Esc: Cancel)"
NORMAL_TITLE = "Input (Press Enter to type)"
CURSOR_GLYPH = "█"


@dataclass(frozen=True)
class Frame:
    """Everything one redraw puts on screen."""

    model_items: tuple[Text, ...]
    conversation: tuple[Text, ...]
    input_text: Text
    input_title: str
    editing: bool
    status: Text


def _sender_styles(sender: str) -> tuple[Style, Style]:
    if sender == USER_SENDER:
        return USER_HEADER_STYLE, USER_TEXT_STYLE
    if sender in (ERROR_SENDER, SYSTEM_ERROR_SENDER):
        return ERROR_HEADER_STYLE, ERROR_TEXT_STYLE
    return MODEL_HEADER_STYLE, MODEL_TEXT_STYLE


def conversation_lines(turns: list[ConversationTurn]) -> list[Text]:
    """Header, rendered body and a blank spacer for every turn."""
    lines: list[Text] = []
    for turn in turns:
        header_style, text_style = _sender_styles(turn.sender)
        lines.append(Text(f"{turn.sender}: ", style=header_style, end=""))
        lines.extend(line.to_text(text_style) for line in render_markdown(turn.text))
        lines.append(Text("", end=""))
    return lines


def model_items(models: list[str], selected: int | None) -> list[Text]:
    items = []
    for index, name in enumerate(models):
        if index == selected:
            items.append(Text(HIGHLIGHT_SYMBOL + name, style=SELECTED_MODEL_STYLE, end=""))
        else:
            items.append(Text(" " * len(HIGHLIGHT_SYMBOL) + name, end=""))
    return items


def status_style(status_message: str, is_loading: bool) -> Style:
    if "error" in status_message.lower():
        return STATUS_ERROR_STYLE
    if is_loading:
        return STATUS_LOADING_STYLE
    return STATUS_IDLE_STYLE


def build_frame(state: AppState) -> Frame:
    """Snapshot the state for drawing. Does not mutate ``state``."""
    editing = state.input_mode is InputMode.EDITING
    input_text = Text(state.input_buffer, end="")
    if editing:
        input_text.append(CURSOR_GLYPH, style="blink")

    return Frame(
        model_items=tuple(model_items(state.models, state.selected_model_index)),
        conversation=tuple(conversation_lines(state.conversation)),
        input_text=input_text,
        input_title=EDITING_TITLE if editing else NORMAL_TITLE,
        editing=editing,
        status=Text(
            state.status_message,
            style=status_style(state.status_message, state.is_loading),
            end="",
        ),
    )
