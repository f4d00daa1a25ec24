"""Translation of terminal key presses into application commands.

Hides the key bindings from the state machine, which only ever sees
``KeyPress`` values.
"""

from dataclasses import dataclass
from enum import Enum

from .models import InputMode


class Command(Enum):
    QUIT = "quit"
    SELECT_NEXT = "select_next"
    SELECT_PREVIOUS = "select_previous"
    CONFIRM = "confirm"
    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"
    INSERT = "insert"
    NEWLINE = "newline"
    ERASE = "erase"
    CANCEL = "cancel"
    SEND = "send"


@dataclass(frozen=True)
class KeyPress:
    """A command plus the character it carries (``INSERT`` only)."""

    command: Command
    char: str = ""


NORMAL_KEYS = {
    "q": Command.QUIT,
    "j": Command.SELECT_NEXT,
    "down": Command.SELECT_NEXT,
    "k": Command.SELECT_PREVIOUS,
    "up": Command.SELECT_PREVIOUS,
    "enter": Command.CONFIRM,
    "pagedown": Command.SCROLL_DOWN,
    "pageup": Command.SCROLL_UP,
}

EDITING_KEYS = {
    "ctrl+s": Command.SEND,
    "enter": Command.NEWLINE,
    "backspace": Command.ERASE,
    "escape": Command.CANCEL,
}


def translate_key(mode: InputMode, key: str, character: str | None = None) -> KeyPress | None:
    """Map a Textual key name (and its printable character) to a command.

    Returns None for keys with no meaning in ``mode``.
    """
    if mode is InputMode.NORMAL:
        command = NORMAL_KEYS.get(key)
        return KeyPress(command) if command else None

    command = EDITING_KEYS.get(key)
    if command:
        return KeyPress(command)
    if character and len(character) == 1 and character.isprintable():
        return KeyPress(Command.INSERT, character)
    return None
