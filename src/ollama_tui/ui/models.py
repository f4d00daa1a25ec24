"""Data models for the TUI.

Hides the internal representation of conversation turns, input modes
and the events background workers send to the interface.
"""

from dataclasses import dataclass, field
from enum import Enum

from ..llm.errors import OllamaError


class InputMode(Enum):
    """Keyboard mode of the application."""

    NORMAL = "normal"  # navigation
    EDITING = "editing"  # text entry


@dataclass
class ConversationTurn:
    """One attributed message in the conversation log."""

    sender: str
    text: str


@dataclass(frozen=True)
class ModelsFetched:
    """Result of listing the installed models."""

    models: list[str] = field(default_factory=list)
    error: OllamaError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class Chunk:
    """A fragment of reply text, in generation order."""

    text: str


@dataclass(frozen=True)
class Done:
    """Terminal signal of one generation; always sent exactly once."""


@dataclass(frozen=True)
class StreamError:
    """A failure during one generation; a ``Done`` still follows."""

    message: str


AppEvent = ModelsFetched | Chunk | Done | StreamError
