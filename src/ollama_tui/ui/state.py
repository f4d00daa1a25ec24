"""Application state machine.

Owns the view model (conversation log, model catalog, input buffer, mode)
and applies the two independent input sources to it: key presses from
the terminal and events from background workers. Nothing here touches the
terminal or the network; generation is started through a spawn callback.
"""

from collections.abc import Callable

from .config import (
    ERROR_SENDER,
    FALLBACK_MODEL_SENDER,
    SCROLL_STEP,
    SYSTEM_ERROR_SENDER,
    USER_SENDER,
)
from .keymap import Command, KeyPress
from .models import (
    AppEvent,
    Chunk,
    ConversationTurn,
    Done,
    InputMode,
    ModelsFetched,
    StreamError,
)

SpawnGeneration = Callable[[str, str], None]
DebugCallback = Callable[[str, str, str], None]

STATUS_FETCHING = "Fetching models..."
STATUS_EDITING = "Editing prompt... Enter: Newline, Ctrl+S: Send, Esc: Cancel."
STATUS_SELECT_FIRST = "Select a model first (Up/Down keys)."
STATUS_CANCELLED = "Input cancelled. Press 'Enter' to start typing again."
STATUS_EMPTY_PROMPT = "Cannot send an empty prompt."
STATUS_NO_MODEL = "Error: No model selected."
STATUS_BUSY = "Still waiting for the current reply. Try again when it finishes."
STATUS_NO_MODELS = "No models found on Ollama server."
STATUS_RECEIVED = "Response received. Press 'Enter' to type (Ctrl+S to send)."
STATUS_DISCONNECTED = "Critical Error: Async event channel disconnected."


class AppState:
    """View model plus the transitions that mutate it.

    Invariants:
    - ``selected_model_index`` is None or a valid index into ``models``
    - at most one turn is open: the last one, attributed to the model of
      the generation in flight
    """

    def __init__(
        self,
        spawn_generation: SpawnGeneration | None = None,
        debug_callback: DebugCallback | None = None,
    ) -> None:
        self.input_mode = InputMode.NORMAL
        self.input_buffer = ""
        self.conversation: list[ConversationTurn] = []
        self.models: list[str] = []
        self.selected_model_index: int | None = None
        self.is_loading = False
        self.status_message = STATUS_FETCHING
        self.scroll_offset = 0
        self.should_quit = False
        self._spawn_generation = spawn_generation
        self._debug_callback = debug_callback
        self._active_model: str | None = None
        self._generation_failed = False
        self._awaiting_done = False

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "State", message)

    @property
    def selected_model(self) -> str | None:
        if self.selected_model_index is None:
            return None
        return self.models[self.selected_model_index]

    @property
    def active_model(self) -> str | None:
        """Model of the generation in flight (or of the last one)."""
        return self._active_model

    # --- Key presses -------------------------------------------------

    def handle_key(self, press: KeyPress) -> None:
        """Apply one translated key press for the current mode."""
        if self.input_mode is InputMode.NORMAL:
            self._handle_normal_key(press)
        else:
            self._handle_editing_key(press)

    def _handle_normal_key(self, press: KeyPress) -> None:
        command = press.command
        if command is Command.QUIT:
            self.should_quit = True
        elif command is Command.SELECT_NEXT:
            self._move_selection(1)
        elif command is Command.SELECT_PREVIOUS:
            self._move_selection(-1)
        elif command is Command.CONFIRM:
            if self.selected_model_index is not None:
                self.input_mode = InputMode.EDITING
                self.status_message = STATUS_EDITING
            else:
                self.status_message = STATUS_SELECT_FIRST
        elif command is Command.SCROLL_DOWN:
            self.scroll_offset += SCROLL_STEP
        elif command is Command.SCROLL_UP:
            self.scroll_offset = max(0, self.scroll_offset - SCROLL_STEP)

    def _handle_editing_key(self, press: KeyPress) -> None:
        command = press.command
        if command is Command.SEND:
            self.submit_prompt()
        elif command is Command.NEWLINE:
            self.input_buffer += "\n"
        elif command is Command.INSERT:
            self.input_buffer += press.char
        elif command is Command.ERASE:
            self.input_buffer = self.input_buffer[:-1]
        elif command is Command.CANCEL:
            self.input_mode = InputMode.NORMAL
            self.input_buffer = ""
            self.status_message = STATUS_CANCELLED

    def _move_selection(self, step: int) -> None:
        if not self.models:
            return
        current = self.selected_model_index or 0
        self.selected_model_index = (current + step) % len(self.models)

    def submit_prompt(self) -> None:
        """Send the input buffer to the selected model.

        Always leaves the state in Normal mode; the reply arrives later
        through ``handle_event``.
        """
        model = self.selected_model
        prompt = self.input_buffer.strip()
        if model is None:
            self.status_message = STATUS_NO_MODEL
        elif not prompt:
            self.status_message = STATUS_EMPTY_PROMPT
        elif self._awaiting_done:
            self.status_message = STATUS_BUSY
        else:
            self.conversation.append(ConversationTurn(sender=USER_SENDER, text=prompt))
            self.input_buffer = ""
            self.is_loading = True
            self._awaiting_done = True
            self._active_model = model
            self._generation_failed = False
            self.status_message = f"Asking {model}..."
            self.scroll_offset = 0
            self._debug("info", f"Submitting {len(prompt)} chars to {model}")
            if self._spawn_generation:
                self._spawn_generation(model, prompt)
        self.input_mode = InputMode.NORMAL

    # --- Channel events ----------------------------------------------

    def handle_event(self, event: AppEvent) -> None:
        """Apply one event received from a background worker."""
        if isinstance(event, ModelsFetched):
            self._on_models_fetched(event)
        elif isinstance(event, Chunk):
            self._on_chunk(event.text)
        elif isinstance(event, StreamError):
            self._on_stream_error(event.message)
        elif isinstance(event, Done):
            self._on_done()

    def _on_models_fetched(self, event: ModelsFetched) -> None:
        if not event.ok:
            self.status_message = f"Error fetching models: {event.error}"
            self.conversation.append(
                ConversationTurn(
                    sender=SYSTEM_ERROR_SENDER,
                    text=f"Failed to fetch models: {event.error}",
                )
            )
            self._debug("error", f"Model list failed: {event.error}")
            return

        self.models = list(event.models)
        if self.models:
            self.selected_model_index = 0
            self.status_message = (
                f"{len(self.models)} models loaded. "
                "Select: Up/Down, Chat: Enter (then Ctrl+S to send)"
            )
        else:
            self.selected_model_index = None
            self.status_message = STATUS_NO_MODELS
        self._debug("info", f"Catalog replaced with {len(self.models)} model(s)")

    def _on_chunk(self, text: str) -> None:
        sender = self._active_model or self.selected_model or FALLBACK_MODEL_SENDER
        if self.conversation and self.conversation[-1].sender == sender:
            self.conversation[-1].text += text
        else:
            self.conversation.append(ConversationTurn(sender=sender, text=text))

    def _on_stream_error(self, message: str) -> None:
        self.conversation.append(ConversationTurn(sender=ERROR_SENDER, text=message))
        self.status_message = f"Error occurred: {message}"
        self._generation_failed = True
        self._finish_loading()
        self._debug("error", message)

    def _on_done(self) -> None:
        self._awaiting_done = False
        if not self._generation_failed:
            self.status_message = STATUS_RECEIVED
        self._finish_loading()

    def _finish_loading(self) -> None:
        if self.is_loading:
            self.is_loading = False
            self._debug("debug", "Generation finished")

    def disconnect(self) -> None:
        """Record that the event channel broke; the loop must stop."""
        self.status_message = STATUS_DISCONNECTED
        self.is_loading = False
        self.should_quit = True

    # --- Frame feedback ----------------------------------------------

    def clamp_scroll(self, max_offset: int) -> None:
        """Keep the scroll offset within the rendered content height."""
        self.scroll_offset = max(0, min(self.scroll_offset, max_offset))
