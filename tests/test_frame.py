"""Tests for building a redraw frame from the state."""
from ollama_tui.ui.frame import (
    EDITING_TITLE,
    NORMAL_TITLE,
    STATUS_ERROR_STYLE,
    STATUS_IDLE_STYLE,
    STATUS_LOADING_STYLE,
    build_frame,
    conversation_lines,
    model_items,
    status_style,
)
from ollama_tui.ui.models import Chunk, ConversationTurn, InputMode, ModelsFetched
from ollama_tui.ui.state import AppState


class TestConversationLines:
    """Tests for conversation layout."""

    def test_header_body_and_spacer_per_turn(self):
        """Test that each turn is a header, its lines and a blank line."""
        turns = [
            ConversationTurn(sender="You", text="hi"),
            ConversationTurn(sender="llama3", text="**Hello**\n\n- one"),
        ]
        lines = conversation_lines(turns)

        assert [line.plain for line in lines] == [
            "You: ", "hi", "",
            "llama3: ", "Hello", "* one", "",
        ]

    def test_error_turns_are_red(self):
        """Test the colour of error senders."""
        lines = conversation_lines([ConversationTurn(sender="Error", text="boom")])
        assert lines[0].style.color.name == "red"
        assert lines[1].style.color.name == "red"


class TestModelItems:
    """Tests for the model list."""

    def test_selected_item_is_highlighted(self):
        """Test the highlight symbol and the alignment of other items."""
        items = model_items(["llama3", "mistral"], 1)

        assert [item.plain for item in items] == ["  llama3", "> mistral"]
        assert items[1].style.bold is True

    def test_nothing_selected(self):
        """Test a catalog with no selection."""
        assert [item.plain for item in model_items(["a"], None)] == ["  a"]


class TestStatusStyle:
    """Tests for status bar colouring."""

    def test_error_wins_over_loading(self):
        """Test that any mention of an error is shown as an error."""
        assert status_style("Error occurred: boom", True) == STATUS_ERROR_STYLE
        assert status_style("Critical ERROR", False) == STATUS_ERROR_STYLE

    def test_loading(self):
        """Test the in-flight colour."""
        assert status_style("Asking llama3...", True) == STATUS_LOADING_STYLE

    def test_idle(self):
        """Test the default colour."""
        assert status_style("3 models loaded.", False) == STATUS_IDLE_STYLE


class TestBuildFrame:
    """Tests for build_frame."""

    def test_normal_mode(self):
        """Test the frame of an idle state."""
        state = AppState()
        state.handle_event(ModelsFetched(models=["llama3"]))
        frame = build_frame(state)

        assert frame.input_title == NORMAL_TITLE
        assert frame.editing is False
        assert frame.input_text.plain == ""
        assert frame.model_items[0].plain == "> llama3"
        assert frame.status.plain == state.status_message

    def test_editing_mode_shows_cursor(self):
        """Test that the input shows the buffer followed by a cursor."""
        state = AppState()
        state.input_mode = InputMode.EDITING
        state.input_buffer = "draft"
        frame = build_frame(state)

        assert frame.input_title == EDITING_TITLE
        assert frame.editing is True
        assert frame.input_text.plain == "draft█"

    def test_streaming_reply_is_rendered(self):
        """Test that a partial reply is rendered as it grows."""
        state = AppState()
        state.handle_event(ModelsFetched(models=["llama3"]))
        state.input_buffer = "hi"
        state.submit_prompt()
        state.handle_event(Chunk("**bo"))

        lines = [line.plain for line in build_frame(state).conversation]
        assert lines[-2] == "**bo"
        assert build_frame(state).status.style == STATUS_LOADING_STYLE

    def test_does_not_mutate_state(self):
        """Test that building a frame leaves the state untouched."""
        state = AppState()
        state.conversation.append(ConversationTurn(sender="You", text="hi"))
        build_frame(state)
        build_frame(state)
        assert len(state.conversation) == 1
