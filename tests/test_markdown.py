"""Tests for the markdown-to-styled-lines renderer."""
from hypothesis import given
from hypothesis import strategies as st
from rich.style import Style

from ollama_tui.ui.formatting import (
    CODE_BLOCK_STYLE,
    HEADING_STYLE,
    INLINE_CODE_STYLE,
    LIST_MARKER_STYLE,
    TASK_MARKER_STYLE,
    StyledLine,
    render_markdown,
)


def plain(text: str) -> list[str]:
    return [line.plain for line in render_markdown(text)]


class TestInline:
    """Tests for inline markup."""

    def test_bold_and_italic_spans(self):
        """Test that emphasis produces three spans with the right styles."""
        lines = render_markdown("**bold** and *italic*")

        assert len(lines) == 1
        spans = lines[0].spans
        assert [span.text for span in spans] == ["bold", " and ", "italic"]
        assert spans[0].style.bold is True
        assert spans[1].style == Style.null()
        assert spans[2].style.italic is True

    def test_nested_emphasis_combines_styles(self):
        """Test that italic inside bold carries both attributes."""
        spans = render_markdown("**strong *nested* text**")[0].spans

        assert [span.text for span in spans] == ["strong ", "nested", " text"]
        assert spans[1].style.bold is True
        assert spans[1].style.italic is True
        assert not spans[2].style.italic

    def test_inline_code(self):
        """Test that inline code is a distinct styled span."""
        spans = render_markdown("run `ls -la` now")[0].spans

        assert [span.text for span in spans] == ["run ", "ls -la", " now"]
        assert spans[1].style == INLINE_CODE_STYLE

    def test_link_text_is_underlined(self):
        """Test that link text is kept and styled, the target dropped."""
        lines = render_markdown("see [the docs](https://ollama.com)")

        assert lines[0].plain == "see the docs"
        link = lines[0].spans[-1]
        assert link.style.underline is True
        assert link.style.color.name == "blue"

    def test_strikethrough(self):
        """Test that struck-through text is marked as such."""
        assert render_markdown("~~gone~~")[0].spans[0].style.strike is True

    def test_image_placeholder_without_alt_text(self):
        """Test that images become a placeholder and the alt text is dropped."""
        lines = plain("![a diagram](diagram.png)")
        assert lines == ["[Image]"]

    def test_soft_break_joins_lines(self):
        """Test that a single newline inside a paragraph becomes a space."""
        assert plain("line one\nline two") == ["line one line two"]

    def test_hard_break_splits_lines(self):
        """Test that a trailing double space forces a new line."""
        assert plain("line one  \nline two") == ["line one", "line two"]


class TestBlocks:
    """Tests for block-level markup."""

    def test_heading(self):
        """Test that headings keep their level prefix and accent style."""
        lines = render_markdown("## Setup")

        assert plain("## Setup") == ["## Setup"]
        assert lines[0].spans[0].text == "## "
        assert lines[0].spans[0].style == HEADING_STYLE
        assert lines[0].spans[1].style.bold is True

    def test_paragraphs_are_separate_lines(self):
        """Test that each paragraph ends its line."""
        assert plain("first\n\nsecond") == ["first", "second"]

    def test_blockquote(self):
        """Test that quotes are prefixed and italic."""
        lines = render_markdown("> quoted text")

        assert lines[0].plain == "> quoted text"
        assert all(span.style.italic for span in lines[0].spans)

    def test_fenced_code_is_verbatim(self):
        """Test that code keeps blank lines and markup characters."""
        text = "```python\nx = 1\n\nprint(**kwargs)\n```"
        lines = render_markdown(text)

        assert [line.plain for line in lines] == ["```", "x = 1", "", "print(**kwargs)", "```"]
        assert lines[1].spans[0].style == CODE_BLOCK_STYLE
        assert lines[3].spans == ((lines[3].spans[0].text, CODE_BLOCK_STYLE),)

    def test_empty_fence(self):
        """Test that an empty code block is just its two fence lines."""
        assert plain("```\n```") == ["```", "```"]

    def test_horizontal_rule(self):
        """Test that a rule becomes a line of box characters and a blank line."""
        assert plain("above\n\n---\n\nbelow") == ["above", "─" * 50, "", "below"]

    def test_table_is_dropped(self):
        """Test that tables produce no output."""
        text = "| a | b |\n|---|---|\n| 1 | 2 |\n\nafter"
        assert plain(text) == ["after"]

    def test_empty_input_yields_one_empty_line(self):
        """Test that rendering nothing still gives one line."""
        lines = render_markdown("")
        assert lines == [StyledLine()]
        assert lines[0].plain == ""


class TestLists:
    """Tests for list rendering."""

    def test_bullets(self):
        """Test that bullet items get a styled marker."""
        lines = render_markdown("- apples\n- pears")

        assert [line.plain for line in lines] == ["* apples", "* pears"]
        assert lines[0].spans[0].style == LIST_MARKER_STYLE

    def test_ordered_markers_count_up(self):
        """Test that ordered items are numbered in sequence."""
        lines = render_markdown("1. a\n2. b")

        assert [line.plain for line in lines] == ["1. a", "2. b"]
        assert lines[0].spans[0].text == "1. "

    def test_ordered_markers_ignore_source_numbers(self):
        """Test that numbers written in the source after the first are ignored."""
        assert plain("1. a\n5. b\n9. c") == ["1. a", "2. b", "3. c"]

    def test_ordered_markers_honour_start(self):
        """Test that a list starting at 3 keeps counting from 3."""
        assert plain("3. a\n1. b") == ["3. a", "4. b"]

    def test_ordered_markers_start_at_zero(self):
        """Test that a list declared to start at 0 is numbered from 0."""
        assert plain("0. a\n1. b") == ["0. a", "1. b"]

    def test_nested_list_is_indented(self):
        """Test that nested items are indented two spaces per level."""
        assert plain("- outer\n  - inner\n- next") == ["* outer", "  * inner", "* next"]

    def test_task_markers(self):
        """Test that task list markers are recognised and highlighted."""
        lines = render_markdown("- [x] done\n- [ ] todo")

        assert [line.plain for line in lines] == ["* [x] done", "* [ ] todo"]
        assert lines[0].spans[1].style == TASK_MARKER_STYLE

    def test_brackets_outside_list_are_plain_text(self):
        """Test that a task-like prefix outside a list is left alone."""
        spans = render_markdown("[x] not a task")[0].spans
        assert all(span.style != TASK_MARKER_STYLE for span in spans)


class TestRenderContract:
    """Tests for determinism and streaming behaviour."""

    def test_deterministic(self):
        """Test that rendering the same text twice gives equal output."""
        text = "# Title\n\n- **a**\n- `b`\n\n> c"
        assert render_markdown(text) == render_markdown(text)

    def test_to_text_applies_base_style(self):
        """Test conversion to a Rich Text over a base style."""
        text = render_markdown("plain *em*")[0].to_text("cyan")

        assert text.plain == "plain em"
        assert str(text.style) == "cyan"

    @given(
        paragraphs=st.lists(
            st.lists(st.text(alphabet="abcdefghij", min_size=1, max_size=6), min_size=1, max_size=6),
            min_size=1,
            max_size=5,
        ),
        data=st.data(),
    )
    def test_growing_prefix_keeps_flushed_lines(self, paragraphs, data):
        """Property test: lines complete in a prefix survive in the full render."""
        full = "\n\n".join(" ".join(words) for words in paragraphs)
        cut = data.draw(st.integers(0, len(full)))

        prefix_lines = render_markdown(full[:cut])
        full_lines = render_markdown(full)

        assert len(full_lines) >= len(prefix_lines)
        settled = len(prefix_lines) - 1
        assert prefix_lines[:settled] == full_lines[:settled]
