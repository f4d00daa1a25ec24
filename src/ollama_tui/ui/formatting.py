"""Markdown rendering for the conversation view.

Hides the details of turning markdown text into styled terminal lines:
- markdown-it-py produces the block and inline token stream
- A single pass over the tokens keeps a style stack and a list stack
- Output is a flat list of lines, each a tuple of (text, style) spans
"""

import re
from dataclasses import dataclass, field
from functools import reduce
from typing import NamedTuple

from markdown_it import MarkdownIt
from markdown_it.token import Token
from rich.style import Style
from rich.text import Text

from .config import CODE_FENCE, IMAGE_PLACEHOLDER, RULE_WIDTH

HEADING_STYLE = Style(color="magenta", bold=True)
QUOTE_STYLE = Style(color="yellow", italic=True)
FENCE_STYLE = Style(color="bright_black")
CODE_BLOCK_STYLE = Style(color="white", bgcolor="rgb(40,40,40)")
INLINE_CODE_STYLE = Style(color="yellow", bgcolor="rgb(50,50,50)", italic=True)
LIST_MARKER_STYLE = Style(color="green")
LINK_STYLE = Style(color="blue", underline=True)
IMAGE_STYLE = Style(color="bright_black")
RULE_STYLE = Style(color="bright_black")
TASK_MARKER_STYLE = Style(color="yellow")

_INLINE_STYLES = {
    "em_open": Style(italic=True),
    "strong_open": Style(bold=True),
    "s_open": Style(strike=True),
    "link_open": LINK_STYLE,
}
_INLINE_CLOSERS = {"em_close", "strong_close", "s_close", "link_close"}

_TASK_MARKER = re.compile(r"^\[([ xX])\]\s+")

_parser = MarkdownIt("commonmark").enable(["strikethrough", "table"])


class StyledSpan(NamedTuple):
    """A contiguous run of text sharing one style."""

    text: str
    style: Style


@dataclass(frozen=True)
class StyledLine:
    """One displayable line: an ordered sequence of styled spans."""

    spans: tuple[StyledSpan, ...] = ()

    @classmethod
    def styled(cls, text: str, style: Style) -> "StyledLine":
        return cls((StyledSpan(text, style),))

    @property
    def plain(self) -> str:
        return "".join(span.text for span in self.spans)

    def to_text(self, base_style: Style | str = "") -> Text:
        """Convert to a Rich ``Text``; span styles layer over ``base_style``."""
        text = Text(style=base_style, end="")
        for span in self.spans:
            text.append(span.text, span.style)
        return text


@dataclass
class _ListLevel:
    start: int | None  # None for bullet lists
    emitted: int = 0

    def next_marker(self) -> str:
        if self.start is None:
            return "* "
        marker = f"{self.start + self.emitted}. "
        self.emitted += 1
        return marker


@dataclass
class _RenderContext:
    """Mutable state of a single render call; never reused."""

    lines: list[StyledLine] = field(default_factory=list)
    spans: list[StyledSpan] = field(default_factory=list)
    styles: list[Style] = field(default_factory=list)
    lists: list[_ListLevel] = field(default_factory=list)
    table_depth: int = 0
    task_item_pending: bool = False

    @property
    def style(self) -> Style:
        return reduce(lambda a, b: a + b, self.styles, Style.null())

    def push(self, text: str, style: Style | None = None) -> None:
        self.spans.append(StyledSpan(text, self.style if style is None else style))

    def flush(self) -> None:
        if self.spans:
            self.lines.append(StyledLine(tuple(self.spans)))
            self.spans = []

    def text(self, content: str) -> None:
        for i, segment in enumerate(content.split("\n")):
            if i > 0:
                self.flush()
            if segment:
                self.push(segment)


def render_markdown(text: str) -> list[StyledLine]:
    """Render markdown text into styled lines.

    Deterministic and free of shared state: every call reprocesses the
    whole input, so it is safe to call on a growing prefix of a reply.
    Always returns at least one line.
    """
    ctx = _RenderContext()
    for token in _parser.parse(text):
        _render_block(ctx, token)
    ctx.flush()

    if not ctx.lines:
        ctx.lines.append(StyledLine())
    return ctx.lines


def _render_block(ctx: _RenderContext, token: Token) -> None:
    kind = token.type

    # Tables are unsupported: drop everything between open and close
    if kind == "table_open":
        ctx.table_depth += 1
        return
    if kind == "table_close":
        ctx.table_depth -= 1
        return
    if ctx.table_depth:
        return

    if kind == "paragraph_close":
        ctx.flush()
    elif kind == "heading_open":
        ctx.flush()
        ctx.styles.append(HEADING_STYLE)
        ctx.push("#" * int(token.tag[1:]) + " ")
    elif kind == "heading_close":
        ctx.flush()
        ctx.styles.pop()
    elif kind == "blockquote_open":
        ctx.flush()
        ctx.styles.append(QUOTE_STYLE)
        ctx.push("> ")
    elif kind == "blockquote_close":
        ctx.flush()
        ctx.styles.pop()
    elif kind in ("fence", "code_block"):
        _render_code_block(ctx, token.content)
    elif kind == "bullet_list_open":
        ctx.flush()
        ctx.lists.append(_ListLevel(start=None))
    elif kind == "ordered_list_open":
        ctx.flush()
        start = token.attrGet("start")
        ctx.lists.append(_ListLevel(start=int(start) if start is not None else 1))
    elif kind in ("bullet_list_close", "ordered_list_close"):
        ctx.flush()
        ctx.lists.pop()
    elif kind == "list_item_open":
        ctx.flush()
        indent = "  " * (len(ctx.lists) - 1)
        if indent:
            ctx.push(indent, Style.null())
        ctx.push(ctx.lists[-1].next_marker(), LIST_MARKER_STYLE)
        ctx.task_item_pending = True
    elif kind == "list_item_close":
        ctx.flush()
        ctx.task_item_pending = False
    elif kind == "hr":
        ctx.flush()
        ctx.lines.append(StyledLine.styled("─" * RULE_WIDTH, RULE_STYLE))
        ctx.lines.append(StyledLine())
    elif kind == "inline":
        _render_inline(ctx, token.children or [])
    # paragraph_open, html_block and anything unknown produce no output


def _render_code_block(ctx: _RenderContext, content: str) -> None:
    ctx.flush()
    ctx.lines.append(StyledLine.styled(CODE_FENCE, FENCE_STYLE))
    if content.endswith("\n"):
        content = content[:-1]
    if content:
        for i, code_line in enumerate(content.split("\n")):
            if i > 0:
                ctx.flush()
            ctx.push(code_line, CODE_BLOCK_STYLE)
    ctx.flush()
    ctx.lines.append(StyledLine.styled(CODE_FENCE, FENCE_STYLE))


def _render_inline(ctx: _RenderContext, children: list[Token]) -> None:
    check_task = ctx.task_item_pending
    ctx.task_item_pending = False

    for index, child in enumerate(children):
        kind = child.type
        if kind == "text":
            content = child.content
            if check_task and index == 0:
                content = _take_task_marker(ctx, content)
            ctx.text(content)
        elif kind == "code_inline":
            ctx.push(child.content, INLINE_CODE_STYLE)
        elif kind == "softbreak":
            ctx.push(" ")
        elif kind == "hardbreak":
            ctx.flush()
        elif kind in _INLINE_STYLES:
            ctx.styles.append(_INLINE_STYLES[kind])
        elif kind in _INLINE_CLOSERS:
            ctx.styles.pop()
        elif kind == "image":
            # alt text lives in child.children and is deliberately not rendered
            ctx.push(IMAGE_PLACEHOLDER, IMAGE_STYLE)
        # html_inline is ignored


def _take_task_marker(ctx: _RenderContext, content: str) -> str:
    match = _TASK_MARKER.match(content)
    if match is None:
        return content
    checked = match.group(1) in "xX"
    ctx.push("[x] " if checked else "[ ] ", TASK_MARKER_STYLE)
    return content[match.end():]
