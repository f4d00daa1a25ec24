"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.

Layout:
- Left column: model list (a quarter of the width)
- Right column: conversation, prompt box (7 rows), status bar (1 row)
- Bottom: trace log, hidden unless enabled
"""

APP_CSS = """
Screen {
    layout: vertical;
    background: $background;
}

#main {
    height: 1fr;
}

/* ============================================
   Model List
   ============================================ */
#model-list {
    width: 25%;
    height: 100%;
    background: $panel;
    border: round $border;
    border-title-color: $primary;
    border-title-style: bold;
    padding: 0 1;
}

/* ============================================
   Conversation, Prompt and Status
   ============================================ */
#right-panel {
    width: 75%;
    height: 100%;
}

#conversation {
    height: 1fr;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    padding: 0 1;
    scrollbar-gutter: stable;
}

#conversation-body {
    width: 100%;
    height: auto;
}

#prompt {
    height: 7;
    background: $surface;
    border: round $border;
    border-title-color: $text-muted;
    padding: 0 1;

    &.-editing {
        border: round $accent;
        border-title-color: $accent;
    }
}

#status {
    height: 1;
    padding: 0 1;
}

/* ============================================
   Trace Log
   ============================================ */
#trace-log {
    height: 10;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-subtitle-color: $text-muted;
}
"""
