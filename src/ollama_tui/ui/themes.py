"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, muted text)

To add a new theme, define it here and register in the app.
"""

from textual.theme import Theme

# Catppuccin Mocha palette; conversation colours come from the frame styles
CATPPUCCIN_MOCHA = Theme(
    name="catppuccin-mocha",
    primary="#89b4fa",      # Blue - borders and focus
    secondary="#cba6f7",    # Mauve
    accent="#f9e2af",       # Yellow - editing highlight
    foreground="#cdd6f4",
    background="#11111b",
    success="#a6e3a1",
    warning="#fab387",
    error="#f38ba8",
    surface="#1e1e2e",
    panel="#181825",
    dark=True,
    variables={
        "border": "#45475a",
        "border-blurred": "#313244",

        "scrollbar": "#313244",
        "scrollbar-hover": "#45475a",
        "scrollbar-active": "#89b4fa",
        "scrollbar-background": "#181825",
        "scrollbar-corner-color": "#181825",

        "text-muted": "#6c7086",
    },
)
