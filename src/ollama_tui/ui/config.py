"""UI configuration constants.

Centralizes magic numbers and configuration values for the UI module.
"""

from enum import IntEnum


class LogLevel(IntEnum):
    """Trace log thresholds; a lower value lets more entries through."""

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    @classmethod
    def parse(cls, name: str) -> "LogLevel":
        """Look up a level by name, case-insensitively. Unknown names mean DEBUG."""
        return cls.__members__.get(name.upper(), cls.DEBUG)


# Frame loop configuration
TICK_INTERVAL = 0.05  # Seconds between redraws
MAX_EVENTS_PER_TICK = 32  # Channel events applied per redraw

# Event channel configuration
EVENT_CHANNEL_CAPACITY = 100  # Events buffered before producers wait

# Conversation view configuration
SCROLL_STEP = 10  # Lines moved per PageUp/PageDown

# Markdown rendering configuration
RULE_WIDTH = 50  # Characters in a horizontal rule
IMAGE_PLACEHOLDER = "[Image]"
CODE_FENCE = "```"

# Sender names in the conversation log
USER_SENDER = "You"
ERROR_SENDER = "Error"
SYSTEM_ERROR_SENDER = "System Error"
FALLBACK_MODEL_SENDER = "Model"
