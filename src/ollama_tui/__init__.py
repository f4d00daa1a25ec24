"""
ollama-tui: a terminal chat client for a local Ollama server.

Each subpackage hides one design decision:
- llm: how replies are requested and decoded from the generation API
- ui: how replies are rendered and how user input drives the session
- cli: how the program is configured and launched
"""

__version__ = "0.1.0"

from .llm import GenerationClient, OllamaClient, OllamaError
from .ui import AppState, render_markdown

__all__ = [
    "AppState",
    "GenerationClient",
    "OllamaClient",
    "OllamaError",
    "render_markdown",
]
