"""Client factory functions for CLI.

Centralizes creation of the generation client from environment variables.
Hides configuration details from command implementations.
"""

import os

from ..llm import DEFAULT_BASE_URL, OllamaClient
from ..llm.ollama import GENERATE_TIMEOUT, LIST_MODELS_TIMEOUT


def get_client(host: str | None = None) -> OllamaClient:
    """Create the Ollama client from options and environment variables.

    Args:
        host: Server URL from the command line; wins over the environment

    Returns:
        Configured Ollama client

    Environment variables:
        OLLAMA_HOST: Server URL (default: http://127.0.0.1:11434)
        OLLAMA_LIST_TIMEOUT: Seconds allowed for listing models (default: 15)
        OLLAMA_GENERATE_TIMEOUT: Seconds allowed for one reply (default: 300)
    """
    base_url = host or os.getenv("OLLAMA_HOST", DEFAULT_BASE_URL)
    if "://" not in base_url:
        base_url = f"http://{base_url}"

    return OllamaClient(
        base_url=base_url,
        list_timeout=float(os.getenv("OLLAMA_LIST_TIMEOUT", str(LIST_MODELS_TIMEOUT))),
        generate_timeout=float(os.getenv("OLLAMA_GENERATE_TIMEOUT", str(GENERATE_TIMEOUT))),
    )
