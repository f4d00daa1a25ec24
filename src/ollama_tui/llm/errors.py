"""Error taxonomy for the generation API.

Transport failures, protocol failures and malformed documents each get
their own type so callers can word their messages without inspecting
httpx internals.
"""


class OllamaError(Exception):
    """Base class for every failure talking to the generation API."""


class RequestError(OllamaError):
    """The request failed before a response arrived (refused, timed out)."""


class StreamReadError(OllamaError):
    """The transport failed while the response body was being read."""


class ApiResponseError(OllamaError):
    """The server answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str, reason: str = "") -> None:
        self.status_code = status_code
        self.body = body
        self.reason = reason
        status = f"{status_code} {reason}".strip()
        super().__init__(f"Status {status} - {body}")


class ResponseDecodeError(OllamaError):
    """A non-streaming response body could not be decoded."""
