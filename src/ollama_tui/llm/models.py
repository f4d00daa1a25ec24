from pydantic import BaseModel, ConfigDict, Field


class GenerateRequest(BaseModel):
    """Body of a ``POST /api/generate`` call."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(description="Name of the model to generate with")
    prompt: str = Field(description="Prompt text")
    stream: bool = Field(default=True, description="Ask for an NDJSON stream")


class GenerateChunk(BaseModel):
    """One newline-delimited record of a streaming generate response."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(description="Model that produced the record")
    created_at: str = Field(description="Server timestamp of the record")
    response: str = Field(description="Text fragment of the reply")
    done: bool = Field(description="True on the last record of the stream")


class DecodeFailure(BaseModel):
    """A line of the stream that could not be decoded into a record."""

    model_config = ConfigDict(frozen=True)

    line: str = Field(description="Raw offending text")
    error: str = Field(description="Decoder error description")
    final: bool = Field(
        default=False,
        description="True when the text was the unterminated end of the stream",
    )

    @property
    def message(self) -> str:
        if self.final:
            return f"Final Buffer Decode Error: '{self.error}' on data: '{self.line}'"
        return f"JSON Decode Error: '{self.error}' on line: '{self.line}'"


class ModelInfo(BaseModel):
    """An installed model as listed by ``GET /api/tags``."""

    name: str


class TagsResponse(BaseModel):
    """Body of a ``GET /api/tags`` response."""

    models: list[ModelInfo] = Field(default_factory=list)


StreamToken = GenerateChunk | DecodeFailure
