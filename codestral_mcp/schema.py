"""
Wire schemas for the Mistral completion APIs.

Outbound bodies (ChatRequest, FimRequest) and the inbound completion
shape (CompletionResponse). Responses are only trusted after
validate_completion() accepts them; schema drift upstream surfaces as
InvalidResponseShape instead of a KeyError three calls later.
"""

from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr, ValidationError

from codestral_mcp.errors import EmptyChoices, InvalidResponseShape

Number = Union[StrictInt, StrictFloat]
Role = Literal["system", "user", "assistant"]


# ─────────────────────────────────────────────────────────────────────
# OUTBOUND
# ─────────────────────────────────────────────────────────────────────

class ChatMessage(BaseModel):
    """A single message in a chat conversation."""
    role: Role
    content: str


class ChatRequest(BaseModel):
    """Body for POST /chat/completions."""
    model: str
    messages: List[ChatMessage]
    temperature: float = Field(ge=0, le=1)
    top_p: float = Field(ge=0, le=1)
    max_tokens: int = Field(gt=0)
    stop: Optional[List[str]] = None

    def to_payload(self) -> dict:
        """JSON body with unset optional fields omitted."""
        return self.model_dump(exclude_none=True)


class FimRequest(BaseModel):
    """Body for POST /fim/completions."""
    model: str
    prompt: str
    suffix: Optional[str] = None
    temperature: float = Field(ge=0, le=1)
    top_p: float = Field(ge=0, le=1)
    max_tokens: int = Field(gt=0)
    stop: Optional[List[str]] = None

    def to_payload(self) -> dict:
        return self.model_dump(exclude_none=True)


# ─────────────────────────────────────────────────────────────────────
# INBOUND
# ─────────────────────────────────────────────────────────────────────

class ResponseMessage(BaseModel):
    role: StrictStr
    content: StrictStr


class Choice(BaseModel):
    index: StrictInt
    message: ResponseMessage
    finish_reason: Optional[StrictStr] = None


class Usage(BaseModel):
    prompt_tokens: Number
    completion_tokens: Number
    total_tokens: Number


class CompletionResponse(BaseModel):
    """Validated chat or FIM completion returned by the upstream API."""
    id: StrictStr
    object: StrictStr
    created: Number
    model: StrictStr
    choices: List[Choice]
    usage: Usage

    def first_content(self) -> str:
        """
        Content of the first choice.

        Raises:
            EmptyChoices: If the upstream returned no choices
        """
        if not self.choices:
            raise EmptyChoices()
        return self.choices[0].message.content


def validate_completion(raw: Any) -> CompletionResponse:
    """
    Validate a decoded response body.

    Raises:
        InvalidResponseShape: On any missing or mistyped field
    """
    try:
        return CompletionResponse.model_validate(raw)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        )
        raise InvalidResponseShape(
            f"Mistral API returned an unexpected response shape: {problems}"
        ) from e
