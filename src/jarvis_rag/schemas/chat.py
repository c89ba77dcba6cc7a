"""
Input schemas for the knowledge base and the chat flow.

These Pydantic models are the contract between the HTTP layer and the
core. Bad input is rejected here, before any embedding work starts, and
surfaced as jarvis_rag.core.ValidationError.
"""

from typing import Annotated, Literal, NoReturn

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from jarvis_rag.core.exceptions import ValidationError


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


# Values are validated but never stripped; whitespace-only counts as missing
NonBlankStr = Annotated[str, AfterValidator(_not_blank)]


class ChatMessage(BaseModel):
    """One turn of conversation as sent to the chat-completion service."""

    model_config = ConfigDict(extra="ignore")

    role: Literal["system", "user", "assistant"] = Field(
        description="Speaker of this turn"
    )
    content: str = Field(description="Message text")


class DocumentInput(BaseModel):
    """A document submitted for indexing. All three fields are required."""

    id: NonBlankStr = Field(description="Caller-supplied unique id (upsert key)")
    title: NonBlankStr
    content: NonBlankStr


class UserTurn(BaseModel):
    """The new message a user sends to the assistant."""

    message: NonBlankStr


class SearchQuery(BaseModel):
    query: NonBlankStr
    # Non-positive limits are allowed and rank to an empty result
    limit: int | None = None


_history_adapter = TypeAdapter(list[ChatMessage])


def _raise_validation_error(error: PydanticValidationError) -> NoReturn:
    first = error.errors()[0]
    loc = first.get("loc") or ("input",)
    field = ".".join(str(part) for part in loc)
    raise ValidationError(field, f"{field}: {first.get('msg', 'invalid value')}") from error


def parse_document(id: str | None, title: str | None, content: str | None) -> DocumentInput:
    """Validate add_document arguments; raises ValidationError naming the bad field."""
    try:
        return DocumentInput(id=id, title=title, content=content)
    except PydanticValidationError as e:
        _raise_validation_error(e)


def parse_search(query: str | None, limit: int | None = None) -> SearchQuery:
    try:
        return SearchQuery(query=query, limit=limit)
    except PydanticValidationError as e:
        _raise_validation_error(e)


def parse_message(message: str | None) -> str:
    try:
        return UserTurn(message=message).message
    except PydanticValidationError as e:
        _raise_validation_error(e)

def parse_history(history: list | None) -> list[ChatMessage]:
    """Validate prior turns (dicts or ChatMessage instances)."""
    if not history:
        return []
    try:
        return _history_adapter.validate_python(
            [turn.model_dump() if isinstance(turn, ChatMessage) else turn for turn in history]
        )
    except PydanticValidationError as e:
        _raise_validation_error(e)
