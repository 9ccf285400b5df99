"""JSON codec used by the client for request bodies and responses."""

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel
from pydantic_core import from_json, to_json


@runtime_checkable
class JsonCodec(Protocol):
    """Protocol for JSON serialization.

    ``parse`` must raise (``ValueError`` or a subclass) on malformed input;
    the client never substitutes a default value.
    """

    def serialize(self, payload: Any) -> str:
        ...

    def parse(self, text: str) -> Any:
        ...


class PydanticJsonCodec:
    """Default codec backed by pydantic-core.

    Pydantic models are dumped by alias with ``None`` fields omitted, which
    is what the Graph API expects for optional properties.
    """

    def serialize(self, payload: Any) -> str:
        if isinstance(payload, BaseModel):
            payload = payload.model_dump(mode="json", by_alias=True, exclude_none=True)
        return to_json(payload).decode("utf-8")

    def parse(self, text: str) -> Any:
        return from_json(text)
