from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import MalformedResponseError


class FetchResponse(BaseModel):
    """
    Inbound list response: {"total": int, "list": [...], "additionalData"?: {...}}.

    Unknown top-level fields are tolerated and ignored.
    """

    model_config = ConfigDict(extra="ignore")

    total: int
    records: list[Any] = Field(alias="list")
    additional_data: Any | None = Field(default=None, alias="additionalData")


def record_id(record: Any) -> Any:
    """Returns the identifier of a record, whether it's a mapping or an object."""
    if isinstance(record, Mapping):
        return record.get("id")
    return getattr(record, "id", None)


class ResponseParser:
    """
    Converts raw transport payloads into a validated FetchResponse.

    Architectural Note:
    -------------------
    The server contract is loose (plain JSON), so the shape is checked here
    before any record set state is touched. When a record model is configured
    each list entry is validated into it; otherwise entries pass through as-is.
    """

    def __init__(self, model: type[BaseModel] | None = None) -> None:
        self.model = model

    def parse(self, payload: Any) -> FetchResponse:
        """
        Validates the payload and deserializes its records.

        Raises:
            MalformedResponseError: If 'total' or 'list' is missing or has the wrong type,
                or a record does not validate against the model
        """
        if not isinstance(payload, Mapping):
            raise MalformedResponseError(
                f"Expected a mapping response, got {type(payload).__name__}", response=payload
            )

        try:
            response = FetchResponse.model_validate(dict(payload))
        except PydanticValidationError as e:
            raise MalformedResponseError(
                f"Malformed list response: {e.error_count()} validation error(s)",
                response=payload,
                original_error=e,
            ) from e

        if self.model is not None:
            response.records = [self._to_model(item, payload) for item in response.records]

        return response

    def to_record(self, item: Any) -> Any:
        """Converts a single raw item into a record (used for local additions)."""
        if self.model is None or isinstance(item, self.model):
            return item
        return self.model.model_validate(item)

    def _to_model(self, item: Any, payload: Any) -> Any:
        try:
            return self.to_record(item)
        except PydanticValidationError as e:
            raise MalformedResponseError(
                f"Record does not match {self.model.__name__}: {e.error_count()} error(s)",  # type: ignore[union-attr]
                response=payload,
                original_error=e,
            ) from e
