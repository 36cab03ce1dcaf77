from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from .exceptions import ConfigurationError

DEFAULT_MAX_SIZE = 20


@dataclass
class RecordSetOptions:
    """
    Configuration surface of a RecordSet.

    Holds the entity type, the initial sort and page size, the page size cap,
    the sort wire encoding and the filter sources.
    """

    name: str | None = None
    url: str | None = None
    order_by: str | None = None
    order: Any = None
    max_size: int = DEFAULT_MAX_SIZE
    max_max_size: int = 0  # 0 means no cap
    legacy_sort: bool = False  # send sortBy/asc instead of orderBy/order
    model: type[BaseModel] | None = None

    # Filter sources, concatenated in this order
    where: list[Any] = field(default_factory=list)
    where_additional: list[Any] = field(default_factory=list)
    where_function: Callable[[], list[Any] | None] | None = None

    # Persistent extra query parameters
    data: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """
        Checks option values.

        Raises:
            ConfigurationError: If a page size is not a positive integer,
                the cap is negative, or the model is not a pydantic model.
        """
        if isinstance(self.max_size, bool) or not isinstance(self.max_size, int):
            raise ConfigurationError("max_size must be an integer", option="max_size")
        if self.max_size <= 0:
            raise ConfigurationError(
                f"max_size must be greater than 0, got {self.max_size}", option="max_size"
            )
        if isinstance(self.max_max_size, bool) or not isinstance(self.max_max_size, int):
            raise ConfigurationError("max_max_size must be an integer", option="max_max_size")
        if self.max_max_size < 0:
            raise ConfigurationError(
                f"max_max_size can not be negative, got {self.max_max_size}",
                option="max_max_size",
            )
        if self.model is not None and not (
            isinstance(self.model, type) and issubclass(self.model, BaseModel)
        ):
            raise ConfigurationError("model must be a pydantic BaseModel subclass", option="model")
        if self.where_function is not None and not callable(self.where_function):
            raise ConfigurationError("where_function must be callable", option="where_function")

    @property
    def resolved_url(self) -> str | None:
        """The request url, falling back to the entity type name."""
        return self.url or self.name

    @classmethod
    def from_kwargs(cls, **kwargs: Any) -> "RecordSetOptions":
        """
        Builds options from keyword arguments.

        Accepts the legacy alias 'sort_by' for 'order_by'.

        Raises:
            ConfigurationError: On unknown option names
        """
        if "sort_by" in kwargs:
            sort_by = kwargs.pop("sort_by")
            if kwargs.get("order_by") is None:
                kwargs["order_by"] = sort_by

        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown record set option(s): {', '.join(unknown)}", option=unknown[0]
            )
        return cls(**kwargs)
