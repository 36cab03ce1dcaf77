"""
Sort state for record sets.

The current sort is kept in one normalized form (field name + direction
string). How it goes over the wire is decided by a SortEncoding chosen
from configuration:

- OrderEncoding:       {"orderBy": "name", "order": "desc"}
- LegacySortEncoding:  {"sortBy": "name", "asc": False}

Only one pair is ever produced for a request.
"""

from typing import Any, Protocol

from ._logging import logger

ASC = "asc"
DESC = "desc"


def normalize_order(order: Any) -> Any:
    """
    Normalizes a direction input.

    True -> "desc", False -> "asc", other truthy values pass through
    unchanged, falsy or missing values default to "asc".
    """
    if order is True:
        return DESC
    if order is False:
        return ASC
    return order or ASC


class SortEncoding(Protocol):
    """Strategy that renders sort state into outbound query parameters."""

    def encode(self, order_by: str | None, order: Any) -> dict[str, Any]: ...


class OrderEncoding:
    """Current wire format: orderBy + order."""

    def encode(self, order_by: str | None, order: Any) -> dict[str, Any]:
        return {"orderBy": order_by, "order": order}


class LegacySortEncoding:
    """Backward compatible wire format: sortBy + asc (bool)."""

    def encode(self, order_by: str | None, order: Any) -> dict[str, Any]:
        return {"sortBy": order_by, "asc": normalize_order(order) == ASC}


class OrderState:
    """
    Holds the current and default sort field and direction.

    The defaults are captured at construction and can be replaced through
    set_order(..., set_default=True).
    """

    def __init__(self, order_by: str | None = None, order: Any = None, legacy: bool = False):
        self.order_by = order_by
        self.order = order
        self.default_order_by = order_by
        self.default_order = order
        self.encoding: SortEncoding = LegacySortEncoding() if legacy else OrderEncoding()

    @property
    def is_legacy(self) -> bool:
        return isinstance(self.encoding, LegacySortEncoding)

    def sort(self, order_by: str | None, order: Any = None) -> None:
        """Sets the sort field and a normalized direction."""
        self.order_by = order_by
        self.order = normalize_order(order)
        logger.debug("Sort changed", extra={"order_by": self.order_by, "order": self.order})

    def set_order(self, order_by: str | None, order: Any = None, set_default: bool = False) -> None:
        """Sets the sort state as given, without normalization."""
        self.order_by = order_by
        self.order = order

        if set_default:
            self.default_order_by = order_by
            self.default_order = order

    def reset_to_default(self) -> None:
        self.order_by = self.default_order_by
        self.order = self.default_order

    def encode(self) -> dict[str, Any]:
        """Renders the current sort state with the configured encoding."""
        return self.encoding.encode(self.order_by, self.order)
