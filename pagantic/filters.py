"""
Filter criteria composition.

A record set draws filter criteria from three sources:

- where:             the base criteria list
- where_additional:  supplementary criteria, always appended after 'where'
- where_function:    optional callable, evaluated on every call and appended last

Criteria are opaque values. They are never inspected, reordered or deduplicated.

Usage:
    composer = FilterComposer(where=[{"type": "equals", "attribute": "status", "value": "New"}])
    composer.where_function = lambda: [{"type": "isTrue", "attribute": "isStarred"}]
    composer.get_where()
"""

from collections.abc import Callable
from typing import Any

WhereFunction = Callable[[], list[Any] | None]


class FilterComposer:
    """Merges base, supplementary and dynamic filter criteria into one ordered list."""

    def __init__(
        self,
        where: list[Any] | None = None,
        where_additional: list[Any] | None = None,
        where_function: WhereFunction | None = None,
    ):
        self.where: list[Any] | None = list(where) if where is not None else None
        self.where_additional: list[Any] | None = (
            list(where_additional) if where_additional is not None else None
        )
        self.where_function = where_function

    def get_where(self) -> list[Any]:
        """
        Returns where ++ where_additional ++ where_function().

        The function is called fresh each time; a None result counts as empty.
        A new list is returned so callers can't mutate the stored sources.
        """
        where = list(self.where or []) + list(self.where_additional or [])

        if self.where_function is not None:
            where.extend(self.where_function() or [])

        return where
