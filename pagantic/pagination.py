"""
Offset pagination for pagantic.

This module owns the offset/total/page-size arithmetic: navigation targets
(next, previous, first, last), offset bounds checks and the page-size cap.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ._logging import logger
from .exceptions import OutOfRangeError

# Sentinel for "total not known yet" (before the first fetch, or unbounded sources)
UNKNOWN_TOTAL = -1


def last_page_offset(total: int, max_size: int) -> int:
    """
    Start offset of the last page for a fixed page size.

    When total is an exact multiple of max_size the naive candidate equals
    total (an empty page), so the previous page start is used instead.
    Never negative: total=0 gives 0.
    """
    offset = total - total % max_size

    if offset == total:
        offset = total - max_size

    return max(offset, 0)


@dataclass
class PageInfo:
    """
    Snapshot of the pagination state of a record set.

    Attributes:
        offset: Index of the first loaded record in the server ordering
        max_size: Requested page size
        total: Server-side record count, or -1 when unknown
        count: Number of records loaded locally
    """

    offset: int
    max_size: int
    total: int
    count: int

    @property
    def has_more(self) -> bool:
        """Returns True if records exist beyond the loaded window (or total is unknown)."""
        if self.total == UNKNOWN_TOTAL:
            return True
        return self.offset + self.count < self.total

    @property
    def has_previous(self) -> bool:
        return self.offset > 0

    @property
    def page_number(self) -> int:
        """1-based number of the page starting at the current offset."""
        return self.offset // self.max_size + 1

    @property
    def page_count(self) -> int | None:
        """Number of pages, None while total is unknown."""
        if self.total == UNKNOWN_TOTAL:
            return None
        return max(-(-self.total // self.max_size), 1)


class PaginationController:
    """
    Holds offset, total and page-size state and computes navigation targets.

    Navigation goes through set_offset(), which validates the target,
    stores it and calls the injected fetch callable. Whatever the callable
    returns (the pending request handle) is handed back to the caller.
    """

    def __init__(
        self,
        fetch: Callable[[], Any],
        max_size: int,
        max_max_size: int = 0,
        total: int = UNKNOWN_TOTAL,
    ):
        self._fetch = fetch
        self.offset = 0
        self.total = total
        self.max_size = max_size
        self.max_max_size = max_max_size

    def check_offset(self, offset: int) -> None:
        """
        Validates 0 <= offset <= total. An unknown total skips the upper bound.

        Raises:
            OutOfRangeError: If the offset is out of bounds
        """
        if offset < 0:
            raise OutOfRangeError("offset can not be less than 0", offset=offset, total=self.total)

        if offset > self.total and self.total != UNKNOWN_TOTAL and offset > 0:
            raise OutOfRangeError(
                f"offset can not be larger than total count ({offset} > {self.total})",
                offset=offset,
                total=self.total,
            )

    def set_offset(self, offset: int) -> Any:
        """Moves to the given offset and fetches. On failure the offset is left as it was."""
        self.check_offset(offset)

        previous = self.offset
        self.offset = offset
        try:
            request = self._fetch()
        except Exception:
            self.offset = previous
            raise

        logger.debug("Offset changed", extra={"offset": offset, "total": self.total})
        return request

    def next_page(self) -> Any:
        return self.set_offset(self.offset + self.max_size)

    def previous_page(self) -> Any:
        return self.set_offset(self.offset - self.max_size)

    def first_page(self) -> Any:
        return self.set_offset(0)

    def last_page(self) -> Any:
        """Fetches the last page. While total is unknown that is the first page."""
        if self.total == UNKNOWN_TOTAL:
            return self.set_offset(0)
        return self.set_offset(last_page_offset(self.total, self.max_size))

    def clamp_size(self, size: int) -> int:
        """Caps a requested page size at max_max_size (0 disables the cap)."""
        if self.max_max_size and size > self.max_max_size:
            return self.max_max_size
        return size

    def page_size_for(self, loaded: int, more: bool = False) -> int:
        """
        Page size to request.

        A refetch asks for at least as many records as are loaded
        (including the pending local delta) so none drop out of the window.
        Append mode asks for one regular page.
        """
        size = self.max_size if more else max(loaded, self.max_size)
        return self.clamp_size(size)

    def info(self, count: int) -> PageInfo:
        return PageInfo(offset=self.offset, max_size=self.max_size, total=self.total, count=count)
