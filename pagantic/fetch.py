import asyncio
from collections.abc import Generator, Mapping
from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any

from ._logging import logger, redact_where
from .exceptions import ConfigurationError, RecordSetError, TransportError
from .serializer import FetchResponse, ResponseParser

if TYPE_CHECKING:
    # Prevent circular imports at runtime
    from .base import RecordSet
    from .transport import Transport

# Outbound keys owned by the sort encodings; only one pair is ever sent
_SORT_KEYS = ("orderBy", "order", "sortBy", "asc")

# camelCase aliases accepted by FetchOptions.from_mapping
_OPTION_ALIASES = {"orderBy": "order_by", "sortBy": "sort_by", "maxSize": "max_size"}


def _retrieve_exception(task: "asyncio.Task[Any]") -> None:
    # Failures reach callers through the handle and the "error" event
    if not task.cancelled():
        task.exception()


@dataclass
class FetchOptions:
    """
    Per-call fetch options. None means "not supplied".

    Attributes:
        data: Extra query parameters, merged into the persistent store
        offset: Explicit offset override
        order_by / sort_by: Explicit sort field override (sort_by is the legacy alias)
        order: Explicit direction override
        where: Explicit base filter override
        max_size: Explicit page size (still capped at max_max_size)
        more: Append mode, continue after the loaded window
        reset: Replace the records through reset() instead of a smart set
        remove: When False, existing records are kept and new ones merged in
    """

    data: dict[str, Any] = field(default_factory=dict)
    offset: int | None = None
    order_by: str | None = None
    sort_by: str | None = None
    order: Any = None
    where: list[Any] | None = None
    max_size: int | None = None
    more: bool = False
    reset: bool = False
    remove: bool = True

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "FetchOptions":
        """
        Builds options from a mapping. camelCase keys (orderBy, sortBy, maxSize) are accepted.

        Raises:
            ConfigurationError: On unknown option names
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ConfigurationError(f"Unknown fetch option '{key}'", option=key)
            kwargs[name] = value
        if kwargs.get("data") is None:
            kwargs["data"] = {}
        return cls(**kwargs)


class FetchRequest:
    """
    Handle to one issued fetch.

    Awaiting it yields the fetched records (or raises the fetch error).
    abort() cancels the underlying transport call while it is still pending;
    it does nothing once the request has settled.
    """

    def __init__(self, task: "asyncio.Task[list[Any]]", params: dict[str, Any]):
        self.task = task
        self.params = params

    def __await__(self) -> Generator[Any, None, list[Any]]:
        return self.task.__await__()

    def done(self) -> bool:
        return self.task.done()

    def cancelled(self) -> bool:
        return self.task.cancelled()

    def abort(self) -> bool:
        """Returns True if a pending request was cancelled."""
        if self.task.done():
            return False
        return self.task.cancel()

    def __repr__(self) -> str:
        state = "done" if self.done() else "pending"
        return f"<FetchRequest {state} offset={self.params.get('offset')}>"


class FetchCoordinator:
    """
    Assembles outbound queries for a RecordSet, issues them and applies responses.

    Only the most recently issued request is tracked (last_request). Earlier
    requests keep running; whichever settles last writes total and records.
    """

    def __init__(self, record_set: "RecordSet", transport: "Transport | None", parser: ResponseParser):
        self.record_set = record_set
        self.transport = transport
        self.parser = parser
        self.last_request: FetchRequest | None = None

    def build_params(self, options: FetchOptions) -> dict[str, Any]:
        """
        Resolves the outbound parameters and syncs the stored state to them.

        Raises:
            OutOfRangeError: If an explicit offset is out of bounds (nothing is changed)
        """
        rs = self.record_set
        pagination = rs.pagination
        order_state = rs.order_state

        if options.offset is not None:
            pagination.check_offset(options.offset)

        # 1. Persistent extra parameters (re-supplied keys win)
        if options.data:
            rs.data.update(options.data)
        params = dict(rs.data)

        # 2. Explicit overrides become the stored state
        if options.offset is not None:
            pagination.offset = options.offset
        order_by = options.order_by if options.order_by is not None else options.sort_by
        if order_by is not None:
            order_state.order_by = order_by
        if options.order is not None:
            order_state.order = options.order
        if options.where is not None:
            rs.filters.where = list(options.where)

        # 3-4. Page size and offset
        loaded = len(rs) + rs.length_correction
        if options.max_size is not None:
            max_size = pagination.clamp_size(options.max_size)
        else:
            max_size = pagination.page_size_for(loaded, more=options.more)

        params["offset"] = loaded if options.more else pagination.offset
        params["maxSize"] = max_size

        # 5. Sort encoding
        for key in _SORT_KEYS:
            params.pop(key, None)
        params.update(order_state.encode())

        # 6. Filters
        params["where"] = rs.filters.get_where()
        return params

    def fetch(self, options: FetchOptions) -> FetchRequest:
        """
        Issues a fetch. Must be called while an event loop is running.

        Raises:
            ConfigurationError: If the record set has no transport
            OutOfRangeError: If an explicit offset is out of bounds
        """
        if self.transport is None:
            raise ConfigurationError("No transport configured for fetching", option="transport")

        # Resolved before any state changes so a missing loop leaves the set untouched
        loop = asyncio.get_running_loop()
        params = self.build_params(options)
        rs = self.record_set

        logger.info(
            "Issuing fetch",
            extra={
                "entity": rs.entity_type,
                "offset": params["offset"],
                "max_size": params["maxSize"],
                "more": options.more,
                "where_hash": redact_where(params["where"]),
            },
        )

        task = loop.create_task(self._run(params, options))
        task.add_done_callback(_retrieve_exception)
        request = FetchRequest(task, params)
        self.last_request = request
        return request

    def abort_last_fetch(self) -> None:
        if self.last_request is not None and not self.last_request.done():
            self.last_request.abort()

    async def _run(self, params: dict[str, Any], options: FetchOptions) -> list[Any]:
        rs = self.record_set
        try:
            try:
                payload = await self.transport.request(rs.url, params)  # type: ignore[union-attr]
            except RecordSetError:
                raise
            except Exception as e:
                raise TransportError(f"Fetch of '{rs.url}' failed: {e!s}", original_error=e) from e

            response = self.parser.parse(payload)
        except RecordSetError as e:
            logger.debug("Fetch failed", extra={"entity": rs.entity_type, "error": e.message})
            rs.events.trigger("error", rs, e)
            raise

        self.apply(response, options)
        rs.events.trigger("sync", rs, response)
        return list(rs.records)

    def apply(self, response: FetchResponse, options: FetchOptions) -> None:
        """Writes a parsed response into the record set."""
        rs = self.record_set
        rs.pagination.total = response.total
        rs.data_additional = response.additional_data

        if options.reset:
            rs.reset(response.records)
        elif not options.remove:
            rs.add(response.records)
        else:
            rs.set(response.records)

        logger.info(
            "Fetch completed",
            extra={"entity": rs.entity_type, "total": response.total, "count": len(rs)},
        )
