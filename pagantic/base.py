from collections.abc import Iterator, Mapping
from typing import Any

from ._logging import logger
from .config import RecordSetOptions
from .events import EventBus, NullEventBus
from .exceptions import ConfigurationError
from .fetch import FetchCoordinator, FetchOptions, FetchRequest
from .filters import FilterComposer, WhereFunction
from .ordering import OrderState
from .pagination import PageInfo, PaginationController
from .serializer import ResponseParser, record_id
from .transport import Transport


class RecordSet:
    """
    A locally loaded window of a paginated, sortable, filterable server list.

    Combines pagination, sort state, filter composition and fetch
    coordination around an ordered list of records. Local changes are
    announced on the configured EventBus.

    Usage:
        records = RecordSet(name="Account", transport=HttpxTransport("https://crm/api/v1"))
        await records.fetch()
        await records.next_page()
        await records.sort("name", True)
    """

    def __init__(
        self,
        records: list[Any] | None = None,
        options: RecordSetOptions | None = None,
        *,
        transport: Transport | None = None,
        events: EventBus | None = None,
        **kwargs: Any,
    ):
        if options is None:
            options = RecordSetOptions.from_kwargs(**kwargs)
        elif kwargs:
            raise ConfigurationError(
                "Pass either an options object or keyword options, not both",
                option=next(iter(kwargs)),
            )

        self.options = options
        self.name = options.name
        self.url = options.resolved_url
        self.events: EventBus = events if events is not None else NullEventBus()

        # Persistent extra query parameters
        self.data: dict[str, Any] = dict(options.data)
        self.data_additional: Any | None = None

        # Pending local delta not yet reflected in total
        self.length_correction = 0

        self._records: list[Any] = []

        self.parser = ResponseParser(options.model)
        self.order_state = OrderState(options.order_by, options.order, legacy=options.legacy_sort)
        self.filters = FilterComposer(
            options.where, options.where_additional, options.where_function
        )
        self.pagination = PaginationController(
            self.fetch, max_size=options.max_size, max_max_size=options.max_max_size
        )
        self.coordinator = FetchCoordinator(self, transport, self.parser)

        if records:
            self.reset(records, silent=True)

    # --- STATE ACCESSORS ---

    @property
    def entity_type(self) -> str | None:
        return self.name

    @property
    def records(self) -> list[Any]:
        """A copy of the loaded records, in order."""
        return list(self._records)

    @property
    def total(self) -> int:
        return self.pagination.total

    @total.setter
    def total(self, value: int) -> None:
        self.pagination.total = value

    @property
    def offset(self) -> int:
        return self.pagination.offset

    @property
    def max_size(self) -> int:
        return self.pagination.max_size

    @max_size.setter
    def max_size(self, value: int) -> None:
        if value <= 0:
            raise ConfigurationError(f"max_size must be greater than 0, got {value}", "max_size")
        self.pagination.max_size = value

    @property
    def max_max_size(self) -> int:
        return self.pagination.max_max_size

    @max_max_size.setter
    def max_max_size(self, value: int) -> None:
        if value < 0:
            raise ConfigurationError(f"max_max_size can not be negative, got {value}", "max_max_size")
        self.pagination.max_max_size = value

    @property
    def order(self) -> Any:
        return self.order_state.order

    @property
    def order_by(self) -> str | None:
        return self.order_state.order_by

    @property
    def default_order(self) -> Any:
        return self.order_state.default_order

    @property
    def default_order_by(self) -> str | None:
        return self.order_state.default_order_by

    @property
    def where(self) -> list[Any] | None:
        return self.filters.where

    @where.setter
    def where(self, value: list[Any] | None) -> None:
        self.filters.where = value

    @property
    def where_additional(self) -> list[Any] | None:
        return self.filters.where_additional

    @where_additional.setter
    def where_additional(self, value: list[Any] | None) -> None:
        self.filters.where_additional = value

    @property
    def where_function(self) -> WhereFunction | None:
        return self.filters.where_function

    @where_function.setter
    def where_function(self, value: WhereFunction | None) -> None:
        self.filters.where_function = value

    @property
    def last_request(self) -> FetchRequest | None:
        return self.coordinator.last_request

    def page_info(self) -> PageInfo:
        return self.pagination.info(len(self._records))

    def has_more(self) -> bool:
        return self.page_info().has_more

    # --- PAGINATION ---

    def set_offset(self, offset: int) -> FetchRequest:
        return self.pagination.set_offset(offset)

    def next_page(self) -> FetchRequest:
        return self.pagination.next_page()

    def previous_page(self) -> FetchRequest:
        return self.pagination.previous_page()

    def first_page(self) -> FetchRequest:
        return self.pagination.first_page()

    def last_page(self) -> FetchRequest:
        return self.pagination.last_page()

    # --- ORDERING ---

    def sort(self, order_by: str | None, order: Any = None) -> FetchRequest:
        """
        Sorts by a field and fetches.

        Args:
            order_by: Field name
            order: True for desc, False for asc, or a direction string. Defaults to asc.

        Returns:
            The pending fetch, awaitable for completion.
        """
        self.order_state.sort(order_by, order)
        return self.fetch()

    def set_order(self, order_by: str | None, order: Any = None, set_default: bool = False) -> None:
        """Sets the sort state without fetching; optionally makes it the default."""
        self.order_state.set_order(order_by, order, set_default=set_default)

    def reset_order_to_default(self) -> None:
        self.order_state.reset_to_default()

    # --- FILTERS ---

    def get_where(self) -> list[Any]:
        return self.filters.get_where()

    # --- FETCHING ---

    def fetch(
        self, options: FetchOptions | Mapping[str, Any] | None = None, **kwargs: Any
    ) -> FetchRequest:
        """
        Fetches the current window from the server.

        Options may be a FetchOptions, a mapping (camelCase keys accepted)
        or keyword arguments. Must be called with a running event loop.

        Returns:
            The pending FetchRequest. Awaiting it yields the records or raises
            TransportError / MalformedResponseError.
        """
        if options is None:
            options = FetchOptions.from_mapping(kwargs)
        elif isinstance(options, Mapping):
            options = FetchOptions.from_mapping({**options, **kwargs})
        elif kwargs:
            raise ConfigurationError(
                "Pass either a FetchOptions object or keyword options, not both",
                option=next(iter(kwargs)),
            )
        return self.coordinator.fetch(options)

    def abort_last_fetch(self) -> None:
        """Cancels the most recent fetch if it is still pending."""
        self.coordinator.abort_last_fetch()

    # --- LOCAL RECORD OPERATIONS ---

    def add(self, records: Any, silent: bool = False) -> list[Any]:
        """
        Appends records. A record whose id is already loaded replaces the
        loaded one in place and doesn't count as added.

        Returns:
            The records that were actually added.
        """
        added = []
        for item in self._as_list(records):
            record = self.parser.to_record(item)
            index = self._locate(record)
            if index is not None:
                self._records[index] = record
                continue
            self._records.append(record)
            added.append(record)

        if not silent:
            for record in added:
                self.events.trigger("add", record, self)
            if added:
                self.events.trigger("update", self)
        return added

    def push(self, record: Any, silent: bool = False) -> Any:
        self.add(record, silent=silent)
        return record

    def remove(self, records: Any, silent: bool = False) -> list[Any]:
        """
        Removes records given as records or ids. Unknown entries are ignored.

        Returns:
            The records that were actually removed.
        """
        removed = []
        for item in self._as_list(records):
            index = self._locate(item)
            if index is None:
                continue
            removed.append(self._records.pop(index))

        if not silent:
            for record in removed:
                self.events.trigger("remove", record, self)
            if removed:
                self.events.trigger("update", self)
        return removed

    def pop(self, silent: bool = False) -> Any | None:
        if not self._records:
            return None
        record = self._records[-1]
        self.remove(record, silent=silent)
        return record

    def reset(self, records: list[Any] | None = None, silent: bool = False) -> None:
        """Replaces the whole record list. Clears the pending length correction."""
        self.length_correction = 0
        self._records = [self.parser.to_record(item) for item in self._as_list(records)]

        logger.debug("Records reset", extra={"entity": self.name, "count": len(self._records)})
        if not silent:
            self.events.trigger("reset", self)

    def set(self, records: list[Any] | None, silent: bool = False) -> None:
        """
        Makes the loaded list equal to the given records, in their order.

        Records no longer present are removed, new ones added and known ids
        updated, with per-record events. The length correction is kept.
        """
        incoming = [self.parser.to_record(item) for item in self._as_list(records)]
        previous = self._records
        self._records = incoming

        removed = [r for r in previous if self._find_in(incoming, r) is None]
        added = [r for r in incoming if self._find_in(previous, r) is None]

        if not silent:
            for record in removed:
                self.events.trigger("remove", record, self)
            for record in added:
                self.events.trigger("add", record, self)
            if removed or added:
                self.events.trigger("update", self)

    def adjust_length(self, delta: int) -> int:
        """Records a local-only change in record count not yet reflected in total."""
        self.length_correction += delta
        return self.length_correction

    def get(self, id_: Any) -> Any | None:
        for record in self._records:
            if record_id(record) == id_:
                return record
        return None

    # --- CONTAINER PROTOCOL ---

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._records))

    def __getitem__(self, index: int) -> Any:
        return self._records[index]

    def __contains__(self, item: Any) -> bool:
        return self._locate(item) is not None

    def __repr__(self) -> str:
        return (
            f"<RecordSet {self.name!r} count={len(self._records)} "
            f"offset={self.offset} total={self.total}>"
        )

    # --- HELPERS ---

    @staticmethod
    def _as_list(records: Any) -> list[Any]:
        if records is None:
            return []
        if isinstance(records, (list, tuple)):
            return list(records)
        return [records]

    def _locate(self, item: Any) -> int | None:
        return self._find_in(self._records, item)

    @staticmethod
    def _find_in(records: list[Any], item: Any) -> int | None:
        """Finds a record by identity, by its id, or by an id given directly."""
        rid = record_id(item)
        if rid is None and not isinstance(item, Mapping) and not hasattr(item, "id"):
            # A bare id was passed
            rid = item
        for index, record in enumerate(records):
            if record is item:
                return index
            if rid is not None and record_id(record) == rid:
                return index
        return None
