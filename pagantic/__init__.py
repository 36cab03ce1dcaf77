from .base import RecordSet
from .config import RecordSetOptions
from .events import EventBus, EventEmitter, NullEventBus
from .exceptions import (
    ConfigurationError,
    MalformedResponseError,
    OutOfRangeError,
    RecordSetError,
    RequestTimeoutError,
    TransportError,
)
from .fetch import FetchOptions, FetchRequest
from .filters import FilterComposer
from .ordering import ASC, DESC, LegacySortEncoding, OrderEncoding, OrderState, normalize_order
from .pagination import UNKNOWN_TOTAL, PageInfo, PaginationController, last_page_offset
from .serializer import FetchResponse, ResponseParser
from .transport import HttpxTransport, Transport, encode_query_params

__all__ = [
    "RecordSet",
    "RecordSetOptions",
    # Components
    "OrderState",
    "FilterComposer",
    "PaginationController",
    "PageInfo",
    "FetchOptions",
    "FetchRequest",
    "FetchResponse",
    "ResponseParser",
    # Sort helpers
    "ASC",
    "DESC",
    "normalize_order",
    "OrderEncoding",
    "LegacySortEncoding",
    "UNKNOWN_TOTAL",
    "last_page_offset",
    # Collaborators
    "EventBus",
    "EventEmitter",
    "NullEventBus",
    "Transport",
    "HttpxTransport",
    "encode_query_params",
    # Exceptions
    "RecordSetError",
    "ConfigurationError",
    "OutOfRangeError",
    "TransportError",
    "RequestTimeoutError",
    "MalformedResponseError",
]
