from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import httpx


class RecordSetError(Exception):
    """Base exception for all pagantic errors."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ConfigurationError(RecordSetError):
    """Raised when a record set is constructed with invalid options."""

    def __init__(
        self, message: str, option: str | None = None, original_error: Exception | None = None
    ) -> None:
        super().__init__(message, original_error)
        self.option = option


class OutOfRangeError(RecordSetError):
    """Raised when an offset falls outside 0..total. Nothing is fetched."""

    def __init__(self, message: str, offset: int, total: int) -> None:
        super().__init__(message)
        self.offset = offset
        self.total = total


class TransportError(RecordSetError):
    """Raised when the transport fails to deliver a response."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.status_code = status_code


class RequestTimeoutError(TransportError):
    """Raised when a fetch request times out."""

    def __init__(
        self, message: str = "Request timed out", original_error: Exception | None = None
    ) -> None:
        super().__init__(message, original_error=original_error)


class MalformedResponseError(RecordSetError):
    """Raised when a response lacks a usable 'total' or 'list' field."""

    def __init__(
        self, message: str, response: Any = None, original_error: Exception | None = None
    ) -> None:
        super().__init__(message, original_error)
        self.response = response


@contextmanager
def handle_transport_errors(url: str | None = None) -> Generator[None, None, None]:
    """
    Context manager that catches httpx errors
    and raises the appropriate TransportError subclass.

    Args:
        url: Optional request url for better error messages

    Usage:
        with handle_transport_errors(url="Account"):
            response = await client.get("Account", params=params)
            response.raise_for_status()
    """
    target = url or "unknown"
    try:
        yield
    except httpx.TimeoutException as e:
        raise RequestTimeoutError(f"Request to '{target}' timed out", original_error=e) from e
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        raise TransportError(
            f"HTTP {status} from '{target}'", status_code=status, original_error=e
        ) from e
    except httpx.HTTPError as e:
        # Unknown transport failure: wrap in generic TransportError
        raise TransportError(f"Transport error ({target}): {e!s}", original_error=e) from e
