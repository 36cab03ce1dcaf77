"""
Transport collaborators.

A transport performs the network round trip for a fetch. The record set
only needs one coroutine from it:

    async def request(url, params) -> payload

The record set runs that coroutine inside a task, so cancelling the task
(FetchRequest.abort()) cancels the underlying transport operation too.
"""

from collections.abc import Mapping
from typing import Any, Protocol

import httpx

from ._logging import logger
from .exceptions import handle_transport_errors


class Transport(Protocol):
    """Port: performs a list request and returns the decoded response payload."""

    async def request(self, url: str | None, params: dict[str, Any]) -> Any: ...


def encode_query_params(params: Mapping[str, Any]) -> list[tuple[str, str]]:
    """
    Flattens nested parameters into bracket notation.

    {"where": [{"type": "equals", "value": 1}], "asc": True}
    -> [("where[0][type]", "equals"), ("where[0][value]", "1"), ("asc", "true")]

    None values are omitted; booleans are sent as "true"/"false".
    """
    pairs: list[tuple[str, str]] = []

    def _walk(prefix: str, value: Any) -> None:
        if value is None:
            return
        if isinstance(value, Mapping):
            for k, v in value.items():
                _walk(f"{prefix}[{k}]", v)
        elif isinstance(value, (list, tuple)):
            for i, v in enumerate(value):
                _walk(f"{prefix}[{i}]", v)
        elif isinstance(value, bool):
            pairs.append((prefix, "true" if value else "false"))
        else:
            pairs.append((prefix, str(value)))

    for key, value in params.items():
        _walk(str(key), value)
    return pairs


class HttpxTransport:
    """
    Async HTTP transport based on httpx.

    Sends a GET to '<base_url>/<url>' with the encoded query parameters and
    returns the decoded JSON body. Errors are mapped to TransportError.
    """

    def __init__(
        self,
        base_url: str = "",
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
        **kwargs: Any,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout, **kwargs)

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def request(self, url: str | None, params: dict[str, Any]) -> Any:
        target = url or ""
        logger.debug("Sending list request", extra={"url": target})

        with handle_transport_errors(url=target):
            response = await self._client.get(target, params=encode_query_params(params))
            response.raise_for_status()

        # A body that isn't JSON is a shape problem, not a transport one
        try:
            return response.json()
        except ValueError:
            return response.text
