"""
Shared pytest fixtures and configuration for pagantic tests.

This module provides common fixtures used across unit and integration tests,
including scripted transports, event recorders and sample list responses.
"""

import asyncio
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from pagantic import EventEmitter, RecordSet


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line("markers", "integration: Integration tests against a mocked HTTP server")


def make_records(count: int, start: int = 0) -> list[dict[str, Any]]:
    """Builds plain records with string ids."""
    return [{"id": f"r{i}", "name": f"Record {i}"} for i in range(start, start + count)]


def make_response(total: int, records: list[Any], **extra: Any) -> dict[str, Any]:
    return {"total": total, "list": records, **extra}


class ControlledTransport:
    """
    Transport whose requests stay pending until the test settles them.

    Each request gets its own future; resolve(i, payload) or fail(i, exc)
    settles the i-th issued request.
    """

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.futures: list[asyncio.Future] = []

    async def request(self, url: str | None, params: dict[str, Any]) -> Any:
        future = asyncio.get_running_loop().create_future()
        self.calls.append({"url": url, "params": params})
        self.futures.append(future)
        return await future

    def resolve(self, index: int, payload: Any) -> None:
        self.futures[index].set_result(payload)

    def fail(self, index: int, exc: Exception) -> None:
        self.futures[index].set_exception(exc)


class EventRecorder:
    """Subscribes to every event on an emitter and keeps (name, args) pairs."""

    def __init__(self, emitter: EventEmitter) -> None:
        self.events: list[tuple[str, tuple[Any, ...]]] = []
        emitter.on("all", self._record)

    def _record(self, event: str, *args: Any) -> None:
        self.events.append((event, args))

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.events]

    def clear(self) -> None:
        self.events.clear()


@pytest.fixture
def mock_transport():
    """
    Creates a mocked transport whose request() resolves immediately.

    Tests set mock_transport.request.return_value (or side_effect)
    to control the payload.
    """
    transport = MagicMock()
    transport.request = AsyncMock(return_value=make_response(0, []))
    return transport


@pytest.fixture
def controlled_transport():
    return ControlledTransport()


@pytest.fixture
def emitter():
    return EventEmitter()


@pytest.fixture
def recorder(emitter):
    return EventRecorder(emitter)


@pytest.fixture
def record_set(mock_transport, emitter):
    """A RecordSet for the 'Account' entity with a mocked transport."""
    return RecordSet(name="Account", transport=mock_transport, events=emitter)


@pytest.fixture
def sample_records() -> list[dict[str, Any]]:
    return make_records(3)


@pytest.fixture
def records_factory():
    """Returns make_records(count, start=0)."""
    return make_records


@pytest.fixture
def response_factory():
    """Returns make_response(total, records, **extra)."""
    return make_response
