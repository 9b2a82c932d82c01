"""Test fixtures for robyn-request-accessor unit tests."""

from dataclasses import dataclass, field

import pytest

from request_accessor.core.request import RequestAccessor
from request_accessor.models.core import FileUpload, RequestContext, UploadError


# -----------------------------------------------------------------------------
# Mock classes for Robyn Request
# -----------------------------------------------------------------------------


@dataclass
class MockHeaders:
    """Mock Headers object for Robyn Request (lowercase names, list values)."""

    _data: dict[str, list[str]] = field(default_factory=dict)

    def get(self, key: str, default: str | None = None) -> str | None:
        values = self._data.get(key.lower())
        return values[0] if values else default

    def set(self, key: str, value: str) -> None:
        self._data[key.lower()] = [value]

    def append(self, key: str, value: str) -> None:
        self._data.setdefault(key.lower(), []).append(value)

    def get_headers(self) -> dict[str, list[str]]:
        return self._data


@dataclass
class MockQueryParams:
    """Mock QueryParams object for Robyn Request."""

    _data: dict[str, list[str]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, list[str]]:
        return self._data


@dataclass
class MockUrl:
    scheme: str = "http"
    host: str = "localhost:8000"
    path: str = "/"


@dataclass
class MockRequest:
    """Mock Request object for Robyn."""

    method: str = "GET"
    url: MockUrl = field(default_factory=MockUrl)
    headers: MockHeaders = field(default_factory=MockHeaders)
    query_params: MockQueryParams = field(default_factory=MockQueryParams)
    path_params: dict[str, str] = field(default_factory=dict)
    form_data: dict[str, str] = field(default_factory=dict)
    files: dict[str, bytes] = field(default_factory=dict)
    body: str | bytes = ""
    ip_addr: str | None = "127.0.0.1"


@pytest.fixture
def make_mock_request():
    """Factory fixture to create mock Robyn requests."""

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: dict[str, str] | None = None,
        query: dict[str, list[str]] | None = None,
        **kwargs,
    ) -> MockRequest:
        mock_headers = MockHeaders()
        for key, value in (headers or {}).items():
            mock_headers.append(key, value)
        return MockRequest(
            method=method,
            url=MockUrl(path=path),
            headers=mock_headers,
            query_params=MockQueryParams(query or {}),
            **kwargs,
        )

    return _make


# -----------------------------------------------------------------------------
# Snapshot fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def request_context() -> RequestContext:
    """A fixed synthetic request snapshot."""
    return RequestContext(
        method="post",
        uri="/orders/42?expand=items#top",
        headers={
            "Authorization": "Bearer abc123",
            "User-Agent": "pytest-agent/1.0",
            "Referer": "https://shop.example/cart",
            "X-Requested-With": "XMLHttpRequest",
            "HTTPS": "on",
            "X-HTTP-Method-Override": "PATCH",
        },
        query_params={"expand": "items"},
        body_data={
            "expand": "items",
            "name": "Widget",
            "qty": 3,
            "price": 2.0,
            "gift": "yes",
            "shipped_on": "2024-03-15",
            "tags": ["a", "b"],
            "note": None,
        },
        files={
            "upload": FileUpload(name="invoice.pdf", type="application/pdf", size=1024),
            "broken": FileUpload(name="big.bin", error=UploadError.INI_SIZE),
        },
        client_ip="203.0.113.7",
    )


@pytest.fixture
def accessor(request_context: RequestContext) -> RequestAccessor:
    return RequestAccessor(request_context)


@pytest.fixture
def make_accessor():
    """Factory fixture to build accessors from keyword snapshot fields."""

    def _make(**fields) -> RequestAccessor:
        return RequestAccessor(RequestContext(**fields))

    return _make
