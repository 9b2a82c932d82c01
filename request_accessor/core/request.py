"""Read-only, typed access to one request's snapshot."""

from collections.abc import Mapping
from datetime import datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable
from urllib.parse import urlsplit
from zoneinfo import ZoneInfoNotFoundError

from request_accessor.core.casts import parse_date, to_bool, to_string
from request_accessor.core.settings import settings as st
from request_accessor.models.core import FileUpload, RequestContext, RequestValue, UploadError, freeze_value

if TYPE_CHECKING:
    from robyn import Request

BEARER_PREFIX = "Bearer "
DEFAULT_DATE_FORMAT = "Y-m-d"


@runtime_checkable
class RequestInterface(Protocol):
    """Accessor surface shared by live and fixture-backed requests."""

    def get_header(self, key: str) -> str | None: ...

    def get_headers(self) -> Mapping[str, str]: ...

    def get_method(self) -> str: ...

    def get_uri(self) -> str: ...

    def get_body(self, key: str | None = None) -> Any: ...

    def get_token(self) -> str | None: ...

    def files(self) -> Mapping[str, FileUpload]: ...

    def file(self, key: str) -> FileUpload | None: ...

    def is_method(self, method: str) -> bool: ...

    def get_path(self) -> str: ...

    def get_params(self) -> Mapping[str, RequestValue]: ...

    def get_param(self, key: str) -> RequestValue: ...

    def all(self) -> Mapping[str, RequestValue]: ...

    def input(self, key: str | None = None, default: Any = None) -> Any: ...

    def query(self) -> Mapping[str, RequestValue]: ...

    def string(self, key: str) -> str: ...

    def boolean(self, key: str) -> bool: ...

    def date(self, key: str, format: str = DEFAULT_DATE_FORMAT, timezone: str | None = None) -> datetime | None: ...

    def is_ajax(self) -> bool: ...

    def is_secure(self) -> bool: ...

    def get_client_ip(self) -> str: ...

    def get_user_agent(self) -> str: ...

    def get_referer(self) -> str: ...

    def get_method_override(self) -> str | None: ...

    def has_file(self, key: str) -> bool: ...


class RequestAccessor:
    """
    Typed, defaulted access to an immutable request snapshot.

    Every accessor reads the RequestContext given at construction; nothing is
    re-read from the host afterwards. Mappings and lists are frozen recursively
    at construction, so returned values cannot change the snapshot. Lookups
    never raise: absent values come back as None, an empty string or False.
    """

    __slots__ = ("_context", "_headers", "_query", "_data", "_files")

    def __init__(self, context: RequestContext | None = None) -> None:
        self._context = (context or RequestContext()).model_copy(deep=True)
        self._headers = freeze_value(self._context.headers)
        self._query = freeze_value(self._context.query_params)
        self._data = freeze_value(self._context.body_data)
        self._files = MappingProxyType(dict(self._context.files))

    @classmethod
    def from_robyn(cls, request: "Request") -> "RequestAccessor":
        """Snapshot a Robyn request."""
        from request_accessor.adapters.robyn import context_from_robyn

        return cls(context_from_robyn(request))

    @property
    def context(self) -> RequestContext:
        """Detached copy of the snapshot."""
        return self._context.model_copy(deep=True)

    def __repr__(self) -> str:
        return f"RequestAccessor({self._context.method} {self._context.uri!r})"

    # Headers

    def get_header(self, key: str) -> str | None:
        return self._headers.get(key)

    def get_headers(self) -> Mapping[str, str]:
        return self._headers

    def get_token(self) -> str | None:
        """Authorization header with one leading 'Bearer ' removed."""
        token = self.get_header("Authorization")
        if not token:
            return None
        return token.removeprefix(BEARER_PREFIX)

    def is_ajax(self) -> bool:
        return self._headers.get("X-Requested-With") == "XMLHttpRequest"

    def is_secure(self) -> bool:
        # Reads an HTTPS header, not the transport state
        return self._headers.get("HTTPS") == "on"

    def get_user_agent(self) -> str:
        return self._headers.get("User-Agent", "")

    def get_referer(self) -> str:
        return self._headers.get("Referer", "")

    # Request line

    def get_method(self) -> str:
        return self._context.method

    def is_method(self, method: str) -> bool:
        return self._context.method == method.upper()

    def get_method_override(self) -> str | None:
        """The _method body field, else the X-HTTP-Method-Override header."""
        override = self._data.get("_method")
        if override is not None:
            return to_string(override)
        return self.get_header("X-HTTP-Method-Override")

    def get_uri(self) -> str:
        return self._context.uri

    def get_path(self) -> str:
        """Path component of the URI, empty when the URI cannot be parsed."""
        try:
            return urlsplit(self._context.uri).path
        except ValueError:
            return ""

    def get_client_ip(self) -> str:
        return self._context.client_ip

    # Query string

    def get_params(self) -> Mapping[str, RequestValue]:
        return self._query

    def query(self) -> Mapping[str, RequestValue]:
        return self._query

    def get_param(self, key: str) -> RequestValue:
        return self._query.get(key)

    # Merged request data

    def get_body(self, key: str | None = None) -> Any:
        if key is None:
            return self._data
        return self._data.get(key)

    def all(self) -> Mapping[str, RequestValue]:
        return self._data

    def input(self, key: str | None = None, default: Any = None) -> Any:
        if key is None:
            return self._data
        value = self._data.get(key)
        return default if value is None else value

    def string(self, key: str) -> str:
        return to_string(self._data.get(key))

    def boolean(self, key: str) -> bool:
        return to_bool(self._data.get(key))

    def date(self, key: str, format: str = DEFAULT_DATE_FORMAT, timezone: str | None = None) -> datetime | None:
        """
        Parse a body value as a date.

        ``format`` uses host date letters ('Y-m-d', 'd/m/Y H:i'). Returns None
        when the key is absent, the value does not match or the timezone is
        unknown.
        """
        value = self._data.get(key)
        if value is None:
            return None

        try:
            return parse_date(value, format, timezone, st.DEFAULT_TIMEZONE)
        except (ValueError, OverflowError, OSError, ZoneInfoNotFoundError):
            return None

    # Files

    def files(self) -> Mapping[str, FileUpload]:
        return self._files

    def file(self, key: str) -> FileUpload | None:
        return self._files.get(key)

    def has_file(self, key: str) -> bool:
        upload = self._files.get(key)
        return upload is not None and upload.error == UploadError.OK
