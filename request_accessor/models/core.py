"""Core models for the request snapshot."""

from collections.abc import Mapping
from enum import IntEnum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

type RequestValue = str | int | float | bool | None | list[RequestValue] | dict[str, RequestValue]


def freeze_value(value: Any) -> Any:
    """Recursive read-only copy: lists become tuples, dicts become mapping proxies."""
    match value:
        case Mapping():
            return MappingProxyType({key: freeze_value(item) for key, item in value.items()})
        case list() | tuple():
            return tuple(freeze_value(item) for item in value)
        case _:
            return value


def thaw_value(value: Any) -> Any:
    """Plain JSON-shaped copy of a frozen value."""
    match value:
        case Mapping():
            return {key: thaw_value(item) for key, item in value.items()}
        case list() | tuple():
            return [thaw_value(item) for item in value]
        case _:
            return value


class UploadError(IntEnum):
    """Upload error codes reported by the host for each file field."""

    OK = 0
    INI_SIZE = 1
    FORM_SIZE = 2
    PARTIAL = 3
    NO_FILE = 4
    NO_TMP_DIR = 6
    CANT_WRITE = 7
    EXTENSION = 8


class FileUpload(BaseModel):
    """Descriptor of one uploaded file as supplied by the host."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str = "application/octet-stream"
    tmp_name: str | None = None
    error: UploadError = UploadError.OK
    size: int = 0
    content: bytes = Field(default=b"", repr=False)

    @property
    def ok(self) -> bool:
        return self.error == UploadError.OK


class RequestContext(BaseModel):
    """Immutable snapshot of the host request state, taken once per request."""

    model_config = ConfigDict(frozen=True)

    method: str = "GET"
    uri: str = ""
    headers: dict[str, str] = Field(default_factory=dict)
    query_params: dict[str, RequestValue] = Field(default_factory=dict)
    body_data: dict[str, RequestValue] = Field(default_factory=dict)
    files: dict[str, FileUpload] = Field(default_factory=dict)
    client_ip: str = ""

    @field_validator("method", mode="before")
    @classmethod
    def _default_method(cls, value: Any) -> Any:
        if not value:
            return "GET"
        return value.upper() if isinstance(value, str) else value

    @field_validator("uri", "client_ip", mode="before")
    @classmethod
    def _empty_when_missing(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("headers", "query_params", "body_data", "files", mode="before")
    @classmethod
    def _empty_mapping_when_missing(cls, value: Any) -> Any:
        return {} if value is None else value
