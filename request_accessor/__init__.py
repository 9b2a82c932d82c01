"""Typed, read-only request accessor for Robyn handlers."""

from request_accessor.core.request import RequestAccessor, RequestInterface
from request_accessor.models.core import FileUpload, RequestContext, RequestValue, UploadError

__all__ = [
    "FileUpload",
    "RequestAccessor",
    "RequestContext",
    "RequestInterface",
    "RequestValue",
    "UploadError",
]
