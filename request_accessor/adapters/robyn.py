"""Build a RequestContext from a Robyn request."""

import mimetypes
from collections.abc import Iterable, Mapping
from typing import Any
from urllib.parse import parse_qsl, urlencode

import orjson
from robyn import Request

from request_accessor.core.logger import LogIcon, logger
from request_accessor.core.settings import Settings
from request_accessor.core.settings import settings as st
from request_accessor.models.core import FileUpload, RequestContext, RequestValue, UploadError

LIST_SUFFIX = "[]"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def canonical_header_name(name: str, acronyms: Iterable[str] = st.HEADER_ACRONYMS) -> str:
    """'x-http-method-override' -> 'X-HTTP-Method-Override'."""
    upper = frozenset(acronyms)
    return "-".join(part.upper() if part.upper() in upper else part.capitalize() for part in name.split("-"))


def _raw_headers(headers: Any) -> dict[str, list[str]]:
    """Robyn Headers expose get_headers(); plain mappings are accepted too."""
    raw = headers.get_headers() if hasattr(headers, "get_headers") else dict(headers or {})
    return {key: value if isinstance(value, list) else [value] for key, value in raw.items()}


def collect_headers(headers: Any, acronyms: Iterable[str] = st.HEADER_ACRONYMS) -> dict[str, str]:
    """Canonicalize header names and join repeated values."""
    collected: dict[str, str] = {}
    for name, values in _raw_headers(headers).items():
        collected[canonical_header_name(name, acronyms)] = ", ".join(str(v) for v in values)
    return collected


def _raw_query(query_params: Any) -> dict[str, list[str]]:
    raw = query_params.to_dict() if hasattr(query_params, "to_dict") else dict(query_params or {})
    return {key: value if isinstance(value, list) else [value] for key, value in raw.items()}


def flatten_pairs(pairs: Iterable[tuple[str, str]]) -> dict[str, RequestValue]:
    """
    Collapse repeated keys.

    The last value of a repeated key wins; keys ending in '[]' keep every
    value as a list under the key without the suffix.
    """
    flat: dict[str, RequestValue] = {}
    for key, value in pairs:
        if key.endswith(LIST_SUFFIX):
            bucket = flat.setdefault(key.removesuffix(LIST_SUFFIX), [])
            if isinstance(bucket, list):
                bucket.append(value)
        else:
            flat[key] = value
    return flat


def flatten_query(query_params: Any) -> dict[str, RequestValue]:
    return flatten_pairs((key, value) for key, values in _raw_query(query_params).items() for value in values)


def parse_form_body(body: str | bytes | None, content_type: str) -> dict[str, RequestValue]:
    """Decode an urlencoded form body the host left unparsed."""
    if not body or "x-www-form-urlencoded" not in content_type.lower():
        return {}
    text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
    return flatten_pairs(parse_qsl(text, keep_blank_values=True))


def build_uri(path: str, query_params: Any) -> str:
    query_string = urlencode(_raw_query(query_params), doseq=True)
    return f"{path}?{query_string}" if query_string else path


def parse_json_body(body: str | bytes | None, content_type: str) -> dict[str, RequestValue]:
    """Decode a JSON object body; anything else contributes nothing."""
    if not body or "json" not in content_type.lower():
        return {}
    try:
        decoded = orjson.loads(body)
    except orjson.JSONDecodeError as ex:
        logger.warning("Ignoring malformed JSON body", icon=LogIcon.JSON, error=str(ex))
        return {}
    if not isinstance(decoded, dict):
        logger.debug("JSON body is not an object", icon=LogIcon.JSON, kind=type(decoded).__name__)
        return {}
    return decoded


def collect_files(files: Mapping[str, bytes] | None) -> dict[str, FileUpload]:
    collected: dict[str, FileUpload] = {}
    for name, content in (files or {}).items():
        data = content.encode() if isinstance(content, str) else bytes(content)
        collected[name] = FileUpload(
            name=name,
            type=mimetypes.guess_type(name)[0] or DEFAULT_CONTENT_TYPE,
            error=UploadError.OK,
            size=len(data),
            content=data,
        )
    return collected


def resolve_client_ip(headers: Mapping[str, str], remote_addr: str | None, trust_proxy: bool) -> str:
    """Remote address, or the proxy-reported client when proxies are trusted."""
    if trust_proxy:
        client_ip = headers.get("X-Client-IP")
        if client_ip and client_ip != "ignore":
            return client_ip
        forwarded = headers.get("X-Forwarded-For")
        if forwarded and forwarded != "ignore":
            return forwarded.split(",")[0].strip()
    return remote_addr or ""


def context_from_robyn(request: Request, config: Settings = st) -> RequestContext:
    """Snapshot a Robyn request into a RequestContext."""
    headers = collect_headers(getattr(request, "headers", None), config.HEADER_ACRONYMS)
    raw_query = getattr(request, "query_params", None)
    query = flatten_query(raw_query)
    url = getattr(request, "url", None)
    path = getattr(url, "path", None) or "/"

    body = getattr(request, "body", None)
    content_type = headers.get("Content-Type", "")

    # Later sources override earlier ones
    body_data: dict[str, RequestValue] = {}
    body_data.update(query)
    body_data.update(getattr(request, "path_params", None) or {})
    body_data.update(getattr(request, "form_data", None) or {})
    body_data.update(parse_form_body(body, content_type))
    body_data.update(parse_json_body(body, content_type))

    context = RequestContext(
        method=getattr(request, "method", None),
        uri=build_uri(path, raw_query),
        headers=headers,
        query_params=query,
        body_data=body_data,
        files=collect_files(getattr(request, "files", None)),
        client_ip=resolve_client_ip(headers, getattr(request, "ip_addr", None), config.TRUST_PROXY_HEADERS),
    )
    logger.debug("Request snapshot taken", icon=LogIcon.ADAPTER, method=context.method, uri=context.uri)
    return context
