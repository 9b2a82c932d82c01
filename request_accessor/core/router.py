"""Router that hands RequestAccessor snapshots to handlers and normalizes results."""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any
from uuid import uuid4

import orjson
from asgi_correlation_id import correlation_id
from pydantic import BaseModel
from robyn import Request, Response, SubRouter, status_codes
from robyn.robyn import HttpMethod

from request_accessor.core.logger import LogIcon, logger
from request_accessor.core.request import RequestAccessor

REQUEST_ID_HEADER = "X-Request-ID"


def parse_endpoint_signature(sig: inspect.Signature) -> set[str]:
    """Names of parameters annotated with RequestAccessor."""
    return {name for name, param in sig.parameters.items() if param.annotation is RequestAccessor}


def parse_response(result: Any) -> Response:
    """Convert handler result to Response."""
    match result:
        case Response():
            return result
        case BaseModel():
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={"content-type": "application/json"},
                description=result.model_dump_json(),
            )
        case dict() | list():
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={"content-type": "application/json"},
                description=orjson.dumps(result).decode(),
            )
        case _:
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={},
                description=str(result),
            )


def wrap_handler(handler: Callable) -> Callable:
    """Wrap handler so RequestAccessor params are injected and results become Responses."""
    sig = inspect.signature(handler)
    accessor_params = parse_endpoint_signature(sig)
    has_request_param = "request" in sig.parameters

    @wraps(handler)
    async def wrapped_handler(request: Request, **h_kwargs):
        accessor = RequestAccessor.from_robyn(request)
        token = correlation_id.set(accessor.get_header(REQUEST_ID_HEADER) or uuid4().hex)
        try:
            logger.debug(
                "Handling request",
                icon=LogIcon.REQUEST,
                method=accessor.get_method(),
                path=accessor.get_path(),
            )
            for name in accessor_params:
                h_kwargs[name] = accessor

            # Pass request to handler only if it declared it
            if has_request_param:
                h_kwargs["request"] = request

            result = handler(**h_kwargs)
            if inspect.isawaitable(result):
                result = await result
            return parse_response(result)
        finally:
            correlation_id.reset(token)

    # Build signature: always include request for Robyn injection
    new_params = [inspect.Parameter("request", inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=Request)]
    new_params.extend(
        param for name, param in sig.parameters.items() if name != "request" and name not in accessor_params
    )
    wrapped_handler.__signature__ = sig.replace(parameters=new_params)  # type: ignore[attr-defined]
    return wrapped_handler


HTTP_METHODS = (
    HttpMethod.GET,
    HttpMethod.POST,
    HttpMethod.PUT,
    HttpMethod.DELETE,
    HttpMethod.PATCH,
    HttpMethod.HEAD,
    HttpMethod.OPTIONS,
    HttpMethod.TRACE,
    HttpMethod.CONNECT,
)


def _create_method_wrapper(original_method: Callable) -> Callable:
    @wraps(original_method)
    def method_wrapper(*args, **kwargs) -> Callable:
        decorator = original_method(*args, **kwargs)

        def handler_decorator(handler: Callable) -> Callable:
            return decorator(wrap_handler(handler))

        return handler_decorator

    return method_wrapper


class Router(SubRouter):
    """SubRouter whose handlers may declare a RequestAccessor parameter."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._wrap_methods()

    def _wrap_methods(self) -> None:
        """Wrap HTTP methods with accessor injection."""
        for method in HTTP_METHODS:
            method_name = str(method).split(".")[-1].lower()
            if hasattr(self, method_name):
                setattr(self, method_name, _create_method_wrapper(getattr(self, method_name)))
        logger.debug("Router ready", icon=LogIcon.ROUTER, prefix=getattr(self, "prefix", ""))
