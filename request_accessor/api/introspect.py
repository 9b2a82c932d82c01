"""Echo what the accessor sees for the current request."""

from typing import Any

from pydantic import BaseModel

from request_accessor.core.logger import LogIcon, logger
from request_accessor.core.request import RequestAccessor
from request_accessor.core.router import Router
from request_accessor.models.core import thaw_value

router = Router(__file__, prefix="/")


class FileSummary(BaseModel):
    name: str
    type: str
    size: int
    ok: bool


class InspectResponse(BaseModel):
    """Accessor view of one request."""

    method: str
    method_override: str | None
    uri: str
    path: str
    client_ip: str
    user_agent: str
    referer: str
    is_ajax: bool
    is_secure: bool
    has_token: bool
    query: dict[str, Any]
    input: dict[str, Any]
    files: list[FileSummary]


def summarize(accessor: RequestAccessor) -> InspectResponse:
    return InspectResponse(
        method=accessor.get_method(),
        method_override=accessor.get_method_override(),
        uri=accessor.get_uri(),
        path=accessor.get_path(),
        client_ip=accessor.get_client_ip(),
        user_agent=accessor.get_user_agent(),
        referer=accessor.get_referer(),
        is_ajax=accessor.is_ajax(),
        is_secure=accessor.is_secure(),
        has_token=accessor.get_token() is not None,
        query=thaw_value(accessor.query()),
        input=thaw_value(accessor.all()),
        files=[
            FileSummary(name=upload.name, type=upload.type, size=upload.size, ok=accessor.has_file(key))
            for key, upload in accessor.files().items()
        ],
    )


async def inspect_request(accessor: RequestAccessor) -> InspectResponse:
    logger.info("Inspecting request", icon=LogIcon.INTROSPECTION, method=accessor.get_method())
    return summarize(accessor)


router.get("/inspect")(inspect_request)
router.post("/inspect")(inspect_request)
