"""robyn-request-accessor demo service."""

from robyn import Robyn

from request_accessor.api.health import router as health_router
from request_accessor.api.introspect import router as inspect_router
from request_accessor.core.logger import LogIcon, logger
from request_accessor.core.settings import settings as st

app = Robyn(__file__)

app.include_router(health_router)
app.include_router(inspect_router)


def main() -> None:
    logger.info("Starting service", icon=LogIcon.START, name=st.API_NAME, host=st.API_HOST, port=st.API_PORT)
    app.start(host=st.API_HOST, port=st.API_PORT)


if __name__ == "__main__":
    main()
