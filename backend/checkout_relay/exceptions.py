import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from checkout_relay.errors import UpstreamError

logger = logging.getLogger(__name__)


async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    """Surface the upstream message to the caller as ``{"message": ...}``."""
    logger.warning(f"Upstream error on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": exc.message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(UpstreamError, upstream_error_handler)
