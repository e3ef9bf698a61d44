import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from keystone.errors import ConflictError, KeystoneError

logger = logging.getLogger(__name__)


async def keystone_error_handler(request: Request, exc: KeystoneError) -> JSONResponse:
    content = {"detail": exc.detail}
    if isinstance(exc, ConflictError) and exc.week is not None:
        content["week"] = {
            "id": exc.week.id,
            "start_date": exc.week.start_date.isoformat(),
            "end_date": exc.week.end_date.isoformat(),
        }
    return JSONResponse(status_code=exc.status_code, content=content)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(KeystoneError, keystone_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
