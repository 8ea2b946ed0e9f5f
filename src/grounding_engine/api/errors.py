"""Map domain errors onto HTTP responses."""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from grounding_engine.exceptions import GroundingEngineError
from grounding_engine.observability.logger import get_logger

logger = get_logger("errors")

STATUS_BY_CODE = {
    "invalid-argument": status.HTTP_400_BAD_REQUEST,
    "unauthenticated": status.HTTP_401_UNAUTHORIZED,
    "permission-denied": status.HTTP_403_FORBIDDEN,
    "not-found": status.HTTP_404_NOT_FOUND,
    "already-exists": status.HTTP_409_CONFLICT,
    "failed-precondition": status.HTTP_412_PRECONDITION_FAILED,
    "unavailable": status.HTTP_503_SERVICE_UNAVAILABLE,
    "internal": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


async def handle_engine_error(request: Request, exc: GroundingEngineError) -> JSONResponse:
    status_code = STATUS_BY_CODE.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    log = logger.error if status_code >= 500 else logger.info
    log("request_rejected", path=request.url.path, code=exc.code, error=str(exc))
    return JSONResponse(status_code=status_code, content={"code": exc.code, "detail": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GroundingEngineError, handle_engine_error)
