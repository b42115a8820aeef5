"""Error handling middleware for FastAPI."""

import logging
from typing import Callable, Optional

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException

from teamthreads.api.schemas.common import ErrorResponse
from teamthreads.errors import TeamThreadsError

logger = logging.getLogger(__name__)


def domain_error_response(error: TeamThreadsError, request_id: Optional[str]) -> JSONResponse:
    """Render a domain error as an ErrorResponse with its mapped status code."""
    body = ErrorResponse(
        error=error.code,
        message=error.message,
        details=error.details,
        request_id=request_id,
    )
    return JSONResponse(status_code=error.http_status, content=body.model_dump())


async def error_handling_middleware(request: Request, call_next: Callable) -> Response:
    """
    Catch exceptions and return standardized JSON error responses.

    Handles different exception types:
    - TeamThreadsError → its own status (401 / 403 / 404 / 409 / 400)
    - ValueError → 400 Bad Request
    - HTTPException → passthrough with original status
    - IntegrityError (SQLAlchemy) → 409 Conflict
    - Exception → 500 Internal Server Error

    Args:
        request: Incoming FastAPI request
        call_next: Next middleware/handler in chain

    Returns:
        Response object (either success or error JSON)
    """
    request_id = getattr(request.state, "request_id", None)

    try:
        response: Response = await call_next(request)
        return response

    except TeamThreadsError as e:
        log = logger.warning if e.http_status < 500 else logger.error
        log(
            f"domain_error: path={request.url.path}, code={e.code}, "
            f"status={e.http_status}, request_id={request_id}"
        )
        return domain_error_response(e, request_id)

    except ValueError as e:
        logger.warning(
            f"validation_error: path={request.url.path}, error={str(e)}, request_id={request_id}"
        )
        error = ErrorResponse(error="validation_error", message=str(e), request_id=request_id)
        return JSONResponse(status_code=400, content=error.model_dump())

    except HTTPException as e:
        logger.info(
            f"http_exception: path={request.url.path}, status={e.status_code}, "
            f"detail={e.detail}, request_id={request_id}"
        )
        error = ErrorResponse(error="http_error", message=str(e.detail), request_id=request_id)
        return JSONResponse(status_code=e.status_code, content=error.model_dump())

    except IntegrityError as e:
        logger.warning(
            f"integrity_error: path={request.url.path}, error={str(e)}, request_id={request_id}"
        )
        error = ErrorResponse(
            error="conflict",
            message="Resource conflict or constraint violation",
            details={"db_error": str(e.orig) if hasattr(e, "orig") else str(e)},
            request_id=request_id,
        )
        return JSONResponse(status_code=409, content=error.model_dump())

    except Exception as e:
        logger.exception(
            f"internal_error: path={request.url.path}, error={str(e)}, request_id={request_id}"
        )
        error = ErrorResponse(
            error="internal_error",
            message="An unexpected error occurred",
            request_id=request_id,
        )
        return JSONResponse(status_code=500, content=error.model_dump())
