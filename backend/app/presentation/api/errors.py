"""Application-wide exception handlers — map uncaught errors to JSON bodies."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ArticleDeleteFailedError(Exception):
    """Raised by the delete endpoint when removal fails for a reason other than not-found.

    Propagating it (instead of returning a response) lets the request session
    roll back before the 500 body is rendered.
    """

    def __init__(self, article_id: int, cause: Exception):
        self.article_id = article_id
        self.cause = cause
        super().__init__(str(cause))


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
    )


async def _delete_failed_handler(request: Request, exc: ArticleDeleteFailedError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Failed to delete article", "message": str(exc.cause)},
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the request-validation (400), delete-failure and catch-all (500) handlers."""
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(ArticleDeleteFailedError, _delete_failed_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
