import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class VisitorQueryError(Exception):
    """A visitor read failed in the record store.

    ``error`` is the user-facing summary for the route ("Failed to fetch
    visitors"); ``message`` carries the underlying store error text.
    """

    def __init__(self, error: str, message: str) -> None:
        self.error = error
        self.message = message
        super().__init__(f"{error}: {message}")


async def visitor_query_error_handler(request: Request, exc: VisitorQueryError) -> JSONResponse:
    logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": exc.error, "message": exc.message},
    )
