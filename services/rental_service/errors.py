"""Error taxonomy for the rental service and its HTTP mapping."""

from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from libs.common.logging import get_logger

logger = get_logger(__name__)


class RentalError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationFailed(RentalError):
    """Input rejected before touching the store. Carries per-field messages."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, errors: list[dict[str, str]]):
        super().__init__("Validation failed")
        self.errors = errors

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationFailed":
        return cls([{"field": field, "message": message}])


class NotFound(RentalError):
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(RentalError):
    status_code = status.HTTP_409_CONFLICT


class AvailabilityLookupError(RentalError):
    """Storage failure while resolving availability."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, cause: Exception):
        super().__init__(f"failed to find available vehicles: {cause}")
        self.__cause__ = cause


async def rental_error_handler(request: Request, exc: RentalError) -> JSONResponse:
    content: dict = {"detail": exc.detail}
    errors: Optional[list] = getattr(exc, "errors", None)
    if errors is not None:
        content["errors"] = errors
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RentalError, rental_error_handler)
