from typing import List, Optional
from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from utils.logger import get_logger

logger = get_logger("Global_Exception")


class AppException(HTTPException):
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)


class ValidationError(AppException):
    """Missing or malformed input. Carries field-level detail."""

    def __init__(self, detail: str = "Invalid input", errors: Optional[List[dict]] = None):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail)
        self.errors = errors or []


class Unauthenticated(AppException):
    def __init__(self, detail: str = "Token is not valid"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail)


class Forbidden(AppException):
    def __init__(self, detail: str = "Access denied. Admin privileges required."):
        super().__init__(status.HTTP_403_FORBIDDEN, detail)


class NotFound(AppException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status.HTTP_404_NOT_FOUND, detail)


class ServerError(AppException):
    def __init__(self, detail: str = "Server error"):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, detail)


async def app_exception_handler(request: Request, exc: AppException):
    content = {"detail": exc.detail}
    if isinstance(exc, ValidationError):
        content["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=content)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        # loc is ("body", "email") / ("query", "type") / ("body",) for a missing body;
        # the first element names the request part, the rest is the field path
        loc = [str(part) for part in err.get("loc", ())[1:]]
        errors.append({"field": ".".join(loc) or None, "message": err.get("msg")})
    logger.warning(f"Validation failed on {request.url.path}: {errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid input", "errors": errors}
    )


async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled exception",
        extra={"path": request.url.path}
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Server error"}
    )
