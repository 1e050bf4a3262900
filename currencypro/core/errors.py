from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
import logging

logger = logging.getLogger("currencypro.errors")


class CurrencyProError(Exception):
    """Base of the domain error taxonomy; status_code is the HTTP mapping."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingParameter(CurrencyProError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnknownCurrency(CurrencyProError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, code: str):
        super().__init__(f"Unsupported currency: {code}")
        self.code = code


class BaseCurrencyLocked(CurrencyProError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, code: str):
        super().__init__(f"Base currency {code} has a fixed rate of 1")
        self.code = code


class InvalidRate(CurrencyProError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(CurrencyProError):
    status_code = status.HTTP_404_NOT_FOUND


class InternalError(CurrencyProError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(message: str) -> dict:
    return {"success": False, "error": message}


def domain_error_handler(request: Request, exc: CurrencyProError):  # type: ignore
    if exc.status_code >= 500:
        logger.error("domain error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


def http_error_handler(request: Request, exc):  # type: ignore
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = f"Endpoint not found: {request.method} {request.url.path}"
    else:
        message = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message),
        headers=getattr(exc, "headers", None),
    )


def _describe(err: dict) -> str:
    # loc is ("body", "amount") or ("query", "days"); drop the source prefix
    loc = ".".join(str(p) for p in err.get("loc", ())[1:]) or "body"
    if err.get("type") == "missing":
        return f"{loc} is required"
    return f"{loc}: {err.get('msg')}"


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    problems = "; ".join(_describe(e) for e in exc.errors())
    return JSONResponse(
        status_code=MissingParameter.status_code,
        content=error_body(f"Missing or invalid parameters: {problems}"),
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("An unexpected error occurred."),
    )
