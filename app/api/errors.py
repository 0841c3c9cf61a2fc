from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core import exceptions as domain_exceptions


def _http_exception_handler(_: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def _validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    # One unified message instead of FastAPI's error list
    return JSONResponse(status_code=422, content={"detail": "Unprocessable Entity"})


def _unhandled_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


def _domain_error_handler(status_code: int, default_detail: str):
    def _handler(_: Request, exc: domain_exceptions.DomainError) -> JSONResponse:
        detail = str(exc) or default_detail
        return JSONResponse(status_code=status_code, content={"detail": detail})

    return _handler


# Subclasses (TerminalStatusError, InvalidStatusError) resolve through their
# parents' handlers via the exception MRO.
DOMAIN_STATUS: tuple[tuple[type[domain_exceptions.DomainError], int, str], ...] = (
    (domain_exceptions.NotFoundError, 404, "Not Found"),
    (domain_exceptions.ValidationError, 400, "Bad Request"),
    (domain_exceptions.ConflictError, 409, "Conflict"),
    (domain_exceptions.UnauthorizedError, 401, "Unauthorized"),
    (domain_exceptions.ForbiddenError, 403, "Forbidden"),
    (domain_exceptions.InfrastructureError, 503, "Service Unavailable"),
)


def install(app) -> None:
    app.add_exception_handler(HTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    for exc_type, status_code, default_detail in DOMAIN_STATUS:
        app.add_exception_handler(exc_type, _domain_error_handler(status_code, default_detail))
    app.add_exception_handler(domain_exceptions.DomainError, _domain_error_handler(400, "Bad Request"))
    app.add_exception_handler(Exception, _unhandled_exception_handler)
