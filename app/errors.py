"""Error taxonomy shared by services, dependencies and routers.

Every class is an HTTPException so services can raise them directly; the handlers
registered in app.main render all of them as {"message": ...}.
"""
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

log = logging.getLogger("uvicorn.error")


class AppError(HTTPException):
    status_code = 400
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        super().__init__(status_code=self.status_code, detail=message or self.default_message)

    @property
    def message(self) -> str:
        return self.detail


class AuthenticationRequired(AppError):
    status_code = 401
    default_message = "Authentication required"


class InvalidCredentials(AppError):
    status_code = 401
    default_message = "Invalid email or password"


class AuthorizationDenied(AppError):
    status_code = 403
    default_message = "Access denied"


# Ownership failures use the same status; kept as a name for readability at call sites.
AccessDenied = AuthorizationDenied


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class AlreadyProcessed(AppError):
    status_code = 400
    default_message = "This verification has already been processed"


class EmailAlreadyRegistered(AppError):
    status_code = 400
    default_message = "Email is already registered"


class DuplicateApplication(AppError):
    status_code = 409
    default_message = "An application for this email is already pending review"


class OtpExpiredOrMissing(AppError):
    status_code = 400
    default_message = "Verification code has expired or was not requested. Please request a new code."


# A wrong code is also "no live code matches"; a stale code from before a reissue
# lands here and still satisfies handlers that catch OtpExpiredOrMissing.
class OtpMismatch(OtpExpiredOrMissing):
    status_code = 400
    default_message = "Invalid verification code"


class OtpAttemptsExceeded(AppError):
    status_code = 429
    default_message = "Too many failed attempts. Please request a new code."


class EmailDeliveryFailed(AppError):
    status_code = 503
    default_message = "We could not send the email. Please try again later."


class UpstreamUnavailable(AppError):
    status_code = 502
    default_message = "Mapping provider is unavailable"


def _message_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message, **extra})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": message},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = first.get("msg", "Invalid request")
    if field:
        message = f"{field}: {message}"
    # ctx may hold exception instances, keep only JSON-safe keys
    safe = [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in errors]
    return _message_response(400, message, errors=safe)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _message_response(500, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
