"""Maps package exceptions onto HTTP responses with an ``{"error", "code"}`` body."""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from complyscan.accounts.exceptions import (
    AuthenticationError,
    AuthorizationError,
    IdentityProviderError,
    InvalidTierError,
    QuotaExceededError,
)
from complyscan.logging.logger import Log
from complyscan.ocr.exceptions import InvalidDataUrlError, UnsupportedFileTypeError
from complyscan.pipeline.exceptions import (
    AnalysisFailedError,
    ExtractionFailedError,
    InputRejectedError,
)
from complyscan.reporting.exceptions import ReportRenderError
from complyscan.storage.exceptions import ReportNotFoundError, StoreUnavailableError


def error_response(status_code: int, message: str, code: str, **extra: object) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, "code": code, **extra})


async def authentication_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
    Log.debug(f"Rejected unauthenticated request to {request.url.path}: {exc}")
    return error_response(status.HTTP_401_UNAUTHORIZED, "Unauthorized", "unauthorized")


async def quota_handler(request: Request, exc: QuotaExceededError) -> JSONResponse:
    return error_response(
        status.HTTP_403_FORBIDDEN,
        str(exc),
        "quota_exceeded",
        limitReached=True,
        limit=exc.limit,
    )


async def authorization_handler(request: Request, exc: AuthorizationError) -> JSONResponse:
    return error_response(status.HTTP_403_FORBIDDEN, str(exc), "forbidden")


async def bad_request_handler(request: Request, exc: Exception) -> JSONResponse:
    code = getattr(exc, "code", "input_rejected")
    return error_response(status.HTTP_400_BAD_REQUEST, str(exc), code)


async def extraction_failed_handler(request: Request, exc: ExtractionFailedError) -> JSONResponse:
    return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc), exc.code)


async def analysis_failed_handler(request: Request, exc: AnalysisFailedError) -> JSONResponse:
    Log.error(f"Analysis failed on {request.url.path}: {exc.__cause__ or exc}")
    return error_response(status.HTTP_502_BAD_GATEWAY, "Failed to analyze document", exc.code)


async def not_found_handler(request: Request, exc: ReportNotFoundError) -> JSONResponse:
    return error_response(status.HTTP_404_NOT_FOUND, str(exc) or "Report not found", "not_found")


async def unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    Log.error(f"Dependency unavailable on {request.url.path}: {exc}")
    return error_response(
        status.HTTP_503_SERVICE_UNAVAILABLE, "Service temporarily unavailable", "unavailable"
    )


async def render_failed_handler(request: Request, exc: ReportRenderError) -> JSONResponse:
    Log.error(f"PDF rendering failed: {exc}")
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to generate PDF", "render_failed"
    )


async def validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    field = ".".join(str(part) for part in errors[0].get("loc", []) if part != "body") if errors else ""
    message = f"Invalid value for field '{field}'" if field else "Invalid request body"
    return error_response(status.HTTP_400_BAD_REQUEST, message, "invalid_request")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthenticationError, authentication_handler)
    app.add_exception_handler(QuotaExceededError, quota_handler)
    app.add_exception_handler(AuthorizationError, authorization_handler)
    app.add_exception_handler(InvalidTierError, bad_request_handler)
    app.add_exception_handler(InputRejectedError, bad_request_handler)
    app.add_exception_handler(UnsupportedFileTypeError, bad_request_handler)
    app.add_exception_handler(InvalidDataUrlError, bad_request_handler)
    app.add_exception_handler(ExtractionFailedError, extraction_failed_handler)
    app.add_exception_handler(AnalysisFailedError, analysis_failed_handler)
    app.add_exception_handler(ReportNotFoundError, not_found_handler)
    app.add_exception_handler(StoreUnavailableError, unavailable_handler)
    app.add_exception_handler(IdentityProviderError, unavailable_handler)
    app.add_exception_handler(ReportRenderError, render_failed_handler)
    app.add_exception_handler(RequestValidationError, validation_handler)
