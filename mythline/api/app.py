"""
FastAPI Application - REST API for the skill line editors.

Endpoints:
    GET    /api/v1/health               Service status and decode defaults
    POST   /api/v1/lines/decode         Text -> structured line
    POST   /api/v1/lines/encode         Structured line -> canonical text
    POST   /api/v1/lines/format         Canonicalize a list of lines
    POST   /api/v1/lines/validate       Validate a list of lines for a context

The wizards call decode when loading a line for editing and encode on
every change to refresh their live preview.

Errors from the engine are returned as ErrorResponse with HTTP 422.
"""

import os
from typing import Optional

from ..line import DecodeOptions

# Environment configuration
MYTHLINE_ENV = os.getenv("MYTHLINE_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


def default_options_from_env() -> DecodeOptions:
    """Server-wide decode defaults from MYTHLINE_ALLOW_CHANCE / MYTHLINE_ALLOW_HEALTH_MODIFIER."""
    return DecodeOptions(
        allow_chance=_env_flag("MYTHLINE_ALLOW_CHANCE"),
        allow_health_modifier=_env_flag("MYTHLINE_ALLOW_HEALTH_MODIFIER"),
    )


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional LineService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Request
        from fastapi.encoders import jsonable_encoder
        from fastapi.exceptions import RequestValidationError
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from ..logging_utils import get_logger
    from .service import LineService
    from .schemas import (
        DecodeRequest,
        DecodeResponse,
        EncodeRequest,
        EncodeResponse,
        ErrorCode,
        ErrorResponse,
        FormatRequest,
        FormatResponse,
        HealthResponse,
        ValidateRequest,
        ValidationReportResponse,
    )

    logger = get_logger(__name__)

    app = FastAPI(
        title="Mythline Skill Line API",
        description="""
Decode, encode, format and validate MythicMobs skill lines.

    mechanic{params} @targeter{params} ~trigger{params} ?condition{params}

## Error Codes

| Code | Description |
|------|-------------|
| `DECODE_ERROR` | Line text could not be decoded; `details` has kind and offset |
| `INVALID_LINE` | Structured line violates the skill line invariants |
| `VALIDATION_ERROR` | Request body does not match the schema |
        """,
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or LineService(default_options=default_options_from_env(), env=MYTHLINE_ENV)
    logger.info("Skill line API ready (env=%s)", api_service.env)

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 422,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def respond(result):
        """Return ErrorResponse models as HTTP 422, anything else as-is."""
        if isinstance(result, ErrorResponse):
            return make_error_response(result.error_code, result.error, details=result.details)
        return result

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Request body is invalid",
            details={"errors": jsonable_encoder(exc.errors())},
        )

    # =========================================================================
    # Endpoints
    # =========================================================================

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["System"])
    async def health() -> HealthResponse:
        """Service status and decode defaults."""
        return api_service.health()

    @app.post(
        "/api/v1/lines/decode",
        response_model=DecodeResponse,
        responses={422: {"model": ErrorResponse}},
        tags=["Lines"],
        summary="Decode a skill line",
    )
    async def decode_line(request: DecodeRequest):
        return respond(api_service.decode(request))

    @app.post(
        "/api/v1/lines/encode",
        response_model=EncodeResponse,
        responses={422: {"model": ErrorResponse}},
        tags=["Lines"],
        summary="Encode a structured skill line",
    )
    async def encode_line(request: EncodeRequest):
        return respond(api_service.encode(request))

    @app.post(
        "/api/v1/lines/format",
        response_model=FormatResponse,
        responses={422: {"model": ErrorResponse}},
        tags=["Lines"],
        summary="Canonicalize skill lines",
    )
    async def format_lines(request: FormatRequest):
        return respond(api_service.format(request))

    @app.post(
        "/api/v1/lines/validate",
        response_model=ValidationReportResponse,
        tags=["Lines"],
        summary="Validate skill lines for a mob or skill context",
    )
    async def validate_lines(request: ValidateRequest) -> ValidationReportResponse:
        return api_service.validate(request)

    return app


# For running directly: uvicorn mythline.api.app:app
app = create_app()
