"""
API Service - Business logic layer between the HTTP API and the engine.

The service:
1. Translates request models into engine calls
2. Applies the server's default decode options
3. Converts engine errors into ErrorResponse models

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .. import __version__
from ..line import (
    DecodeError,
    DecodeOptions,
    InvalidSkillLine,
    decode,
    encode,
    extract_modifiers,
    format_lines,
    validate_lines,
)
from ..logging_utils import get_logger
from .schemas import (
    DecodeErrorInfo,
    DecodeOptionsInfo,
    DecodeRequest,
    DecodeResponse,
    EncodeRequest,
    EncodeResponse,
    ErrorCode,
    ErrorResponse,
    FormatRequest,
    FormatResponse,
    HealthResponse,
    LineReportInfo,
    SkillLineInfo,
    ValidateRequest,
    ValidationReportResponse,
)

logger = get_logger(__name__)


def decode_error_response(err: DecodeError) -> ErrorResponse:
    return ErrorResponse(
        error=err.detail,
        error_code=ErrorCode.DECODE_ERROR,
        details=err.to_dict(),
    )


@dataclass
class LineService:
    """
    Skill line service for the editor front-ends.

    Usage:
        service = LineService()
        response = service.decode(DecodeRequest(line="- heal{amount=5} @self"))
        response = service.encode(EncodeRequest(line=response.line))
    """
    default_options: DecodeOptions = field(default_factory=DecodeOptions)
    env: str = "development"

    def _options(self, requested: DecodeOptionsInfo | None) -> DecodeOptions:
        if requested is None:
            return self.default_options
        return requested.resolve(self.default_options)

    def decode(self, request: DecodeRequest) -> DecodeResponse | ErrorResponse:
        """Decode one line into its structured form."""
        try:
            line = decode(request.line, self._options(request.options))
        except DecodeError as err:
            logger.debug("Decode failed: %s", err.detail, extra={"kind": err.kind, "offset": err.offset})
            return decode_error_response(err)

        canonical = encode(line)
        if request.extract_modifiers:
            line = extract_modifiers(line)
        return DecodeResponse(line=SkillLineInfo.from_line(line), canonical=canonical)

    def encode(self, request: EncodeRequest) -> EncodeResponse | ErrorResponse:
        """Encode a structured line into canonical text."""
        try:
            line = request.line.to_line()
        except InvalidSkillLine as err:
            logger.debug("Rejected structured line: %s", err)
            return ErrorResponse(
                error=str(err),
                error_code=ErrorCode.INVALID_LINE,
                details={"errors": err.errors},
            )

        text = encode(line)
        return EncodeResponse(text=f"- {text}" if request.list_item else text)

    def format(self, request: FormatRequest) -> FormatResponse | ErrorResponse:
        """Canonicalize a list of lines; fails on the first undecodable one."""
        try:
            lines = format_lines(
                request.lines,
                sort_params=request.sort_params,
                list_item=request.list_item,
                options=self._options(request.options),
            )
        except DecodeError as err:
            logger.debug("Format failed at line %s: %s", err.line_number, err.detail)
            return decode_error_response(err)
        return FormatResponse(lines=lines)

    def validate(self, request: ValidateRequest) -> ValidationReportResponse:
        """Validate a list of lines for the requested context."""
        report = validate_lines(request.lines, request.context, self._options(request.options))
        logger.info(
            "Validated %d line(s): %d valid, %d invalid",
            report.total, report.valid, report.invalid,
        )
        return ValidationReportResponse(
            context=request.context,
            total=report.total,
            valid=report.valid,
            invalid=report.invalid,
            details=[
                LineReportInfo(
                    index=detail.index,
                    line=detail.line,
                    valid=detail.result.valid,
                    errors=detail.result.errors,
                    warnings=detail.result.warnings,
                    decode_error=(
                        DecodeErrorInfo(**detail.decode_error) if detail.decode_error else None
                    ),
                )
                for detail in report.details
            ],
        )

    def health(self) -> HealthResponse:
        return HealthResponse(
            version=__version__,
            env=self.env,
            allow_chance=self.default_options.allow_chance,
            allow_health_modifier=self.default_options.allow_health_modifier,
        )
