"""
API Module - HTTP interface for the skill line editors.

The editors:
1. Decode an existing line when opening it for editing
2. Encode the edited fields on every change for live preview
3. Format and validate whole skill lists before export

All calls are stateless.
"""

from .schemas import (
    # Requests
    DecodeRequest,
    EncodeRequest,
    FormatRequest,
    ValidateRequest,
    # Responses
    DecodeResponse,
    EncodeResponse,
    FormatResponse,
    ValidationReportResponse,
    ErrorResponse,
    HealthResponse,
    # Shared
    SkillLineInfo,
    ConditionInfo,
    ModifiersInfo,
    DecodeOptionsInfo,
    ErrorCode,
)
from .service import LineService
from .app import create_app

__all__ = [
    # Requests
    "DecodeRequest",
    "EncodeRequest",
    "FormatRequest",
    "ValidateRequest",
    # Responses
    "DecodeResponse",
    "EncodeResponse",
    "FormatResponse",
    "ValidationReportResponse",
    "ErrorResponse",
    "HealthResponse",
    # Shared
    "SkillLineInfo",
    "ConditionInfo",
    "ModifiersInfo",
    "DecodeOptionsInfo",
    "ErrorCode",
    # Service
    "LineService",
    "create_app",
]
