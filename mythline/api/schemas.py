"""
Pydantic Schemas for API - request/response models for OpenAPI.

These models define the contract between the editor front-ends
(step wizard, template editor, mobile wizard) and the skill line engine.

Error Codes:
- DECODE_ERROR: the line text could not be decoded (kind/offset in details)
- INVALID_LINE: a structured line violates the SkillLine invariants
- VALIDATION_ERROR: the request body does not match its schema
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from ..line import (
    Condition,
    ConditionScope,
    DecodeOptions,
    SchedulingModifiers,
    SkillLine,
)
from ..line.validation import LineContext


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    DECODE_ERROR = "DECODE_ERROR"
    INVALID_LINE = "INVALID_LINE"
    VALIDATION_ERROR = "VALIDATION_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class ConditionInfo(BaseModel):
    """An inline condition; params are kept as raw text."""
    name: str
    params: str = ""
    negated: bool = False
    scope: ConditionScope = ConditionScope.CASTER

    model_config = {"from_attributes": True}


class ModifiersInfo(BaseModel):
    """Scheduling modifiers shown as separate editor fields."""
    repeat: Optional[int] = Field(None, ge=1)
    repeat_interval: Optional[int] = Field(None, ge=1)
    delay: Optional[int] = Field(None, ge=0)

    model_config = {"from_attributes": True}


class SkillLineInfo(BaseModel):
    """Structured skill line as exchanged with the editors."""
    mechanic: str
    mechanic_params: dict[str, str] = Field(default_factory=dict)
    targeter: Optional[str] = None
    targeter_params: dict[str, str] = Field(default_factory=dict)
    trigger: Optional[str] = None
    trigger_params: dict[str, str] = Field(default_factory=dict)
    conditions: list[ConditionInfo] = Field(default_factory=list)
    modifiers: ModifiersInfo = Field(default_factory=ModifiersInfo)
    chance: Optional[str] = None
    health_modifier: Optional[str] = None

    model_config = {"from_attributes": True}

    @classmethod
    def from_line(cls, line: SkillLine) -> SkillLineInfo:
        return cls(
            mechanic=line.mechanic,
            mechanic_params=dict(line.mechanic_params),
            targeter=line.targeter,
            targeter_params=dict(line.targeter_params),
            trigger=line.trigger,
            trigger_params=dict(line.trigger_params),
            conditions=[
                ConditionInfo(name=c.name, params=c.params, negated=c.negated, scope=c.scope)
                for c in line.conditions
            ],
            modifiers=ModifiersInfo(
                repeat=line.modifiers.repeat,
                repeat_interval=line.modifiers.repeat_interval,
                delay=line.modifiers.delay,
            ),
            chance=line.chance,
            health_modifier=line.health_modifier,
        )

    def to_line(self) -> SkillLine:
        """Build the engine value. Raises InvalidSkillLine on bad input."""
        return SkillLine(
            mechanic=self.mechanic,
            mechanic_params=dict(self.mechanic_params),
            targeter=self.targeter,
            targeter_params=dict(self.targeter_params),
            trigger=self.trigger,
            trigger_params=dict(self.trigger_params),
            conditions=[
                Condition(name=c.name, params=c.params, negated=c.negated, scope=c.scope)
                for c in self.conditions
            ],
            modifiers=SchedulingModifiers(
                repeat=self.modifiers.repeat,
                repeat_interval=self.modifiers.repeat_interval,
                delay=self.modifiers.delay,
            ),
            chance=self.chance,
            health_modifier=self.health_modifier,
        )


class DecodeOptionsInfo(BaseModel):
    """Grammar extensions. Unset fields fall back to the server defaults."""
    allow_chance: Optional[bool] = None
    allow_health_modifier: Optional[bool] = None

    def resolve(self, defaults: DecodeOptions) -> DecodeOptions:
        return DecodeOptions(
            allow_chance=(
                defaults.allow_chance if self.allow_chance is None else self.allow_chance
            ),
            allow_health_modifier=(
                defaults.allow_health_modifier
                if self.allow_health_modifier is None
                else self.allow_health_modifier
            ),
        )


class DecodeErrorInfo(BaseModel):
    """Where and why a line failed to decode."""
    kind: str = Field(description="MissingMechanic, UnbalancedBraces, TrailingGarbage, ...")
    detail: str
    offset: int = Field(description="0-based character offset into the submitted line")
    segment: str = ""
    line_number: Optional[int] = None


# =============================================================================
# Request Models
# =============================================================================

class DecodeRequest(BaseModel):
    """Decode one line of text."""
    line: str = Field(description="Skill line, with or without the '- ' list marker")
    options: Optional[DecodeOptionsInfo] = None
    extract_modifiers: bool = Field(
        False, description="Promote integer repeat/repeatInterval/delay params into modifiers"
    )


class EncodeRequest(BaseModel):
    """Encode a structured line."""
    line: SkillLineInfo
    list_item: bool = Field(False, description="Prefix the '- ' list marker")


class FormatRequest(BaseModel):
    """Canonicalize many lines."""
    lines: list[str]
    sort_params: bool = False
    list_item: bool = False
    options: Optional[DecodeOptionsInfo] = None


class ValidateRequest(BaseModel):
    """Validate many lines for a context."""
    lines: list[str]
    context: LineContext = LineContext.MOB
    options: Optional[DecodeOptionsInfo] = None


# =============================================================================
# Response Models
# =============================================================================

class DecodeResponse(BaseModel):
    """Decoded line plus its canonical text."""
    line: SkillLineInfo
    canonical: str


class EncodeResponse(BaseModel):
    """Canonical text of a structured line."""
    text: str


class FormatResponse(BaseModel):
    """Formatted lines, blank lines and comments removed."""
    lines: list[str]


class LineReportInfo(BaseModel):
    """Validation outcome for one submitted line."""
    index: int = Field(description="1-based position in the submitted list")
    line: str
    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    decode_error: Optional[DecodeErrorInfo] = None


class ValidationReportResponse(BaseModel):
    """Batch validation summary."""
    context: LineContext
    total: int
    valid: int
    invalid: int
    details: list[LineReportInfo] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None


class HealthResponse(BaseModel):
    """Service health check."""
    status: str = "ok"
    version: str
    env: str
    allow_chance: bool
    allow_health_modifier: bool
