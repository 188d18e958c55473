"""
Skill Line engine - decode and encode MythicMobs skill lines.

    mechanic{params} @targeter{params} ~trigger{params} ?condition{params} ...

The engine is pure: no I/O, no logging, no shared state. Every call
works on its arguments and returns fresh values.
"""

from .model import (
    SkillLine,
    Condition,
    ConditionScope,
    SchedulingModifiers,
    ParameterMap,
)
from .errors import (
    DecodeError,
    MissingMechanic,
    UnbalancedBraces,
    NestingTooDeep,
    DuplicateTargeter,
    DuplicateTrigger,
    TrailingGarbage,
    EmptyParameterKey,
    InvalidParameterKey,
    EmptyIdentifier,
    InvalidSkillLine,
)
from .params import parse_param_block, serialize_params
from .decoder import DecodeOptions, decode
from .encoder import encode
from .modifiers import extract_modifiers, merge_modifiers
from .formatter import format_line, format_lines
from .validation import (
    LineContext,
    ValidationResult,
    BatchReport,
    validate_line,
    validate_lines,
)

__all__ = [
    "SkillLine",
    "Condition",
    "ConditionScope",
    "SchedulingModifiers",
    "ParameterMap",
    "DecodeError",
    "MissingMechanic",
    "UnbalancedBraces",
    "NestingTooDeep",
    "DuplicateTargeter",
    "DuplicateTrigger",
    "TrailingGarbage",
    "EmptyParameterKey",
    "InvalidParameterKey",
    "EmptyIdentifier",
    "InvalidSkillLine",
    "parse_param_block",
    "serialize_params",
    "DecodeOptions",
    "decode",
    "encode",
    "extract_modifiers",
    "merge_modifiers",
    "format_line",
    "format_lines",
    "LineContext",
    "ValidationResult",
    "BatchReport",
    "validate_line",
    "validate_lines",
]
