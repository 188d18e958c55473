"""
Skill line validation - structural checks that depend on where a line lives.

Validates that:
1. Mob skill lines carry a trigger, skill file lines do not
2. Trigger names look like ~onEvent or ~onTimer:<ticks>
3. Chance and health modifier suffixes are in range
4. repeat is paired with repeatInterval

Mechanic, targeter and condition names are not checked against any
catalogue; that reference data belongs to the editor.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable
import re

from .decoder import DecodeOptions, decode
from .errors import DecodeError
from .formatter import iter_source_lines
from .model import REPEAT_INTERVAL_KEY, REPEAT_KEY, SkillLine

TRIGGER_NAME_RE = re.compile(r"on[A-Z][A-Za-z]*|onTimer:\d+")
HEALTH_BOUND_RE = re.compile(r"(\d*\.?\d+)%")


class LineContext(str, Enum):
    """Where a skill line is used."""
    MOB = "mob"  # Skills: section of a mob, triggers required
    SKILL = "skill"  # Skills: section of a metaskill, triggers not allowed
    ANY = "any"  # No context rules


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class LineReport:
    """Validation outcome for one line of a batch."""
    index: int
    line: str
    result: ValidationResult
    decode_error: dict[str, Any] | None = None


@dataclass
class BatchReport:
    """Summary over many lines."""
    total: int = 0
    valid: int = 0
    invalid: int = 0
    details: list[LineReport] = field(default_factory=list)


def validate_line(line: SkillLine, context: LineContext = LineContext.MOB) -> ValidationResult:
    """
    Validate a decoded skill line for the given context.

    Returns ValidationResult with errors and warnings.
    """
    context = LineContext(context)
    errors: list[str] = []
    warnings: list[str] = []

    if context == LineContext.MOB and line.trigger is None:
        errors.append(
            "Trigger is required in mob context (e.g. ~onAttack, ~onDamaged, ~onTimer:100)"
        )
    elif context == LineContext.SKILL and line.trigger is not None:
        errors.append("Triggers cannot be used in skill files (only in mob files)")

    if line.trigger is not None and not TRIGGER_NAME_RE.fullmatch(line.trigger):
        warnings.append(
            f"Trigger '~{line.trigger}' may have invalid syntax. "
            "Expected format: ~onEventName or ~onTimer:ticks"
        )

    if line.chance is not None:
        warnings.extend(_check_chance(line.chance))

    if line.health_modifier is not None:
        warnings.extend(_check_health_modifier(line.health_modifier))

    has_repeat = line.modifiers.repeat is not None or REPEAT_KEY in line.mechanic_params
    has_interval = (
        line.modifiers.repeat_interval is not None
        or REPEAT_INTERVAL_KEY in line.mechanic_params
    )
    if has_repeat and not has_interval:
        warnings.append("repeat is set without repeatInterval")

    return ValidationResult(valid=len(errors) == 0, errors=errors, warnings=warnings)


def _check_chance(chance: str) -> list[str]:
    if chance.endswith("%"):
        value = float(chance[:-1])
        if not 0 <= value <= 100:
            return [f"Chance '{chance}' is invalid. Expected 0-100%"]
        return []
    value = float(chance)
    if not 0 <= value <= 1:
        return [f"Chance '{chance}' is invalid. Expected 0.0-1.0 or 0%-100%"]
    return []


def _check_health_modifier(modifier: str) -> list[str]:
    bounds = [float(value) for value in HEALTH_BOUND_RE.findall(modifier)]
    if any(value > 100 for value in bounds):
        return [f"Health modifier '{modifier}' is invalid. Expected percentages in 0-100%"]
    if len(bounds) == 2 and bounds[0] > bounds[1]:
        return [f"Health modifier '{modifier}' has its range reversed"]
    return []


def validate_lines(
    texts: Iterable[str],
    context: LineContext = LineContext.MOB,
    options: DecodeOptions | None = None,
) -> BatchReport:
    """
    Decode and validate many lines. Blank lines and '#' comments are skipped.

    A line that fails to decode counts as invalid; its error is reported
    in the result errors and in decode_error.
    """
    report = BatchReport()
    for line_no, text in iter_source_lines(texts):
        try:
            line = decode(text, options)
        except DecodeError as err:
            result = ValidationResult(valid=False, errors=[err.detail])
            detail = LineReport(
                index=line_no, line=text, result=result,
                decode_error=err.at_line(line_no).to_dict(),
            )
        else:
            detail = LineReport(index=line_no, line=text, result=validate_line(line, context))

        report.details.append(detail)
        report.total += 1
        if detail.result.valid:
            report.valid += 1
        else:
            report.invalid += 1

    return report
