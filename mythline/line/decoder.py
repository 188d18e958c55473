"""
Skill line decoder: string -> SkillLine.

A single left-to-right scan with no backtracking:

    - mechanic{params} @targeter{params} ~trigger{params} ?cond{raw} ?~!cond2

1. An optional leading '-' (YAML list marker) and whitespace are dropped
2. The mechanic name and its optional parameter block are read
3. Segments are read until end of line:
   '@' targeter (at most one), '~' trigger (at most one), '?' condition
4. Anything else is TrailingGarbage, unless DecodeOptions enables the
   mob-skill chance / health modifier suffixes

Scheduling modifiers stay inside mechanic_params; promoting them is
left to mythline.line.modifiers.extract_modifiers.
"""

from __future__ import annotations
from dataclasses import dataclass

from .errors import (
    DecodeError,
    DuplicateTargeter,
    DuplicateTrigger,
    EmptyIdentifier,
    MissingMechanic,
    TrailingGarbage,
    UnbalancedBraces,
)
from .model import (
    CHANCE_RE,
    HEALTH_MODIFIER_RE,
    IDENTIFIER_STOP,
    Condition,
    ConditionScope,
    ParameterMap,
    SkillLine,
)
from .params import parse_params, read_block


@dataclass(frozen=True)
class DecodeOptions:
    """
    Optional grammar extensions.

    allow_chance: accept a trailing chance token ("0.5", "25%")
    allow_health_modifier: accept a trailing health modifier ("<50%", "=30%-50%")
    """
    allow_chance: bool = False
    allow_health_modifier: bool = False


DEFAULT_OPTIONS = DecodeOptions()


class _Scanner:
    """Cursor over one line. Offsets are reported against the caller's string."""

    def __init__(self, source: str, pos: int, end: int):
        self.source = source
        self.pos = pos
        self.end = end

    def at_end(self) -> bool:
        return self.pos >= self.end

    def peek(self) -> str:
        return self.source[self.pos] if self.pos < self.end else ""

    def skip_whitespace(self):
        while self.pos < self.end and self.source[self.pos].isspace():
            self.pos += 1

    def read_identifier(self) -> str:
        start = self.pos
        while self.pos < self.end:
            char = self.source[self.pos]
            if char.isspace() or char in IDENTIFIER_STOP:
                break
            self.pos += 1
        return self.source[start:self.pos]

    def read_word(self) -> str:
        start = self.pos
        while self.pos < self.end and not self.source[self.pos].isspace():
            self.pos += 1
        return self.source[start:self.pos]

    def read_block(self) -> tuple[str, int] | None:
        """Read "{...}" if one starts here. Returns (interior, block offset)."""
        if self.peek() != "{":
            return None
        block_offset = self.pos
        interior, end = read_block(self.source[:self.end], self.pos, source=self.source)
        self.pos = end
        return interior, block_offset

    def read_params(self) -> ParameterMap:
        block = self.read_block()
        if block is None:
            return {}
        interior, block_offset = block
        return parse_params(interior, block_offset, source=self.source)

    def error(self, error_cls: type[DecodeError], detail: str, offset: int | None = None,
              segment: str = "") -> DecodeError:
        return error_cls(
            detail,
            offset=self.pos if offset is None else offset,
            segment=segment,
            source=self.source,
        )


def _strip_list_marker(line: str) -> tuple[int, int]:
    """Bounds of line with whitespace and one leading '-' removed."""
    start, end = 0, len(line)
    while start < end and line[start].isspace():
        start += 1
    while end > start and line[end - 1].isspace():
        end -= 1
    if start < end and line[start] == "-":
        start += 1
        while start < end and line[start].isspace():
            start += 1
    return start, end


def decode(line: str, options: DecodeOptions | None = None) -> SkillLine:
    """
    Decode a skill line string.

    Args:
        line: Raw line, with or without the "- " list marker
        options: Grammar extensions (defaults to the strict grammar)

    Returns:
        A new SkillLine

    Raises:
        DecodeError: one of MissingMechanic, UnbalancedBraces, NestingTooDeep,
            DuplicateTargeter, DuplicateTrigger, TrailingGarbage,
            EmptyParameterKey, InvalidParameterKey, EmptyIdentifier.
            Offsets index into `line`.
    """
    if not isinstance(line, str):
        raise TypeError(f"decode() expects a string, got {type(line).__name__}")
    options = options or DEFAULT_OPTIONS

    start, end = _strip_list_marker(line)
    scanner = _Scanner(line, start, end)

    mechanic = scanner.read_identifier()
    if not mechanic or mechanic.startswith("-"):
        raise scanner.error(
            MissingMechanic, "Line does not start with a mechanic", segment=line[start:end]
        )
    mechanic_params = scanner.read_params()

    targeter: str | None = None
    targeter_params: ParameterMap = {}
    trigger: str | None = None
    trigger_params: ParameterMap = {}
    conditions: list[Condition] = []
    chance: str | None = None
    health_modifier: str | None = None

    while True:
        scanner.skip_whitespace()
        if scanner.at_end():
            break

        segment_start = scanner.pos
        marker = scanner.peek()

        if marker == "@":
            if targeter is not None:
                raise scanner.error(
                    DuplicateTargeter, "A line takes at most one targeter",
                    segment=scanner.read_word(), offset=segment_start,
                )
            scanner.pos += 1
            targeter = _read_name(scanner, "targeter", segment_start)
            targeter_params = scanner.read_params()

        elif marker == "~":
            if trigger is not None:
                raise scanner.error(
                    DuplicateTrigger, "A line takes at most one trigger",
                    segment=scanner.read_word(), offset=segment_start,
                )
            scanner.pos += 1
            trigger = _read_name(scanner, "trigger", segment_start)
            trigger_params = scanner.read_params()

        elif marker == "?":
            scanner.pos += 1
            conditions.append(_read_condition(scanner, segment_start))

        elif marker == "}":
            raise scanner.error(UnbalancedBraces, "'}' without a matching '{'", segment="}")

        else:
            word = scanner.read_word()
            if options.allow_chance and chance is None and CHANCE_RE.fullmatch(word):
                chance = word
                continue
            if (options.allow_health_modifier and health_modifier is None
                    and HEALTH_MODIFIER_RE.fullmatch(word)):
                health_modifier = word
                continue
            raise scanner.error(
                TrailingGarbage,
                f"Unrecognized content '{line[segment_start:end]}'",
                offset=segment_start,
                segment=line[segment_start:end],
            )

    return SkillLine(
        mechanic=mechanic,
        mechanic_params=mechanic_params,
        targeter=targeter,
        targeter_params=targeter_params,
        trigger=trigger,
        trigger_params=trigger_params,
        conditions=conditions,
        chance=chance,
        health_modifier=health_modifier,
    )


def _read_name(scanner: _Scanner, what: str, segment_start: int) -> str:
    name = scanner.read_identifier()
    if not name:
        raise scanner.error(
            EmptyIdentifier, f"Missing {what} name after '{scanner.source[segment_start]}'",
            offset=segment_start, segment=scanner.source[segment_start:scanner.pos + 1].strip(),
        )
    return name


def _read_condition(scanner: _Scanner, segment_start: int) -> Condition:
    """Read a condition after its '?': [!][~][!]name[{raw}]"""
    negated = False
    scope = ConditionScope.CASTER
    if scanner.peek() == "!":
        negated = True
        scanner.pos += 1
    if scanner.peek() == "~":
        scope = ConditionScope.TRIGGER
        scanner.pos += 1
    if scanner.peek() == "!":
        negated = True
        scanner.pos += 1

    name = _read_name(scanner, "condition", segment_start)
    if name.startswith("!"):
        raise scanner.error(
            EmptyIdentifier, f"Invalid condition name '{name}'",
            offset=segment_start, segment=scanner.source[segment_start:scanner.pos],
        )
    block = scanner.read_block()
    raw = block[0] if block is not None else ""
    return Condition(name=name, params=raw, negated=negated, scope=scope)
