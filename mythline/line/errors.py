"""
Skill line errors.

Decoding failures are raised as DecodeError subclasses. Each one carries:
- kind: stable name of the failure (MissingMechanic, UnbalancedBraces, ...)
- offset: 0-based character offset into the string the caller passed in
- segment: the offending text, when there is one

InvalidSkillLine is raised when a SkillLine is constructed with values
that could never be encoded into a decodable line.
"""

from __future__ import annotations


class DecodeError(ValueError):
    """Base class for every skill line decoding failure."""

    kind = "DecodeError"

    def __init__(
        self,
        detail: str,
        offset: int = 0,
        segment: str = "",
        source: str = "",
        line_number: int | None = None,
    ):
        self.detail = detail
        self.offset = int(offset)
        self.segment = segment
        self.source = source
        self.line_number = line_number
        loc = f"offset {self.offset}"
        if line_number is not None:
            loc = f"line {line_number}, {loc}"
        message = f"{self.kind} at {loc}: {detail}"
        if source:
            caret = " " * max(0, self.offset) + "^"
            message += f"\n  {source}\n  {caret}"
        super().__init__(message)

    def at_line(self, line_number: int) -> DecodeError:
        """Copy of this error tagged with the 1-based line it came from."""
        return type(self)(
            self.detail,
            offset=self.offset,
            segment=self.segment,
            source=self.source,
            line_number=line_number,
        )

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "detail": self.detail,
            "offset": self.offset,
            "segment": self.segment,
            "line_number": self.line_number,
        }


class MissingMechanic(DecodeError):
    """No mechanic identifier before the first marker or end of line."""
    kind = "MissingMechanic"


class UnbalancedBraces(DecodeError):
    """A '{' without its matching '}' or a stray '}'."""
    kind = "UnbalancedBraces"


class NestingTooDeep(DecodeError):
    """A parameter block nested deeper than one inner level."""
    kind = "NestingTooDeep"


class DuplicateTargeter(DecodeError):
    """A second '@' segment."""
    kind = "DuplicateTargeter"


class DuplicateTrigger(DecodeError):
    """A second '~' segment."""
    kind = "DuplicateTrigger"


class TrailingGarbage(DecodeError):
    """Content that does not start with '@', '~' or '?'."""
    kind = "TrailingGarbage"


class EmptyParameterKey(DecodeError):
    """A key=value pair whose key is empty after trimming."""
    kind = "EmptyParameterKey"


class InvalidParameterKey(DecodeError):
    """A parameter key containing whitespace or a brace."""
    kind = "InvalidParameterKey"


class EmptyIdentifier(DecodeError):
    """A '@', '~' or '?' marker that is not followed by a name."""
    kind = "EmptyIdentifier"


class InvalidSkillLine(ValueError):
    """Raised when a SkillLine (or one of its parts) violates its invariants."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))
