"""
Skill Line Model - structured form of a single MythicMobs skill line.

    mechanic{params} @targeter{params} ~trigger{params} ?condition{raw} ...

The model is:
- Value-like: built fresh by every decode, owned by the caller
- Self-checking: construction rejects anything the encoder could not
  turn back into an equal line. The one exception is a ';' inside a
  parameter value, which the format has no way to escape
- String-valued: parameter values are never interpreted ("-1to2" is a
  range, "<caster.var.x>" a placeholder, both are plain strings here)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import re

from .errors import InvalidSkillLine

# Insertion-ordered key -> value mapping used for every parameter block
ParameterMap = dict[str, str]

# Characters that end an identifier
IDENTIFIER_STOP = frozenset("{}@~?")

# Characters a parameter key may not contain, besides whitespace
KEY_FORBIDDEN = frozenset("=;{}")

# Brace levels allowed inside a parameter value or raw condition params
MAX_INNER_BRACE_DEPTH = 1

# Reserved mechanic parameter keys for the scheduling modifiers
REPEAT_KEY = "repeat"
REPEAT_INTERVAL_KEY = "repeatInterval"
DELAY_KEY = "delay"
MODIFIER_KEYS = (REPEAT_KEY, REPEAT_INTERVAL_KEY, DELAY_KEY)

# Trailing mob-skill tokens (only decoded when DecodeOptions enables them)
CHANCE_RE = re.compile(r"\d*\.?\d+%?")
HEALTH_MODIFIER_RE = re.compile(r"[<>=]\d*\.?\d+%?(?:-\d*\.?\d+%?)?")


def is_identifier(text: str) -> bool:
    """True if text can stand as a mechanic, targeter, trigger or condition name."""
    if not isinstance(text, str) or not text:
        return False
    return not any(ch.isspace() or ch in IDENTIFIER_STOP for ch in text)


def is_param_key(text: str) -> bool:
    """True if text can stand as a parameter key."""
    if not isinstance(text, str) or not text:
        return False
    return not any(ch.isspace() or ch in KEY_FORBIDDEN for ch in text)


def brace_problem(text: str) -> str | None:
    """Why text cannot sit inside a parameter block, or None if it can."""
    depth = 0
    for char in text:
        if char == "{":
            depth += 1
            if depth > MAX_INNER_BRACE_DEPTH:
                return f"nests braces more than {MAX_INNER_BRACE_DEPTH} level deep"
        elif char == "}":
            depth -= 1
            if depth < 0:
                return "has a '}' without a matching '{'"
    if depth:
        return "has a '{' without a matching '}'"
    return None


def _check_params(label: str, params: ParameterMap) -> list[str]:
    errors = []
    if not isinstance(params, dict):
        return [f"{label} must be a mapping"]
    for key, value in params.items():
        if not isinstance(key, str) or not key.strip():
            errors.append(f"{label} contains an empty key")
            continue
        if not is_param_key(key):
            errors.append(f"{label} key '{key}' contains whitespace, a brace or a delimiter")
        if not isinstance(value, str):
            errors.append(f"{label}['{key}'] must be a string, got {type(value).__name__}")
            continue
        # parse_params trims values, so padding would not survive a round trip
        if value != value.strip():
            errors.append(f"{label}['{key}'] has leading or trailing whitespace")
        problem = brace_problem(value)
        if problem:
            errors.append(f"{label}['{key}'] {problem}")
    return errors


class ConditionScope(str, Enum):
    """Whose state an inline condition is checked against."""
    CASTER = "caster"  # ?name
    TRIGGER = "trigger"  # ?~name


@dataclass
class Condition:
    """
    An inline condition: ?name{raw params}.

    The parameter text is kept verbatim; condition grammars differ per
    condition type, so nothing here interprets them.
    """
    name: str
    params: str = ""
    negated: bool = False
    scope: ConditionScope = ConditionScope.CASTER

    def __post_init__(self):
        errors = []
        if not is_identifier(self.name) or self.name.startswith("!"):
            errors.append(f"Invalid condition name: {self.name!r}")
        if not isinstance(self.params, str):
            errors.append(f"Condition '{self.name}' params must be a string")
        else:
            problem = brace_problem(self.params)
            if problem:
                errors.append(f"Condition '{self.name}' params {problem}")
        if errors:
            raise InvalidSkillLine(errors)
        self.scope = ConditionScope(self.scope)

    @property
    def prefix(self) -> str:
        """Marker text written before the name: ?, ?!, ?~ or ?~!"""
        prefix = "?"
        if self.scope == ConditionScope.TRIGGER:
            prefix += "~"
        if self.negated:
            prefix += "!"
        return prefix


@dataclass
class SchedulingModifiers:
    """Timing controls layered onto a mechanic invocation."""
    repeat: int | None = None
    repeat_interval: int | None = None
    delay: int | None = None

    def __post_init__(self):
        errors = []
        for name, minimum in (("repeat", 1), ("repeat_interval", 1), ("delay", 0)):
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
                errors.append(f"{name} must be an int >= {minimum}, got {value!r}")
        if errors:
            raise InvalidSkillLine(errors)

    def is_empty(self) -> bool:
        return self.repeat is None and self.repeat_interval is None and self.delay is None

    def as_params(self) -> ParameterMap:
        """Set fields as mechanic parameters, in repeat/repeatInterval/delay order."""
        params: ParameterMap = {}
        if self.repeat is not None:
            params[REPEAT_KEY] = str(self.repeat)
        if self.repeat_interval is not None:
            params[REPEAT_INTERVAL_KEY] = str(self.repeat_interval)
        if self.delay is not None:
            params[DELAY_KEY] = str(self.delay)
        return params


@dataclass
class SkillLine:
    """
    A single skill line.

    Examples:
    - SkillLine(mechanic="heal")
    - SkillLine(mechanic="damage", mechanic_params={"amount": "10"}, targeter="target")
    - SkillLine(mechanic="teleport", modifiers=SchedulingModifiers(delay=40))
    """
    mechanic: str
    mechanic_params: ParameterMap = field(default_factory=dict)

    # None means "use the caller's default targeter"
    targeter: str | None = None
    targeter_params: ParameterMap = field(default_factory=dict)

    # None means "inherit the ambient trigger context"
    trigger: str | None = None
    trigger_params: ParameterMap = field(default_factory=dict)

    # Evaluated in order by the game
    conditions: list[Condition] = field(default_factory=list)

    modifiers: SchedulingModifiers = field(default_factory=SchedulingModifiers)

    # Mob-skill suffixes: "0.5" / "25%" and "<50%" / "=30%-50%"
    chance: str | None = None
    health_modifier: str | None = None

    def __post_init__(self):
        errors = []
        if not is_identifier(self.mechanic) or self.mechanic.startswith("-"):
            errors.append(f"Invalid mechanic: {self.mechanic!r}")
        errors.extend(_check_params("mechanic_params", self.mechanic_params))

        if self.targeter is not None and not is_identifier(self.targeter):
            errors.append(f"Invalid targeter: {self.targeter!r}")
        if self.targeter is None and self.targeter_params:
            errors.append("targeter_params given without a targeter")
        errors.extend(_check_params("targeter_params", self.targeter_params))

        if self.trigger is not None and not is_identifier(self.trigger):
            errors.append(f"Invalid trigger: {self.trigger!r}")
        if self.trigger is None and self.trigger_params:
            errors.append("trigger_params given without a trigger")
        errors.extend(_check_params("trigger_params", self.trigger_params))

        for condition in self.conditions:
            if not isinstance(condition, Condition):
                errors.append(f"Expected Condition, got {type(condition).__name__}")
        if not isinstance(self.modifiers, SchedulingModifiers):
            errors.append("modifiers must be SchedulingModifiers")

        if self.chance is not None and not CHANCE_RE.fullmatch(str(self.chance)):
            errors.append(f"Invalid chance: {self.chance!r}")
        if self.health_modifier is not None and not HEALTH_MODIFIER_RE.fullmatch(
            str(self.health_modifier)
        ):
            errors.append(f"Invalid health modifier: {self.health_modifier!r}")

        if errors:
            raise InvalidSkillLine(errors)

    def get_condition(self, name: str) -> Condition | None:
        """First condition with the given name."""
        for condition in self.conditions:
            if condition.name == name:
                return condition
        return None
