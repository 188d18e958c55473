"""
Scheduling modifier promotion.

decode() leaves repeat / repeatInterval / delay inside mechanic_params.
Editors that show them as separate fields call extract_modifiers() after
decoding, and merge_modifiers() when they want the inline form back.
Both return new SkillLines and leave their argument untouched.
"""

from __future__ import annotations
from dataclasses import replace

from .encoder import merged_mechanic_params
from .model import (
    DELAY_KEY,
    REPEAT_INTERVAL_KEY,
    REPEAT_KEY,
    SchedulingModifiers,
    SkillLine,
)

# (param key, modifier field, minimum value)
_MODIFIER_FIELDS = (
    (REPEAT_KEY, "repeat", 1),
    (REPEAT_INTERVAL_KEY, "repeat_interval", 1),
    (DELAY_KEY, "delay", 0),
)


def _as_int(value: str, minimum: int) -> int | None:
    text = value.strip()
    if not (text.isascii() and text.isdigit()):
        return None
    number = int(text)
    return number if number >= minimum else None


def extract_modifiers(line: SkillLine) -> SkillLine:
    """
    Move integer-valued modifier params into line.modifiers.

    Values that are not plain integers in range ("<caster.var.delay>",
    "-1") stay in mechanic_params. A modifier field that is already set
    wins, and the inline copy is dropped since encode() would overwrite it.
    """
    params = dict(line.mechanic_params)
    values = {
        "repeat": line.modifiers.repeat,
        "repeat_interval": line.modifiers.repeat_interval,
        "delay": line.modifiers.delay,
    }

    for key, attr, minimum in _MODIFIER_FIELDS:
        if key not in params:
            continue
        if values[attr] is not None:
            del params[key]
            continue
        number = _as_int(params[key], minimum)
        if number is not None:
            values[attr] = number
            del params[key]

    return replace(
        line,
        mechanic_params=params,
        modifiers=SchedulingModifiers(**values),
        targeter_params=dict(line.targeter_params),
        trigger_params=dict(line.trigger_params),
        conditions=list(line.conditions),
    )


def merge_modifiers(line: SkillLine) -> SkillLine:
    """Fold line.modifiers into mechanic_params and clear them."""
    return replace(
        line,
        mechanic_params=merged_mechanic_params(line),
        modifiers=SchedulingModifiers(),
        targeter_params=dict(line.targeter_params),
        trigger_params=dict(line.trigger_params),
        conditions=list(line.conditions),
    )
