"""
Skill line encoder: SkillLine -> canonical string.

Canonical form:
- No "- " list marker (that belongs to whoever writes the YAML list)
- Empty parameter blocks are omitted, never written as "{}"
- Segments joined by single spaces: mechanic, @targeter, ~trigger,
  conditions in stored order, chance, health modifier
- Scheduling modifiers are written into the mechanic block under
  repeat / repeatInterval / delay, overriding same-named params
"""

from __future__ import annotations

from .model import ParameterMap, SkillLine
from .params import serialize_params


def merged_mechanic_params(line: SkillLine) -> ParameterMap:
    """
    Mechanic params with the scheduling modifiers folded in.

    A modifier replaces the value of an existing key of the same name in
    place; otherwise it is appended after the existing params.
    """
    params = dict(line.mechanic_params)
    params.update(line.modifiers.as_params())
    return params


def encode(line: SkillLine) -> str:
    """
    Render a SkillLine in canonical form.

    A line with a chance or health modifier only decodes back when the
    matching DecodeOptions flag (allow_chance / allow_health_modifier) is
    set; the default options report those suffixes as TrailingGarbage.
    """
    segments = [line.mechanic + serialize_params(merged_mechanic_params(line))]

    if line.targeter is not None:
        segments.append("@" + line.targeter + serialize_params(line.targeter_params))

    if line.trigger is not None:
        segments.append("~" + line.trigger + serialize_params(line.trigger_params))

    for condition in line.conditions:
        segment = condition.prefix + condition.name
        if condition.params:
            segment += "{" + condition.params + "}"
        segments.append(segment)

    if line.chance is not None:
        segments.append(line.chance)
    if line.health_modifier is not None:
        segments.append(line.health_modifier)

    return " ".join(segments)
