"""
Mythline - Skill line engine for MythicMobs configuration packs.

Converts the one-line skill mini-language used by mobs, items and
metaskills into structured values and back:
- Decoding with typed errors and character offsets
- Canonical encoding (decode/encode round-trips)
- Scheduling modifier promotion helpers
- Formatting and context-aware validation
"""

__version__ = "0.1.0"

from .line import SkillLine, Condition, SchedulingModifiers, DecodeError, decode, encode

__all__ = ["SkillLine", "Condition", "SchedulingModifiers", "DecodeError", "decode", "encode"]
