"""
Skill line formatting - canonicalize lines by decoding and re-encoding.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Iterable

from .decoder import DecodeOptions, decode
from .encoder import encode
from .errors import DecodeError
from .params import sorted_params


def format_line(
    text: str,
    sort_params: bool = False,
    list_item: bool = False,
    options: DecodeOptions | None = None,
) -> str:
    """
    Canonical form of a single line.

    sort_params orders the mechanic, targeter and trigger params by key.
    list_item prefixes the YAML list marker "- ".
    Condition params are raw text and are never reordered.
    """
    line = decode(text, options)
    if sort_params:
        line = replace(
            line,
            mechanic_params=sorted_params(line.mechanic_params),
            targeter_params=sorted_params(line.targeter_params),
            trigger_params=sorted_params(line.trigger_params),
        )
    formatted = encode(line)
    return f"- {formatted}" if list_item else formatted


def iter_source_lines(texts: Iterable[str]) -> Iterable[tuple[int, str]]:
    """Yield (1-based line number, text) for lines that are not blank or '#' comments."""
    for line_no, raw in enumerate(texts, start=1):
        stripped = raw.strip()
        if not stripped or stripped.startswith("#"):
            continue
        yield line_no, raw.rstrip("\n\r")


def format_lines(
    texts: Iterable[str],
    sort_params: bool = False,
    list_item: bool = False,
    options: DecodeOptions | None = None,
) -> list[str]:
    """
    Format many lines. Blank lines and '#' comments are dropped.

    Raises the first DecodeError, tagged with its 1-based line number.
    """
    formatted: list[str] = []
    for line_no, text in iter_source_lines(texts):
        try:
            formatted.append(format_line(text, sort_params, list_item, options))
        except DecodeError as err:
            raise err.at_line(line_no) from err
    return formatted
