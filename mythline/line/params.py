"""
Parameter blocks: {key=value;key=value}

Rules:
- Pairs are separated by ';' at the top level of the block
- Each pair splits on the first '=' only (values may contain '=')
- A pair without '=' is a bare flag with an empty value
- Keys and values are trimmed; an empty key is an error, and so is a key
  holding whitespace or a brace
- A value may hold one inner {...} block, kept verbatim
- There is no escaping: a ';' inside a value cannot round-trip
"""

from __future__ import annotations

from .errors import (
    DecodeError,
    EmptyParameterKey,
    InvalidParameterKey,
    NestingTooDeep,
    TrailingGarbage,
    UnbalancedBraces,
)
from .model import MAX_INNER_BRACE_DEPTH, ParameterMap, is_param_key

# Outer block plus one level of nesting
MAX_BRACE_DEPTH = MAX_INNER_BRACE_DEPTH + 1


def read_block(text: str, start: int, base_offset: int = 0, source: str = "") -> tuple[str, int]:
    """
    Read the balanced block that opens at text[start].

    Returns (interior, end) where end is the index just past the closing '}'.
    Offsets in raised errors are text indices shifted by base_offset.
    """
    if start >= len(text) or text[start] != "{":
        raise UnbalancedBraces(
            "Expected '{'", offset=base_offset + start, segment=text[start:], source=source
        )

    depth = 0
    for index in range(start, len(text)):
        char = text[index]
        if char == "{":
            depth += 1
            if depth > MAX_BRACE_DEPTH:
                raise NestingTooDeep(
                    f"Parameter blocks nest at most {MAX_BRACE_DEPTH - 1} level deep",
                    offset=base_offset + index,
                    segment=text[start:],
                    source=source,
                )
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start + 1:index], index + 1

    raise UnbalancedBraces(
        "'{' is never closed", offset=base_offset + start, segment=text[start:], source=source
    )


def split_top_level(interior: str, delimiter: str = ";") -> list[str]:
    """Split on delimiter outside inner braces."""
    pieces: list[str] = []
    depth = 0
    piece_start = 0
    for index, char in enumerate(interior):
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        elif char == delimiter and depth == 0:
            pieces.append(interior[piece_start:index])
            piece_start = index + 1
    pieces.append(interior[piece_start:])
    return pieces


def parse_params(interior: str, block_offset: int = 0, source: str = "") -> ParameterMap:
    """
    Parse the text between the braces of a parameter block.

    block_offset is the offset of the opening '{' and is reported on errors.
    Empty pieces (";;" or a trailing ';') are skipped. A repeated key keeps
    its first position and takes the last value.
    """
    params: ParameterMap = {}
    for piece in split_top_level(interior):
        if not piece.strip():
            continue
        key, sep, value = piece.partition("=")
        key = key.strip()
        if not key:
            raise EmptyParameterKey(
                f"Empty key in parameter '{piece.strip()}'",
                offset=block_offset,
                segment=piece.strip(),
                source=source,
            )
        if not is_param_key(key):
            raise InvalidParameterKey(
                f"Invalid key '{key}' in parameter '{piece.strip()}'",
                offset=block_offset,
                segment=piece.strip(),
                source=source,
            )
        params[key] = value.strip() if sep else ""
    return params


def parse_param_block(block: str | None) -> ParameterMap:
    """
    Parse a whole "{...}" block. None or "" means no parameters.

    Raises:
        UnbalancedBraces: block is not a single balanced {...}
        NestingTooDeep: block nests deeper than one inner level
        EmptyParameterKey: a pair has an empty key
        InvalidParameterKey: a key holds whitespace or a brace
    """
    if not block:
        return {}
    interior, end = read_block(block, 0, source=block)
    rest = block[end:]
    if rest.strip():
        error_cls: type[DecodeError] = UnbalancedBraces if "}" in rest else TrailingGarbage
        raise error_cls(
            "Unexpected text after parameter block", offset=end, segment=rest, source=block
        )
    return parse_params(interior, 0, source=block)


def serialize_params(params: ParameterMap) -> str:
    """
    Render a parameter map as "{k1=v1;k2=v2}" in insertion order.

    An empty map renders as "" so that no "{}" appears in canonical lines.
    """
    if not params:
        return ""
    return "{" + ";".join(f"{key}={value}" for key, value in params.items()) + "}"


def sorted_params(params: ParameterMap) -> ParameterMap:
    """Copy of params ordered by key (case-insensitive)."""
    return {key: params[key] for key in sorted(params, key=str.lower)}
