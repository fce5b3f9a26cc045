"""Unit conversion for decomp source literals.

The game stores angles in 16-bit binary units (0x10000 = 360 degrees) and
scales in 16.16 fixed point (0x10000 = 1.0). Some placement macros use a
coarser byte angle (256 = 360 degrees).
"""

from __future__ import annotations

import re
from typing import Union

from decompscene.errors import MalformedEntryError

ANGLE_UNITS_PER_TURN = 65536.0
SCALE_UNITS_PER_ONE = 65536.0
LEGACY_YAW_UNITS_PER_TURN = 256.0

_INT_LITERAL = re.compile(r"^([+-]?)(0[xX][0-9a-fA-F]+|\d+)$")

Literal = Union[str, int]


def parse_int_literal(literal: Literal) -> int:
    """Parse a decimal or 0x-hex integer, sign taken as written."""
    if isinstance(literal, int):
        return literal
    text = literal.strip()
    match = _INT_LITERAL.match(text)
    if match is None:
        raise MalformedEntryError(f"Not an integer literal: {literal!r}")
    sign, digits = match.groups()
    value = int(digits, 16) if digits[:2].lower() == "0x" else int(digits)
    return -value if sign == "-" else value


def parse_uint_literal(literal: Literal) -> int:
    """Parse a behavior-parameter literal as an unsigned 32-bit bit pattern."""
    return parse_int_literal(literal) & 0xFFFFFFFF


def try_parse_uint_literal(literal: Literal, default: int = 0) -> int:
    """Like parse_uint_literal, but symbolic expressions yield ``default``."""
    try:
        return parse_uint_literal(literal)
    except MalformedEntryError:
        return default


def angle_to_degrees(literal: Literal) -> float:
    """Binary angle units to degrees: (value / 65536) * 360."""
    return (parse_int_literal(literal) / ANGLE_UNITS_PER_TURN) * 360.0


def degrees_to_angle(degrees: float) -> int:
    """Degrees to the nearest binary angle unit."""
    return int(round(degrees / 360.0 * ANGLE_UNITS_PER_TURN))


def legacy_yaw_to_degrees(literal: Literal) -> float:
    """Byte yaw (256 per turn) to degrees."""
    return (parse_int_literal(literal) / LEGACY_YAW_UNITS_PER_TURN) * 360.0


def scale_to_float(literal: Literal) -> float:
    """16.16 fixed-point scale to float."""
    return parse_int_literal(literal) / SCALE_UNITS_PER_ONE
