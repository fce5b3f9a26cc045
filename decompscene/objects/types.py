"""
Placement records shared by the script, macro-object and special-object loaders.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class PlacedObject:
    """
    Object placed in a level.

    All three placement sources fill the same fields so their lists can be
    concatenated directly.
    """

    model_name: str = ""
    x: int = 0
    y: int = 0
    z: int = 0
    rx: int = 0
    """Rotation in degrees."""
    ry: int = 0
    rz: int = 0
    params: int = 0
    """Behavior parameters as an unsigned 32-bit bit pattern."""
    behavior: str = ""
    acts: Optional[str] = None
    """Raw act mask of OBJECT_WITH_ACTS, None otherwise."""
    source: str = ""
    """"script", "player", "macro" or "special"."""

    @property
    def position(self) -> tuple[int, int, int]:
        return (self.x, self.y, self.z)

    def describe(self) -> str:
        """One-line summary for a detail panel."""
        return (f"{self.model_name} | Pos: ({self.x}, {self.y}, {self.z}) | "
                f"Rot: ({self.rx}, {self.ry}, {self.rz}) | Behavior: {self.behavior}")


@dataclass
class MacroPreset:
    """Macro-object preset: what a terse MACRO_OBJECT expands to."""

    behavior: str
    model: str
    param: int = 0


@dataclass
class SpecialObjectPlacement:
    """
    One special-object macro as scanned from collision source.

    Yaw stays in raw units; each consumer converts it with its own divisor.
    """

    preset: str
    x: int
    y: int
    z: int
    raw_yaw: Optional[int] = None
    param_literal: Optional[str] = None
    form: str = "SPECIAL_OBJECT"
