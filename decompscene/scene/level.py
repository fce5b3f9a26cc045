"""
Level record handed in by the level browser.

Discovery of level.yaml files and their deserialization happen outside this
package; LevelMetadata.from_dict accepts the already-parsed mapping.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

COURSE_LEVELS = {
    "bob", "wf", "jrb", "ccm", "bbh", "hmc", "lll", "ssl",
    "ddd", "sl", "wdw", "ttm", "thi", "ttc", "rr",
}
BOWSER_LEVELS = {"bitdw", "bitfs", "bits", "bowser_1", "bowser_2", "bowser_3"}
CASTLE_LEVELS = {"castle_inside", "castle_grounds", "castle_courtyard"}
SPECIAL_LEVELS = {"pss", "cotmc", "totwc", "vcutm", "wmotr", "sa"}
MENU_LEVELS = {"menu", "intro", "ending"}

CATEGORY_ORDER = ["Course", "Bowser", "Castle", "Special", "Menu", "Other"]


def categorize_level(short_name: str) -> str:
    if short_name in COURSE_LEVELS:
        return "Course"
    if short_name in BOWSER_LEVELS:
        return "Bowser"
    if short_name in CASTLE_LEVELS:
        return "Castle"
    if short_name in SPECIAL_LEVELS:
        return "Special"
    if short_name in MENU_LEVELS:
        return "Menu"
    return "Other"


@dataclass
class LevelMetadata:
    """Level description from level.yaml plus the directory it lives in."""

    short_name: str = ""
    full_name: str = ""
    area_count: int = 0
    level_path: Path = field(default_factory=Path)
    texture_files: List[str] = field(default_factory=list)
    objects: List[str] = field(default_factory=list)
    shared_path: List[str] = field(default_factory=list)
    skybox_bin: Optional[str] = None
    texture_bin: str = ""
    effects: bool = False
    actor_bins: List[str] = field(default_factory=list)
    common_bin: List[str] = field(default_factory=list)

    @property
    def category(self) -> str:
        return categorize_level(self.short_name)

    @property
    def display_name(self) -> str:
        return self.full_name or self.short_name or self.level_path.name

    @staticmethod
    def from_dict(data: dict, level_path: Union[str, Path]) -> "LevelMetadata":
        """Build from a parsed level.yaml mapping (hyphenated keys)."""
        return LevelMetadata(
            short_name=str(data.get("short-name", "")),
            full_name=str(data.get("full-name", "")),
            area_count=int(data.get("area-count", 0) or 0),
            level_path=Path(level_path),
            texture_files=list(data.get("texture-file", []) or []),
            objects=list(data.get("objects", []) or []),
            shared_path=list(data.get("shared-path", []) or []),
            skybox_bin=data.get("skybox-bin"),
            texture_bin=str(data.get("texture-bin", "") or ""),
            effects=bool(data.get("effects", False)),
            actor_bins=list(data.get("actor-bins", []) or []),
            common_bin=list(data.get("common-bin", []) or []),
        )

    @staticmethod
    def for_directory(level_path: Union[str, Path]) -> "LevelMetadata":
        """Minimal record for a bare level directory."""
        level_path = Path(level_path)
        return LevelMetadata(short_name=level_path.name, full_name=level_path.name, level_path=level_path)

    def __str__(self) -> str:
        return self.display_name


def level_sort_key(level: LevelMetadata):
    """Sort by category (courses first), then by full name."""
    return (CATEGORY_ORDER.index(level.category), level.full_name)
