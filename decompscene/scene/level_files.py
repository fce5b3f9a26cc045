"""Locating the source files of a level inside a decomp project tree.

Layout:
    <project>/include/{macro,special}_presets.inc.c
    <project>/levels/<level>/script.c
    <project>/levels/<level>/areas/<n>/collision.inc.c
    <project>/levels/<level>/areas/<n>/geo.inc.c
    <project>/levels/<level>/areas/<n>/<sub>/model.inc.c
    <project>/levels/<level>/areas/<n>/macro.inc.c
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Union

from decompscene.loaders.c_source import find_file_containing
from decompscene.loaders.collision_loader import find_collision_files
from decompscene.loaders.model_loader import find_model_files
from decompscene.scene.level import LevelMetadata
from decompscene.settings import SceneSettings


class LevelFiles:
    """Paths of one level's sources, resolved with the given settings."""

    def __init__(
        self,
        level: LevelMetadata,
        settings: Optional[SceneSettings] = None,
        project_root: Optional[Union[str, Path]] = None,
    ):
        self.level = level
        self.settings = settings or SceneSettings()
        self.level_path = Path(level.level_path)
        if project_root is None:
            project_root = self.level_path.parent.parent
        self.project_root = Path(project_root)

    @property
    def script_path(self) -> Path:
        return self.level_path / self.settings.script_file_name

    def collision_files(self) -> Dict[str, Path]:
        return find_collision_files(self.level_path, self.settings.collision_file_name)

    def model_files(self) -> Dict[str, List[Path]]:
        return find_model_files(self.level_path, self.settings.model_file_name)

    def include_file(self, file_name: str) -> Optional[Path]:
        """First existing ``file_name`` among the configured include directories."""
        for include_dir in self.settings.include_dirs:
            candidate = self.project_root / include_dir / file_name
            if candidate.is_file():
                return candidate
        return None

    @property
    def macro_presets_path(self) -> Optional[Path]:
        return self.include_file(self.settings.macro_presets_file_name)

    @property
    def special_presets_path(self) -> Optional[Path]:
        return self.include_file(self.settings.special_presets_file_name)

    def area_directory(self, model_files: List[Path]) -> Optional[Path]:
        """Area directory: parent of the sub-area directories holding the models."""
        if not model_files:
            return None
        return Path(model_files[0]).parent.parent

    def area_geo_layout(self, model_files: List[Path]) -> Optional[Path]:
        area_dir = self.area_directory(model_files)
        if area_dir is None:
            return None
        path = area_dir / self.settings.geo_layout_file_name
        return path if path.is_file() else None

    def find_macro_file(self, list_name: str) -> Optional[Path]:
        """First macro file of the level that mentions ``list_name``."""
        return find_file_containing(self.level_path, self.settings.macro_file_name, list_name)

    def find_geo_layout(self, root: Union[str, Path], layout_name: str) -> Optional[Path]:
        return find_file_containing(root, self.settings.geo_layout_file_name, layout_name)
