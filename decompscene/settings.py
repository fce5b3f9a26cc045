"""
Scene settings: project-level configuration for the extraction pipeline.

Stores source file names, include directories and the fixed labels given to
synthetic objects. Settings are read from decompscene.json in the project root;
a missing or broken file yields the defaults.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import List, Optional, Union

from decompscene import log


SETTINGS_FILE_NAME = "decompscene.json"


@dataclass
class SceneSettings:
    """
    Settings for locating and interpreting a level's source files.

    File names are matched exactly inside the level tree; include directories
    are relative to the project root.
    """

    collision_file_name: str = "collision.inc.c"
    model_file_name: str = "model.inc.c"
    geo_layout_file_name: str = "geo.inc.c"
    script_file_name: str = "script.c"
    macro_file_name: str = "macro.inc.c"
    macro_presets_file_name: str = "macro_presets.inc.c"
    special_presets_file_name: str = "special_presets.inc.c"

    include_dirs: List[str] = field(default_factory=lambda: ["include", "howtomake/include"])

    default_surface_type: str = "SURFACE_DEFAULT"

    # Synthetic object emitted for the level's start position
    player_model: str = "MODEL_MARIO"
    player_behavior: str = "bhvMario"

    special_object_behavior: str = "(Special Object)"

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return asdict(self)

    @staticmethod
    def from_dict(data: dict) -> "SceneSettings":
        """Deserialize from dictionary, unknown keys ignored."""
        defaults = SceneSettings()
        kwargs = {}
        for name, default in defaults.to_dict().items():
            value = data.get(name, default)
            if isinstance(default, list):
                value = [str(item) for item in value]
            kwargs[name] = value
        return SceneSettings(**kwargs)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "SceneSettings":
        """Load settings from file."""
        path = Path(path)
        if not path.exists():
            return cls()

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            settings = cls.from_dict(data)
            log.info(f"[SceneSettings] Loaded settings from {path}")
            return settings
        except Exception as e:
            log.error(f"[SceneSettings] Failed to load settings: {e}")
            return cls()

    @classmethod
    def for_project(cls, project_root: Optional[Union[str, Path]]) -> "SceneSettings":
        """Load settings stored in the project root (defaults if absent)."""
        if project_root is None:
            return cls()
        return cls.load(Path(project_root) / SETTINGS_FILE_NAME)

    def save(self, path: Union[str, Path]) -> None:
        """Save settings to file."""
        path = Path(path)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
