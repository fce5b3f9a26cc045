"""Scene composition: level records, source paths and per-area extraction."""

from decompscene.scene.level import LevelMetadata, categorize_level, level_sort_key
from decompscene.scene.level_files import LevelFiles
from decompscene.scene.composer import AreaScene, SceneComposer

__all__ = [
    "LevelMetadata",
    "categorize_level",
    "level_sort_key",
    "LevelFiles",
    "AreaScene",
    "SceneComposer",
]
