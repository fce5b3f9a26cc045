"""
Scene composer: builds per-area collision, visual and object data for a level.

Sub-model geometry is transformed into area space before merging: transforms
come from the area geometry layout and from special objects that place a
geometry layout in the collision source.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

import numpy as np

from decompscene import log
from decompscene.errors import AmbiguousResolutionError, SceneExtractionError
from decompscene.geombase.transform import identity, transform_points, yaw_placement
from decompscene.loaders.c_source import read_source
from decompscene.loaders.collision_loader import parse_collision_source
from decompscene.loaders.geo_layout_loader import load_geo_layout, primary_display_list_name
from decompscene.loaders.macro_object_loader import load_macro_objects, load_macro_presets
from decompscene.loaders.model_loader import load_model_file
from decompscene.loaders.script_loader import load_macro_list_name, load_model_table, load_script_objects
from decompscene.loaders.special_object_loader import (
    load_special_presets,
    lookup_model,
    scan_special_objects,
    special_objects_to_placed,
)
from decompscene.mesh.types import CollisionMesh, SubMesh, VisualMesh
from decompscene.objects.types import PlacedObject
from decompscene.scene.level import LevelMetadata
from decompscene.scene.level_files import LevelFiles
from decompscene.settings import SceneSettings
from decompscene.units import legacy_yaw_to_degrees

_DECIMAL = re.compile(r"^\d+$")


@dataclass
class AreaScene:
    """Everything extracted for one area."""

    area_name: str = ""
    collision_mesh: Optional[CollisionMesh] = None
    """Collision geometry, None if the area has no readable collision source."""

    visual_mesh: Optional[VisualMesh] = None
    """Merged visual geometry, None if no model file parsed."""

    objects: List[PlacedObject] = field(default_factory=list)
    """Script, macro and special placements, in that order."""

    def __str__(self) -> str:
        collision = self.collision_mesh.triangle_count if self.collision_mesh else 0
        visual = self.visual_mesh.triangle_count if self.visual_mesh else 0
        return (f"{self.area_name}: {collision} collision triangles, "
                f"{visual} visual triangles, {len(self.objects)} objects")


def sub_model_ordinal(path: Union[str, Path], fallback: int) -> int:
    """Last decimal path segment of a model file, else ``fallback``."""
    for part in reversed(Path(path).parts):
        if _DECIMAL.match(part):
            return int(part)
    return fallback


def resolve_transform(mesh: VisualMesh, ordinal: int, transforms: Dict[str, np.ndarray]) -> np.ndarray:
    """First display list of ``mesh`` with a transform, then SubModel_<n>, then identity."""
    for name in mesh.display_list_names:
        if name in transforms:
            return transforms[name]
    fallback = f"SubModel_{ordinal}"
    if fallback in transforms:
        return transforms[fallback]
    return identity()


class SceneComposer:
    def __init__(
        self,
        settings: Optional[SceneSettings] = None,
        project_root: Optional[Union[str, Path]] = None,
    ):
        self.settings = settings or SceneSettings()
        self.project_root = Path(project_root) if project_root is not None else None

    def files_for(self, level: LevelMetadata) -> LevelFiles:
        return LevelFiles(level, self.settings, self.project_root)

    # ---------- visual ----------

    def compose_visual_mesh(
        self,
        model_files: List[Path],
        area_name: str = "",
        level_name: str = "",
        transforms: Optional[Dict[str, np.ndarray]] = None,
    ) -> Optional[VisualMesh]:
        """
        Merge the sub-model files of an area into one visual mesh.

        Each file's vertex positions are transformed and truncated toward zero
        before merging. Merged triangles are offset by the vertices already in
        the mesh; each SubMesh keeps its own local indices.
        """
        transforms = transforms or {}
        merged = VisualMesh(area_name=area_name, level_name=level_name)
        parsed = 0

        for sequence, path in enumerate(model_files, start=1):
            mesh = load_model_file(path, area_name, level_name)
            if mesh is None:
                continue
            parsed += 1

            ordinal = sub_model_ordinal(path, sequence)
            matrix = resolve_transform(mesh, ordinal, transforms)

            positions = transform_points(matrix, [(v.x, v.y, v.z) for v in mesh.vertices])
            vertices = [
                v.with_position(int(p[0]), int(p[1]), int(p[2]))
                for v, p in zip(mesh.vertices, positions)
            ]

            offset = merged.vertex_count
            merged.vertices.extend(vertices)
            merged.triangles.extend(tri.offset(offset) for tri in mesh.triangles)
            merged.sub_meshes.append(SubMesh(
                vertices=vertices,
                triangles=list(mesh.triangles),
                source_file=str(path),
                sub_model_number=ordinal,
            ))
            for name in mesh.display_list_names:
                merged.add_display_list_name(name)

            log.debug(f"[SceneComposer] Sub-model {ordinal} from {path}: "
                      f"{len(vertices)} vertices, {len(mesh.triangles)} triangles")

        if parsed == 0:
            return None

        log.info(f"[SceneComposer] Composed visual mesh: {merged}")
        return merged

    # ---------- transforms ----------

    def build_transforms(
        self,
        level: LevelMetadata,
        model_files: List[Path],
        collision_text: Optional[str] = None,
    ) -> Dict[str, np.ndarray]:
        """Display list name -> placement matrix for an area's sub-models."""
        files = self.files_for(level)
        transforms: Dict[str, np.ndarray] = {}

        geo_path = files.area_geo_layout(model_files)
        if geo_path is not None:
            layout = load_geo_layout(geo_path)
            if layout is not None:
                transforms.update(layout.transformations())

        area_dir = files.area_directory(model_files)
        if collision_text and area_dir is not None:
            transforms.update(self._special_object_transforms(files, area_dir, collision_text))

        return transforms

    def _special_object_transforms(
        self,
        files: LevelFiles,
        area_dir: Path,
        collision_text: str,
    ) -> Dict[str, np.ndarray]:
        placements = scan_special_objects(collision_text)
        if not placements:
            return {}

        presets_path = files.special_presets_path
        if presets_path is None:
            log.debug("[SceneComposer] No special presets file, special-object transforms skipped")
            return {}
        presets = load_special_presets(presets_path)
        model_table = load_model_table(files.script_path)

        transforms: Dict[str, np.ndarray] = {}
        for placement in placements:
            try:
                model = lookup_model(presets, placement.preset)
                layout_name = model_table.get(model)
                if layout_name is None:
                    raise AmbiguousResolutionError(f"No geometry layout loaded for {model}")
                geo_path = files.find_geo_layout(area_dir, layout_name)
                if geo_path is None:
                    raise AmbiguousResolutionError(f"Geometry layout {layout_name} not found")
                dl_name = primary_display_list_name(read_source(geo_path))
                if dl_name is None:
                    raise AmbiguousResolutionError(f"Geometry layout {layout_name} has no display list")
            except SceneExtractionError as e:
                log.debug(f"[SceneComposer] Special object {placement.preset}: {e}")
                continue

            yaw = legacy_yaw_to_degrees(placement.raw_yaw or 0)
            transforms[dl_name] = yaw_placement(placement.x, placement.y, placement.z, yaw)
            log.debug(f"[SceneComposer] {dl_name} placed by {placement.preset} at "
                      f"({placement.x}, {placement.y}, {placement.z}) yaw {yaw}")

        return transforms

    # ---------- objects ----------

    def collect_objects(self, level: LevelMetadata, collision_text: Optional[str] = None) -> List[PlacedObject]:
        """Script placements, then macro objects, then special objects."""
        files = self.files_for(level)
        settings = self.settings

        objects = load_script_objects(files.script_path, settings.player_model, settings.player_behavior)

        list_name = load_macro_list_name(files.script_path)
        if list_name:
            macro_path = files.find_macro_file(list_name)
            presets_path = files.macro_presets_path
            if macro_path is None:
                log.debug(f"[SceneComposer] No macro file declares {list_name}")
            elif presets_path is None:
                log.warn(f"[SceneComposer] Macro presets not found under {files.project_root}")
            else:
                objects.extend(load_macro_objects(macro_path, load_macro_presets(presets_path)))

        if collision_text:
            presets_path = files.special_presets_path
            if presets_path is not None:
                presets = load_special_presets(presets_path)
                objects.extend(special_objects_to_placed(
                    scan_special_objects(collision_text), presets, settings.special_object_behavior))

        log.info(f"[SceneComposer] Collected {len(objects)} objects for {level.display_name}")
        return objects

    # ---------- areas ----------

    def compose_area(self, level: LevelMetadata, area_name: str) -> AreaScene:
        """Extract one area. Failures of a step are logged and leave its field empty."""
        files = self.files_for(level)
        scene = AreaScene(area_name=area_name)
        collision_text: Optional[str] = None

        collision_path = files.collision_files().get(area_name)
        if collision_path is not None:
            try:
                collision_text = read_source(collision_path)
                scene.collision_mesh = parse_collision_source(
                    collision_text, area_name, level.display_name, self.settings.default_surface_type)
            except SceneExtractionError as e:
                log.error(e, f"[SceneComposer] Collision of {area_name}")
            except (OSError, UnicodeError) as e:
                log.error(e, f"[SceneComposer] Failed to read {collision_path}")
        else:
            log.warn(f"[SceneComposer] No collision file for {area_name}")

        model_files = files.model_files().get(area_name, [])
        if model_files:
            try:
                transforms = self.build_transforms(level, model_files, collision_text)
                scene.visual_mesh = self.compose_visual_mesh(
                    model_files, area_name, level.display_name, transforms)
            except (SceneExtractionError, OSError, UnicodeError) as e:
                log.error(e, f"[SceneComposer] Visual mesh of {area_name}")
        else:
            log.warn(f"[SceneComposer] No model files for {area_name}")

        try:
            scene.objects = self.collect_objects(level, collision_text)
        except (SceneExtractionError, OSError, UnicodeError) as e:
            log.error(e, f"[SceneComposer] Objects of {area_name}")

        return scene

    def area_names(self, level: LevelMetadata) -> List[str]:
        """Areas with a collision or a model source, in directory order."""
        files = self.files_for(level)
        names = list(files.collision_files())
        for name in files.model_files():
            if name not in names:
                names.append(name)
        return names

    def compose_level(self, level: LevelMetadata) -> Dict[str, AreaScene]:
        return {name: self.compose_area(level, name) for name in self.area_names(level)}
