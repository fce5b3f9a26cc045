# decompscene/loaders/collision_loader.py
"""Collision loader: COL_VERTEX / COL_TRI_INIT / COL_TRI macros to a CollisionMesh."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Optional, Union

from decompscene import log
from decompscene.errors import MalformedEntryError, SceneExtractionError
from decompscene.loaders.c_source import IDENT, INT, directory_sort_key, read_source
from decompscene.mesh.types import CollisionMesh, CollisionTriangle, CollisionVertex

DEFAULT_SURFACE_TYPE = "SURFACE_DEFAULT"

VERTEX_PATTERN = re.compile(rf"COL_VERTEX\s*\(\s*({INT})\s*,\s*({INT})\s*,\s*({INT})\s*\)")
TRI_INIT_PATTERN = re.compile(rf"COL_TRI_INIT\s*\(\s*({IDENT})\s*,\s*(\d+)\s*\)")
TRI_PATTERN = re.compile(r"COL_TRI(?:_SPECIAL)?\s*\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*[,)]")


def parse_collision_source(
    text: str,
    area_name: str = "",
    level_name: str = "",
    default_surface_type: str = DEFAULT_SURFACE_TYPE,
) -> CollisionMesh:
    """
    Parse collision source text.

    Vertices are indexed by encounter order. Triangles are assigned to surface
    runs by counting: once a run has received its declared number of
    triangles, the next header takes over. With no headers every triangle
    gets ``default_surface_type``.

    Raises:
        MalformedEntryError: A triangle references a vertex that does not exist.
    """
    mesh = CollisionMesh(area_name=area_name, level_name=level_name)

    for m in VERTEX_PATTERN.finditer(text):
        mesh.vertices.append(CollisionVertex(int(m.group(1)), int(m.group(2)), int(m.group(3))))

    runs = [(m.group(1), int(m.group(2))) for m in TRI_INIT_PATTERN.finditer(text)]

    run_index = 0
    consumed = 0
    surface_type = runs[0][0] if runs else default_surface_type
    expected = runs[0][1] if runs else 0

    vertex_count = len(mesh.vertices)
    for m in TRI_PATTERN.finditer(text):
        while run_index < len(runs) - 1 and consumed >= expected:
            run_index += 1
            surface_type, expected = runs[run_index]
            consumed = 0

        v1, v2, v3 = int(m.group(1)), int(m.group(2)), int(m.group(3))
        if max(v1, v2, v3) >= vertex_count:
            raise MalformedEntryError(
                f"Collision triangle ({v1}, {v2}, {v3}) references a missing vertex "
                f"(have {vertex_count})")
        mesh.triangles.append(CollisionTriangle(v1, v2, v3, surface_type))
        consumed += 1

    return mesh


def load_collision_file(
    path: Union[str, Path],
    area_name: str = "",
    level_name: str = "",
    default_surface_type: str = DEFAULT_SURFACE_TYPE,
) -> Optional[CollisionMesh]:
    """Load a collision file. Returns None if it is missing or malformed."""
    try:
        text = read_source(path)
        mesh = parse_collision_source(text, area_name, level_name, default_surface_type)
    except SceneExtractionError as e:
        log.warn(f"[CollisionLoader] {e}")
        return None
    except (OSError, UnicodeError) as e:
        log.error(e, f"[CollisionLoader] Failed to read {path}")
        return None

    log.info(f"[CollisionLoader] Parsed collision: {mesh}")
    return mesh


def find_collision_files(level_path: Union[str, Path], file_name: str = "collision.inc.c") -> Dict[str, Path]:
    """Map "Area <n>" to the collision file of each areas/<n>/ directory."""
    result: Dict[str, Path] = {}
    areas_path = Path(level_path) / "areas"
    if not areas_path.is_dir():
        return result

    for area_dir in sorted((p for p in areas_path.iterdir() if p.is_dir()), key=directory_sort_key):
        collision_file = area_dir / file_name
        if collision_file.is_file():
            result[f"Area {area_dir.name}"] = collision_file
    return result
