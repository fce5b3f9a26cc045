# decompscene/loaders/model_loader.py
"""Visual model loader for model.inc.c files.

Two passes:
1. Vtx arrays -> named vertex buffers.
2. Gfx display lists are replayed: gsSPVertex appends the loaded vertices to
   the mesh, gsSP1Triangle/gsSP2Triangles index into the most recent load.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Optional, Union

from decompscene import log
from decompscene.errors import SceneExtractionError
from decompscene.loaders.c_source import INT, directory_sort_key, iter_braced_blocks, ordered_matches, read_source
from decompscene.mesh.types import ModelTriangle, ModelVertex, VisualMesh

VTX_ARRAY_PATTERN = re.compile(r"static\s+const\s+Vtx\s+(\w+)\[\]\s*=\s*\{")
VTX_DATA_PATTERN = re.compile(
    rf"\{{\{{\{{\s*({INT})\s*,\s*({INT})\s*,\s*({INT})\s*\}}\s*,\s*{INT}\s*,"
    rf"\s*\{{\s*({INT})\s*,\s*({INT})\s*\}}\s*,"
    r"\s*\{\s*(0x[0-9a-fA-F]{1,2})\s*,\s*(0x[0-9a-fA-F]{1,2})\s*,"
    r"\s*(0x[0-9a-fA-F]{1,2})\s*,\s*(0x[0-9a-fA-F]{1,2})\s*\}\s*\}\s*\}")
DISPLAY_LIST_PATTERN = re.compile(r"const\s+Gfx\s+(\w+)\[\]\s*=\s*\{")

SP_VERTEX_PATTERN = re.compile(r"gsSPVertex\s*\(\s*(\w+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\)")
SP_2TRIANGLES_PATTERN = re.compile(
    r"gsSP2Triangles\s*\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*,\s*0x[0-9a-fA-F]+\s*,"
    r"\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*,\s*0x[0-9a-fA-F]+\s*\)")
SP_1TRIANGLE_PATTERN = re.compile(
    r"gsSP1Triangle\s*\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*,\s*0x[0-9a-fA-F]+\s*\)")
SET_TEXTURE_IMAGE_PATTERN = re.compile(
    r"gsDPSetTextureImage\s*\(\s*\w+\s*,\s*\w+\s*,\s*\w+\s*,\s*(\w+)\s*\)")


def parse_vertex_arrays(text: str) -> Dict[str, List[ModelVertex]]:
    """Named vertex buffers. Arrays without vertex records are left out."""
    arrays: Dict[str, List[ModelVertex]] = {}
    for name, body in iter_braced_blocks(text, VTX_ARRAY_PATTERN):
        vertices = [
            ModelVertex(
                x=int(m.group(1)), y=int(m.group(2)), z=int(m.group(3)),
                s=int(m.group(4)), t=int(m.group(5)),
                nx=int(m.group(6), 16), ny=int(m.group(7), 16), nz=int(m.group(8), 16),
                alpha=int(m.group(9), 16),
            )
            for m in VTX_DATA_PATTERN.finditer(body)
        ]
        if vertices:
            arrays[name] = vertices
            log.debug(f"[ModelLoader]   {name}: {len(vertices)} vertices")
    return arrays


def replay_display_list(body: str, vertex_arrays: Dict[str, List[ModelVertex]], mesh: VisualMesh) -> None:
    """
    Replay one display list body into ``mesh``.

    Every load appends the buffer's first ``count`` vertices, so loading the
    same buffer twice duplicates its vertices. Triangle indices are local to
    the latest load.
    """
    current: Optional[List[ModelVertex]] = None
    base = 0
    texture: Optional[str] = None

    commands = ordered_matches(
        body,
        ("vertex", SP_VERTEX_PATTERN),
        ("tri2", SP_2TRIANGLES_PATTERN),
        ("tri1", SP_1TRIANGLE_PATTERN),
        ("texture", SET_TEXTURE_IMAGE_PATTERN),
    )

    def emit(a: int, b: int, c: int) -> None:
        v1, v2, v3 = base + a, base + b, base + c
        if max(v1, v2, v3) >= len(mesh.vertices):
            log.debug(f"[ModelLoader] Skipping triangle ({a}, {b}, {c}) outside the loaded vertices")
            return
        mesh.triangles.append(ModelTriangle(v1, v2, v3, texture))

    for _, kind, m in commands:
        if kind == "vertex":
            name = m.group(1)
            count = int(m.group(2))
            current = vertex_arrays.get(name)
            if current is None:
                log.debug(f"[ModelLoader] Unknown vertex buffer {name}")
                continue
            base = len(mesh.vertices)
            mesh.vertices.extend(current[:count])
        elif kind == "texture":
            texture = m.group(1)
        elif current is None:
            continue
        elif kind == "tri2":
            emit(int(m.group(1)), int(m.group(2)), int(m.group(3)))
            emit(int(m.group(4)), int(m.group(5)), int(m.group(6)))
        else:
            emit(int(m.group(1)), int(m.group(2)), int(m.group(3)))


def parse_model_source(text: str, area_name: str = "", level_name: str = "") -> VisualMesh:
    """Parse vertex arrays and replay every display list of a model source."""
    mesh = VisualMesh(area_name=area_name, level_name=level_name)
    vertex_arrays = parse_vertex_arrays(text)
    log.debug(f"[ModelLoader] Found {len(vertex_arrays)} vertex arrays")

    for name, body in iter_braced_blocks(text, DISPLAY_LIST_PATTERN):
        mesh.add_display_list_name(name)
        replay_display_list(body, vertex_arrays, mesh)

    return mesh


def load_model_file(path: Union[str, Path], area_name: str = "", level_name: str = "") -> Optional[VisualMesh]:
    """Load a model file. Returns None if it is missing or malformed."""
    try:
        mesh = parse_model_source(read_source(path), area_name, level_name)
    except SceneExtractionError as e:
        log.warn(f"[ModelLoader] {e}")
        return None
    except (OSError, UnicodeError) as e:
        log.error(e, f"[ModelLoader] Failed to read {path}")
        return None

    log.info(f"[ModelLoader] Parsed visual mesh: {mesh}")
    return mesh


def find_model_files(level_path: Union[str, Path], file_name: str = "model.inc.c") -> Dict[str, List[Path]]:
    """Group areas/<n>/<sub>/model files under "Area <n>"."""
    result: Dict[str, List[Path]] = {}
    areas_path = Path(level_path) / "areas"
    if not areas_path.is_dir():
        return result

    for area_dir in sorted((p for p in areas_path.iterdir() if p.is_dir()), key=directory_sort_key):
        files = [sub / file_name
                 for sub in sorted((p for p in area_dir.iterdir() if p.is_dir()), key=directory_sort_key)
                 if (sub / file_name).is_file()]
        if files:
            result[f"Area {area_dir.name}"] = files
            log.debug(f"[ModelLoader] Found {len(files)} model file(s) for Area {area_dir.name}")
    return result
