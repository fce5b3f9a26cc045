"""
Data structures for collision and visual meshes.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

import numpy as np


@dataclass(frozen=True)
class CollisionVertex:
    """Collision vertex in integer world units."""

    x: int
    y: int
    z: int

    def __str__(self) -> str:
        return f"({self.x}, {self.y}, {self.z})"


@dataclass
class CollisionTriangle:
    """Collision triangle: three vertex indices and a surface tag."""

    v1: int
    v2: int
    v3: int
    surface_type: str = "SURFACE_DEFAULT"

    def __str__(self) -> str:
        return f"Triangle({self.v1}, {self.v2}, {self.v3}) [{self.surface_type}]"


@dataclass
class CollisionMesh:
    """
    Collision geometry of one area.

    Created per area by the collision loader and not modified afterwards.
    """

    vertices: list[CollisionVertex] = field(default_factory=list)
    triangles: list[CollisionTriangle] = field(default_factory=list)
    area_name: str = ""
    level_name: str = ""

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)

    def surface_types(self) -> list[str]:
        """Distinct surface tags in first-seen order."""
        return list(dict.fromkeys(t.surface_type for t in self.triangles))

    def positions_array(self) -> np.ndarray:
        """Vertex positions, shape (N, 3) float32."""
        return np.array([(v.x, v.y, v.z) for v in self.vertices], dtype=np.float32).reshape(-1, 3)

    def indices_array(self) -> np.ndarray:
        """Triangle indices, shape (M, 3) uint32."""
        return np.array([(t.v1, t.v2, t.v3) for t in self.triangles], dtype=np.uint32).reshape(-1, 3)

    def __str__(self) -> str:
        return f"{self.level_name} - {self.area_name}: {self.vertex_count} vertices, {self.triangle_count} triangles"


@dataclass(frozen=True)
class ModelVertex:
    """
    Visual vertex as written in a Vtx array.

    Normal components are stored as the raw bytes of the source (0..255);
    they are signed values in two's complement.
    """

    x: int
    y: int
    z: int
    s: int
    t: int
    nx: int
    ny: int
    nz: int
    alpha: int

    def normalized_normal(self) -> tuple[float, float, float]:
        """Normal with each byte reinterpreted as signed and divided by 127."""
        return (_signed_byte(self.nx) / 127.0,
                _signed_byte(self.ny) / 127.0,
                _signed_byte(self.nz) / 127.0)

    def with_position(self, x: int, y: int, z: int) -> "ModelVertex":
        return replace(self, x=x, y=y, z=z)


def _signed_byte(value: int) -> int:
    value &= 0xFF
    return value - 256 if value >= 128 else value


@dataclass
class ModelTriangle:
    """Visual triangle with absolute vertex indices."""

    v1: int
    v2: int
    v3: int
    texture_name: Optional[str] = None

    def offset(self, delta: int) -> "ModelTriangle":
        return ModelTriangle(self.v1 + delta, self.v2 + delta, self.v3 + delta, self.texture_name)


@dataclass
class SubMesh:
    """
    One sub-area model inside a merged visual mesh.

    Triangle indices are local to this sub-mesh's vertex list.
    """

    vertices: list[ModelVertex] = field(default_factory=list)
    triangles: list[ModelTriangle] = field(default_factory=list)
    source_file: str = ""
    sub_model_number: int = 0
    is_visible: bool = True
    """Toggled by the viewer; composition never resets it on an existing SubMesh."""


@dataclass
class VisualMesh:
    """
    Visual geometry with UVs and normals.

    ``vertices``/``triangles`` hold the flattened, index-adjusted geometry;
    ``sub_meshes`` keep each sub-model separately for visibility toggling.
    """

    vertices: list[ModelVertex] = field(default_factory=list)
    triangles: list[ModelTriangle] = field(default_factory=list)
    sub_meshes: list[SubMesh] = field(default_factory=list)
    area_name: str = ""
    level_name: str = ""
    main_display_list_name: Optional[str] = None
    display_list_names: list[str] = field(default_factory=list)

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)

    def add_display_list_name(self, name: str) -> None:
        if name not in self.display_list_names:
            self.display_list_names.append(name)
        if self.main_display_list_name is None:
            self.main_display_list_name = name

    def visible_triangles(self) -> list[ModelTriangle]:
        """Index-adjusted triangles of visible sub-meshes only."""
        if not self.sub_meshes:
            return list(self.triangles)
        result = []
        offset = 0
        for sub in self.sub_meshes:
            if sub.is_visible:
                result.extend(t.offset(offset) for t in sub.triangles)
            offset += len(sub.vertices)
        return result

    def positions_array(self) -> np.ndarray:
        """Vertex positions, shape (N, 3) float32."""
        return np.array([(v.x, v.y, v.z) for v in self.vertices], dtype=np.float32).reshape(-1, 3)

    def normals_array(self) -> np.ndarray:
        """Normalized vertex normals, shape (N, 3) float32."""
        return np.array([v.normalized_normal() for v in self.vertices], dtype=np.float32).reshape(-1, 3)

    def uvs_array(self) -> np.ndarray:
        """Raw texture coordinates, shape (N, 2) float32."""
        return np.array([(v.s, v.t) for v in self.vertices], dtype=np.float32).reshape(-1, 2)

    def indices_array(self) -> np.ndarray:
        """Triangle indices, shape (M, 3) uint32."""
        return np.array([(t.v1, t.v2, t.v3) for t in self.triangles], dtype=np.uint32).reshape(-1, 3)

    def __str__(self) -> str:
        return (f"VisualMesh: {self.level_name} - {self.area_name} "
                f"({self.vertex_count} vertices, {self.triangle_count} triangles)")
