"""Mesh module - collision and visual mesh records."""

from decompscene.mesh.types import (
    CollisionVertex,
    CollisionTriangle,
    CollisionMesh,
    ModelVertex,
    ModelTriangle,
    SubMesh,
    VisualMesh,
)

__all__ = [
    "CollisionVertex",
    "CollisionTriangle",
    "CollisionMesh",
    "ModelVertex",
    "ModelTriangle",
    "SubMesh",
    "VisualMesh",
]
