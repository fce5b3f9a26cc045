"""4x4 affine transforms for placing sub-model geometry.

Matrices use the column-vector convention: a point p maps to M @ [x, y, z, 1].
A layout node's composed transform applies scale first, then rotation about
X, Y and Z in that order, then translation:

    M = T @ Rz @ Ry @ Rx @ S
"""

import math
from typing import Sequence

import numpy
import numpy as np


def identity() -> numpy.ndarray:
    return numpy.eye(4)


def translation_matrix(x: float, y: float, z: float) -> numpy.ndarray:
    mat = numpy.eye(4)
    mat[:3, 3] = (x, y, z)
    return mat


def scale_matrix(s: float) -> numpy.ndarray:
    """Uniform scale."""
    return numpy.diag([s, s, s, 1.0])


def rotation_x(degrees: float) -> numpy.ndarray:
    a = math.radians(degrees)
    c, s = math.cos(a), math.sin(a)
    return numpy.array([
        [1.0, 0.0, 0.0, 0.0],
        [0.0, c, -s, 0.0],
        [0.0, s, c, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ])


def rotation_y(degrees: float) -> numpy.ndarray:
    a = math.radians(degrees)
    c, s = math.cos(a), math.sin(a)
    return numpy.array([
        [c, 0.0, s, 0.0],
        [0.0, 1.0, 0.0, 0.0],
        [-s, 0.0, c, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ])


def rotation_z(degrees: float) -> numpy.ndarray:
    a = math.radians(degrees)
    c, s = math.cos(a), math.sin(a)
    return numpy.array([
        [c, -s, 0.0, 0.0],
        [s, c, 0.0, 0.0],
        [0.0, 0.0, 1.0, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ])


def compose_transform(
    translation: Sequence[float] = (0.0, 0.0, 0.0),
    rotation_deg: Sequence[float] = (0.0, 0.0, 0.0),
    scale: float = 1.0,
) -> numpy.ndarray:
    """Build the scale-rotate-translate matrix of a layout node."""
    rx, ry, rz = rotation_deg
    return (
        translation_matrix(*translation)
        @ rotation_z(rz)
        @ rotation_y(ry)
        @ rotation_x(rx)
        @ scale_matrix(scale)
    )


def yaw_placement(x: float, y: float, z: float, yaw_deg: float) -> numpy.ndarray:
    """Rotate about Y, then move to (x, y, z)."""
    return translation_matrix(x, y, z) @ rotation_y(yaw_deg)


def transform_points(matrix: numpy.ndarray, points) -> np.ndarray:
    """
    Apply a 4x4 transform to points.

    Args:
        matrix: (4, 4) transform
        points: (N, 3) array-like

    Returns:
        Transformed points (N, 3) float64
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    if len(pts) == 0:
        return pts
    homogeneous = np.hstack([pts, np.ones((len(pts), 1))])
    return (homogeneous @ np.asarray(matrix, dtype=np.float64).T)[:, :3]
