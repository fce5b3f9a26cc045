"""
Basic geometry for scene composition.

Contains the 4x4 transform builders used to place sub-model geometry:
- compose_transform - scale, XYZ rotation and translation of a layout node
- yaw_placement - rotation about Y followed by translation
- transform_points - apply a transform to an (N, 3) point array
"""

from .transform import (
    identity,
    translation_matrix,
    scale_matrix,
    rotation_x,
    rotation_y,
    rotation_z,
    compose_transform,
    yaw_placement,
    transform_points,
)

__all__ = [
    'identity',
    'translation_matrix',
    'scale_matrix',
    'rotation_x',
    'rotation_y',
    'rotation_z',
    'compose_transform',
    'yaw_placement',
    'transform_points',
]
