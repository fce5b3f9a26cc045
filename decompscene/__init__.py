"""
decompscene - scene data extraction from decompiled SM64 level sources.

Main modules:
- loaders - collision, geometry layout, model, script and object parsers
- mesh - collision and visual mesh records
- objects - placed object records
- scene - per-area composition of a level
"""

from .errors import SceneExtractionError, NotFoundError, MalformedEntryError, AmbiguousResolutionError
from .settings import SceneSettings
from .mesh import CollisionMesh, VisualMesh, SubMesh
from .objects import PlacedObject
from .scene import LevelMetadata, SceneComposer, AreaScene

__version__ = '0.1.0'

__all__ = [
    # Errors
    'SceneExtractionError',
    'NotFoundError',
    'MalformedEntryError',
    'AmbiguousResolutionError',
    # Records
    'CollisionMesh',
    'VisualMesh',
    'SubMesh',
    'PlacedObject',
    # Composition
    'SceneSettings',
    'LevelMetadata',
    'SceneComposer',
    'AreaScene',
]
