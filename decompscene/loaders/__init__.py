"""
Loaders for decomp C sources.

Each loader has a ``parse_*`` function working on text (raises on malformed
input) and a ``load_*`` function working on a path (logs and returns an empty
result instead of raising).
"""

from decompscene.loaders.collision_loader import (
    parse_collision_source,
    load_collision_file,
    find_collision_files,
)
from decompscene.loaders.geo_layout_loader import (
    GeoLayout,
    GeoNode,
    GeoNodeKind,
    parse_geo_layout_source,
    primary_display_list_name,
    extract_transformations,
    load_geo_layout,
    find_geo_layout_containing,
)
from decompscene.loaders.model_loader import (
    parse_model_source,
    load_model_file,
    find_model_files,
)
from decompscene.loaders.script_loader import (
    parse_script_objects,
    parse_macro_list_name,
    parse_load_models,
)
from decompscene.loaders.macro_object_loader import (
    parse_macro_presets,
    parse_macro_objects,
)
from decompscene.loaders.special_object_loader import (
    parse_special_presets,
    scan_special_objects,
    parse_special_objects,
)

__all__ = [
    "parse_collision_source",
    "load_collision_file",
    "find_collision_files",
    "GeoLayout",
    "GeoNode",
    "GeoNodeKind",
    "parse_geo_layout_source",
    "primary_display_list_name",
    "extract_transformations",
    "load_geo_layout",
    "find_geo_layout_containing",
    "parse_model_source",
    "load_model_file",
    "find_model_files",
    "parse_script_objects",
    "parse_macro_list_name",
    "parse_load_models",
    "parse_macro_presets",
    "parse_macro_objects",
    "parse_special_presets",
    "scan_special_objects",
    "parse_special_objects",
]
