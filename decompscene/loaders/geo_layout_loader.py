# decompscene/loaders/geo_layout_loader.py
"""Geometry-layout loader.

Reads GEO_* transform commands from a geo.inc.c file. The commands are kept
as a flat node list; nesting (GEO_OPEN_NODE / GEO_CLOSE_NODE) is not modeled.
Transforms are looked up by the display list a node binds, so node order does
not affect the transform map.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import numpy as np

from decompscene import log
from decompscene.errors import SceneExtractionError
from decompscene.geombase.transform import compose_transform
from decompscene.loaders.c_source import INT, NUMBER, find_file_containing, read_source
from decompscene.units import angle_to_degrees, scale_to_float

Vec3 = Tuple[float, float, float]


class GeoNodeKind(Enum):
    TRANSLATE = "translate"
    ROTATE = "rotate"
    TRANSLATE_ROTATE = "translate_rotate"
    SCALE = "scale"
    DISPLAY_LIST = "display_list"
    OTHER = "other"


class GeoNode:
    """Layout command. Subclasses carry only the fields their command has."""

    kind = GeoNodeKind.OTHER

    def __init__(self, display_list: Optional[str] = None):
        self.display_list = display_list

    def translation(self) -> Vec3:
        return (0.0, 0.0, 0.0)

    def rotation(self) -> Vec3:
        """Rotation in degrees about X, Y, Z."""
        return (0.0, 0.0, 0.0)

    def scale(self) -> float:
        return 1.0

    def matrix(self) -> np.ndarray:
        return compose_transform(self.translation(), self.rotation(), self.scale())

    def __repr__(self):
        return (f"GeoNode[{self.kind.name}] T:{self.translation()} R:{self.rotation()} "
                f"S:{self.scale()} DL:{self.display_list or 'none'}")


class TranslateNode(GeoNode):
    kind = GeoNodeKind.TRANSLATE

    def __init__(self, translation: Vec3, display_list: Optional[str] = None):
        super().__init__(display_list)
        self._translation = translation

    def translation(self) -> Vec3:
        return self._translation


class RotateNode(GeoNode):
    kind = GeoNodeKind.ROTATE

    def __init__(self, rotation: Vec3, display_list: Optional[str] = None):
        super().__init__(display_list)
        self._rotation = rotation

    def rotation(self) -> Vec3:
        return self._rotation


class TranslateRotateNode(GeoNode):
    kind = GeoNodeKind.TRANSLATE_ROTATE

    def __init__(self, translation: Vec3, rotation: Vec3, display_list: Optional[str] = None):
        super().__init__(display_list)
        self._translation = translation
        self._rotation = rotation

    def translation(self) -> Vec3:
        return self._translation

    def rotation(self) -> Vec3:
        return self._rotation


class ScaleNode(GeoNode):
    kind = GeoNodeKind.SCALE

    def __init__(self, scale: float, display_list: Optional[str] = None):
        super().__init__(display_list)
        self._scale = scale

    def scale(self) -> float:
        return self._scale


class DisplayListNode(GeoNode):
    kind = GeoNodeKind.DISPLAY_LIST


# ---------- PATTERNS ----------

_L = r"\s*\(\s*\w+\s*,\s*"          # "(" + layer + ","
_C = r"\s*,\s*"
_DL = r"(\w+)"
_T3 = rf"({INT}){_C}({INT}){_C}({INT})"
_R3 = rf"({NUMBER}){_C}({NUMBER}){_C}({NUMBER})"
_END = r"\s*\)"

_TRANSLATE = r"GEO_TRANSLATE(?:_NODE)?"
_ROTATE = r"GEO_(?:ROTATE|ROTATION_NODE)"

TRANSLATE_PATTERN = re.compile(rf"{_TRANSLATE}{_L}{_T3}{_END}")
TRANSLATE_WITH_DL_PATTERN = re.compile(rf"{_TRANSLATE}_WITH_DL{_L}{_T3}{_C}{_DL}{_END}")
ROTATE_PATTERN = re.compile(rf"{_ROTATE}{_L}{_R3}{_END}")
ROTATE_WITH_DL_PATTERN = re.compile(rf"{_ROTATE}_WITH_DL{_L}{_R3}{_C}{_DL}{_END}")
SCALE_PATTERN = re.compile(rf"GEO_SCALE{_L}(0[xX][0-9a-fA-F]+|\d+){_END}")
SCALE_WITH_DL_PATTERN = re.compile(rf"GEO_SCALE_WITH_DL{_L}(0[xX][0-9a-fA-F]+|\d+){_C}{_DL}{_END}")
TRANSLATE_ROTATE_PATTERN = re.compile(rf"GEO_TRANSLATE_ROTATE{_L}{_T3}{_C}{_R3}{_END}")
TRANSLATE_ROTATE_WITH_DL_PATTERN = re.compile(
    rf"GEO_TRANSLATE_ROTATE_WITH_DL{_L}{_T3}{_C}{_R3}{_C}{_DL}{_END}")
DISPLAY_LIST_PATTERN = re.compile(rf"GEO_DISPLAY_LIST{_L}{_DL}{_END}")


def _vec_int(m, first: int) -> Vec3:
    return (float(int(m.group(first))), float(int(m.group(first + 1))), float(int(m.group(first + 2))))


def _vec_angle(m, first: int) -> Vec3:
    return (angle_to_degrees(m.group(first)),
            angle_to_degrees(m.group(first + 1)),
            angle_to_degrees(m.group(first + 2)))


class GeoLayout:
    """Flat list of layout commands parsed from one file."""

    def __init__(self, nodes: Optional[List[GeoNode]] = None, source_file: str = ""):
        self.nodes: List[GeoNode] = nodes if nodes is not None else []
        self.source_file = source_file

    def primary_display_list_name(self) -> Optional[str]:
        """First display list found, plain references before transform-bound ones."""
        for kind in (GeoNodeKind.DISPLAY_LIST, GeoNodeKind.TRANSLATE, GeoNodeKind.ROTATE,
                     GeoNodeKind.SCALE, GeoNodeKind.TRANSLATE_ROTATE):
            for node in self.nodes:
                if node.kind == kind and node.display_list:
                    return node.display_list
        return None

    def transformations(self) -> Dict[str, np.ndarray]:
        return extract_transformations(self.nodes)

    def __len__(self):
        return len(self.nodes)


def parse_geo_layout_source(text: str, source_file: str = "") -> GeoLayout:
    """
    Parse every recognized GEO_* command.

    Nodes are emitted kind by kind (translates, translates with DL, rotates,
    ...), each kind in textual order.
    """
    nodes: List[GeoNode] = []

    for m in TRANSLATE_PATTERN.finditer(text):
        nodes.append(TranslateNode(_vec_int(m, 1)))
    for m in TRANSLATE_WITH_DL_PATTERN.finditer(text):
        nodes.append(TranslateNode(_vec_int(m, 1), m.group(4)))
    for m in ROTATE_PATTERN.finditer(text):
        nodes.append(RotateNode(_vec_angle(m, 1)))
    for m in ROTATE_WITH_DL_PATTERN.finditer(text):
        nodes.append(RotateNode(_vec_angle(m, 1), m.group(4)))
    for m in SCALE_PATTERN.finditer(text):
        nodes.append(ScaleNode(scale_to_float(m.group(1))))
    for m in SCALE_WITH_DL_PATTERN.finditer(text):
        nodes.append(ScaleNode(scale_to_float(m.group(1)), m.group(2)))
    for m in TRANSLATE_ROTATE_PATTERN.finditer(text):
        nodes.append(TranslateRotateNode(_vec_int(m, 1), _vec_angle(m, 4)))
    for m in TRANSLATE_ROTATE_WITH_DL_PATTERN.finditer(text):
        nodes.append(TranslateRotateNode(_vec_int(m, 1), _vec_angle(m, 4), m.group(7)))
    for m in DISPLAY_LIST_PATTERN.finditer(text):
        nodes.append(DisplayListNode(m.group(1)))

    return GeoLayout(nodes, source_file)


def primary_display_list_name(text: str) -> Optional[str]:
    """First display list name in a layout source, by command priority."""
    for pattern, group in ((DISPLAY_LIST_PATTERN, 1),
                           (TRANSLATE_WITH_DL_PATTERN, 4),
                           (ROTATE_WITH_DL_PATTERN, 4),
                           (SCALE_WITH_DL_PATTERN, 2),
                           (TRANSLATE_ROTATE_WITH_DL_PATTERN, 7)):
        m = pattern.search(text)
        if m:
            return m.group(group)
    return None


def extract_transformations(nodes: List[GeoNode]) -> Dict[str, np.ndarray]:
    """Map each bound display list to its node's matrix. Later nodes win."""
    transforms: Dict[str, np.ndarray] = {}
    for node in nodes:
        if node.display_list is not None:
            transforms[node.display_list] = node.matrix()
            log.debug(f"[GeoLayout] Transform for {node.display_list}: T:{node.translation()}, "
                      f"R:{node.rotation()}, S:{node.scale()}")
    return transforms


def load_geo_layout(path: Union[str, Path]) -> Optional[GeoLayout]:
    """Load a layout file. Returns None if it is missing or malformed."""
    try:
        layout = parse_geo_layout_source(read_source(path), str(path))
    except SceneExtractionError as e:
        log.warn(f"[GeoLayout] {e}")
        return None
    except (OSError, UnicodeError) as e:
        log.error(e, f"[GeoLayout] Failed to read {path}")
        return None

    log.info(f"[GeoLayout] Parsed {len(layout)} nodes from {path}")
    return layout


def find_geo_layout_containing(
    root: Union[str, Path],
    layout_name: str,
    file_name: str = "geo.inc.c",
) -> Optional[Path]:
    """First layout file under ``root`` that mentions ``layout_name``."""
    return find_file_containing(root, file_name, layout_name)
