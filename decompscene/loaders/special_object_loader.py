# decompscene/loaders/special_object_loader.py
"""Special objects: preset table and the SPECIAL_OBJECT macros of collision sources."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Union

from decompscene import log
from decompscene.errors import AmbiguousResolutionError, SceneExtractionError
from decompscene.loaders.c_source import ANNOTATION as A, INT, NUMBER, ordered_matches, read_source
from decompscene.objects.types import PlacedObject, SpecialObjectPlacement
from decompscene.units import angle_to_degrees, parse_int_literal, try_parse_uint_literal

SPECIAL_OBJECT_BEHAVIOR = "(Special Object)"

# { special_yellow_coin, SPTYPE_NO_YROT_OR_PARAMS, 0x00, MODEL_YELLOW_COIN, ...
PRESET_PATTERN = re.compile(r"\{\s*(\w+)\s*,\s*SPTYPE_\w+\s*,\s*(?:0[xX][a-fA-F0-9]+|\d+)\s*,\s*(\w+)")

_HEAD = rf"\s*\(\s*{A}([^,]+?)\s*,\s*{A}({INT})\s*,\s*({INT})\s*,\s*({INT})"

SPECIAL_OBJECT_PATTERN = re.compile(rf"\bSPECIAL_OBJECT{_HEAD}\s*\)")
SPECIAL_OBJECT_WITH_YAW_PATTERN = re.compile(rf"\bSPECIAL_OBJECT_WITH_YAW{_HEAD}\s*,\s*{A}({NUMBER})\s*\)")
SPECIAL_OBJECT_WITH_YAW_AND_PARAM_PATTERN = re.compile(
    rf"\bSPECIAL_OBJECT_WITH_YAW_AND_PARAM{_HEAD}\s*,\s*{A}({NUMBER})\s*,\s*{A}([^)]+?)\s*\)")


def parse_special_presets(text: str) -> Dict[str, str]:
    """Preset name -> model id. The first definition of a name wins."""
    mapping: Dict[str, str] = {}
    for m in PRESET_PATTERN.finditer(text):
        mapping.setdefault(m.group(1), m.group(2))
    return mapping


def scan_special_objects(text: str) -> List[SpecialObjectPlacement]:
    """All special-object macros of a collision source, in textual order."""
    placements: List[SpecialObjectPlacement] = []
    for _, form, m in ordered_matches(
            text,
            ("SPECIAL_OBJECT", SPECIAL_OBJECT_PATTERN),
            ("SPECIAL_OBJECT_WITH_YAW", SPECIAL_OBJECT_WITH_YAW_PATTERN),
            ("SPECIAL_OBJECT_WITH_YAW_AND_PARAM", SPECIAL_OBJECT_WITH_YAW_AND_PARAM_PATTERN)):
        placement = SpecialObjectPlacement(
            preset=m.group(1).strip(),
            x=int(m.group(2)), y=int(m.group(3)), z=int(m.group(4)),
            form=form,
        )
        if form != "SPECIAL_OBJECT":
            placement.raw_yaw = parse_int_literal(m.group(5))
        if form == "SPECIAL_OBJECT_WITH_YAW_AND_PARAM":
            placement.param_literal = m.group(6).strip()
        placements.append(placement)
    return placements


def lookup_model(presets: Dict[str, str], preset: str) -> str:
    model = presets.get(preset)
    if model is None:
        raise AmbiguousResolutionError(f"Unknown special preset {preset}")
    return model


def special_objects_to_placed(
    placements: List[SpecialObjectPlacement],
    presets: Dict[str, str],
    behavior: str = SPECIAL_OBJECT_BEHAVIOR,
) -> List[PlacedObject]:
    """
    Placed objects for the object list.

    Yaw is read as a binary angle (65536 per turn) and truncated to whole
    degrees. Placements with unknown presets are dropped.
    """
    objects: List[PlacedObject] = []
    for placement in placements:
        try:
            model = lookup_model(presets, placement.preset)
        except AmbiguousResolutionError as e:
            log.debug(f"[SpecialObjects] {e}")
            continue

        ry = 0
        if placement.raw_yaw is not None:
            ry = int(angle_to_degrees(placement.raw_yaw))
        params = 0
        if placement.param_literal is not None:
            params = try_parse_uint_literal(placement.param_literal)

        objects.append(PlacedObject(
            model_name=model,
            behavior=behavior,
            x=placement.x, y=placement.y, z=placement.z,
            ry=ry,
            params=params,
            source="special",
        ))
    return objects


def parse_special_objects(
    collision_text: str,
    presets: Dict[str, str],
    behavior: str = SPECIAL_OBJECT_BEHAVIOR,
) -> List[PlacedObject]:
    return special_objects_to_placed(scan_special_objects(collision_text), presets, behavior)


def load_special_presets(path: Union[str, Path]) -> Dict[str, str]:
    try:
        mapping = parse_special_presets(read_source(path))
    except SceneExtractionError as e:
        log.warn(f"[SpecialObjects] {e}")
        return {}
    except (OSError, UnicodeError) as e:
        log.error(e, f"[SpecialObjects] Failed to read presets {path}")
        return {}

    log.info(f"[SpecialObjects] Parsed {len(mapping)} special object presets from {Path(path).name}")
    return mapping
