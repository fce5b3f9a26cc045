# decompscene/loaders/macro_object_loader.py
"""Macro-object loader: preset table + MACRO_OBJECT instance lists."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Union

from decompscene import log
from decompscene.errors import AmbiguousResolutionError, SceneExtractionError
from decompscene.loaders.c_source import ANNOTATION as A, INT, ordered_matches, read_source
from decompscene.objects.types import MacroPreset, PlacedObject
from decompscene.units import try_parse_uint_literal

# /* macro_name */ { behavior, model, param }
PRESET_PATTERN = re.compile(r"/\*\s*(\w+)\s*\*/\s*\{\s*(\w+)\s*,\s*(\w+)\s*,\s*([^}]+?)\s*\}")

_POS = rf"{A}({INT})\s*,\s*({INT})\s*,\s*({INT})"

MACRO_OBJECT_PATTERN = re.compile(
    rf"\bMACRO_OBJECT\s*\(\s*{A}([^,]+?)\s*,\s*{A}({INT})\s*,\s*{_POS}\s*\)")
MACRO_OBJECT_WITH_PARAM_PATTERN = re.compile(
    rf"\bMACRO_OBJECT_WITH_BHV_PARAM\s*\(\s*{A}([^,]+?)\s*,\s*{A}({INT})\s*,\s*{_POS}\s*,\s*{A}([^)]+?)\s*\)")


def evaluate_preset_param(text: str) -> int:
    """
    Default parameter of a preset.

    Plain hex/decimal literals are used as written. OR-expressions of named
    constants are not evaluated and give 0; so do other symbols.
    """
    text = text.strip()
    if "|" in text:
        return 0
    return try_parse_uint_literal(text)


def parse_macro_presets(text: str) -> Dict[str, MacroPreset]:
    presets: Dict[str, MacroPreset] = {}
    for m in PRESET_PATTERN.finditer(text):
        presets[m.group(1)] = MacroPreset(
            behavior=m.group(2),
            model=m.group(3),
            param=evaluate_preset_param(m.group(4)),
        )
    return presets


def lookup_preset(presets: Dict[str, MacroPreset], name: str) -> MacroPreset:
    preset = presets.get(name)
    if preset is None:
        raise AmbiguousResolutionError(f"Unknown macro preset {name}")
    return preset


def parse_macro_objects(text: str, presets: Dict[str, MacroPreset]) -> List[PlacedObject]:
    """
    Expand MACRO_OBJECT entries through the preset table, in textual order.

    Yaw is already in degrees here. An instance parameter is OR-ed with the
    preset default. Entries with unknown presets are dropped.
    """
    objects: List[PlacedObject] = []
    dropped = 0

    for _, kind, m in ordered_matches(text,
                                      ("plain", MACRO_OBJECT_PATTERN),
                                      ("param", MACRO_OBJECT_WITH_PARAM_PATTERN)):
        try:
            preset = lookup_preset(presets, m.group(1).strip())
        except AmbiguousResolutionError as e:
            log.debug(f"[MacroObjects] {e}")
            dropped += 1
            continue

        params = preset.param & 0xFFFFFFFF
        if kind == "param":
            params |= try_parse_uint_literal(m.group(6))

        objects.append(PlacedObject(
            model_name=preset.model,
            behavior=preset.behavior,
            x=int(m.group(3)), y=int(m.group(4)), z=int(m.group(5)),
            ry=int(m.group(2)),
            params=params,
            source="macro",
        ))

    if dropped:
        log.debug(f"[MacroObjects] Dropped {dropped} entries with unknown presets")
    return objects


def load_macro_presets(path: Union[str, Path]) -> Dict[str, MacroPreset]:
    try:
        presets = parse_macro_presets(read_source(path))
    except SceneExtractionError as e:
        log.warn(f"[MacroObjects] {e}")
        return {}
    except (OSError, UnicodeError) as e:
        log.error(e, f"[MacroObjects] Failed to read presets {path}")
        return {}

    log.info(f"[MacroObjects] Parsed {len(presets)} macro presets from {Path(path).name}")
    return presets


def load_macro_objects(path: Union[str, Path], presets: Dict[str, MacroPreset]) -> List[PlacedObject]:
    try:
        return parse_macro_objects(read_source(path), presets)
    except SceneExtractionError as e:
        log.warn(f"[MacroObjects] {e}")
    except (OSError, UnicodeError) as e:
        log.error(e, f"[MacroObjects] Failed to read {path}")
    return []
