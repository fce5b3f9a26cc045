# decompscene/loaders/script_loader.py
"""Level script loader: static OBJECT placements, start position, model table."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Optional, Union

from decompscene import log
from decompscene.errors import SceneExtractionError
from decompscene.loaders.c_source import ANNOTATION as A, INT, read_source
from decompscene.objects.types import PlacedObject
from decompscene.units import try_parse_uint_literal

_SEP = r"\s*,\s*"

OBJECT_PATTERN = re.compile(
    rf"\bOBJECT(_WITH_ACTS)?\s*\(\s*{A}([^,]+?){_SEP}"
    rf"{A}({INT}){_SEP}({INT}){_SEP}({INT}){_SEP}"
    rf"{A}({INT}){_SEP}({INT}){_SEP}({INT}){_SEP}"
    rf"{A}([^,]+?){_SEP}{A}([^,)]+?)\s*(?:,\s*{A}([^)]+?)\s*)?\)")

MARIO_POS_PATTERN = re.compile(
    rf"\bMARIO_POS\s*\(\s*{A}([^,]+?){_SEP}{A}({INT}){_SEP}{A}({INT}){_SEP}({INT}){_SEP}({INT})\s*\)")

MACRO_OBJECTS_PATTERN = re.compile(rf"\bMACRO_OBJECTS\s*\(\s*{A}([^)]+?)\s*\)")

LOAD_MODEL_PATTERN = re.compile(rf"\bLOAD_MODEL_FROM_GEO\s*\(\s*{A}([^,]+?){_SEP}{A}([^)]+?)\s*\)")

_COMMENT = re.compile(r"/\*.*?\*/")


def _clean(value: str) -> str:
    return _COMMENT.sub("", value).strip()


def parse_script_objects(
    text: str,
    player_model: str = "MODEL_MARIO",
    player_behavior: str = "bhvMario",
) -> List[PlacedObject]:
    """
    Static placements of a level script.

    OBJECT and OBJECT_WITH_ACTS give full records; each MARIO_POS adds a
    synthetic player object. Non-numeric behavior parameters become 0.
    """
    objects: List[PlacedObject] = []

    for m in OBJECT_PATTERN.finditer(text):
        acts = m.group(11)
        objects.append(PlacedObject(
            model_name=_clean(m.group(2)),
            x=int(m.group(3)), y=int(m.group(4)), z=int(m.group(5)),
            rx=int(m.group(6)), ry=int(m.group(7)), rz=int(m.group(8)),
            params=try_parse_uint_literal(_clean(m.group(9))),
            behavior=_clean(m.group(10)),
            acts=_clean(acts) if acts is not None else None,
            source="script",
        ))

    for m in MARIO_POS_PATTERN.finditer(text):
        objects.append(PlacedObject(
            model_name=player_model,
            x=int(m.group(3)), y=int(m.group(4)), z=int(m.group(5)),
            ry=int(m.group(2)),
            behavior=player_behavior,
            source="player",
        ))

    return objects


def parse_macro_list_name(text: str) -> Optional[str]:
    """Name of the macro-object list the script refers to, if any."""
    m = MACRO_OBJECTS_PATTERN.search(text)
    return _clean(m.group(1)) if m else None


def parse_load_models(text: str) -> Dict[str, str]:
    """Model id -> geometry layout name from LOAD_MODEL_FROM_GEO. Later entries win."""
    return {_clean(m.group(1)): _clean(m.group(2)) for m in LOAD_MODEL_PATTERN.finditer(text)}


def _read_script(path: Union[str, Path]) -> Optional[str]:
    try:
        return read_source(path)
    except SceneExtractionError as e:
        log.warn(f"[ScriptLoader] {e}")
    except (OSError, UnicodeError) as e:
        log.error(e, f"[ScriptLoader] Failed to read {path}")
    return None


def load_script_objects(
    path: Union[str, Path],
    player_model: str = "MODEL_MARIO",
    player_behavior: str = "bhvMario",
) -> List[PlacedObject]:
    text = _read_script(path)
    if text is None:
        return []
    objects = parse_script_objects(text, player_model, player_behavior)
    log.info(f"[ScriptLoader] Found {len(objects)} objects in {Path(path).name}")
    return objects


def load_macro_list_name(path: Union[str, Path]) -> Optional[str]:
    text = _read_script(path)
    return parse_macro_list_name(text) if text is not None else None


def load_model_table(path: Union[str, Path]) -> Dict[str, str]:
    text = _read_script(path)
    return parse_load_models(text) if text is not None else {}
