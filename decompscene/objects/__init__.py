"""Placement records."""

from decompscene.objects.types import PlacedObject, MacroPreset, SpecialObjectPlacement

__all__ = [
    "PlacedObject",
    "MacroPreset",
    "SpecialObjectPlacement",
]
