"""
Command-line entry point for scene extraction.

Usage:
    python -m decompscene path/to/levels/bob --objects
    python -m decompscene path/to/levels/bob --area "Area 1" -v
"""

import argparse
import logging
import sys
from pathlib import Path

from decompscene import log
from decompscene.scene import AreaScene, LevelMetadata, SceneComposer
from decompscene.settings import SceneSettings


def print_area(scene: AreaScene, show_objects: bool) -> None:
    print(f"{scene.area_name}:")
    if scene.collision_mesh is not None:
        mesh = scene.collision_mesh
        print(f"  ✓ Collision: {mesh.vertex_count} vertices, {mesh.triangle_count} triangles")
    else:
        print("  ✗ Collision: not available")

    if scene.visual_mesh is not None:
        mesh = scene.visual_mesh
        print(f"  ✓ Visual: {mesh.vertex_count} vertices, {mesh.triangle_count} triangles, "
              f"{len(mesh.sub_meshes)} sub-models")
    else:
        print("  ✗ Visual: not available")

    print(f"  Objects: {len(scene.objects)}")
    if show_objects:
        for obj in scene.objects:
            print(f"    [{obj.source}] {obj.describe()}")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Extract collision, visual and object data from a decomp level directory"
    )
    parser.add_argument(
        "level",
        type=str,
        help="Path to level directory (levels/<name>)",
    )
    parser.add_argument(
        "--area", "-a",
        type=str,
        default=None,
        help='Area to extract, e.g. "Area 1" (default: all areas)',
    )
    parser.add_argument(
        "--project-root", "-p",
        type=str,
        default=None,
        help="Decomp project root (default: two levels above the level directory)",
    )
    parser.add_argument(
        "--objects", "-o",
        action="store_true",
        help="List placed objects",
    )
    parser.add_argument(
        "--settings", "-s",
        type=str,
        default=None,
        help="Settings file (default: decompscene.json in the project root)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(format="%(levelname)s %(message)s")
    log.set_level("DEBUG" if args.verbose else "WARNING")

    level_path = Path(args.level)
    if not level_path.is_dir():
        print(f"Error: Level directory does not exist: {level_path}")
        sys.exit(1)

    project_root = Path(args.project_root) if args.project_root else level_path.parent.parent
    if args.settings:
        settings = SceneSettings.load(args.settings)
    else:
        settings = SceneSettings.for_project(project_root)

    composer = SceneComposer(settings, project_root)
    level = LevelMetadata.for_directory(level_path)

    if args.area:
        scenes = {args.area: composer.compose_area(level, args.area)}
    else:
        scenes = composer.compose_level(level)
        if not scenes:
            print(f"Error: No areas found in {level_path}")
            sys.exit(1)

    print(f"Level: {level.display_name}")
    for scene in scenes.values():
        print_area(scene, args.objects)


if __name__ == "__main__":
    main()
