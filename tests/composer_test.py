"""
Scene composer tests on small level trees built in tmp_path.
"""

from pathlib import Path

import numpy as np
import pytest

from decompscene.geombase import translation_matrix
from decompscene.scene import LevelMetadata, SceneComposer
from decompscene.scene.composer import resolve_transform, sub_model_ordinal
from decompscene.mesh.types import VisualMesh

COLLISION = """
const Collision test_seg7_collision_level[] = {
    COL_INIT(),
    COL_VERTEX_INIT(0x3),
    COL_VERTEX(0, 0, 0),
    COL_VERTEX(100, 0, 0),
    COL_VERTEX(0, 0, 100),
    COL_TRI_INIT(SURFACE_DEFAULT, 1),
    COL_TRI(0, 1, 2),
    COL_TRI_STOP(),
    COL_END(),
};
"""

MODEL = """
static const Vtx test_seg7_vertex_07000000[] = {
    {{{     0,      0,      0}, 0, {     0,      0}, {0x00, 0x7f, 0x00, 0xff}}},
    {{{    10,      0,      0}, 0, {  1024,      0}, {0x00, 0x7f, 0x00, 0xff}}},
    {{{     0,      0,     10}, 0, {     0,   1024}, {0x00, 0x7f, 0x00, 0xff}}},
};

const Gfx test_seg7_dl_07000100[] = {
    gsSPVertex(test_seg7_vertex_07000000, 3, 0),
    gsSP1Triangle( 0,  1,  2, 0x0),
    gsSPEndDisplayList(),
};
"""

SCRIPT = """
const LevelScript level_test_entry[] = {
    AREA(/*index*/ 1, test_geo_000100),
        OBJECT(/*model*/ MODEL_STAR, /*pos*/ 1, 2, 3, /*angle*/ 0, 0, 0, /*behParam*/ 0x01000000, /*beh*/ bhvStar),
    END_AREA(),
};
"""


def make_level(root: Path, script: str = SCRIPT, collision: str = COLLISION, models=None) -> LevelMetadata:
    level_path = root / "levels" / "test"
    area = level_path / "areas" / "1"
    area.mkdir(parents=True)
    (level_path / "script.c").write_text(script)
    (area / "collision.inc.c").write_text(collision)
    for sub, text in (models or {"1": MODEL}).items():
        (area / sub).mkdir()
        (area / sub / "model.inc.c").write_text(text)
    return LevelMetadata.from_dict({"short-name": "test", "full-name": "Test Level", "area-count": 1}, level_path)


def positions(mesh: VisualMesh):
    return [(v.x, v.y, v.z) for v in mesh.vertices]


def test_minimal_level_end_to_end(tmp_path):
    level = make_level(tmp_path)
    scene = SceneComposer().compose_area(level, "Area 1")

    assert scene.collision_mesh.vertex_count == 3
    assert scene.collision_mesh.triangle_count == 1

    visual = scene.visual_mesh
    assert visual.vertex_count == 3
    assert visual.triangle_count == 1
    assert len(visual.sub_meshes) == 1
    assert visual.sub_meshes[0].sub_model_number == 1
    assert visual.main_display_list_name == "test_seg7_dl_07000100"

    assert [o.source for o in scene.objects] == ["script"]
    assert scene.objects[0].params == 0x01000000


def test_compose_level(tmp_path):
    level = make_level(tmp_path)
    scenes = SceneComposer().compose_level(level)
    assert list(scenes) == ["Area 1"]
    assert "1 collision triangles" in str(scenes["Area 1"])


def test_missing_area_is_empty(tmp_path):
    level = make_level(tmp_path)
    scene = SceneComposer().compose_area(level, "Area 7")
    assert scene.collision_mesh is None
    assert scene.visual_mesh is None
    assert len(scene.objects) == 1


def test_broken_collision_does_not_stop_visual(tmp_path):
    level = make_level(tmp_path, collision="COL_VERTEX(0, 0, 0), COL_TRI(0, 1, 2),")
    scene = SceneComposer().compose_area(level, "Area 1")
    assert scene.collision_mesh is None
    assert scene.visual_mesh is not None


def test_sub_models_are_merged_with_offsets(tmp_path):
    level = make_level(tmp_path, models={"1": MODEL, "2": MODEL})
    scene = SceneComposer().compose_area(level, "Area 1")
    visual = scene.visual_mesh

    assert visual.vertex_count == 6
    assert [(t.v1, t.v2, t.v3) for t in visual.triangles] == [(0, 1, 2), (3, 4, 5)]
    assert [s.sub_model_number for s in visual.sub_meshes] == [1, 2]
    # sub-meshes keep local indices
    assert [(t.v1, t.v2, t.v3) for t in visual.sub_meshes[1].triangles] == [(0, 1, 2)]


def test_hidden_sub_mesh(tmp_path):
    level = make_level(tmp_path, models={"1": MODEL, "2": MODEL})
    visual = SceneComposer().compose_area(level, "Area 1").visual_mesh
    visual.sub_meshes[0].is_visible = False
    assert [(t.v1, t.v2, t.v3) for t in visual.visible_triangles()] == [(3, 4, 5)]


class TestTransformResolution:

    def test_display_list_transform(self, tmp_path):
        level = make_level(tmp_path)
        files = SceneComposer().files_for(level).model_files()["Area 1"]
        transforms = {"test_seg7_dl_07000100": translation_matrix(0, 50, 0)}
        visual = SceneComposer().compose_visual_mesh(files, "Area 1", "test", transforms)
        assert positions(visual) == [(0, 50, 0), (10, 50, 0), (0, 50, 10)]

    def test_sub_model_fallback(self, tmp_path):
        level = make_level(tmp_path)
        files = SceneComposer().files_for(level).model_files()["Area 1"]
        transforms = {"SubModel_1": translation_matrix(100, 0, 0)}
        visual = SceneComposer().compose_visual_mesh(files, "Area 1", "test", transforms)
        assert positions(visual) == [(100, 0, 0), (110, 0, 0), (100, 0, 10)]

    def test_identity_when_unresolved(self, tmp_path):
        level = make_level(tmp_path)
        files = SceneComposer().files_for(level).model_files()["Area 1"]
        transforms = {"SubModel_2": translation_matrix(100, 0, 0)}
        visual = SceneComposer().compose_visual_mesh(files, "Area 1", "test", transforms)
        assert positions(visual) == [(0, 0, 0), (10, 0, 0), (0, 0, 10)]

    def test_positions_truncate_toward_zero(self, tmp_path):
        level = make_level(tmp_path)
        files = SceneComposer().files_for(level).model_files()["Area 1"]
        transforms = {"SubModel_1": translation_matrix(-0.5, 0.7, -1.5)}
        visual = SceneComposer().compose_visual_mesh(files, "Area 1", "test", transforms)
        assert positions(visual) == [(0, 0, -1), (9, 0, -1), (0, 0, 8)]

    def test_resolve_prefers_display_list_over_ordinal(self):
        mesh = VisualMesh(display_list_names=["dl_a", "dl_b"])
        transforms = {"dl_b": translation_matrix(1, 0, 0), "SubModel_1": translation_matrix(2, 0, 0)}
        assert np.allclose(resolve_transform(mesh, 1, transforms)[:3, 3], (1, 0, 0))
        assert np.allclose(resolve_transform(VisualMesh(), 1, transforms)[:3, 3], (2, 0, 0))
        assert np.allclose(resolve_transform(VisualMesh(), 3, transforms), np.eye(4))

    def test_area_geo_layout_applies(self, tmp_path):
        level = make_level(tmp_path)
        (tmp_path / "levels" / "test" / "areas" / "1" / "geo.inc.c").write_text(
            "GEO_TRANSLATE_WITH_DL(LAYER_OPAQUE, 0, -5, 0, test_seg7_dl_07000100),")
        visual = SceneComposer().compose_area(level, "Area 1").visual_mesh
        assert positions(visual)[1] == (10, -5, 0)


@pytest.mark.parametrize("path,fallback,expected", [
    ("levels/bob/areas/1/3/model.inc.c", 9, 3),
    ("levels/bob/areas/1/tower/model.inc.c", 9, 1),
    ("model.inc.c", 4, 4),
])
def test_sub_model_ordinal(path, fallback, expected):
    assert sub_model_ordinal(path, fallback) == expected


def test_no_parsable_model_gives_none(tmp_path):
    assert SceneComposer().compose_visual_mesh([tmp_path / "absent" / "model.inc.c"]) is None


def test_macro_and_special_objects(tmp_path):
    script = SCRIPT.replace("END_AREA()", "MACRO_OBJECTS(/*objList*/ test_seg7_macro_objs),\n    END_AREA()")
    collision = COLLISION.replace(
        "COL_END(),",
        "COL_SPECIAL_INIT(1),\n"
        "    SPECIAL_OBJECT_WITH_YAW(/*preset*/ special_tree, /*pos*/ 10, 0, 10, /*yaw*/ 16384),\n"
        "    COL_END(),")
    level = make_level(tmp_path, script=script, collision=collision)

    include = tmp_path / "include"
    include.mkdir()
    (include / "macro_presets.inc.c").write_text(
        "/* macro_yellow_coin */ { bhvYellowCoin, MODEL_YELLOW_COIN, 0x2 },")
    (include / "special_presets.inc.c").write_text(
        "{ special_tree, SPTYPE_YROT_NO_PARAMS, 0x00, MODEL_TREE, bhvTree },")
    (tmp_path / "levels" / "test" / "areas" / "1" / "macro.inc.c").write_text(
        "const MacroObject test_seg7_macro_objs[] = {\n"
        "    MACRO_OBJECT_WITH_BHV_PARAM(/*preset*/ macro_yellow_coin, /*yaw*/ 0, /*pos*/ 5, 6, 7, /*bhvParam*/ 0x1),\n"
        "    MACRO_OBJECT_END(),\n"
        "};")

    objects = SceneComposer().compose_area(level, "Area 1").objects
    assert [o.source for o in objects] == ["script", "macro", "special"]
    assert objects[1].params == 0x3
    assert objects[2].model_name == "MODEL_TREE"
    assert objects[2].ry == 90
    assert objects[2].behavior == "(Special Object)"


def test_special_object_places_geometry(tmp_path):
    gate_model = MODEL.replace("test_seg7", "gate")
    script = SCRIPT.replace("AREA(", "LOAD_MODEL_FROM_GEO(MODEL_GATE, gate_geo),\n    AREA(")
    collision = COLLISION.replace(
        "COL_END(),",
        "SPECIAL_OBJECT_WITH_YAW(/*preset*/ special_gate, /*pos*/ 100, 0, 0, /*yaw*/ 64),\n    COL_END(),")
    level = make_level(tmp_path, script=script, collision=collision, models={"1": MODEL, "2": gate_model})

    (tmp_path / "levels" / "test" / "areas" / "1" / "2" / "geo.inc.c").write_text(
        "const GeoLayout gate_geo[] = {\n"
        "    GEO_DISPLAY_LIST(LAYER_OPAQUE, gate_dl_07000100),\n"
        "    GEO_END(),\n"
        "};")
    (tmp_path / "include").mkdir()
    (tmp_path / "include" / "special_presets.inc.c").write_text(
        "{ special_gate, SPTYPE_YROT_NO_PARAMS, 0x00, MODEL_GATE, bhvGate },")

    visual = SceneComposer().compose_area(level, "Area 1").visual_mesh
    # byte yaw 64 is a quarter turn: (10, 0, 0) -> (0, 0, -10), then moved to x=100
    assert positions(visual)[3:] == [(100, 0, 0), (100, 0, -10), (110, 0, 0)]
    assert positions(visual)[:3] == [(0, 0, 0), (10, 0, 0), (0, 0, 10)]


def test_project_root_override(tmp_path):
    level = make_level(tmp_path / "tree")
    other = tmp_path / "elsewhere"
    (other / "include").mkdir(parents=True)
    (other / "include" / "special_presets.inc.c").write_text("")
    composer = SceneComposer(project_root=other)
    assert composer.files_for(level).special_presets_path == other / "include" / "special_presets.inc.c"
