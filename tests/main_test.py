import pytest

from decompscene.__main__ import main

COLLISION = "COL_VERTEX(0, 0, 0), COL_VERTEX(1, 0, 0), COL_VERTEX(0, 0, 1), COL_TRI_INIT(SURFACE_DEFAULT, 1), COL_TRI(0, 1, 2),"
SCRIPT = "OBJECT(/*model*/ MODEL_STAR, /*pos*/ 1, 2, 3, /*angle*/ 0, 0, 0, /*behParam*/ 0x0, /*beh*/ bhvStar),"


@pytest.fixture
def level_dir(tmp_path):
    level = tmp_path / "levels" / "test"
    (level / "areas" / "1").mkdir(parents=True)
    (level / "areas" / "1" / "collision.inc.c").write_text(COLLISION)
    (level / "script.c").write_text(SCRIPT)
    return level


def test_prints_area_stats(level_dir, capsys):
    main([str(level_dir)])
    out = capsys.readouterr().out
    assert "Area 1:" in out
    assert "✓ Collision: 3 vertices, 1 triangles" in out
    assert "✗ Visual: not available" in out
    assert "Objects: 1" in out


def test_lists_objects(level_dir, capsys):
    main([str(level_dir), "--objects", "--area", "Area 1"])
    out = capsys.readouterr().out
    assert "[script] MODEL_STAR | Pos: (1, 2, 3)" in out


def test_missing_level_exits(tmp_path):
    with pytest.raises(SystemExit):
        main([str(tmp_path / "nowhere")])
