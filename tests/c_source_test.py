import re
from pathlib import Path

import pytest

from decompscene.errors import NotFoundError
from decompscene.loaders.c_source import (
    directory_sort_key,
    extract_braced_body,
    find_file_containing,
    find_files,
    iter_braced_blocks,
    ordered_matches,
    read_source,
)


def test_braced_body_handles_nesting():
    text = "arr[] = { {1, 2}, {3, {4}} }; tail"
    start = text.index("{") + 1
    body, end = extract_braced_body(text, start)
    assert body == " {1, 2}, {3, {4}} "
    assert text[end] == "}"


def test_unclosed_body_runs_to_end():
    text = "x = { {1, 2"
    body, end = extract_braced_body(text, text.index("{") + 1)
    assert body == " {1, 2"
    assert end == len(text)


def test_iter_braced_blocks():
    text = "const Gfx a[] = { one(), };\nconst Gfx b[] = { two(), };"
    blocks = list(iter_braced_blocks(text, re.compile(r"const\s+Gfx\s+(\w+)\[\]\s*=\s*\{")))
    assert [name for name, _ in blocks] == ["a", "b"]
    assert "two()" in blocks[1][1]


def test_ordered_matches_sorts_by_offset():
    text = "B A B A"
    found = ordered_matches(text, ("a", re.compile("A")), ("b", re.compile("B")))
    assert [tag for _, tag, _ in found] == ["b", "a", "b", "a"]


def test_read_source_missing(tmp_path):
    with pytest.raises(NotFoundError):
        read_source(tmp_path / "absent.inc.c")


def test_find_files_and_containing(tmp_path):
    (tmp_path / "b").mkdir()
    (tmp_path / "a").mkdir()
    (tmp_path / "b" / "macro.inc.c").write_text("const MacroObject list_b[] = {};")
    (tmp_path / "a" / "macro.inc.c").write_text("const MacroObject list_a[] = {};")

    files = find_files(tmp_path, "macro.inc.c")
    assert files == [tmp_path / "a" / "macro.inc.c", tmp_path / "b" / "macro.inc.c"]
    assert find_file_containing(tmp_path, "macro.inc.c", "list_b") == tmp_path / "b" / "macro.inc.c"
    assert find_file_containing(tmp_path, "macro.inc.c", "list_c") is None


def test_directory_sort_key_is_numeric():
    names = ["10", "2", "1", "extra"]
    ordered = sorted((Path(n) for n in names), key=directory_sort_key)
    assert [p.name for p in ordered] == ["1", "2", "10", "extra"]
