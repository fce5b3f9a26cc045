# decompscene/loaders/c_source.py
"""Helpers shared by the C-source loaders: file reading, brace bodies, regex pieces."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, List, Optional, Pattern, Tuple, Union

from decompscene.errors import NotFoundError

# Optional argument annotation: MACRO(/*pos*/ 1, 2, 3)
ANNOTATION = r"(?:/\*.*?\*/\s*)?"
# Signed decimal
INT = r"-?\d+"
# Signed decimal or hex
NUMBER = r"-?(?:0[xX][0-9a-fA-F]+|\d+)"
IDENT = r"[A-Za-z_]\w*"


def read_source(path: Union[str, Path]) -> str:
    """Read a whole source file. The file is closed before parsing starts."""
    path = Path(path)
    if not path.is_file():
        raise NotFoundError(f"Source file not found: {path}")
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


def extract_braced_body(text: str, start: int) -> Tuple[str, int]:
    """
    Return the text between an opening brace and its matching close.

    Args:
        text: Source text
        start: Index just after the opening '{'

    Returns:
        (body, end) where end is the index of the matching '}' or len(text)
        when the body is not closed.
    """
    depth = 1
    i = start
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start:i], i
        i += 1
    return text[start:], n


def iter_braced_blocks(text: str, header: Pattern) -> Iterator[Tuple[str, str]]:
    """Yield (name, body) for each ``header`` match ending in '{'; group 1 is the name."""
    for match in header.finditer(text):
        body, _ = extract_braced_body(text, match.end())
        yield match.group(1), body


def ordered_matches(text: str, *patterns: Tuple[str, Pattern]) -> List[Tuple[int, str, "object"]]:
    """All matches of the tagged patterns, sorted by character offset."""
    found = []
    for tag, pattern in patterns:
        for m in pattern.finditer(text):
            found.append((m.start(), tag, m))
    found.sort(key=lambda item: item[0])
    return found


def find_files(root: Union[str, Path], file_name: str) -> List[Path]:
    """All files called ``file_name`` under ``root`` (recursive, sorted)."""
    root = Path(root)
    if not root.is_dir():
        return []
    return sorted(p for p in root.rglob(file_name) if p.is_file())


def find_file_containing(root: Union[str, Path], file_name: str, needle: str) -> Optional[Path]:
    """First file called ``file_name`` under ``root`` whose text contains ``needle``."""
    for path in find_files(root, file_name):
        try:
            if needle in read_source(path):
                return path
        except (NotFoundError, OSError):
            continue
    return None


def directory_sort_key(path: Path):
    """Numeric directory names first, in numeric order, then the rest by name."""
    name = path.name
    return (0, int(name), name) if name.isdecimal() else (1, 0, name)
