# fs_sandbox/services/search.py
from __future__ import annotations

import fnmatch
import os
from pathlib import Path
from typing import Callable, Iterator

NameMatcher = Callable[[str], bool]


def make_matcher(pattern: str, mode: str = "substring") -> NameMatcher:
    if mode == "glob":
        return lambda name: fnmatch.fnmatchcase(name, pattern)
    return lambda name: pattern in name


def iter_matches(root: Path, matches: NameMatcher, recursive: bool = True) -> Iterator[Path]:
    """
    Depth-first pre-order walk below an already-authorized ``root``.

    Entries are taken in the order the directory read yields them: a matching
    file is emitted when encountered, a subdirectory is descended into when
    encountered. Symlinks are never followed, so the walk stays inside root.
    """
    with os.scandir(root) as it:
        entries = list(it)

    for entry in entries:
        if entry.is_file(follow_symlinks=False):
            if matches(entry.name):
                yield Path(entry.path)
        elif recursive and entry.is_dir(follow_symlinks=False):
            yield from iter_matches(Path(entry.path), matches, recursive)
