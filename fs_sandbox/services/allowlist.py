# fs_sandbox/services/allowlist.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Tuple, Union

from fs_sandbox.errors import AccessDenied, InvalidArguments

PathLike = Union[str, Path]


def canonicalize(raw: PathLike, resolve_symlinks: bool = True) -> Path:
    """
    Absolute, normalized form of ``raw``. The path does not need to exist.
    Relative paths are anchored at the process working directory.
    """
    if raw is None or str(raw) == "":
        raise InvalidArguments("Path must be a non-empty string")
    try:
        p = Path(raw)
        if resolve_symlinks:
            return p.resolve(strict=False)
        return Path(os.path.abspath(p))
    except (OSError, ValueError, RuntimeError) as exc:
        raise InvalidArguments(f"Invalid path '{raw}': {exc}") from exc


@dataclass(frozen=True)
class AllowList:
    """
    Directories a process instance may ever touch.
    Built once at startup and shared read-only afterwards.
    """
    _roots: Tuple[Path, ...]
    _names: Tuple[str, ...]

    @classmethod
    def from_raw(cls, raw_dirs: Iterable[PathLike], resolve_symlinks: bool = True) -> "AllowList":
        roots: list[Path] = []
        for raw in raw_dirs:
            root = canonicalize(raw, resolve_symlinks)
            if root not in roots:
                roots.append(root)
        return cls(tuple(roots), tuple(str(r) for r in roots))

    def roots(self) -> Tuple[Path, ...]:
        return self._roots

    def names(self) -> Tuple[str, ...]:
        return self._names

    def __len__(self) -> int:
        return len(self._roots)


class PathAuthorizer:
    """
    Canonicalize a candidate path and check it against the allow-list:
    allowed when it equals a root or lies below one (separator boundary,
    so /data is not a prefix of /database).
    """

    def __init__(self, allow_list: AllowList, resolve_symlinks: bool = True):
        self.allow_list = allow_list
        self.resolve_symlinks = resolve_symlinks

    def contains(self, path: Path) -> bool:
        return any(path == root or root in path.parents for root in self.allow_list.roots())

    def is_allowed(self, candidate: PathLike) -> bool:
        try:
            return self.contains(canonicalize(candidate, self.resolve_symlinks))
        except InvalidArguments:
            return False

    def authorize(self, candidate: PathLike) -> Path:
        path = canonicalize(candidate, self.resolve_symlinks)
        if not self.contains(path):
            # Same message whether or not the path exists
            raise AccessDenied(f"Access to path '{candidate}' is not allowed")
        return path
