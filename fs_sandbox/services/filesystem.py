# fs_sandbox/services/filesystem.py
from __future__ import annotations

import os
from typing import Any, Dict

from fs_sandbox.errors import FileOperationError, InvalidArguments
from fs_sandbox.services.allowlist import PathAuthorizer
from fs_sandbox.services.search import iter_matches, make_matcher


def _require_str(name: str, value: Any, allow_empty: bool = False) -> str:
    if value is None:
        raise InvalidArguments(f"{name} is required")
    if not isinstance(value, str):
        raise InvalidArguments(f"{name} must be a string")
    if not allow_empty and not value:
        raise InvalidArguments(f"{name} must not be empty")
    return value


class FileSystemService:
    """
    Confine all file operations to the allow-list.
    - parameters are checked before anything touches the disk
    - every path is authorized again on each call (never cached)
    - OS failures after authorization surface as FileOperationError
    """

    def __init__(self, authorizer: PathAuthorizer, pattern_mode: str = "substring"):
        self.authorizer = authorizer
        self.pattern_mode = pattern_mode

    def read_text(self, path: str) -> Dict[str, Any]:
        _require_str("path", path)
        target = self.authorizer.authorize(path)
        try:
            with open(target, "r", encoding="utf-8", newline="") as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise FileOperationError(f"Failed to read file: {exc}") from exc
        return {"path": str(target), "content": content}

    def write_text(self, path: str, content: str, append: bool = False) -> Dict[str, Any]:
        _require_str("path", path)
        _require_str("content", content, allow_empty=True)
        if not isinstance(append, bool):
            raise InvalidArguments("append must be a boolean")

        target = self.authorizer.authorize(path)
        # Directory creation is a side effect that needs its own check
        parent = self.authorizer.authorize(target.parent)
        try:
            parent.mkdir(parents=True, exist_ok=True)
            with open(target, "a" if append else "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as exc:
            raise FileOperationError(f"Failed to write file: {exc}") from exc
        return {"path": str(target), "operation": "append" if append else "write", "success": True}

    def list_dir(self, path: str) -> Dict[str, Any]:
        _require_str("path", path)
        target = self.authorizer.authorize(path)
        try:
            with os.scandir(target) as it:
                entries = list(it)
        except OSError as exc:
            raise FileOperationError(f"Failed to list directory: {exc}") from exc

        # Symlinks, sockets and devices are neither; they are left out
        directories = [
            {"name": e.name, "type": "directory"} for e in entries if e.is_dir(follow_symlinks=False)
        ]
        files = [{"name": e.name, "type": "file"} for e in entries if e.is_file(follow_symlinks=False)]
        return {"path": str(target), "contents": directories + files}

    def search(self, path: str, pattern: str, recursive: bool = True) -> Dict[str, Any]:
        _require_str("path", path)
        _require_str("pattern", pattern)
        if not isinstance(recursive, bool):
            raise InvalidArguments("recursive must be a boolean")

        base = self.authorizer.authorize(path)
        matcher = make_matcher(pattern, self.pattern_mode)
        try:
            matches = [str(p) for p in iter_matches(base, matcher, recursive)]
        except OSError as exc:
            raise FileOperationError(f"Failed to search files: {exc}") from exc
        return {"pattern": pattern, "matches": matches}

    def list_allowed(self) -> Dict[str, Any]:
        return {"allowedDirectories": list(self.authorizer.allow_list.names())}
