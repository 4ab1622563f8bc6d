# fs_sandbox/di.py
from dataclasses import dataclass
from typing import Iterable, Optional

from fs_sandbox.config import Settings
from fs_sandbox.services.allowlist import AllowList, PathAuthorizer
from fs_sandbox.services.filesystem import FileSystemService


@dataclass(frozen=True)
class Container:
    settings: Settings
    allow_list: AllowList
    authorizer: PathAuthorizer
    fs_service: FileSystemService


def build_container(
    allowed_dirs: Optional[Iterable[str]] = None, settings: Optional[Settings] = None
) -> Container:
    """
    Build the allow-list once and hand the same instance to every service.
    Explicit ``allowed_dirs`` (CLI arguments) win over ALLOWED_DIRS.
    """
    s = settings or Settings()
    raw_dirs = list(allowed_dirs) if allowed_dirs is not None else s.allowed_dirs_list()

    allow_list = AllowList.from_raw(raw_dirs, resolve_symlinks=s.RESOLVE_SYMLINKS)
    authorizer = PathAuthorizer(allow_list, resolve_symlinks=s.RESOLVE_SYMLINKS)
    fs = FileSystemService(authorizer, pattern_mode=s.SEARCH_PATTERN_MODE)

    return Container(s, allow_list, authorizer, fs)
