# fs_sandbox/results.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Union

from fs_sandbox.errors import FailureKind


@dataclass(frozen=True)
class ToolRequest:
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Success:
    payload: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": True, "result": self.payload}


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": False, "error": {"kind": self.kind.value, "message": self.message}}


ToolResult = Union[Success, Failure]
