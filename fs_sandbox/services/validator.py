# fs_sandbox/services/validator.py
from __future__ import annotations
from typing import Any, Dict, List
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError


class ArgumentValidator:
    """
    Validate tool arguments against the tool's declared JSON Schema (draft 2020-12).
    Returns structured error details; an empty list means the shape is valid.
    """

    def __init__(self, schema: Dict[str, Any]):
        Draft202012Validator.check_schema(schema)
        self.schema = schema
        self._validator = Draft202012Validator(schema)

    def errors(self, arguments: Any) -> List[Dict[str, Any]]:
        errors: List[ValidationError] = sorted(
            self._validator.iter_errors(arguments), key=lambda e: [str(p) for p in e.path]
        )

        def to_path(err: ValidationError) -> str:
            # Convert deque/path into JSON Pointer-like string
            segments = [str(p) for p in err.path]
            return "/" + "/".join(segments) if segments else "/"

        return [
            {"path": to_path(e), "keyword": e.validator, "message": e.message}
            for e in errors
        ]

    def describe(self, arguments: Any) -> str:
        """One-line summary of every violation, or '' when valid."""
        return "; ".join(f"{e['path']}: {e['message']}" for e in self.errors(arguments))
