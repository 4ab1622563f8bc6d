# fs_sandbox/errors.py
from enum import Enum


class FailureKind(str, Enum):
    VALIDATION = "validation"
    PERMISSION = "permission"
    IO = "io"
    UNKNOWN_OPERATION = "unknown_operation"


class SandboxError(Exception):
    """Base for failures raised by the filesystem services."""

    kind: FailureKind = FailureKind.IO

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArguments(SandboxError):
    """A required parameter is missing, empty, or of the wrong type."""

    kind = FailureKind.VALIDATION


class AccessDenied(SandboxError, PermissionError):
    """The canonical path is outside every allowed directory."""

    kind = FailureKind.PERMISSION


class FileOperationError(SandboxError):
    """The filesystem effect failed after authorization passed."""

    kind = FailureKind.IO
