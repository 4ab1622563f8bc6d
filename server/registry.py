# server/registry.py
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Type

from pydantic import BaseModel, ValidationError

from fs_sandbox.di import Container
from fs_sandbox.errors import FailureKind, SandboxError
from fs_sandbox.logging import log_tool_call
from fs_sandbox.results import Failure, Success, ToolRequest, ToolResult
from fs_sandbox.services.validator import ArgumentValidator

# Import only the Pydantic input models from the tool module.
from server.tools.files import (
    ListAllowedIn,
    ListDirectoryIn,
    ReadFileIn,
    SearchFilesIn,
    WriteFileIn,
)

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    READ_FILE = "read_file"
    WRITE_FILE = "write_file"
    LIST_DIRECTORY = "list_directory"
    SEARCH_FILES = "search_files"
    LIST_ALLOWED_DIRECTORIES = "list_allowed_directories"


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_model: Type[BaseModel]
    handler: Callable[[BaseModel], Any]


def _run(fn: Callable[..., Dict[str, Any]], *args: Any) -> ToolResult:
    try:
        return Success(fn(*args))
    except SandboxError as exc:
        return Failure(exc.kind, exc.message)


class ToolHandlers:
    """
    Named handlers for each operation (no lambdas).
    Every handler returns Success or Failure; service exceptions stop here.
    """
    def __init__(self, container: Container):
        self.fs = container.fs_service

    def read_file(self, args: ReadFileIn) -> ToolResult:
        return _run(self.fs.read_text, args.path)

    def write_file(self, args: WriteFileIn) -> ToolResult:
        return _run(self.fs.write_text, args.path, args.content, args.append)

    def list_directory(self, args: ListDirectoryIn) -> ToolResult:
        return _run(self.fs.list_dir, args.path)

    def search_files(self, args: SearchFilesIn) -> ToolResult:
        return _run(self.fs.search, args.path, args.pattern, args.recursive)

    def list_allowed_directories(self, args: ListAllowedIn) -> ToolResult:
        return _run(self.fs.list_allowed)


def _schema_from_model(model: Type[BaseModel]) -> Dict[str, Any]:
    return model.model_json_schema()


def build_tool_registry(container: Container, extra: Iterable[ToolSpec] = ()) -> Mapping[str, ToolSpec]:
    """
    Build the registry once at startup. Additional operations can be
    registered through ``extra``; the returned mapping is read-only.
    """
    handlers = ToolHandlers(container)

    specs = [
        ToolSpec(
            name=Operation.READ_FILE.value,
            description="Read content from a file",
            input_model=ReadFileIn,
            handler=handlers.read_file,
        ),
        ToolSpec(
            name=Operation.WRITE_FILE.value,
            description="Write content to a file",
            input_model=WriteFileIn,
            handler=handlers.write_file,
        ),
        ToolSpec(
            name=Operation.LIST_DIRECTORY.value,
            description="List contents of a directory",
            input_model=ListDirectoryIn,
            handler=handlers.list_directory,
        ),
        ToolSpec(
            name=Operation.SEARCH_FILES.value,
            description="Search for files whose name contains a pattern",
            input_model=SearchFilesIn,
            handler=handlers.search_files,
        ),
        ToolSpec(
            name=Operation.LIST_ALLOWED_DIRECTORIES.value,
            description="List all directories the server is allowed to access",
            input_model=ListAllowedIn,
            handler=handlers.list_allowed_directories,
        ),
        *extra,
    ]

    reg: Dict[str, ToolSpec] = {}
    for spec in specs:
        if spec.name in reg:
            raise ValueError(f"Duplicate tool name: {spec.name}")
        reg[spec.name] = spec
    return MappingProxyType(reg)


def list_tools_payload(registry: Mapping[str, ToolSpec]) -> Dict[str, Any]:
    """
    Produce the `tools/list` payload body as per MCP Tools spec.
    """
    tools = []
    for spec in registry.values():
        tools.append({
            "name": spec.name,
            "description": spec.description,
            "inputSchema": _schema_from_model(spec.input_model),
        })
    return {"tools": tools}


def _describe_pydantic(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or '/'}: {err['msg']}" for err in exc.errors()
    )


class ToolDispatcher:
    """
    Route a ToolRequest to its handler and normalize the outcome.

    Shape is checked against the declared JSON Schema, then the input model is
    built, then the handler runs. Nothing raised by a handler escapes
    ``dispatch``; the registry is the only state kept between requests.
    """

    def __init__(
        self,
        registry: Mapping[str, ToolSpec],
        timeout_sec: Optional[float] = None,
        max_log_chars: int = 200,
    ):
        self.registry = registry
        self.timeout_sec = timeout_sec
        self.max_log_chars = max_log_chars
        self._validators = {
            name: ArgumentValidator(_schema_from_model(spec.input_model))
            for name, spec in registry.items()
        }

    def dispatch(self, request: ToolRequest) -> ToolResult:
        spec = self.registry.get(request.name)
        if spec is None:
            return self._failed(request.name, Failure(FailureKind.UNKNOWN_OPERATION, f"Tool not found: {request.name}"))

        arguments = request.arguments if request.arguments is not None else {}
        if isinstance(arguments, dict):
            log_tool_call(logger, request.name, arguments, self.max_log_chars)

        problems = self._validators[request.name].describe(arguments)
        if problems:
            return self._failed(
                request.name, Failure(FailureKind.VALIDATION, f"Invalid arguments for {request.name}: {problems}")
            )

        try:
            args_obj = spec.input_model.model_validate(arguments)
        except ValidationError as exc:
            return self._failed(
                request.name,
                Failure(FailureKind.VALIDATION, f"Invalid arguments for {request.name}: {_describe_pydantic(exc)}"),
            )

        try:
            result = spec.handler(args_obj)
        except SandboxError as exc:
            result = Failure(exc.kind, exc.message)
        except Exception as exc:
            logger.exception("tool_error %s", request.name)
            result = Failure(FailureKind.IO, f"{request.name} failed: {exc}")

        if isinstance(result, Failure):
            return self._failed(request.name, result)
        if not isinstance(result, Success):
            # Registered extensions may return a bare payload
            result = Success(result)
        return result

    async def dispatch_async(self, request: ToolRequest) -> ToolResult:
        """
        Run ``dispatch`` on a worker thread so blocking I/O of concurrent
        requests proceeds independently. A timeout is reported as an IO failure.
        The worker thread is not cancelled: a timed-out write may still land on
        disk after the caller has received the failure.
        """
        call = asyncio.to_thread(self.dispatch, request)
        if self.timeout_sec is None:
            return await call
        try:
            return await asyncio.wait_for(call, self.timeout_sec)
        except asyncio.TimeoutError:
            return self._failed(
                request.name, Failure(FailureKind.IO, f"{request.name} timed out after {self.timeout_sec}s")
            )

    def _failed(self, name: str, failure: Failure) -> Failure:
        logger.warning("tool_failed %s %s %s", name, failure.kind.value, failure.message)
        return failure


def build_dispatcher(container: Container, extra: Iterable[ToolSpec] = ()) -> ToolDispatcher:
    registry = build_tool_registry(container, extra)
    return ToolDispatcher(
        registry,
        timeout_sec=container.settings.OPERATION_TIMEOUT_SEC,
        max_log_chars=container.settings.LOG_MAX_ARG_CHARS,
    )
