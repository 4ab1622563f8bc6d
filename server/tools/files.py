# server/tools/files.py
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from fs_sandbox.results import Failure, ToolRequest


class ReadFileIn(BaseModel):
    model_config = ConfigDict(strict=True)

    path: str = Field(..., min_length=1, description="Path to the file")


class WriteFileIn(BaseModel):
    model_config = ConfigDict(strict=True)

    path: str = Field(..., min_length=1, description="Path to the file")
    content: str = Field(..., description="UTF-8 text content to write (may be empty)")
    append: bool = Field(False, description="Append to the file instead of overwriting")


class ListDirectoryIn(BaseModel):
    model_config = ConfigDict(strict=True)

    path: str = Field(..., min_length=1, description="Path to the directory")


class SearchFilesIn(BaseModel):
    model_config = ConfigDict(strict=True)

    path: str = Field(..., min_length=1, description="Base directory to search in")
    pattern: str = Field(
        ..., min_length=1, description="Text the file name must contain (glob when configured)"
    )
    recursive: bool = Field(True, description="Descend into subdirectories")


class ListAllowedIn(BaseModel):
    pass


def register_file_tools(mcp: FastMCP, dispatcher):
    """
    Very thin tool adapters:
    - FastMCP deserializes inputs (Pydantic)
    - the dispatcher validates, authorizes and runs the operation
    - failures are raised back to the client as ToolError
    """

    async def call(name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
        result = await dispatcher.dispatch_async(ToolRequest(name, arguments))
        if isinstance(result, Failure):
            raise ToolError(f"{result.kind.value}: {result.message}")
        return result.payload

    @mcp.tool(name="read_file", description="Read content from a file")
    async def read_file(input: ReadFileIn) -> Dict[str, Any]:
        return await call("read_file", input.model_dump())

    @mcp.tool(name="write_file", description="Write content to a file")
    async def write_file(input: WriteFileIn) -> Dict[str, Any]:
        return await call("write_file", input.model_dump())

    @mcp.tool(name="list_directory", description="List contents of a directory")
    async def list_directory(input: ListDirectoryIn) -> Dict[str, Any]:
        return await call("list_directory", input.model_dump())

    @mcp.tool(name="search_files", description="Search for files whose name contains a pattern")
    async def search_files(input: SearchFilesIn) -> Dict[str, Any]:
        return await call("search_files", input.model_dump())

    @mcp.tool(
        name="list_allowed_directories",
        description="List all directories the server is allowed to access",
    )
    async def list_allowed_directories() -> Dict[str, Any]:
        return await call("list_allowed_directories", {})
