# fs_sandbox/config.py
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Filesystem allow-list (comma-separated); CLI arguments take precedence
    ALLOWED_DIRS: str = ""
    RESOLVE_SYMLINKS: bool = True

    # Search
    SEARCH_PATTERN_MODE: Literal["substring", "glob"] = "substring"

    # Per-request timeout for blocking I/O (None = run to completion)
    OPERATION_TIMEOUT_SEC: Optional[float] = None

    # MCP host
    MCP_SERVER_NAME: str = "fs-sandbox"

    # HTTP MCP transport
    MCP_HTTP_HOST: str = "127.0.0.1"
    MCP_HTTP_PORT: int = 8080
    MCP_HTTP_PATH: str = "/mcp"

    # Security: Bearer token and allowed origins
    MCP_HTTP_BEARER_TOKEN: str = "change-me"         # set in .env for prod
    MCP_HTTP_ALLOWED_ORIGINS: str = "http://localhost, http://127.0.0.1"
    MCP_HTTP_ALLOW_NO_ORIGIN: bool = True            # allow non-browser clients

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_MAX_ARG_CHARS: int = 200

    class Config:
        env_file = ".env"

    def allowed_dirs_list(self) -> List[str]:
        return [d.strip() for d in self.ALLOWED_DIRS.split(",") if d.strip()]
