# server/http_app.py
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse

from fs_sandbox.di import Container, build_container
from fs_sandbox.results import Failure, ToolRequest
from server.registry import build_dispatcher, list_tools_payload


PROTOCOL_VERSION = "2025-03-26"  # aligns with current spec draft dates


def _jsonrpc_error(id_: Any, code: int, message: str, data: Any | None = None) -> JSONResponse:
    body: Dict[str, Any] = {"jsonrpc": "2.0", "id": id_, "error": {"code": code, "message": message}}
    if data is not None:
        body["error"]["data"] = data
    return JSONResponse(body)


def _jsonrpc_result(id_: Any, result: Any) -> JSONResponse:
    return JSONResponse({"jsonrpc": "2.0", "id": id_, "result": result})


def create_http_app(container: Optional[Container] = None) -> FastAPI:
    container = container or build_container()
    settings = container.settings
    dispatcher = build_dispatcher(container)

    app = FastAPI(title="MCP HTTP Server", version="0.1.0")

    # ---------- Security: Origin validation & Bearer token ----------

    def _origin_allowed(req: Request) -> bool:
        origin = req.headers.get("origin")
        if not origin:
            return settings.MCP_HTTP_ALLOW_NO_ORIGIN
        allowed = {o.strip().lower() for o in settings.MCP_HTTP_ALLOWED_ORIGINS.split(",") if o.strip()}
        return origin.lower() in allowed

    def _require_auth(req: Request):
        auth = req.headers.get("authorization", "")
        if not auth.startswith("Bearer "):
            raise HTTPException(status_code=401, detail="Missing Bearer token")
        token = auth.split(" ", 1)[1]
        if token != settings.MCP_HTTP_BEARER_TOKEN:
            raise HTTPException(status_code=401, detail="Invalid Bearer token")

    @app.middleware("http")
    async def origin_validation_mw(request: Request, call_next):
        # Origin validation prevents DNS rebinding; disallowed origin → 403
        if not _origin_allowed(request):
            return JSONResponse({"error": {"code": 403, "message": "Forbidden origin"}}, status_code=403)
        return await call_next(request)

    # ---------- MCP JSON-RPC endpoint (Streamable HTTP) ----------

    @app.post(settings.MCP_HTTP_PATH)
    async def mcp_endpoint(request: Request):
        _require_auth(request)

        try:
            payload = await request.json()
        except ValueError:
            return _jsonrpc_error(None, -32700, "Parse error")
        if not isinstance(payload, dict):
            return _jsonrpc_error(None, -32600, "Invalid Request")

        id_ = payload.get("id")
        method = payload.get("method")
        params = payload.get("params") or {}
        if not isinstance(params, dict):
            return _jsonrpc_error(id_, -32602, "Invalid params")

        if method == "initialize":
            return _jsonrpc_result(id_, {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": {"listChanged": False}},
                "serverInfo": {"name": settings.MCP_SERVER_NAME, "version": "0.1.0"},
            })

        if method == "tools/list":
            return _jsonrpc_result(id_, list_tools_payload(dispatcher.registry))

        if method == "tools/call":
            name = params.get("name")
            if not isinstance(name, str):
                return _jsonrpc_error(id_, -32602, "Invalid params: 'name' must be a string")
            args = params.get("arguments", {})
            result = await dispatcher.dispatch_async(ToolRequest(name, args))
            content_block = {"type": "json", "json": result.to_dict()}
            return _jsonrpc_result(id_, {"content": [content_block], "isError": isinstance(result, Failure)})

        return _jsonrpc_error(id_, -32601, f"Method not found: {method}")

    return app


app = create_http_app()

if __name__ == "__main__":
    import uvicorn
    from fs_sandbox.config import Settings
    from fs_sandbox.logging import configure_logging

    settings = Settings()
    configure_logging(settings.LOG_LEVEL)
    uvicorn.run(
        "server.http_app:app",
        host=settings.MCP_HTTP_HOST,
        port=settings.MCP_HTTP_PORT,
        reload=False,
    )
