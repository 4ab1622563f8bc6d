from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from fs_sandbox.config import Settings
from fs_sandbox.di import build_container
from server.http_app import create_http_app

TOKEN = "test-token"
AUTH = {"Authorization": f"Bearer {TOKEN}"}


@pytest.fixture
def client(tmp_path: Path) -> TestClient:
    settings = Settings(MCP_HTTP_BEARER_TOKEN=TOKEN, MCP_HTTP_PATH="/mcp")
    return TestClient(create_http_app(build_container([str(tmp_path)], settings)))


def _call(client: TestClient, name: str, arguments: dict, id_: int = 1) -> dict:
    body = {"jsonrpc": "2.0", "id": id_, "method": "tools/call", "params": {"name": name, "arguments": arguments}}
    resp = client.post("/mcp", json=body, headers=AUTH)
    assert resp.status_code == 200
    return resp.json()


def test_requires_bearer_token(client: TestClient):
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 1, "method": "tools/list"})
    assert resp.status_code == 401
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 1, "method": "tools/list"},
                       headers={"Authorization": "Bearer wrong"})
    assert resp.status_code == 401


def test_forbidden_origin(client: TestClient):
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 1, "method": "tools/list"},
                       headers={**AUTH, "Origin": "http://evil.example"})
    assert resp.status_code == 403


def test_initialize_and_tools_list(client: TestClient):
    init = client.post("/mcp", json={"jsonrpc": "2.0", "id": 1, "method": "initialize"}, headers=AUTH).json()
    assert init["result"]["serverInfo"]["name"] == "fs-sandbox"

    tools = client.post("/mcp", json={"jsonrpc": "2.0", "id": 2, "method": "tools/list"}, headers=AUTH).json()
    names = {t["name"] for t in tools["result"]["tools"]}
    assert names == {"read_file", "write_file", "list_directory", "search_files", "list_allowed_directories"}


def test_tools_call_round_trip(client: TestClient, tmp_path: Path):
    target = str(tmp_path / "hello.txt")
    written = _call(client, "write_file", {"path": target, "content": "hi there"})
    assert written["result"]["isError"] is False

    read = _call(client, "read_file", {"path": target}, id_=2)
    block = read["result"]["content"][0]
    assert block["type"] == "json"
    assert block["json"]["result"]["content"] == "hi there"


def test_tools_call_failures_are_results_not_errors(client: TestClient, tmp_path: Path):
    denied = _call(client, "read_file", {"path": str(tmp_path.parent / "secret.txt")})
    assert denied["result"]["isError"] is True
    assert denied["result"]["content"][0]["json"]["error"]["kind"] == "permission"

    unknown = _call(client, "rm_rf", {})
    assert unknown["result"]["content"][0]["json"]["error"]["kind"] == "unknown_operation"


def test_unknown_method_and_parse_error(client: TestClient):
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 9, "method": "resources/list"}, headers=AUTH)
    assert resp.json()["error"]["code"] == -32601

    resp = client.post("/mcp", content=b"{not json", headers={**AUTH, "Content-Type": "application/json"})
    assert resp.json()["error"]["code"] == -32700
