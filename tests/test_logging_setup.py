import logging

from fs_sandbox.logging import log_tool_call, redact_args, redact_str


def test_content_is_never_logged():
    safe = redact_args({"path": "/data/a.txt", "content": "top secret", "append": True})
    assert safe == {"path": "/data/a.txt", "content": "<10 chars>", "append": True}


def test_long_strings_are_truncated():
    out = redact_str("x" * 50, max_chars=10)
    assert out.startswith("x" * 10)
    assert "40 more chars" in out
    assert redact_str("short", max_chars=10) == "short"


def test_log_tool_call_emits_redacted_args(caplog):
    logger = logging.getLogger("test.tool_call")
    with caplog.at_level(logging.INFO, logger="test.tool_call"):
        log_tool_call(logger, "write_file", {"path": "/tmp/a", "content": "password=hunter2"})
    assert "tool_call write_file" in caplog.text
    assert "hunter2" not in caplog.text
