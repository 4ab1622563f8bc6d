# fs_sandbox/logging.py
import logging
import os
from typing import Any, Dict, Optional

# Argument values never written to logs verbatim
CONTENT_KEYS = {"content"}


def configure_logging(level: Optional[str] = None):
    # basicConfig writes to stderr; stdout belongs to the stdio protocol
    logging.basicConfig(
        level=(level or os.getenv("LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def redact_str(s: str, max_chars: int = 200) -> str:
    if len(s) <= max_chars:
        return s
    return s[:max_chars] + f"...[{len(s) - max_chars} more chars]"


def redact_args(args: Dict[str, Any], max_chars: int = 200) -> Dict[str, Any]:
    safe: Dict[str, Any] = {}
    for k, v in args.items():
        if k in CONTENT_KEYS and isinstance(v, str):
            safe[k] = f"<{len(v)} chars>"
        elif isinstance(v, str):
            safe[k] = redact_str(v, max_chars)
        else:
            safe[k] = v
    return safe


def log_tool_call(logger: logging.Logger, name: str, args: Dict[str, Any], max_chars: int = 200):
    logger.info("tool_call %s %s", name, redact_args(args, max_chars))
