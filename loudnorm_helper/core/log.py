from __future__ import annotations
import os
import sys
from typing import Any

# stdout carries the filter string only, so every log line goes to stderr.
LEVELS = {"error": 0, "info": 1, "debug": 2}
MAX_VALUE_LEN = 500


def _threshold() -> int:
    return LEVELS.get(os.getenv("LOUDNORM_LOG_LEVEL", "info").strip().lower(), 1)


def fmt_kv(**kv: Any) -> str:
    parts = []
    for k, v in kv.items():
        sval = str(v)
        if len(sval) > MAX_VALUE_LEN:
            sval = sval[:MAX_VALUE_LEN] + "…"
        parts.append(f"{k}={sval}")
    return " ".join(parts)


def _log(level: str, msg: str, **kv: Any) -> None:
    if LEVELS.get(level, 0) > _threshold():
        return
    line = f"[{level}] {msg}"
    kvs = fmt_kv(**kv)
    if kvs:
        line = f"{line} | {kvs}"
    print(line, file=sys.stderr, flush=True)


def log_error(msg: str, **kv: Any) -> None:
    _log("error", msg, **kv)


def log_info(msg: str, **kv: Any) -> None:
    _log("info", msg, **kv)


def log_debug(msg: str, **kv: Any) -> None:
    _log("debug", msg, **kv)
