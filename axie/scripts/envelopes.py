"""Shared result/payload envelope helpers for the axie wrapper."""

from __future__ import annotations

import json
import re
from datetime import UTC, datetime
from typing import Any, Callable

from error_map import ERR_INTERNAL, ERR_INVALID_REQUEST

TimestampFn = Callable[[], str]


def timestamp_utc() -> str:
    return datetime.now(UTC).isoformat()


def json_dump(payload: Any, pretty: bool = True) -> str:
    return json.dumps(payload, indent=2 if pretty else None, sort_keys=False)


def build_ok_payload(
    *,
    method: str,
    result: Any,
    request: dict[str, Any] | None = None,
    timestamp_fn: TimestampFn = timestamp_utc,
) -> dict[str, Any]:
    """Build a standard successful payload envelope."""
    payload: dict[str, Any] = {
        "timestamp_utc": timestamp_fn(),
        "method": method,
        "status": "ok",
        "ok": True,
        "error_code": None,
        "error_message": None,
    }
    if request is not None:
        payload["request"] = request
    payload["result"] = result
    return payload


def build_error_payload(
    *,
    method: str,
    code: str = ERR_INTERNAL,
    message: str = "unset",
    request: dict[str, Any] | None = None,
    hint: str | None = None,
    timestamp_fn: TimestampFn = timestamp_utc,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "timestamp_utc": timestamp_fn(),
        "method": method,
        "status": "error",
        "ok": False,
        "error_code": code,
        "error_message": message,
    }
    if request is not None:
        payload["request"] = request
    if hint:
        payload["hint"] = hint
    return payload

# One selector step: `.key` or `[index]`.
_PATH_STEP_RE = re.compile(r"\.([^.\[]+)|\[(\d+)\]")


def _path_steps(path: str) -> tuple[bool, list[str | int], str]:
    if not isinstance(path, str) or not path.startswith("$"):
        return False, [], "path must start with '$'"
    steps: list[str | int] = []
    pos = 1
    while pos < len(path):
        match = _PATH_STEP_RE.match(path, pos)
        if match is None:
            return False, [], f"invalid path syntax at position {pos}"
        key, index = match.groups()
        steps.append(key if key is not None else int(index))
        pos = match.end()
    return True, steps, ""


def select_jsonpath(value: Any, path: str) -> tuple[bool, Any, str]:
    """Resolve a jsonpath-lite selector (`$`, `.key`, `[index]`) against a payload."""
    ok, steps, err = _path_steps(path)
    if not ok:
        return False, None, err
    current = value
    for step in steps:
        if isinstance(step, str):
            if not isinstance(current, dict) or step not in current:
                return False, None, f"key '{step}' not found"
        elif not isinstance(current, list) or step >= len(current):
            return False, None, f"index [{step}] out of range"
        current = current[step]
    return True, current, ""


def render_payload(
    payload: dict[str, Any],
    *,
    compact: bool = False,
    result_only: bool = False,
    select: str | None = None,
) -> int:
    """Print a payload honoring --select / --result-only; returns a render exit code."""
    value: Any = payload
    if select:
        ok, value, err = select_jsonpath(payload, select)
        if not ok:
            value = build_error_payload(
                method=str(payload.get("method", "")),
                code=ERR_INVALID_REQUEST,
                message=f"invalid --select path: {err}",
            )
            print(json_dump(value, pretty=not compact))
            return 2
    elif result_only and payload.get("ok"):
        value = payload.get("result")

    # Bare strings print unquoted so shell callers can use them directly.
    print(value if isinstance(value, str) else json_dump(value, pretty=not compact))
    return 0
