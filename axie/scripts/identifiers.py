"""Shared parsers for Axie ids, counters and timestamps."""

from __future__ import annotations

import re
import time
from typing import Any

AXIE_URL_ID_RE = re.compile(r"axies?[/:](\d+)", re.IGNORECASE)
AXIE_PLAIN_ID_RE = re.compile(r"^#?(\d+)$")
SECONDS_PER_DAY = 24 * 60 * 60
AXIE_IMAGE_URL = "https://axiecdn.axieinfinity.com/axies/{axie_id}/axie/axie-full-transparent.png"
AXIE_MARKET_URL = "https://app.axieinfinity.com/marketplace/axies/{axie_id}"


def parse_axie_id(raw: Any) -> str:
    """Normalize `123`, `#123` or a marketplace URL to the bare numeric id."""
    if isinstance(raw, bool):
        raise ValueError("axie id cannot be boolean")
    if isinstance(raw, int):
        if raw < 0:
            raise ValueError("axie id must be non-negative")
        return str(raw)
    value = str(raw).strip()
    url_match = AXIE_URL_ID_RE.search(value)
    if url_match:
        return url_match.group(1)
    plain_match = AXIE_PLAIN_ID_RE.fullmatch(value)
    if plain_match:
        return plain_match.group(1)
    raise ValueError(f"invalid axie id format: {raw}")


def parse_nonnegative_count(value: Any, *, field: str) -> tuple[bool, int, str]:
    if isinstance(value, bool):
        return False, 0, f"{field} cannot be boolean"
    if isinstance(value, int):
        if value < 0:
            return False, 0, f"{field} must be non-negative"
        return True, value, ""
    if not isinstance(value, str):
        return False, 0, f"{field} must be int or string"
    raw = value.strip()
    if not raw:
        return False, 0, f"{field} cannot be empty"
    if raw.isdigit():
        return True, int(raw, 10), ""
    return False, 0, f"{field} must be a non-negative decimal integer"


def axie_age_days(born_at: int | float, now: float | None = None) -> int:
    now_ts = time.time() if now is None else float(now)
    return int((int(now_ts) - int(born_at)) // SECONDS_PER_DAY)


def axie_image_url(axie_id: Any) -> str:
    return AXIE_IMAGE_URL.format(axie_id=parse_axie_id(axie_id))


def axie_market_url(axie_id: Any) -> str:
    return AXIE_MARKET_URL.format(axie_id=parse_axie_id(axie_id))
