"""
domain.fingerprint - Lossy checksum over a user's recent journaling context.

The fingerprint decides whether cached suggestions are still valid. It is
a 31-multiplier rolling hash over UTF-16 code units, truncated to a signed
32-bit integer after every step, so values match the ones stored by the
browser-side implementation of the same hash.
"""

from __future__ import annotations

from typing import Iterable

from domain.entities import Entry

CONTEXT_WINDOW = 3

_INT32_MASK = 0xFFFFFFFF


def _to_int32(value: int) -> int:
    value &= _INT32_MASK
    return value - 0x100000000 if value & 0x80000000 else value


def _utf16_code_units(text: str) -> Iterable[int]:
    raw = text.encode("utf-16-le")
    for i in range(0, len(raw), 2):
        yield raw[i] | (raw[i + 1] << 8)


def rolling_hash(text: str) -> int:
    """Return the signed 32-bit ``(h << 5) - h + c`` hash of *text*."""
    h = 0
    for unit in _utf16_code_units(text):
        h = _to_int32((h << 5) - h + unit)
    return h


def context_string(entries: Iterable[Entry]) -> str:
    """Join ``id-description`` pairs of the given entries with ``|``."""
    return "|".join(
        f"{entry.id}-{entry.detailed_mood_description}" for entry in entries
    )


def context_fingerprint(entries: list[Entry]) -> int:
    """Fingerprint of the newest CONTEXT_WINDOW entries (newest first)."""
    return rolling_hash(context_string(entries[:CONTEXT_WINDOW]))
