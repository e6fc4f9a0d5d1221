"""Stable identity for findings.

A finding's hash is keyed on where it is and what it is called, never on its
severity or wording, so the same issue reported by two runs maps to the same
review comment. The digest is the classic 32-bit ``h = h * 31 + c`` string
hash over UTF-16 code units, which keeps hashes identical to the ones already
embedded in comments posted by earlier deployments of the reviewer.
"""

from __future__ import annotations

import re

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def normalize_title(title: str) -> str:
    return _NON_ALNUM_RE.sub("", title.lower())


def _string_hash(text: str) -> int:
    data = text.encode("utf-16-le", "surrogatepass")
    value = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        value = ((value << 5) - value + unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return abs(value)


def generate_hash(file: str, line: int, end_line: int | None, title: str) -> str:
    """Return the 8-character hex identity of a finding."""
    line_range = f"{line}-{end_line}" if end_line else f"{line}"
    return format(_string_hash(f"{file}:{line_range}:{normalize_title(title)}"), "08x")
