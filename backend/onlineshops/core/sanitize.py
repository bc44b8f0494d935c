"""Input sanitization helpers for request payloads."""

from __future__ import annotations

import re
import unicodedata

_WHITESPACE_RE = re.compile(r"\s+")


def _strip_control_chars(value: str) -> str:
    return "".join(ch for ch in value if unicodedata.category(ch) != "Cc")


def clean_single_line(value: str | None) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        value = str(value)
    value = _strip_control_chars(value).strip()
    return _WHITESPACE_RE.sub(" ", value)


def clean_optional(value: str | None) -> str | None:
    cleaned = clean_single_line(value)
    return cleaned or None


def clean_email(value: str | None) -> str:
    return clean_single_line(value).lower()


def normalize_email(email: str) -> str:
    """Canonical form used for storage and lookup: trimmed and lowercased."""
    return email.strip().lower()


def has_control_chars(value: str) -> bool:
    return any(unicodedata.category(ch) == "Cc" for ch in value)


_SLUG_SEPARATOR_RE = re.compile(r"[^a-z0-9]+")
SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


def slugify(value: str) -> str:
    """Lowercase, hyphen-separated form of ``value`` (``"Bob's Shop"`` -> ``"bob-s-shop"``)."""
    return _SLUG_SEPARATOR_RE.sub("-", value.lower()).strip("-")
