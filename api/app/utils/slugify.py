"""Slug helpers for menu identifiers.

Invariants:
- Non-empty slugs only contain ``[a-z0-9-]`` with no leading, trailing, or
  doubled hyphens.
- Only a fixed table of Latin accents is folded to ASCII; any other
  non-ASCII character is dropped.
"""

from __future__ import annotations

import re
from collections.abc import Container

_ACCENT_TABLE = str.maketrans(
    {
        **dict.fromkeys("àáâãäå", "a"),
        **dict.fromkeys("èéêë", "e"),
        **dict.fromkeys("ìíîï", "i"),
        **dict.fromkeys("òóôõö", "o"),
        **dict.fromkeys("ùúûü", "u"),
        "ç": "c",
        "ñ": "n",
    }
)
_DISALLOWED_RE = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE_RE = re.compile(r"\s+")
_HYPHENS_RE = re.compile(r"-+")
_VALID_SLUG_RE = re.compile(r"^[a-z0-9-]+$")

# Hyphens before this share of the limit are too early to cut back to.
_WORD_BOUNDARY_RATIO = 0.7


def base_slug(restaurant_name: str, menu_name: str) -> str:
    """Derive the URL slug for a restaurant/menu name pair.

    The result may be empty when both names only hold stripped characters;
    callers must reject that before persisting.
    """
    value = f"{restaurant_name}-{menu_name}".lower().strip()
    value = value.translate(_ACCENT_TABLE)
    value = _DISALLOWED_RE.sub("", value)
    value = _WHITESPACE_RE.sub("-", value)
    value = _HYPHENS_RE.sub("-", value)
    return value.strip("-")


def resolve_slug_collision(base: str, existing_slugs: Container[str]) -> str:
    """Return ``base`` or the first free ``base-N`` probing N = 1, 2, ..."""
    if base not in existing_slugs:
        return base
    counter = 1
    candidate = f"{base}-{counter}"
    while candidate in existing_slugs:
        counter += 1
        candidate = f"{base}-{counter}"
    return candidate


def truncate_slug(slug: str, max_length: int) -> str:
    """Cap a slug length, preferring to cut at a late word boundary."""
    if max_length <= 0:
        return ""
    if len(slug) <= max_length:
        return slug
    truncated = slug[:max_length]
    last_hyphen = truncated.rfind("-")
    if last_hyphen >= 0 and last_hyphen >= max_length * _WORD_BOUNDARY_RATIO:
        return truncated[:last_hyphen]
    return truncated


def is_valid_slug(slug: str) -> bool:
    """Return True for non-empty, URL-safe slugs."""
    return bool(slug) and _VALID_SLUG_RE.fullmatch(slug) is not None
