"""Menu identifier classification for id-or-slug lookups.

Invariants:
- Every string classifies as exactly one of ``"id"`` or ``"slug"``.
- Only a full, canonical 8-4-4-4-12 hex string counts as an id.
"""

from __future__ import annotations

import re
from typing import Literal

MenuLookupField = Literal["id", "slug"]

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_uuid(identifier: str) -> bool:
    """Return True when the identifier is a canonical textual UUID."""
    # fullmatch: `$` alone would accept a trailing newline.
    return _UUID_RE.fullmatch(identifier) is not None


def classify_identifier(identifier: str) -> MenuLookupField:
    """Pick the menu column a public identifier should be matched against."""
    return "id" if is_uuid(identifier) else "slug"
