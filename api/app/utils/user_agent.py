"""User-agent sniffing for scan analytics."""

from __future__ import annotations

import hashlib
import re
from datetime import date

UNKNOWN = "Unknown"

_MOBILE_RE = re.compile(r"Mobile|Android|iPhone|iPad")


def parse_user_agent(user_agent: str | None) -> dict[str, str]:
    """Reduce a user-agent header to coarse device, browser, and OS labels."""
    info = {"device_type": UNKNOWN, "browser": UNKNOWN, "os": UNKNOWN}
    if not user_agent:
        return info

    if _MOBILE_RE.search(user_agent):
        info["device_type"] = "Tablet" if "iPad" in user_agent else "Mobile"
    else:
        info["device_type"] = "Desktop"

    if "Chrome" in user_agent and "Edge" not in user_agent:
        info["browser"] = "Chrome"
    elif "Safari" in user_agent and "Chrome" not in user_agent:
        info["browser"] = "Safari"
    elif "Firefox" in user_agent:
        info["browser"] = "Firefox"
    elif "Edge" in user_agent:
        info["browser"] = "Edge"

    # Android agents also say Linux, and iOS agents also say Mac OS X.
    if "Windows" in user_agent:
        info["os"] = "Windows"
    elif "Android" in user_agent:
        info["os"] = "Android"
    elif "Linux" in user_agent:
        info["os"] = "Linux"
    elif re.search(r"iOS|iPhone|iPad", user_agent):
        info["os"] = "iOS"
    elif "Mac" in user_agent:
        info["os"] = "macOS"
    return info


def session_fingerprint(user_agent: str | None, ip_address: str | None, day: date) -> str:
    """Stable per-visitor, per-day session id for unique-session counts."""
    raw = f"{user_agent or ''}|{ip_address or ''}|{day.isoformat()}"
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:32]
