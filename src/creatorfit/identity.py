"""Turn a pasted profile URL or ``@handle`` into a platform + handle pair."""

from __future__ import annotations

import re

from creatorfit.models import Identity, Platform

# Order matters: first match wins.
_HANDLE_PATTERNS: list[tuple[Platform, re.Pattern[str]]] = [
    (Platform.INSTAGRAM, re.compile(r"instagram\.com/([^/?]+)", re.IGNORECASE)),
    (Platform.TIKTOK, re.compile(r"tiktok\.com/@([^/?]+)", re.IGNORECASE)),
    (Platform.YOUTUBE, re.compile(r"youtube\.com/c/([^/?]+)", re.IGNORECASE)),
    (Platform.YOUTUBE, re.compile(r"youtube\.com/channel/([^/?]+)", re.IGNORECASE)),
    (Platform.YOUTUBE, re.compile(r"youtube\.com/@([^/?]+)", re.IGNORECASE)),
    (Platform.LINKEDIN, re.compile(r"linkedin\.com/in/([^/?]+)", re.IGNORECASE)),
    (Platform.TWITTER, re.compile(r"twitter\.com/([^/?]+)", re.IGNORECASE)),
    (Platform.TWITTER, re.compile(r"x\.com/([^/?]+)", re.IGNORECASE)),
]

# Host hints for inputs whose path did not match a handle pattern.
_HOST_HINTS: list[tuple[str, Platform]] = [
    ("instagram.com", Platform.INSTAGRAM),
    ("tiktok.com", Platform.TIKTOK),
    ("youtube.com", Platform.YOUTUBE),
    ("youtu.be", Platform.YOUTUBE),
    ("linkedin.com", Platform.LINKEDIN),
    ("twitter.com", Platform.TWITTER),
    ("x.com", Platform.TWITTER),
]

_INSTAGRAM_PROFILE_URL = "https://www.instagram.com/{handle}/"


def detect_platform(raw: str, default: Platform = Platform.INSTAGRAM) -> Platform:
    """Infer the platform from host substrings, else return *default*."""
    lowered = raw.lower()
    for hint, platform in _HOST_HINTS:
        if hint in lowered:
            return platform
    return default


def resolve(raw_input: str, default_platform: Platform = Platform.INSTAGRAM) -> Identity:
    """Best-effort ``{platform, handle}`` for *raw_input*. Never raises.

    Unmatched input is treated as a bare handle (leading ``@`` stripped). The
    handle may come back empty; deciding what to do with that is the caller's
    job.
    """
    text = (raw_input or "").strip()
    for platform, pattern in _HANDLE_PATTERNS:
        match = pattern.search(text)
        if match:
            return Identity(platform=platform, handle=match.group(1))

    handle = text[1:] if text.startswith("@") else text
    return Identity(platform=detect_platform(text, default_platform), handle=handle.strip())


def profile_url(identity: Identity) -> str:
    """Canonical Instagram profile URL for the scraper's ``directUrls``."""
    return _INSTAGRAM_PROFILE_URL.format(handle=identity.handle)
