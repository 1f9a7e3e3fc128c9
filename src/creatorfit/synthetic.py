"""Deterministic simulated creator data, seeded from the handle.

Used when live data is unavailable (non-Instagram platforms, scraper errors)
or when a scraped profile came back without any posts. The same handle always
produces the same numbers.
"""

from __future__ import annotations

import math

from creatorfit.models import Platform, Post, PostType, Profile

_INT32_MAX = 2147483647
_SYNTHETIC_POST_COUNT = 10
_SYNTHETIC_TYPES: list[PostType] = [PostType.PHOTO, PostType.VIDEO, PostType.CAROUSEL]


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value >= 0x80000000 else value


def handle_hash(handle: str) -> int:
    """Rolling ``h*31 + c`` over UTF-16 code units, folded to signed 32 bits."""
    encoded = handle.encode("utf-16-le")
    h = 0
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        h = _to_int32(h * 31 + unit)
    return h


def seed_for(handle: str) -> float:
    return abs(handle_hash(handle)) / _INT32_MAX


def engagement_rate(likes: int, comments: int, shares: int, followers: int) -> float:
    """Per-post engagement percentage, 0 when there are no followers."""
    if followers <= 0:
        return 0.0
    return round((likes + comments + shares) / followers * 100, 2)


def synthetic_posts(
    handle: str,
    followers: int,
    caption: str = "Demo post {n} content - using simulated data",
    with_shares: bool = False,
) -> list[Post]:
    """Ten posts derived from the handle seed and *followers*.

    ``caption`` is formatted with ``n`` (1-based ordinal) and ``handle``.
    """
    seed = seed_for(handle)
    posts: list[Post] = []
    for i in range(_SYNTHETIC_POST_COUNT):
        post_seed = seed + i * 0.1
        likes = math.floor(followers * (post_seed * 0.05 + 0.01))
        comments = math.floor(likes * (post_seed * 0.1 + 0.02))
        shares = math.floor(likes * 0.05) if with_shares else 0
        posts.append(
            Post(
                id=i + 1,
                caption=caption.format(n=i + 1, handle=handle),
                likes=likes,
                comments=comments,
                shares=shares,
                engagement_rate=engagement_rate(likes, comments, shares, followers),
                posted_ago=f"{math.floor(post_seed * 7) + 1} days ago",
                type=_SYNTHETIC_TYPES[math.floor(post_seed * 3) % len(_SYNTHETIC_TYPES)],
            )
        )
    return posts


def simulated_profile(handle: str, platform: Platform, bio: str) -> Profile:
    seed = seed_for(handle)
    return Profile(
        handle=handle,
        platform=platform,
        followers=math.floor(seed * 2_000_000) + 50_000,
        engagement_rate=round(seed * 5 + 1, 2),
        bio=bio,
        verified=seed > 0.7,
    )
