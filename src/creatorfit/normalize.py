"""Normalize raw scraper records into a canonical Profile and ordered Posts.

The Apify dataset is a flat list that mixes profile-shaped records, post-shaped
records and provider error stubs, and the field names drift between actor
versions. Nothing here binds to a schema: records are classified by which
optional fields they expose, and every value is read through an ordered chain
of candidate field names.
"""

from __future__ import annotations

import enum
import logging
import math
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Any

from creatorfit.models import Platform, Post, PostType, Profile
from creatorfit.synthetic import engagement_rate, synthetic_posts

logger = logging.getLogger(__name__)

MAX_POSTS = 10

PARTIAL_DATA_NOTE = (
    "Profile data retrieved successfully, but no recent posts found. "
    "Using simulated post data based on follower count for demonstration."
)


class NormalizationError(Exception):
    """Raised when scraper output contains nothing usable as a profile."""


# ── Field chains ───────────────────────────────────────────────────────────


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().replace(",", ""))
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _as_text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _as_flag(value: Any) -> bool | None:
    return True if value is True else None


def field_chain(
    *names: str, parse: Callable[[Any], Any] = _as_number
) -> Callable[[Mapping[str, Any]], Any]:
    """Build an accessor returning the first parseable value among *names*.

    Fields that are missing or that *parse* rejects (returns ``None``) are
    skipped; the accessor returns ``None`` when the whole chain misses.
    """

    def resolve(record: Mapping[str, Any]) -> Any:
        for name in names:
            if name in record:
                parsed = parse(record[name])
                if parsed is not None:
                    return parsed
        return None

    return resolve


_FOLLOWERS = field_chain("followersCount", "followers", "subscribersCount", "followerCount")
_BIO = field_chain("biography", "bio", "description", parse=_as_text)
_VERIFIED = field_chain("verified", "isVerified", parse=_as_flag)

_LIKES = field_chain(
    "likesCount", "likes", "likeCount", "likes_count", "like_count", "totalLikes"
)
_COMMENTS = field_chain(
    "commentsCount", "comments", "commentCount", "comments_count", "comment_count",
    "totalComments",
)
_SHARES = field_chain("sharesCount", "shares", "shareCount")
_CAPTION = field_chain("caption", "text", "description", parse=_as_text)


# ── Classification ─────────────────────────────────────────────────────────


class RecordKind(enum.Flag):
    UNKNOWN = 0
    PROFILE = enum.auto()
    POST = enum.auto()


_PROFILE_FIELDS = frozenset(
    {"followersCount", "followers", "subscribersCount", "followerCount", "biography", "username"}
)
_POST_FIELDS = frozenset(
    {"likesCount", "likes", "commentsCount", "comments", "caption", "timestamp", "publishedAt"}
)
_NESTED_POST_ARRAYS = ("latestPosts", "latestIgtvVideos")


def classify(record: Mapping[str, Any]) -> RecordKind:
    """Tag a record as profile-like, post-like, both, or neither."""
    kind = RecordKind.UNKNOWN
    marker = record.get("type")
    if marker == "userProfile" or not _PROFILE_FIELDS.isdisjoint(record):
        kind |= RecordKind.PROFILE
    if marker == "post" or not _POST_FIELDS.isdisjoint(record):
        kind |= RecordKind.POST
    return kind


def _nested_posts(record: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    nested: list[Mapping[str, Any]] = []
    for key in _NESTED_POST_ARRAYS:
        items = record.get(key)
        if isinstance(items, list):
            nested.extend(item for item in items if isinstance(item, Mapping))
    return nested


# ── Post fields ────────────────────────────────────────────────────────────

_TYPE_ALIASES: dict[str, PostType] = {
    "image": PostType.PHOTO,
    "photo": PostType.PHOTO,
    "graphimage": PostType.PHOTO,
    "video": PostType.VIDEO,
    "graphvideo": PostType.VIDEO,
    "reel": PostType.VIDEO,
    "igtv": PostType.VIDEO,
    "clips": PostType.VIDEO,
    "sidecar": PostType.CAROUSEL,
    "graphsidecar": PostType.CAROUSEL,
    "carousel": PostType.CAROUSEL,
}


def _post_type(record: Mapping[str, Any]) -> PostType:
    marker = record.get("type")
    if isinstance(marker, str) and marker.strip():
        return _TYPE_ALIASES.get(marker.strip().lower(), PostType.OTHER)
    if record.get("isVideo") is True:
        return PostType.VIDEO
    return PostType.PHOTO


def _as_date(value: Any) -> date | None:
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip()).date()
        except ValueError:
            return None
    number = _as_number(value)
    if number is None:
        return None
    # Epoch seconds or milliseconds.
    seconds = number / 1000 if number > 1e11 else number
    try:
        return datetime.fromtimestamp(seconds, tz=UTC).date()
    except (OverflowError, OSError, ValueError):
        return None


_POSTED_AT = field_chain("timestamp", "publishedAt", parse=_as_date)


def _count(accessor: Callable[[Mapping[str, Any]], Any], record: Mapping[str, Any]) -> int:
    value = accessor(record)
    return max(0, int(value)) if value is not None else 0


def _build_post(ordinal: int, record: Mapping[str, Any], followers: int) -> Post:
    likes = _count(_LIKES, record)
    comments = _count(_COMMENTS, record)
    shares = _count(_SHARES, record)
    posted_at = _POSTED_AT(record)
    return Post(
        id=ordinal,
        caption=_CAPTION(record) or "No caption",
        likes=likes,
        comments=comments,
        shares=shares,
        engagement_rate=engagement_rate(likes, comments, shares, followers),
        posted_ago=posted_at.isoformat() if posted_at else f"{ordinal} days ago",
        type=_post_type(record),
    )


def mean_engagement(posts: list[Post], followers: int) -> float:
    """Average per-post engagement, as a percentage of *followers*."""
    if not posts or followers <= 0:
        return 0.0
    total = sum(post.interactions for post in posts)
    return round(total / len(posts) / followers * 100, 2)


# ── Entry point ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class NormalizedCreator:
    profile: Profile
    posts: list[Post]
    simulated_posts: bool = False
    note: str | None = None


def normalize(
    records: Iterable[Any],
    handle: str,
    platform: Platform = Platform.INSTAGRAM,
) -> NormalizedCreator:
    """Build the canonical profile and up to ten posts from raw *records*."""
    usable = [
        r for r in records
        if isinstance(r, Mapping) and not ("error" in r and classify(r) == RecordKind.UNKNOWN)
    ]
    if not usable:
        raise NormalizationError("No valid profile data found in scraper results")

    profile_source: Mapping[str, Any] | None = None
    candidates: list[Mapping[str, Any]] = []
    for record in usable:
        kind = classify(record)
        if RecordKind.PROFILE in kind:
            if profile_source is None:
                profile_source = record
            candidates.extend(_nested_posts(record))
        if RecordKind.POST in kind:
            candidates.append(record)

    if profile_source is None:
        logger.info("No profile-shaped record; using the first record as profile")
        profile_source = usable[0]

    followers = _count(_FOLLOWERS, profile_source)
    logger.info(
        "Normalizing %d records: followers=%d, %d post candidates",
        len(usable), followers, len(candidates),
    )

    if candidates:
        posts = [
            _build_post(i, record, followers)
            for i, record in enumerate(candidates[:MAX_POSTS], start=1)
        ]
        simulated, note = False, None
    else:
        logger.warning("No posts for @%s; generating simulated posts", handle)
        posts = synthetic_posts(
            handle,
            followers,
            caption="Recent post {n} from @{handle} - simulated based on profile data",
            with_shares=True,
        )
        simulated, note = True, PARTIAL_DATA_NOTE

    profile = Profile(
        handle=handle,
        platform=platform,
        followers=followers,
        engagement_rate=mean_engagement(posts, followers),
        bio=_BIO(profile_source) or "No bio available",
        verified=bool(_VERIFIED(profile_source)),
    )
    return NormalizedCreator(profile=profile, posts=posts, simulated_posts=simulated, note=note)
