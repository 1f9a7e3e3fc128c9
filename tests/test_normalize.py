"""Unit tests for scraper-record normalization."""

import pytest

from creatorfit.models import Platform, PostType
from creatorfit.normalize import (
    NormalizationError,
    RecordKind,
    classify,
    field_chain,
    normalize,
)


def _profile(**extra: object) -> dict:
    record: dict = {
        "username": "humansofny",
        "followersCount": 10_000,
        "biography": "Stories from the streets of New York",
        "verified": True,
    }
    record.update(extra)
    return record


def _post(likes: int = 100, comments: int = 10, **extra: object) -> dict:
    record: dict = {
        "caption": "Volunteer day at the food bank",
        "likesCount": likes,
        "commentsCount": comments,
        "timestamp": "2024-03-05T18:22:10.000Z",
        "type": "Image",
    }
    record.update(extra)
    return record


class TestClassify:
    def test_profile_record(self) -> None:
        assert classify(_profile()) == RecordKind.PROFILE

    def test_post_record(self) -> None:
        assert classify(_post()) == RecordKind.POST

    def test_profile_type_marker(self) -> None:
        assert classify({"type": "userProfile"}) == RecordKind.PROFILE

    def test_both(self) -> None:
        kind = classify({"username": "a", "caption": "b"})
        assert RecordKind.PROFILE in kind
        assert RecordKind.POST in kind

    def test_unknown(self) -> None:
        assert classify({"url": "https://example.com"}) == RecordKind.UNKNOWN


class TestFieldChain:
    def test_first_parseable_wins(self) -> None:
        likes = field_chain("likesCount", "likes", "likeCount")
        assert likes({"likesCount": None, "likes": "n/a", "likeCount": "1,204"}) == 1204

    def test_skips_non_finite(self) -> None:
        likes = field_chain("likes", "likeCount")
        assert likes({"likes": float("nan"), "likeCount": 7}) == 7

    def test_misses_return_none(self) -> None:
        assert field_chain("likes")({"comments": 3}) is None

    def test_booleans_are_not_counts(self) -> None:
        assert field_chain("likes")({"likes": True}) is None


class TestNormalize:
    def test_profile_with_nested_posts_only(self) -> None:
        record = _profile(latestPosts=[_post(), _post(likes=2000), _post(likes=50)])
        result = normalize([record], "humansofny")
        assert len(result.posts) == 3
        assert not result.simulated_posts
        assert result.note is None
        assert [p.id for p in result.posts] == [1, 2, 3]
        assert result.posts[1].likes == 2000

    def test_nested_igtv_videos_are_harvested(self) -> None:
        record = _profile(latestIgtvVideos=[{"caption": "clip", "isVideo": True}])
        result = normalize([record], "humansofny")
        assert len(result.posts) == 1
        assert result.posts[0].type is PostType.VIDEO

    def test_like_count_fallback(self) -> None:
        post = {"caption": "hello", "likeCount": 321}
        result = normalize([_profile(), post], "humansofny")
        assert result.posts[0].likes == 321

    def test_profile_fields(self) -> None:
        result = normalize([_profile(), _post()], "humansofny", Platform.INSTAGRAM)
        profile = result.profile
        assert profile.handle == "humansofny"
        assert profile.followers == 10_000
        assert profile.bio == "Stories from the streets of New York"
        assert profile.verified is True

    def test_profile_defaults(self) -> None:
        result = normalize([{"username": "quiet"}, _post()], "quiet")
        assert result.profile.followers == 0
        assert result.profile.bio == "No bio available"
        assert result.profile.verified is False

    def test_follower_fallbacks(self) -> None:
        result = normalize([{"username": "yt", "subscribersCount": "52000"}, _post()], "yt")
        assert result.profile.followers == 52_000

    def test_engagement_rates(self) -> None:
        posts = [_post(likes=180, comments=20), _post(likes=80, comments=20)]
        result = normalize([_profile(), *posts], "humansofny")
        assert [p.engagement_rate for p in result.posts] == [2.0, 1.0]
        assert result.profile.engagement_rate == 1.5

    def test_zero_followers_zero_engagement(self) -> None:
        result = normalize([{"username": "new", "followersCount": 0}, _post()], "new")
        assert result.posts[0].engagement_rate == 0
        assert result.profile.engagement_rate == 0

    def test_truncates_to_ten_in_order(self) -> None:
        posts = [_post(likes=i) for i in range(15)]
        result = normalize([_profile(), *posts], "humansofny")
        assert len(result.posts) == 10
        assert [p.likes for p in result.posts] == list(range(10))

    def test_post_fields(self) -> None:
        result = normalize([_profile(), _post(type="Sidecar", sharesCount=4)], "humansofny")
        post = result.posts[0]
        assert post.caption == "Volunteer day at the food bank"
        assert post.posted_ago == "2024-03-05"
        assert post.type is PostType.CAROUSEL
        assert post.shares == 4

    def test_post_defaults(self) -> None:
        result = normalize([_profile(), {"type": "post"}], "humansofny")
        post = result.posts[0]
        assert post.caption == "No caption"
        assert post.likes == 0
        assert post.comments == 0
        assert post.posted_ago == "1 days ago"
        assert post.type is PostType.OTHER

    def test_hidden_like_count_clamps_to_zero(self) -> None:
        result = normalize([_profile(), _post(likes=-1)], "humansofny")
        assert result.posts[0].likes == 0

    def test_epoch_timestamp(self) -> None:
        result = normalize([_profile(), _post(timestamp=1_700_000_000)], "humansofny")
        assert result.posts[0].posted_ago == "2023-11-14"

    def test_no_posts_falls_back_to_simulated(self) -> None:
        result = normalize([_profile()], "humansofny")
        assert result.simulated_posts
        assert result.note is not None
        assert len(result.posts) == 10
        assert result.posts[0].caption.startswith("Recent post 1 from @humansofny")
        again = normalize([_profile()], "humansofny")
        assert [p.likes for p in result.posts] == [p.likes for p in again.posts]

    def test_first_record_used_when_no_profile_shape(self) -> None:
        result = normalize([{"caption": "just a post", "likes": 5}], "someone")
        assert result.profile.followers == 0
        assert len(result.posts) == 1

    def test_empty_records_raise(self) -> None:
        with pytest.raises(NormalizationError):
            normalize([], "humansofny")

    def test_provider_error_records_raise(self) -> None:
        records = [{"error": "not_found", "errorDescription": "Page not found"}]
        with pytest.raises(NormalizationError):
            normalize(records, "humansofny")

    def test_non_mapping_records_ignored(self) -> None:
        result = normalize(["garbage", None, _profile(latestPosts=[_post()])], "humansofny")
        assert len(result.posts) == 1
