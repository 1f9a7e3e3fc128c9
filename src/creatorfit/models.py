"""Domain models shared by the resolver, normalizer, scorer and pricing engine."""

from __future__ import annotations

from datetime import date
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Platform(StrEnum):
    INSTAGRAM = "instagram"
    TIKTOK = "tiktok"
    YOUTUBE = "youtube"
    LINKEDIN = "linkedin"
    TWITTER = "twitter"
    OTHER = "other"


class PostType(StrEnum):
    PHOTO = "photo"
    VIDEO = "video"
    CAROUSEL = "carousel"
    OTHER = "other"


class Recommendation(StrEnum):
    GREEN = "green"
    AMBER = "amber"
    RED = "red"


class ExclusivityTier(StrEnum):
    NONE = "none"
    DAYS_30 = "30d"
    DAYS_90 = "90d"
    DAYS_180 = "180d"
    DAYS_365 = "365d"


class UsageRight(StrEnum):
    BRAND_REPOST = "brand_repost"
    PAID_ADS = "paid_ads"
    WEBSITE = "website"


class Identity(BaseModel):
    model_config = ConfigDict(frozen=True)

    platform: Platform = Platform.INSTAGRAM
    handle: str = ""


class Profile(BaseModel):
    model_config = ConfigDict(frozen=True)

    handle: str
    platform: Platform = Platform.INSTAGRAM
    followers: int = Field(default=0, ge=0)
    engagement_rate: float = Field(default=0.0, ge=0)  # percent
    bio: str = "No bio available"
    verified: bool = False
    last_updated: date = Field(default_factory=date.today)


class Post(BaseModel):
    id: int = Field(ge=1)  # run-local ordinal, not the provider's id
    caption: str = "No caption"
    likes: int = Field(default=0, ge=0)
    comments: int = Field(default=0, ge=0)
    shares: int = Field(default=0, ge=0)
    engagement_rate: float = Field(default=0.0, ge=0)
    posted_ago: str = ""
    type: PostType = PostType.PHOTO

    @property
    def interactions(self) -> int:
        return self.likes + self.comments + self.shares


class HeuristicInsights(BaseModel):
    model_config = ConfigDict(frozen=True)

    cause_content_count: int = Field(default=0, ge=0)
    risk_factor_count: int = Field(default=0, ge=0)
    high_engagement_post_count: int = Field(default=0, ge=0)


class AIInsights(BaseModel):
    model_config = ConfigDict(frozen=True)

    ai_analysis: str


class BrandFitScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    overall_score: int = Field(ge=0, le=100)
    cause_alignment: int = Field(ge=0, le=100)
    brand_safety: int = Field(ge=0, le=100)
    audience_authenticity: int = Field(ge=0, le=100)
    recommendation: Recommendation
    insights: HeuristicInsights | AIInsights

    @property
    def ai_powered(self) -> bool:
        return isinstance(self.insights, AIInsights)


class PricingConfiguration(BaseModel):
    model_config = ConfigDict(frozen=True)

    deliverable_count: int = Field(default=1, ge=1)
    exclusivity: ExclusivityTier = ExclusivityTier.NONE
    usage_rights: frozenset[UsageRight] = Field(default_factory=frozenset)


class ValuationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_rate: int = Field(default=0, ge=0)
    final_price: int = Field(default=0, ge=0)
    estimated_reach: float = Field(default=0.0, ge=0)
    estimated_media_value: float = Field(default=0.0, ge=0)

    @property
    def roi_percent(self) -> int:
        """EMV as a percentage of the final price (0 when unpriced)."""
        if not self.final_price:
            return 0
        return round(self.estimated_media_value / self.final_price * 100)


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    profile: Profile
    posts: list[Post] = Field(default_factory=list)
    brand_fit: BrandFitScore
    simulated: bool = False
    advisory: str | None = None
