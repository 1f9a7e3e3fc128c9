"""Brand-fit scoring — keyword heuristics, optionally replaced by an LLM read."""

from __future__ import annotations

import json
import logging
import math
from typing import Any

from openai import OpenAI
from pydantic import BaseModel, ConfigDict, Field

from creatorfit.models import (
    AIInsights,
    BrandFitScore,
    HeuristicInsights,
    Post,
    Recommendation,
)

logger = logging.getLogger(__name__)

# ── Lexicons ───────────────────────────────────────────────────────────────
_CAUSE_KEYWORDS: tuple[str, ...] = (
    "charity", "donate", "fundraising", "nonprofit", "cause", "help", "support",
    "community", "giving", "volunteer", "social impact", "philanthropy",
)

_RISK_KEYWORDS: tuple[str, ...] = (
    "controversy", "scandal", "political", "offensive", "inappropriate",
)

_HIGH_ENGAGEMENT_LIKES = 1000

# ── Weights ────────────────────────────────────────────────────────────────
_W_CAUSE = 0.4
_W_SAFETY = 0.3
_W_AUTHENTICITY = 0.3
_GREEN_AT = 75
_RED_BELOW = 50

_PROMPT_TEMPLATE = """\
Analyze this Instagram creator's content for nonprofit brand partnership potential:

Creator: @{handle}
Recent posts:
{captions}

Score each category 0-100:
1. Cause Alignment: How often do they mention charitable causes, fundraising, helping others?
2. Brand Safety: Absence of controversial, political, or inappropriate content
3. Audience Authenticity: Quality engagement vs follower count

Return JSON format:
{{
  "causeAlignment": 85,
  "brandSafety": 92,
  "audienceAuthenticity": 78,
  "insights": "Brief analysis of why these scores were given"
}}"""


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _recommend(overall: int) -> Recommendation:
    if overall >= _GREEN_AT:
        return Recommendation.GREEN
    if overall < _RED_BELOW:
        return Recommendation.RED
    return Recommendation.AMBER


def _weighted(cause: float, safety: float, authenticity: float) -> int:
    return _round_half_up(
        cause * _W_CAUSE + safety * _W_SAFETY + authenticity * _W_AUTHENTICITY
    )


def heuristic_score(posts: list[Post]) -> BrandFitScore:
    """Score *posts* with the cause/risk lexicons and like counts."""
    cause_hits = 0
    risk_hits = 0
    engaged = 0
    for post in posts:
        text = post.caption.lower()
        cause_hits += sum(1 for kw in _CAUSE_KEYWORDS if kw in text)
        risk_hits += sum(1 for kw in _RISK_KEYWORDS if kw in text)
        if post.likes > _HIGH_ENGAGEMENT_LIKES:
            engaged += 1

    n = max(len(posts), 1)
    cause_alignment = min(100.0, cause_hits / n * 100 + 20)
    brand_safety = max(0.0, 100 - risk_hits / n * 50)
    audience_authenticity = min(100.0, engaged / n * 100 + 30)
    overall = _weighted(cause_alignment, brand_safety, audience_authenticity)

    return BrandFitScore(
        overall_score=overall,
        cause_alignment=_round_half_up(cause_alignment),
        brand_safety=_round_half_up(brand_safety),
        audience_authenticity=_round_half_up(audience_authenticity),
        recommendation=_recommend(overall),
        insights=HeuristicInsights(
            cause_content_count=cause_hits,
            risk_factor_count=risk_hits,
            high_engagement_post_count=engaged,
        ),
    )


class _AIVerdict(BaseModel):
    """Shape the model is asked to reply with."""

    model_config = ConfigDict(populate_by_name=True)

    cause_alignment: float = Field(alias="causeAlignment", allow_inf_nan=False)
    brand_safety: float = Field(alias="brandSafety", allow_inf_nan=False)
    audience_authenticity: float = Field(alias="audienceAuthenticity", allow_inf_nan=False)
    insights: str


def _clamp_score(value: float) -> int:
    return _round_half_up(min(100.0, max(0.0, value)))


class BrandFitScorer:
    """Scores brand fit with an LLM when configured, otherwise heuristically.

    Any failure on the LLM path (transport, bad JSON, missing fields) discards
    that attempt entirely and returns the heuristic score instead.
    """

    def __init__(
        self,
        provider: str = "openai",
        api_key: str = "",
        model: str = "gpt-4o-mini",
        client: Any = None,
    ) -> None:
        self._provider = provider.lower()
        self._model = model
        self._client: Any = client

        if self._client is not None:
            return
        if not api_key:
            logger.info("LLM_API_KEY not set — brand fit will use keyword heuristics.")
            return
        if self._provider == "openai":
            self._client = OpenAI(api_key=api_key)
        else:
            logger.warning("Unknown LLM_PROVIDER '%s'; using keyword heuristics.", provider)

    @property
    def ai_enabled(self) -> bool:
        return self._client is not None

    # ── public ──────────────────────────────────────────────────────────

    def score(self, posts: list[Post], handle: str) -> BrandFitScore:
        if self._client is None:
            return heuristic_score(posts)
        try:
            return self._score_with_llm(posts, handle)
        except Exception:
            logger.warning("AI brand-fit analysis failed, using fallback", exc_info=True)
            return heuristic_score(posts)

    # ── private ─────────────────────────────────────────────────────────

    def _score_with_llm(self, posts: list[Post], handle: str) -> BrandFitScore:
        captions = "\n\n".join(post.caption for post in posts)
        prompt = _PROMPT_TEMPLATE.format(handle=handle, captions=captions)
        resp = self._client.chat.completions.create(
            model=self._model,
            messages=[{"role": "user", "content": prompt}],
            temperature=0.3,
            max_tokens=500,
        )
        verdict = self._parse_verdict(resp.choices[0].message.content or "")

        cause = _clamp_score(verdict.cause_alignment)
        safety = _clamp_score(verdict.brand_safety)
        authenticity = _clamp_score(verdict.audience_authenticity)
        overall = _weighted(cause, safety, authenticity)
        logger.info("AI brand fit for @%s: %d/100", handle, overall)

        return BrandFitScore(
            overall_score=overall,
            cause_alignment=cause,
            brand_safety=safety,
            audience_authenticity=authenticity,
            recommendation=_recommend(overall),
            insights=AIInsights(ai_analysis=verdict.insights),
        )

    @staticmethod
    def _parse_verdict(raw: str) -> _AIVerdict:
        """Parse the model's JSON reply, tolerating a surrounding code fence."""
        text = raw.strip()
        if text.startswith("```"):
            text = text.strip("`").strip()
            if text.lower().startswith("json"):
                text = text[4:]
        return _AIVerdict.model_validate(json.loads(text))
