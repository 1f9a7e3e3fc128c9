"""Analysis pipeline — wires resolve → scrape → normalize → brand-fit score."""

from __future__ import annotations

import logging
import threading

from creatorfit import config
from creatorfit.apify_client import ApifyScraper, ScrapeError
from creatorfit.brandfit import BrandFitScorer
from creatorfit.identity import profile_url, resolve
from creatorfit.models import AnalysisResult, Identity, Platform, Post, Profile
from creatorfit.normalize import NormalizationError, normalize
from creatorfit.synthetic import simulated_profile, synthetic_posts

logger = logging.getLogger(__name__)


class AnalysisError(Exception):
    """Raised when the input cannot be analyzed at all (e.g. an empty handle)."""


class CreatorAnalyzer:
    """Runs one independent analysis per call; holds no per-run state."""

    def __init__(self, scraper: ApifyScraper | None, scorer: BrandFitScorer) -> None:
        self._scraper = scraper
        self._scorer = scorer

    def analyze(
        self,
        raw_input: str,
        *,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> AnalysisResult:
        """Analyze a creator URL or handle.

        Scraper and normalization failures never escape: the run degrades to
        simulated data and the reason is returned as ``advisory``.
        """
        identity = resolve(raw_input)
        if not identity.handle:
            raise AnalysisError("A creator URL or handle is required")
        logger.info("=== analysis start [@%s on %s] ===", identity.handle, identity.platform)

        profile, posts, simulated, advisory = self._collect(identity, timeout, cancel)

        brand_fit = self._scorer.score(posts, identity.handle)
        logger.info(
            "=== analysis done [@%s] — fit %d/100 (%s)%s ===",
            identity.handle,
            brand_fit.overall_score,
            brand_fit.recommendation,
            " [simulated]" if simulated else "",
        )
        return AnalysisResult(
            profile=profile,
            posts=posts,
            brand_fit=brand_fit,
            simulated=simulated,
            advisory=advisory,
        )

    # ── private ─────────────────────────────────────────────────────────

    def _collect(
        self,
        identity: Identity,
        timeout: float | None,
        cancel: threading.Event | None,
    ) -> tuple[Profile, list[Post], bool, str | None]:
        if identity.platform is not Platform.INSTAGRAM:
            profile, posts = _simulate(
                identity,
                bio=f"Content creator focused on {identity.platform}",
                caption=f"Sample {identity.platform} content {{n}}",
            )
            return profile, posts, True, (
                f"Live data is only available for Instagram; "
                f"showing simulated {identity.platform} data."
            )

        if self._scraper is None:
            profile, posts = _simulate(
                identity,
                bio=f"Demo profile for @{identity.handle} - Live API not configured",
            )
            return profile, posts, True, (
                "APIFY_TOKEN not configured. Using simulated data for demonstration."
            )

        try:
            records = self._scraper.scrape(profile_url(identity), timeout=timeout, cancel=cancel)
            normalized = normalize(records, identity.handle, identity.platform)
        except (ScrapeError, NormalizationError) as exc:
            logger.error("Live scrape for @%s failed, using simulated data: %s", identity.handle, exc)
            profile, posts = _simulate(
                identity,
                bio=f"Demo profile for @{identity.handle} - Live API temporarily unavailable",
            )
            return profile, posts, True, (
                f"Live API failed: {exc}. Using simulated data for demonstration."
            )

        return normalized.profile, normalized.posts, normalized.simulated_posts, normalized.note


def _simulate(
    identity: Identity,
    bio: str,
    caption: str = "Demo post {n} content - using simulated data",
) -> tuple[Profile, list[Post]]:
    profile = simulated_profile(identity.handle, identity.platform, bio=bio)
    return profile, synthetic_posts(identity.handle, profile.followers, caption=caption)


def build_analyzer() -> CreatorAnalyzer:
    """Construct an analyzer from environment configuration."""
    scraper = None
    if config.scraping_enabled():
        scraper = ApifyScraper(
            token=config.APIFY_TOKEN,
            actor_id=config.APIFY_ACTOR_ID,
            base_url=config.APIFY_BASE_URL,
            poll_interval=config.SCRAPE_POLL_INTERVAL,
            max_attempts=config.SCRAPE_MAX_ATTEMPTS,
        )
    else:
        logger.warning("APIFY_TOKEN not set — Instagram runs will use simulated data.")
    scorer = BrandFitScorer(
        provider=config.LLM_PROVIDER,
        api_key=config.LLM_API_KEY,
        model=config.LLM_MODEL,
    )
    return CreatorAnalyzer(scraper=scraper, scorer=scorer)


def analyze(
    raw_input: str,
    *,
    timeout: float | None = None,
    cancel: threading.Event | None = None,
) -> AnalysisResult:
    """One-shot analysis using the environment-configured scraper and scorer."""
    if timeout is None:
        timeout = config.SCRAPE_TIMEOUT
    return build_analyzer().analyze(raw_input, timeout=timeout, cancel=cancel)
