"""Centralised configuration loaded from environment variables and dotenv."""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

# ── Apify (Instagram scraper actor) ────────────────────────────────────────
APIFY_TOKEN: str = os.getenv("APIFY_TOKEN", "")
APIFY_ACTOR_ID: str = os.getenv("APIFY_ACTOR_ID", "apify~instagram-scraper")
APIFY_BASE_URL: str = os.getenv("APIFY_BASE_URL", "https://api.apify.com/v2")

# ── Scrape polling ─────────────────────────────────────────────────────────
SCRAPE_POLL_INTERVAL: float = float(os.getenv("SCRAPE_POLL_INTERVAL", "10"))
SCRAPE_MAX_ATTEMPTS: int = int(os.getenv("SCRAPE_MAX_ATTEMPTS", "60"))
# Overall deadline in seconds; empty means only the attempt bound applies.
SCRAPE_TIMEOUT: float | None = (
    float(os.environ["SCRAPE_TIMEOUT"]) if os.getenv("SCRAPE_TIMEOUT") else None
)

# ── LLM (brand-fit analysis) ───────────────────────────────────────────────
LLM_PROVIDER: str = os.getenv("LLM_PROVIDER", "openai")
LLM_API_KEY: str = os.getenv("LLM_API_KEY", "")
LLM_MODEL: str = os.getenv("LLM_MODEL", "gpt-4o-mini")


def scraping_enabled() -> bool:
    """Return True when an Apify token is configured."""
    return bool(APIFY_TOKEN)
