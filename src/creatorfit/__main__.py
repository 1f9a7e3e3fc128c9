"""CLI entry-point: ``python -m creatorfit analyze`` / ``python -m creatorfit price``."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from pydantic import ValidationError

from creatorfit.engine import AnalysisError, analyze
from creatorfit.models import (
    AnalysisResult,
    ExclusivityTier,
    Platform,
    PricingConfiguration,
    Profile,
    UsageRight,
    ValuationResult,
)
from creatorfit.pricing import price

logger = logging.getLogger(__name__)

_RECOMMENDATION_TEXT = {
    "green": "EXCELLENT FIT - Highly recommended for nonprofit campaigns",
    "amber": "GOOD FIT - Recommended with proper guidelines",
    "red": "POOR FIT - Consider alternative creators",
}


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _pricing_config(args: argparse.Namespace) -> PricingConfiguration:
    return PricingConfiguration(
        deliverable_count=args.deliverables,
        exclusivity=ExclusivityTier(args.exclusivity),
        usage_rights=frozenset(UsageRight(r) for r in args.usage_right),
    )


def _print_valuation(profile: Profile, valuation: ValuationResult) -> None:
    print("\nPricing")
    if not valuation.final_price:
        print("  Not priced (no followers or engagement data).")
        return
    print(
        f"  Base rate:   ${valuation.base_rate:,} "
        f"({profile.followers:,} followers × {profile.engagement_rate}%)"
    )
    print(f"  Final price: ${valuation.final_price:,}")
    print(
        f"  EMV:         ${round(valuation.estimated_media_value):,} "
        f"(reach {round(valuation.estimated_reach):,}, ROI {valuation.roi_percent}%)"
    )


def _print_analysis(result: AnalysisResult) -> None:
    p = result.profile
    fit = result.brand_fit
    if result.advisory:
        print(f"NOTE: {result.advisory}\n")

    print(f"@{p.handle}{' ✓' if p.verified else ''} — {p.platform}")
    print(f"  {p.bio}")
    print(f"  Followers: {p.followers:,}   Engagement: {p.engagement_rate}%")

    print(f"\nBrand fit: {fit.overall_score}/100 ({fit.recommendation})")
    print(f"  Cause alignment:       {fit.cause_alignment}/100")
    print(f"  Brand safety:          {fit.brand_safety}/100")
    print(f"  Audience authenticity: {fit.audience_authenticity}/100")
    print(f"  {_RECOMMENDATION_TEXT[fit.recommendation]}")
    insights = fit.insights
    if fit.ai_powered:
        print(f"  AI analysis: {insights.ai_analysis}")
    else:
        print(f"  • {insights.cause_content_count} cause keyword mentions")
        print(f"  • {insights.risk_factor_count} potential brand safety concerns")
        print(f"  • {insights.high_engagement_post_count} posts with high engagement")

    top = sorted(result.posts, key=lambda post: post.engagement_rate, reverse=True)[:3]
    if top:
        print("\nTop performing posts")
    for i, post in enumerate(top, start=1):
        caption = post.caption if len(post.caption) <= 80 else post.caption[:80] + "..."
        print(f"  {i}. {post.engagement_rate}% — {post.likes:,} likes, {post.comments:,} comments")
        print(f'     "{caption}"')


def _cmd_analyze(args: argparse.Namespace) -> None:
    try:
        config = _pricing_config(args)
        result = analyze(args.target, timeout=args.timeout)
    except (AnalysisError, ValidationError) as exc:
        logger.error("%s", exc)
        sys.exit(1)

    valuation = price(result.profile, config)
    if args.json:
        payload = {
            "analysis": result.model_dump(mode="json"),
            "valuation": valuation.model_dump(mode="json"),
        }
        print(json.dumps(payload, indent=2))
        return
    _print_analysis(result)
    _print_valuation(result.profile, valuation)


def _cmd_price(args: argparse.Namespace) -> None:
    try:
        profile = Profile(
            handle=args.handle,
            platform=Platform(args.platform),
            followers=args.followers,
            engagement_rate=args.engagement_rate,
        )
        config = _pricing_config(args)
    except ValidationError as exc:
        logger.error("Invalid pricing input: %s", exc)
        sys.exit(1)
    valuation = price(profile, config)
    if args.json:
        print(json.dumps(valuation.model_dump(mode="json"), indent=2))
        return
    _print_valuation(profile, valuation)


def _add_pricing_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--deliverables",
        type=int,
        default=1,
        help="Number of deliverables (default: 1).",
    )
    parser.add_argument(
        "--exclusivity",
        choices=[t.value for t in ExclusivityTier],
        default=ExclusivityTier.NONE.value,
        help="Exclusivity window (default: none).",
    )
    parser.add_argument(
        "--usage-right",
        action="append",
        choices=[r.value for r in UsageRight],
        default=[],
        help="Usage right to include; repeat for several.",
    )
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text.")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="creatorfit",
        description="Creator brand-fit analysis and sponsorship pricing.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    sub = parser.add_subparsers(dest="command")

    # ── analyze ────────────────────────────────────────────────────────
    analyze_parser = sub.add_parser("analyze", help="Analyze a creator URL or @handle.")
    analyze_parser.add_argument("target", help="Profile URL or @handle.")
    analyze_parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Give up on the live scrape after this many seconds.",
    )
    _add_pricing_args(analyze_parser)

    # ── price ──────────────────────────────────────────────────────────
    price_parser = sub.add_parser("price", help="Price a creator from known stats.")
    price_parser.add_argument("--followers", type=int, required=True)
    price_parser.add_argument(
        "--engagement-rate", type=float, required=True, help="Engagement rate in percent."
    )
    price_parser.add_argument(
        "--platform",
        choices=[p.value for p in Platform],
        default=Platform.INSTAGRAM.value,
    )
    price_parser.add_argument("--handle", default="creator")
    _add_pricing_args(price_parser)

    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    if args.command == "analyze":
        _cmd_analyze(args)
    elif args.command == "price":
        _cmd_price(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
