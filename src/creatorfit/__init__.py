"""Creator brand-fit analysis and sponsorship valuation."""

__version__ = "0.1.0"
