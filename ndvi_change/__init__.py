"""NDVI change analysis core.

Turns map clicks into a validated area of interest, requests a
before/after NDVI change analysis for it from a remote backend, and
derives the overlay placement and summary numbers a map UI renders.
"""

__version__ = "0.1.0"
