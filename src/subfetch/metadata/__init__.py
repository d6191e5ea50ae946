"""Metadata scraping for subfetch.

This package contains clients that look up canonical media information
from third-party services and merge it into locally parsed media.
"""

from subfetch.metadata.tmdb import TMDBScraper

__all__ = ["TMDBScraper"]
