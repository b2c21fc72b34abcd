"""Shopping platform registry."""

from __future__ import annotations

from typing import Optional

from shopping_agent.platforms.base import Platform, ProductListing
from shopping_agent.platforms.amazon import AmazonPlatform
from shopping_agent.platforms.flipkart import FlipkartPlatform
from shopping_agent.platforms.meesho import MeeshoPlatform
from shopping_agent.platforms.myntra import MyntraPlatform
from shopping_agent.platforms.ajio import AjioPlatform
from shopping_agent.platforms.croma import CromaPlatform


# Visit order for multi-platform searches
PLATFORMS: list[Platform] = [
    AmazonPlatform(),
    FlipkartPlatform(),
    MeeshoPlatform(),
    MyntraPlatform(),
    AjioPlatform(),
    CromaPlatform(),
]

_PLATFORMS_BY_KEY = {platform.key: platform for platform in PLATFORMS}


def get_platform(key: Optional[str]) -> Optional[Platform]:
    """Return the platform for a key such as "amazon", or None if unsupported."""
    if not key:
        return None
    return _PLATFORMS_BY_KEY.get(key.strip().lower())


__all__ = [
    "PLATFORMS",
    "Platform",
    "ProductListing",
    "get_platform",
]
