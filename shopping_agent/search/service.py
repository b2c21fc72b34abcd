"""
Shopping search service.

Two strategies:
- Platform-specific: search one named site and return up to
  ``settings.platform_product_limit`` products.
- Universal: visit every supported site in a fixed order, skipping any that
  block automation, until ``settings.universal_product_threshold`` products
  are collected.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from playwright.async_api import Page

from shopping_agent.browser.page_state import detect_login_page
from shopping_agent.config import settings
from shopping_agent.platforms import PLATFORMS, Platform, ProductListing
from shopping_agent import metrics

logger = logging.getLogger(__name__)


@dataclass
class PlatformSearchResult:
    """Outcome of a search on one named platform."""

    products: List[ProductListing] = field(default_factory=list)
    platform_used: Optional[str] = None
    warning: Optional[str] = None
    error: Optional[str] = None


class SearchService:
    """Runs product searches on a live Playwright page."""

    def __init__(self, platforms: Optional[List[Platform]] = None):
        self.platforms = platforms if platforms is not None else PLATFORMS

    def _lookup(self, key: Optional[str]) -> Optional[Platform]:
        key = (key or "").strip().lower()
        return next((p for p in self.platforms if p.key == key), None)

    async def _open_home(self, page: Page, platform: Platform) -> None:
        await page.goto(
            platform.home_url,
            wait_until="domcontentloaded",
            timeout=settings.platform_nav_timeout_ms,
        )
        await page.wait_for_timeout(settings.platform_settle_ms)

    async def platform_search(self, page: Page, query: str, platform: str) -> PlatformSearchResult:
        """
        Search a single platform.

        Unknown platform names fall back to a universal search.

        Args:
            page: Playwright page
            query: Search term
            platform: Platform key, e.g. "flipkart"

        Returns:
            PlatformSearchResult with products or a warning/error
        """
        logger.info(f"Platform-specific search: {platform} - {query}")

        selected = self._lookup(platform)
        if selected is None:
            logger.warning(f"Unknown platform: {platform}, using universal search")
            products = await self.universal_search(page, query)
            return PlatformSearchResult(products=products)

        try:
            await self._open_home(page, selected)

            if detect_login_page(page.url):
                logger.warning(f"{selected.name} requires login or is showing a CAPTCHA")
                metrics.platform_searches_total.labels(platform=selected.key, outcome="blocked").inc()
                return PlatformSearchResult(
                    warning=f"{selected.name} requires login or is blocking automation",
                )

            if not await selected.search(page, query):
                metrics.platform_searches_total.labels(platform=selected.key, outcome="search_failed").inc()
                return PlatformSearchResult(warning=f"Search failed on {selected.name}")

            products = await selected.extract(page)

        except Exception as e:
            logger.error(f"{selected.name} error: {e}")
            metrics.platform_searches_total.labels(platform=selected.key, outcome="error").inc()
            return PlatformSearchResult(error=f"{selected.name}: {e}")

        logger.info(f"{selected.name}: Found {len(products)} products")
        metrics.platform_searches_total.labels(platform=selected.key, outcome="success").inc()
        return PlatformSearchResult(
            products=products[: settings.platform_product_limit],
            platform_used=selected.name,
        )

    async def universal_search(self, page: Page, query: str) -> List[ProductListing]:
        """
        Search platforms in order until enough products are collected.

        Sites that redirect to a login/captcha page, whose search box fails,
        or that raise are skipped.

        Returns:
            At most ``settings.universal_product_threshold`` products
        """
        threshold = settings.universal_product_threshold
        logger.info(f"Universal shopping search: {query}")

        collected: List[ProductListing] = []
        for platform in self.platforms:
            if len(collected) >= threshold:
                break

            try:
                logger.info(f"Trying {platform.name}...")
                await self._open_home(page, platform)

                if detect_login_page(page.url):
                    logger.warning(f"{platform.name} requires login or is showing a CAPTCHA, skipping")
                    metrics.platform_searches_total.labels(platform=platform.key, outcome="blocked").inc()
                    continue

                if not await platform.search(page, query):
                    logger.warning(f"{platform.name} search failed, trying next")
                    metrics.platform_searches_total.labels(platform=platform.key, outcome="search_failed").inc()
                    continue

                products = await platform.extract(page)

            except Exception as e:
                logger.warning(f"{platform.name} error: {e}, trying next")
                metrics.platform_searches_total.labels(platform=platform.key, outcome="error").inc()
                continue

            logger.info(f"{platform.name}: Found {len(products)} products")
            metrics.platform_searches_total.labels(platform=platform.key, outcome="success").inc()
            collected.extend(products)

        logger.info(f"Total products collected: {len(collected)}")
        return collected[:threshold]


# Global search service instance
search_service = SearchService()
