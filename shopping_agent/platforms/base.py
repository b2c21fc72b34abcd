"""Base class for e-commerce search-and-extract platforms."""

import logging
from dataclasses import dataclass, asdict
from typing import List, Optional, Sequence
from urllib.parse import urljoin

from playwright.async_api import Page
from selectolax.lexbor import LexborHTMLParser, LexborNode

from shopping_agent.browser.page_state import scroll_and_wait
from shopping_agent.config import settings
from shopping_agent import metrics

logger = logging.getLogger(__name__)

# Lazy-loading sites put these in src until the real image arrives
IMAGE_PLACEHOLDER_MARKERS = ("transparent-pixel", "1x1")


@dataclass
class ProductListing:
    """A product card scraped from a search results page."""

    id: str
    platform: str
    title: str
    price: str
    rating: str = ""
    review_count: str = ""
    image: str = ""
    product_url: str = ""

    @property
    def is_complete(self) -> bool:
        """Title, price and a real image are required to show the card."""
        return bool(self.title and self.price and self.image.startswith("http"))

    def to_dict(self) -> dict:
        """Serialize with the keys the chat UI expects."""
        data = asdict(self)
        data["reviewCount"] = data.pop("review_count")
        data["productUrl"] = data.pop("product_url")
        return data


def node_text(node: Optional[LexborNode]) -> str:
    """Trimmed text content of a node, empty string for None."""
    if node is None:
        return ""
    return (node.text(deep=True) or "").strip()


def node_attr(node: Optional[LexborNode], name: str) -> str:
    if node is None:
        return ""
    return node.attributes.get(name) or ""


def select(node: LexborNode, selector: str) -> List[LexborNode]:
    """Descendants of node matching selector, in document order (node itself excluded)."""
    return [match for match in node.css(selector) if match.mem_id != node.mem_id]


def select_first(node: LexborNode, selector: str) -> Optional[LexborNode]:
    matches = select(node, selector)
    return matches[0] if matches else None


def first_match(node: LexborNode, selectors: Sequence[str]) -> Optional[LexborNode]:
    """Return the first element matched by the selectors, tried in order."""
    for selector in selectors:
        match = select_first(node, selector)
        if match is not None:
            return match
    return None


def next_element(node: Optional[LexborNode]) -> Optional[LexborNode]:
    """Next sibling that is an element (skips text and comment nodes)."""
    if node is None:
        return None
    sibling = node.next
    while sibling is not None and sibling.tag in ("-text", "-comment"):
        sibling = sibling.next
    return sibling


def is_placeholder_image(url: str) -> bool:
    if not url or url.startswith("data:"):
        return True
    return any(marker in url for marker in IMAGE_PLACEHOLDER_MARKERS)


def first_srcset_url(srcset: str) -> str:
    """First absolute, non-placeholder URL from a srcset attribute."""
    for candidate in srcset.split(","):
        parts = candidate.strip().split(" ")
        url = parts[0] if parts else ""
        if url.startswith("http") and "1x1" not in url:
            return url
    return ""


def resolve_url(href: str, base_url: str) -> str:
    """Make a link absolute; absolute links pass through unchanged."""
    if not href:
        return ""
    if href.startswith("http"):
        return href
    return urljoin(base_url, href)


class Platform:
    """
    A shopping site: how to search it and how to read its result cards.

    Subclasses describe the site with ordered selector lists. Each list is a
    fallback chain: the first selector that matches wins. Sites whose cards
    need more than that override ``find_containers`` or ``parse_item``.
    """

    key: str = ""
    name: str = ""
    home_url: str = ""

    search_selector: str = ""
    # Milliseconds to pause between typing the query and pressing Enter
    pre_enter_wait_ms: int = 0

    # Viewport scrolls before reading the page, and extra settle time after
    scrolls: int = 3
    post_scroll_wait_ms: int = 0

    container_selectors: List[str] = []
    link_selectors: List[str] = ["a"]
    title_selectors: List[str] = []
    price_selectors: List[str] = []
    rating_selectors: List[str] = []
    review_selectors: List[str] = []
    # Attributes tried, in order, when img src is missing or a placeholder
    image_fallbacks: List[str] = ["data-src"]
    # Some sites render the whole card as a single anchor
    container_is_link: bool = False

    async def search(self, page: Page, query: str) -> bool:
        """
        Type the query into the site search box and submit it.

        Returns:
            True once the results page loaded, False on any failure
        """
        selector = self.search_selector
        logger.info(f"Searching {self.name} for: {query}")

        try:
            await page.wait_for_selector(selector, timeout=settings.search_input_timeout_ms)
            await page.click(selector)
            await page.fill(selector, "")
            await page.fill(selector, query)
            if self.pre_enter_wait_ms:
                await page.wait_for_timeout(self.pre_enter_wait_ms)
            await page.keyboard.press("Enter")
            await page.wait_for_load_state("domcontentloaded")
            await page.wait_for_timeout(settings.search_settle_ms)
        except Exception as e:
            logger.warning(f"{self.name} search failed: {e}")
            return False

        return True

    async def extract(self, page: Page) -> List[ProductListing]:
        """Scroll the results page and read every complete product card."""
        await scroll_and_wait(page, self.scrolls)
        if self.post_scroll_wait_ms:
            await page.wait_for_timeout(self.post_scroll_wait_ms)

        html = await page.content()
        products = self.parse_listings(html)

        metrics.products_extracted_total.labels(platform=self.key).inc(len(products))
        logger.info(f"{self.name}: Extracted {len(products)} products")
        return products

    def parse_listings(self, html: str, base_url: Optional[str] = None) -> List[ProductListing]:
        """
        Parse a rendered results page into product listings.

        Args:
            html: Page HTML
            base_url: Base for relative links (defaults to the site home)

        Returns:
            Complete listings in page order
        """
        base_url = base_url or self.home_url
        tree = LexborHTMLParser(html)
        containers = self.find_containers(tree)
        logger.debug(f"{self.name}: Found {len(containers)} containers")

        results = []
        for index, item in enumerate(containers):
            try:
                listing = self.parse_item(item, index, base_url)
            except Exception as e:
                logger.debug(f"Error extracting {self.name} product {index + 1}: {e}")
                continue

            if listing is not None and listing.is_complete:
                results.append(listing)

        return results

    def find_containers(self, tree: LexborHTMLParser) -> List[LexborNode]:
        """Product card nodes from the first container selector that matches any."""
        for selector in self.container_selectors:
            containers = tree.css(selector)
            if containers:
                return containers
        return []

    def parse_item(self, item: LexborNode, index: int, base_url: str) -> Optional[ProductListing]:
        """Read one product card; None when it lacks a link or title."""
        if self.container_is_link and item.tag == "a":
            link = item
        else:
            link = first_match(item, self.link_selectors)
        if link is None:
            return None

        title_node = first_match(item, self.title_selectors)
        if title_node is None:
            return None

        return ProductListing(
            id=str(index + 1),
            platform=self.name,
            title=node_text(title_node),
            price=node_text(first_match(item, self.price_selectors)),
            rating=node_text(first_match(item, self.rating_selectors)),
            review_count=node_text(first_match(item, self.review_selectors)),
            image=self.image_url(select_first(item, "img"), base_url),
            product_url=resolve_url(node_attr(link, "href"), base_url),
        )

    def image_url(self, img: Optional[LexborNode], base_url: str) -> str:
        """Best image URL for a card, working past lazy-load placeholders."""
        if img is None:
            return ""

        url = node_attr(img, "src")
        for fallback in self.image_fallbacks:
            if not is_placeholder_image(url):
                break
            if fallback == "srcset":
                candidate = first_srcset_url(node_attr(img, "srcset"))
            else:
                candidate = node_attr(img, fallback)
            if candidate:
                url = candidate

        if url.startswith("data:"):
            return url
        return resolve_url(url, base_url)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.key}>"
