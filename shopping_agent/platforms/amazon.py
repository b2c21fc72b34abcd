"""Amazon India search results extractor."""

from typing import Optional

from selectolax.lexbor import LexborNode

from shopping_agent.platforms.base import (
    Platform,
    ProductListing,
    first_match,
    next_element,
    node_attr,
    node_text,
    resolve_url,
    select,
    select_first,
)


class AmazonPlatform(Platform):
    """Amazon result cards carry a data-asin; empty asins are ads and spacers."""

    key = "amazon"
    name = "Amazon"
    home_url = "https://www.amazon.in"

    search_selector = 'input#twotabsearchtextbox, input[name="field-keywords"]'
    pre_enter_wait_ms = 1000

    scrolls = 5
    post_scroll_wait_ms = 2000

    container_selectors = [
        '[data-component-type="s-search-result"]',
        'div[data-asin]:not([data-asin=""])',
        ".s-result-item[data-asin]",
    ]
    title_selectors = ["h2 a span", "h2 span", ".a-text-normal"]
    link_selectors = ["h2 a", "a.a-link-normal"]
    image_fallbacks = ["srcset", "data-src", "data-old-hires"]

    CURRENCY_SYMBOL = "₹"

    def parse_item(self, item: LexborNode, index: int, base_url: str) -> Optional[ProductListing]:
        if not node_attr(item, "data-asin"):
            return None

        title_node = first_match(item, self.title_selectors)
        link = first_match(item, self.link_selectors)
        if title_node is None or link is None:
            return None

        title = node_text(title_node)
        url = resolve_url(node_attr(link, "href"), base_url)
        if not title or not url:
            return None

        img = select_first(item, "img.s-image") or select_first(item, "img")

        return ProductListing(
            id=str(index + 1),
            platform=self.name,
            title=title,
            price=self.parse_price(item),
            rating=self.parse_rating(item),
            review_count=self.parse_review_count(item),
            image=self.image_url(img, base_url),
            product_url=url,
        )

    def parse_price(self, item: LexborNode) -> str:
        """Whole + fraction parts, then the screen-reader price, then symbol + value."""
        whole = select_first(item, ".a-price-whole")
        if whole is not None:
            digits = node_text(whole).replace(",", "").replace(".", "").strip()
            fraction = select_first(item, ".a-price-fraction")
            cents = node_text(fraction) if fraction is not None else "00"
            return f"{self.CURRENCY_SYMBOL}{digits}.{cents}"

        offscreen = select_first(item, ".a-price .a-offscreen")
        if offscreen is not None:
            return node_text(offscreen)

        symbol = select_first(item, ".a-price-symbol")
        value = None
        for span in select(item, ".a-price span"):
            if "a-price-symbol" not in node_attr(span, "class").split():
                value = span
                break
        if symbol is not None and value is not None:
            return (symbol.text() or "") + (value.text() or "")

        return ""

    @staticmethod
    def parse_rating(item: LexborNode) -> str:
        """First word of the star label, e.g. 4.3 from "4.3 out of 5 stars"."""
        text = node_text(select_first(item, ".a-icon-alt"))
        return text.split(" ")[0] if text else ""

    @staticmethod
    def parse_review_count(item: LexborNode) -> str:
        stars = select_first(item, 'span[aria-label*="stars"]')
        if stars is not None and stars.parent is not None:
            count = node_text(next_element(stars.parent))
            if count:
                return count
        return node_text(select_first(item, ".a-size-base.s-underline-text"))
