"""Flipkart search results extractor."""

from shopping_agent.platforms.base import Platform


class FlipkartPlatform(Platform):
    """Flipkart ships obfuscated class names that change often, so every field has a long chain."""

    key = "flipkart"
    name = "Flipkart"
    home_url = "https://www.flipkart.com"

    search_selector = 'input[name="q"], input[type="text"], input.Pke_EE'

    scrolls = 5
    post_scroll_wait_ms = 6000

    container_selectors = [
        "[data-id]",
        "._1AtVbE, ._13oc-S, .tUxRFH, ._1fQZEK, .DOjaWF, .CGtC98, ._75nlfW",
        'div[class*="product"], div[class*="item"]',
    ]
    link_selectors = [
        'a[href*="/p/"]',
        "a._1fQZEK, a.s1Q9rs, a._2rpwqI, a.wjcEIp, a.VJA3rP",
        "a",
    ]
    title_selectors = [
        ".s1Q9rs, ._4rR01T, .IRpwTa, ._2WkVRV, .KzDlHZ, .wjcEIp",
        'a[class*="title"]',
        'div[class*="title"]',
    ]
    price_selectors = [
        "._30jeq3, ._1_WHN1, ._3tbKJL, .Nx9bqj, ._4b5DiR",
        'div[class*="price"]',
    ]
    rating_selectors = [
        "._3LWZlK, .XQDdHH, .Y1HWO0",
        'div[class*="rating"]',
    ]
    review_selectors = [
        "._2_R_DZ span, ._13vcmD, .Wphh3N",
        'span[class*="review"]',
    ]
    image_fallbacks = ["data-src", "srcset"]
