"""Meesho search results extractor."""

from shopping_agent.platforms.base import Platform


class MeeshoPlatform(Platform):
    key = "meesho"
    name = "Meesho"
    home_url = "https://www.meesho.com"

    search_selector = 'input[type="text"], input[placeholder*="Search"], input[class*="SearchBar"]'

    scrolls = 4

    container_selectors = [
        '[class*="ProductCard"], [class*="product-card"], a[href*="/product/"], [class*="Card__"]',
    ]
    container_is_link = True
    link_selectors = ['a[href*="/product/"]']
    title_selectors = ['[class*="title"], [class*="name"], p, h3, h4, [class*="Text__"]']
    price_selectors = ['[class*="price"], [class*="Price"]']
    rating_selectors = ['[class*="rating"], [class*="Rating"]']
    review_selectors = ['[class*="review"], [class*="Review"]']
