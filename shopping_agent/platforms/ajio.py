"""Ajio search results extractor."""

from shopping_agent.platforms.base import Platform


class AjioPlatform(Platform):
    key = "ajio"
    name = "Ajio"
    home_url = "https://www.ajio.com"

    search_selector = 'input[name="searchbar"], input[placeholder*="Search"]'

    container_selectors = ['.item, [class*="product"], .rilrtl-products-list__item']
    title_selectors = ['.nameCls, [class*="brand"], [class*="name"]']
    price_selectors = ['.price, [class*="price"]']
    rating_selectors = ['[class*="rating"]']
    review_selectors = ['[class*="count"]']
