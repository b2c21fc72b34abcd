"""Croma search results extractor."""

from shopping_agent.platforms.base import Platform


class CromaPlatform(Platform):
    key = "croma"
    name = "Croma"
    home_url = "https://www.croma.com"

    search_selector = 'input[type="search"], input[placeholder*="Search"]'

    container_selectors = ['.product, [class*="product-item"], li.product']
    link_selectors = ['a.product-title, a[class*="product"]']
    title_selectors = ['.product-title, [class*="title"], h3, h4']
    price_selectors = ['.amount, .price, [class*="price"]']
    rating_selectors = ['[class*="rating"]']
    review_selectors = ['[class*="review"]']
