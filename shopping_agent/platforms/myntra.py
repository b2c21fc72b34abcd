"""Myntra search results extractor."""

from shopping_agent.platforms.base import Platform


class MyntraPlatform(Platform):
    key = "myntra"
    name = "Myntra"
    home_url = "https://www.myntra.com"

    search_selector = 'input.desktop-searchBar, input[placeholder*="Search"]'

    container_selectors = ['.product-base, li[class*="product"], .productCard']
    title_selectors = [
        '.product-product, h3, h4, [class*="productName"], .product-brand, .product-productMetaInfo',
    ]
    price_selectors = ['.product-price, [class*="price"], .product-discountedPrice']
    rating_selectors = ['.product-rating, [class*="rating"]']
    review_selectors = ['[class*="count"], .product-ratingsCount']
