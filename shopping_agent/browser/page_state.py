"""Page navigation helpers and login/checkout URL detection."""

import logging

from playwright.async_api import Error as PlaywrightError, Page, TimeoutError as PlaywrightTimeoutError

from shopping_agent.config import settings
from shopping_agent import metrics

logger = logging.getLogger(__name__)

# URL fragments that mean the site wants a human (login wall or bot check)
LOGIN_PATTERNS = [
    "/login",
    "/signin",
    "/auth",
    "/ap/signin",
    "accounts.google",
    "login.live",
    "account/login",
    "captcha",
    "robot_check",
]

CHECKOUT_PATTERNS = [
    "/checkout",
    "/payment",
    "/buy",
    "/place-order",
    "/confirm-order",
    "/billing",
    "/pay",
]

# Leaving all of these means the manual login finished
LOGIN_EXIT_PATTERNS = ["/login", "/signin", "/auth", "/ap/signin"]

_LOGIN_EXIT_SCRIPT = """
(patterns) => {
    const url = window.location.href.toLowerCase();
    return patterns.every(p => !url.includes(p));
}
"""


def detect_login_page(url: str) -> bool:
    """Return True when the URL looks like a login, captcha or robot check page."""
    lowered = (url or "").lower()
    return any(pattern in lowered for pattern in LOGIN_PATTERNS)


def detect_checkout_page(url: str) -> bool:
    """Return True when the URL looks like a checkout or payment step."""
    lowered = (url or "").lower()
    return any(pattern in lowered for pattern in CHECKOUT_PATTERNS)


async def wait_for_user_login(page: Page, timeout_ms: int | None = None) -> bool:
    """
    Block until the user finishes logging in by hand.

    Args:
        page: Playwright page sitting on a login screen
        timeout_ms: How long to wait (defaults to settings.login_wait_timeout_ms)

    Returns:
        True once the page left the login URL, False on timeout or when the
        page closed mid-wait
    """
    timeout_ms = timeout_ms if timeout_ms is not None else settings.login_wait_timeout_ms
    logger.info("Waiting for manual login...")

    try:
        await page.wait_for_function(
            _LOGIN_EXIT_SCRIPT,
            arg=LOGIN_EXIT_PATTERNS,
            timeout=timeout_ms,
        )
        await page.wait_for_timeout(settings.login_settle_ms)
    except PlaywrightTimeoutError:
        logger.warning("Login timeout after %ss", timeout_ms // 1000)
        metrics.login_waits_total.labels(outcome="timeout").inc()
        return False
    except PlaywrightError as e:
        logger.warning(f"Login wait aborted: {e}")
        metrics.login_waits_total.labels(outcome="error").inc()
        return False

    logger.info("Login detected, resuming automation")
    metrics.login_waits_total.labels(outcome="success").inc()
    return True


async def open_site(page: Page, url: str) -> None:
    """Navigate to a site and give it time to render."""
    await page.goto(
        url,
        wait_until="domcontentloaded",
        timeout=settings.open_site_timeout_ms,
    )
    await page.wait_for_timeout(settings.open_site_settle_ms)


async def scroll_and_wait(page: Page, scrolls: int = 3) -> None:
    """Scroll down one viewport at a time so lazy images load, then return to top."""
    for _ in range(scrolls):
        await page.evaluate("() => window.scrollBy(0, window.innerHeight)")
        await page.wait_for_timeout(1000)
    await page.evaluate("() => window.scrollTo(0, 0)")
    await page.wait_for_timeout(500)
