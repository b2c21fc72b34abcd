"""Playwright browser lifecycle for a single agent task."""

import asyncio
import logging
from typing import Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    Frame,
    Page,
    Playwright,
    async_playwright,
)

from shopping_agent.browser.page_state import detect_login_page, wait_for_user_login
from shopping_agent.browser.session_store import SessionStore, session_store
from shopping_agent.config import settings

logger = logging.getLogger(__name__)

# Hide the automation flag that most bot checks look at first
WEBDRIVER_STEALTH_SCRIPT = """
Object.defineProperty(navigator, 'webdriver', {
    get: () => false
});
"""


class BrowserSession:
    """
    One browser, one context, one page.

    Usage:
        async with BrowserSession(headless=False) as session:
            await session.page.goto(...)
            await session.save_session()

    The saved session is loaded on entry, and a login watch pauses automation
    whenever the page lands on a login screen so the user can sign in by hand.
    """

    def __init__(
        self,
        headless: Optional[bool] = None,
        store: Optional[SessionStore] = None,
        watch_logins: bool = True,
    ):
        self.headless = settings.browser_headless if headless is None else headless
        self.store = store or session_store
        self.watch_logins = watch_logins

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None
        self._login_lock = asyncio.Lock()

    async def __aenter__(self) -> "BrowserSession":
        try:
            await self.start()
        except Exception:
            await self.close()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def start(self) -> Page:
        """Launch Chromium, restore the session and open a page."""
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(
            headless=self.headless,
            args=settings.browser_args,
        )

        self.context = await self._browser.new_context(
            user_agent=settings.browser_user_agent,
            viewport=settings.browser_viewport,
            locale=settings.browser_locale,
        )
        await self.context.add_init_script(WEBDRIVER_STEALTH_SCRIPT)

        await self.store.load(self.context)

        self.page = await self.context.new_page()
        if self.watch_logins:
            self.page.on("framenavigated", self._on_frame_navigated)

        logger.debug(f"Browser started (headless={self.headless})")
        return self.page

    async def _on_frame_navigated(self, frame: Frame) -> None:
        """Pause for a manual login when the main frame hits a login URL."""
        if self.page is None or frame != self.page.main_frame:
            return
        if not detect_login_page(frame.url):
            return
        if self._login_lock.locked():
            return

        async with self._login_lock:
            logger.info(f"Login page detected: {frame.url}")
            if await wait_for_user_login(self.page):
                await self.save_session()

    async def ensure_logged_in(self) -> None:
        """
        Wait for a manual login if the current page is a login screen.

        If the navigation watch is already waiting, this blocks until it is
        done, then checks the page again.
        """
        if self.page is None:
            return

        async with self._login_lock:
            if not detect_login_page(self.page.url):
                return
            if await wait_for_user_login(self.page):
                await self.save_session()

    async def save_session(self) -> bool:
        """Persist cookies and storage for the next task."""
        if self.context is None:
            return False
        return await self.store.save(self.context)

    async def close(self) -> None:
        """Close browser and cleanup."""
        if self.context is not None:
            try:
                await self.context.close()
            except Exception as e:
                logger.error(f"Error closing browser context: {e}")
            self.context = None
            self.page = None

        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception as e:
                logger.error(f"Error closing browser: {e}")
            self._browser = None

        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
