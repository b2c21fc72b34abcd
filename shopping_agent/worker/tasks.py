"""Browser task execution for the chat agent."""

import asyncio
import base64
import logging
import time
from typing import Any, Callable, Dict, Optional

from shopping_agent.ai.prompts import AgentTask
from shopping_agent.browser.page_state import open_site
from shopping_agent.browser.session import BrowserSession
from shopping_agent.config import settings
from shopping_agent.media.youtube import fetch_youtube_embeds
from shopping_agent.search.service import SearchService, search_service
from shopping_agent import metrics

logger = logging.getLogger(__name__)

UNIVERSAL = "universal"
BLOCKED_WARNING = "Some platforms blocked automated access"

FOOD_SITES = {
    "swiggy": "https://www.swiggy.com",
    "zomato": "https://www.zomato.com",
}
RIDE_SITES = {
    "uber": "https://www.uber.com/in/en/",
    "ola": "https://www.olacabs.com",
}
SOCIAL_SITES = {
    "instagram": "https://www.instagram.com",
    "facebook": "https://www.facebook.com",
    "twitter": "https://www.twitter.com",
    "linkedin": "https://www.linkedin.com",
}


class BrowserTaskError(RuntimeError):
    """Raised when a task is missing what it needs to run."""


class TaskRunner:
    """
    Runs one browser task per call.

    Each task gets its own browser. Tasks are serialized because they all
    read and write the same session file.
    """

    def __init__(
        self,
        session_factory: Callable[..., BrowserSession] = BrowserSession,
        searcher: Optional[SearchService] = None,
    ):
        self.session_factory = session_factory
        self.searcher = searcher or search_service
        self._lock = asyncio.Lock()
        self._handlers = {
            "youtube": self._run_youtube,
            "shopping": self._run_shopping,
            "food": self._run_food,
            "ride": self._run_ride,
            "browse": self._run_browse,
            "screenshot": self._run_screenshot,
        }

    async def execute_task(self, task: AgentTask) -> Dict[str, Any]:
        """
        Run a task chosen by the model.

        Args:
            task: Task description from the agent reply

        Returns:
            Task result dictionary; failures are reported in an "error" key
        """
        logger.info(f"Task: {task.type} {task.platform or ''}")
        handler = self._handlers.get(task.type)
        started = time.monotonic()

        async with self._lock:
            try:
                async with self.session_factory(headless=settings.browser_headless) as session:
                    if handler is None:
                        result = {"error": f"Unknown task type: {task.type}"}
                    else:
                        result = await handler(session, task)
            except Exception as e:
                logger.error(f"Task failed: {e}")
                metrics.agent_tasks_total.labels(task_type=task.type, status="error").inc()
                return {"error": f"Task failed: {e}", "type": task.type}

        metrics.agent_task_duration_seconds.labels(task_type=task.type).observe(time.monotonic() - started)
        metrics.agent_tasks_total.labels(
            task_type=task.type,
            status="error" if "error" in result else "success",
        ).inc()
        logger.info(f"Task completed: {result.get('type', task.type)}")
        return result

    async def run_web_task(self, task: str, query: Optional[str], headless: bool = False) -> Dict[str, Any]:
        """
        Run a direct web task (no model in the loop).

        Only "search_product" is supported: a universal search for the query.
        Browser failures propagate to the caller.
        """
        logger.info(f"Web Task: {task} {query or ''}")

        if task != "search_product":
            return {"success": False, "message": "Unknown task type"}

        async with self._lock:
            async with self.session_factory(headless=headless) as session:
                products = await self.searcher.universal_search(session.page, query or "")
                await session.save_session()

        logger.info(f"Found products: {len(products)}")
        result = {
            "success": True,
            "message": f"Found {len(products)} products from multiple sources",
            "products": [p.to_dict() for p in products],
            "count": len(products),
        }
        if len(products) < settings.universal_product_threshold:
            result["warning"] = BLOCKED_WARNING
        return result

    async def _run_youtube(self, session: BrowserSession, task: AgentTask) -> Dict[str, Any]:
        videos = await fetch_youtube_embeds(session.page, task.query or "")
        found = sum(1 for v in videos if v.video_id)
        return {
            "type": "youtube",
            "platform": "YouTube",
            "videos": [v.to_dict() for v in videos],
            "count": len(videos),
            "message": f"Found {found} videos! 🎥",
        }

    async def _run_shopping(self, session: BrowserSession, task: AgentTask) -> Dict[str, Any]:
        platform = task.platform or UNIVERSAL
        specific = platform != UNIVERSAL

        try:
            if specific:
                logger.info(f"Platform-specific search: {platform}")
                outcome = await self.searcher.platform_search(session.page, task.query or "", platform)
                products = outcome.products
                platform_used = outcome.platform_used or platform
                warning = outcome.warning or outcome.error
            else:
                logger.info("Universal multi-platform search")
                products = await self.searcher.universal_search(session.page, task.query or "")
                platform_used = "Multiple Platforms"
                warning = BLOCKED_WARNING if len(products) < settings.universal_product_threshold else None

            logger.info(f"Total products collected: {len(products)}")
            where = " from multiple sources" if not specific else f" on {platform_used}"
            result = {
                "type": "shopping_results",
                "query": task.query,
                "sourceStrategy": "platform_specific" if specific else "universal_multi_platform",
                "platform": platform_used,
                "products": [p.to_dict() for p in products],
                "count": len(products),
                "message": f"Found {len(products)} products{where}! 🛍️",
                "warning": warning,
            }
        except Exception as e:
            logger.warning(f"Shopping error: {e}")
            result = {
                "type": "shopping_results",
                "query": task.query,
                "error": f"Could not search products: {e}",
                "platform": platform,
                "products": [],
                "warning": "Search failed",
            }

        await session.save_session()
        return result

    async def _open_with_login(self, session: BrowserSession, url: str) -> None:
        await open_site(session.page, url)
        await session.ensure_logged_in()

    async def _run_food(self, session: BrowserSession, task: AgentTask) -> Dict[str, Any]:
        platform = task.platform if task.platform in FOOD_SITES else "swiggy"
        url = FOOD_SITES[platform]
        await self._open_with_login(session, url)
        await session.save_session()
        return {
            "type": "food",
            "platform": task.platform or "swiggy",
            "message": f"{task.platform or 'Swiggy'} opened in browser! 🍕",
            "url": url,
        }

    async def _run_ride(self, session: BrowserSession, task: AgentTask) -> Dict[str, Any]:
        platform = task.platform if task.platform in RIDE_SITES else "uber"
        url = RIDE_SITES[platform]
        await self._open_with_login(session, url)
        await session.save_session()
        return {
            "type": "ride",
            "platform": task.platform or "uber",
            "message": f"{task.platform or 'Uber'} opened in browser! 🚗",
            "url": url,
        }

    async def _run_browse(self, session: BrowserSession, task: AgentTask) -> Dict[str, Any]:
        url = SOCIAL_SITES.get(task.platform or "", task.url)
        if not url:
            raise BrowserTaskError("browse task needs a url")

        await self._open_with_login(session, url)
        title = await session.page.title()
        await session.save_session()
        return {
            "type": "browse",
            "platform": task.platform or "web",
            "title": title,
            "url": url,
            "message": f"Opened {task.platform or 'website'} in browser! 🌐",
        }

    async def _run_screenshot(self, session: BrowserSession, task: AgentTask) -> Dict[str, Any]:
        if not task.url:
            raise BrowserTaskError("screenshot task needs a url")
        url = task.url if task.url.startswith("http") else f"https://{task.url}"

        await self._open_with_login(session, url)
        full_page = bool((task.data or {}).get("fullPage", False))
        image = await session.page.screenshot(full_page=full_page)
        title = await session.page.title()
        await session.save_session()
        return {
            "type": "screenshot",
            "url": url,
            "message": "Screenshot captured! 📸",
            "imageData": "data:image/png;base64," + base64.b64encode(image).decode("ascii"),
            "title": title,
        }


# Global task runner instance
task_runner = TaskRunner()
