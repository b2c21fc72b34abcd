"""
Tests for browser task dispatch.

The browser session is replaced with a fake whose page is an AsyncMock, and
the search service with a mock, so each handler's result shape is checked
without launching Chromium.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from shopping_agent.ai.prompts import AgentTask
from shopping_agent.media.youtube import VideoEmbed
from shopping_agent.platforms.base import ProductListing
from shopping_agent.search.service import PlatformSearchResult
from shopping_agent.worker.tasks import BLOCKED_WARNING, TaskRunner


class FakeSession:

    def __init__(self):
        self.page = AsyncMock()
        self.page.url = "https://example.com"
        self.page.title.return_value = "Example Page"
        self.save_session = AsyncMock(return_value=True)
        self.ensure_logged_in = AsyncMock()
        self.headless = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


def make_products(count, platform="Amazon"):
    return [
        ProductListing(
            id=str(i + 1),
            platform=platform,
            title=f"Item {i + 1}",
            price="₹499",
            image=f"https://cdn.example/{i}.jpg",
            product_url=f"https://shop.example/{i}",
        )
        for i in range(count)
    ]


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def searcher():
    searcher = MagicMock()
    searcher.universal_search = AsyncMock(return_value=make_products(3))
    searcher.platform_search = AsyncMock(
        return_value=PlatformSearchResult(products=make_products(2, "Flipkart"), platform_used="Flipkart")
    )
    return searcher


@pytest.fixture
def runner(session, searcher):
    def factory(headless=None):
        session.headless = headless
        return session

    return TaskRunner(session_factory=factory, searcher=searcher)


class TestShopping:

    @pytest.mark.asyncio
    async def test_universal_search_below_threshold_warns(self, runner, session):
        result = await runner.execute_task(AgentTask(type="shopping", platform="universal", query="laptop"))

        assert result["type"] == "shopping_results"
        assert result["sourceStrategy"] == "universal_multi_platform"
        assert result["platform"] == "Multiple Platforms"
        assert result["count"] == 3
        assert result["message"] == "Found 3 products from multiple sources! 🛍️"
        assert result["warning"] == BLOCKED_WARNING
        assert result["products"][0]["productUrl"] == "https://shop.example/0"
        session.save_session.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_platform_is_universal(self, runner, searcher):
        searcher.universal_search.return_value = make_products(10)

        result = await runner.execute_task(AgentTask(type="shopping", query="shoes"))

        assert result["sourceStrategy"] == "universal_multi_platform"
        assert result["warning"] is None
        searcher.platform_search.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_platform_specific(self, runner, searcher):
        result = await runner.execute_task(AgentTask(type="shopping", platform="flipkart", query="phone"))

        assert result["sourceStrategy"] == "platform_specific"
        assert result["platform"] == "Flipkart"
        assert result["message"] == "Found 2 products on Flipkart! 🛍️"
        assert result["warning"] is None
        assert searcher.platform_search.call_args.args[1:] == ("phone", "flipkart")

    @pytest.mark.asyncio
    async def test_platform_warning_passes_through(self, runner, searcher):
        searcher.platform_search.return_value = PlatformSearchResult(
            warning="Myntra requires login or is blocking automation",
        )

        result = await runner.execute_task(AgentTask(type="shopping", platform="myntra", query="shirt"))

        assert result["count"] == 0
        assert result["platform"] == "myntra"
        assert result["warning"] == "Myntra requires login or is blocking automation"

    @pytest.mark.asyncio
    async def test_search_error(self, runner, searcher, session):
        searcher.universal_search.side_effect = RuntimeError("boom")

        result = await runner.execute_task(AgentTask(type="shopping", query="tv"))

        assert result["error"] == "Could not search products: boom"
        assert result["products"] == []
        assert result["warning"] == "Search failed"
        session.save_session.assert_awaited_once()


class TestOtherTasks:

    @pytest.mark.asyncio
    async def test_youtube(self, runner):
        videos = [VideoEmbed("abc", "Recipe", "https://www.youtube.com/embed/abc")] + [
            VideoEmbed("", "No video available", "") for _ in range(4)
        ]

        with patch("shopping_agent.worker.tasks.fetch_youtube_embeds", AsyncMock(return_value=videos)):
            result = await runner.execute_task(AgentTask(type="youtube", query="paneer recipe"))

        assert result["type"] == "youtube"
        assert result["count"] == 5
        assert result["message"] == "Found 1 videos! 🎥"
        assert result["videos"][0]["embedUrl"] == "https://www.youtube.com/embed/abc"

    @pytest.mark.asyncio
    async def test_food_opens_site_and_waits_for_login(self, runner, session):
        result = await runner.execute_task(AgentTask(type="food", platform="zomato"))

        assert result["url"] == "https://www.zomato.com"
        assert result["message"] == "zomato opened in browser! 🍕"
        assert session.page.goto.call_args.args[0] == "https://www.zomato.com"
        session.ensure_logged_in.assert_awaited_once()
        session.save_session.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_ride_defaults_to_uber(self, runner):
        result = await runner.execute_task(AgentTask(type="ride"))

        assert result["platform"] == "uber"
        assert result["url"] == "https://www.uber.com/in/en/"
        assert result["message"] == "Uber opened in browser! 🚗"

    @pytest.mark.asyncio
    async def test_browse_social_platform(self, runner):
        result = await runner.execute_task(AgentTask(type="browse", platform="instagram"))

        assert result["url"] == "https://www.instagram.com"
        assert result["title"] == "Example Page"

    @pytest.mark.asyncio
    async def test_browse_without_url_fails(self, runner):
        result = await runner.execute_task(AgentTask(type="browse"))

        assert result == {"error": "Task failed: browse task needs a url", "type": "browse"}

    @pytest.mark.asyncio
    async def test_screenshot(self, runner, session):
        session.page.screenshot.return_value = b"png"

        result = await runner.execute_task(
            AgentTask(type="screenshot", url="example.com", data={"fullPage": True})
        )

        assert result["url"] == "https://example.com"
        assert result["imageData"] == "data:image/png;base64,cG5n"
        session.page.screenshot.assert_awaited_once_with(full_page=True)

    @pytest.mark.asyncio
    async def test_unknown_task_type(self, runner):
        result = await runner.execute_task(AgentTask(type="dance"))

        assert result == {"error": "Unknown task type: dance"}

    @pytest.mark.asyncio
    async def test_browser_launch_failure(self, searcher):
        def broken_factory(headless=None):
            raise RuntimeError("Executable doesn't exist")

        runner = TaskRunner(session_factory=broken_factory, searcher=searcher)

        result = await runner.execute_task(AgentTask(type="shopping", query="x"))

        assert result == {"error": "Task failed: Executable doesn't exist", "type": "shopping"}


class TestWebTask:

    @pytest.mark.asyncio
    async def test_search_product(self, runner, session):
        result = await runner.run_web_task("search_product", "headphones", headless=True)

        assert result["success"] is True
        assert result["count"] == 3
        assert result["message"] == "Found 3 products from multiple sources"
        assert result["warning"] == BLOCKED_WARNING
        assert session.headless is True
        session.save_session.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_enough_products_has_no_warning(self, runner, searcher):
        searcher.universal_search.return_value = make_products(10)

        result = await runner.run_web_task("search_product", "headphones")

        assert "warning" not in result

    @pytest.mark.asyncio
    async def test_unknown_web_task(self, runner, searcher):
        result = await runner.run_web_task("book_flight", "goa")

        assert result == {"success": False, "message": "Unknown task type"}
        searcher.universal_search.assert_not_awaited()
