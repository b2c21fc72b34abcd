"""Tests for session persistence and the login watch."""

import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from shopping_agent.browser.session import BrowserSession
from shopping_agent.browser.session_store import SessionStore


class TestSessionStore:

    def test_missing_file(self, tmp_path):
        store = SessionStore(tmp_path / "browser-session.json")
        assert store.load_storage_state() is None

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "browser-session.json"
        path.write_text("{not json", encoding="utf-8")

        assert SessionStore(path).load_storage_state() is None

    def test_non_object_file(self, tmp_path):
        path = tmp_path / "browser-session.json"
        path.write_text("[1, 2]", encoding="utf-8")

        assert SessionStore(path).load_storage_state() is None

    def test_write_then_read(self, tmp_path):
        store = SessionStore(tmp_path / "browser-session.json")
        state = {"cookies": [{"name": "sid", "value": "1", "domain": ".amazon.in", "path": "/"}], "origins": []}

        store.save_storage_state(state)

        assert store.load_storage_state() == state

    def test_clear(self, tmp_path):
        store = SessionStore(tmp_path / "browser-session.json")
        store.save_storage_state({"cookies": []})

        store.clear()
        store.clear()

        assert not store.path.exists()

    @pytest.mark.asyncio
    async def test_save_snapshot(self, tmp_path):
        store = SessionStore(tmp_path / "browser-session.json")
        context = AsyncMock()
        context.storage_state.return_value = {"cookies": [], "origins": []}

        assert await store.save(context) is True
        assert store.load_storage_state() == {"cookies": [], "origins": []}

    @pytest.mark.asyncio
    async def test_save_failure_is_reported(self, tmp_path):
        store = SessionStore(tmp_path / "browser-session.json")
        context = AsyncMock()
        context.storage_state.side_effect = Exception("Target closed")

        assert await store.save(context) is False
        assert not store.path.exists()

    @pytest.mark.asyncio
    async def test_load_adds_cookies(self, tmp_path):
        store = SessionStore(tmp_path / "browser-session.json")
        cookies = [{"name": "sid", "value": "1", "domain": ".flipkart.com", "path": "/"}]
        store.save_storage_state({"cookies": cookies, "origins": []})
        context = AsyncMock()

        assert await store.load(context) is True
        context.add_cookies.assert_awaited_once_with(cookies)

    @pytest.mark.asyncio
    async def test_load_without_file(self, tmp_path):
        context = AsyncMock()

        assert await SessionStore(tmp_path / "none.json").load(context) is False
        context.add_cookies.assert_not_awaited()


class TestLoginWatch:

    def make_session(self, url):
        store = MagicMock()
        store.save = AsyncMock(return_value=True)
        session = BrowserSession(headless=True, store=store)
        frame = MagicMock()
        frame.url = url
        session.page = MagicMock()
        session.page.main_frame = frame
        session.page.url = url
        session.context = MagicMock()
        return session, frame

    @pytest.mark.asyncio
    async def test_login_navigation_waits_and_saves(self):
        session, frame = self.make_session("https://www.amazon.in/ap/signin")

        with patch("shopping_agent.browser.session.wait_for_user_login", AsyncMock(return_value=True)) as wait:
            await session._on_frame_navigated(frame)

        wait.assert_awaited_once_with(session.page)
        session.store.save.assert_awaited_once_with(session.context)

    @pytest.mark.asyncio
    async def test_login_timeout_does_not_save(self):
        session, frame = self.make_session("https://www.amazon.in/ap/signin")

        with patch("shopping_agent.browser.session.wait_for_user_login", AsyncMock(return_value=False)):
            await session._on_frame_navigated(frame)

        session.store.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ignores_regular_and_child_frames(self):
        session, frame = self.make_session("https://www.amazon.in/s?k=phone")
        child = MagicMock()
        child.url = "https://accounts.google.com/signin"

        with patch("shopping_agent.browser.session.wait_for_user_login", AsyncMock()) as wait:
            await session._on_frame_navigated(frame)
            await session._on_frame_navigated(child)

        wait.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ensure_logged_in_on_login_page(self):
        session, _ = self.make_session("https://www.flipkart.com/account/login")

        with patch("shopping_agent.browser.session.wait_for_user_login", AsyncMock(return_value=True)) as wait:
            await session.ensure_logged_in()

        wait.assert_awaited_once()
        session.store.save.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_save_session_without_context(self):
        session = BrowserSession(headless=True, store=MagicMock())

        assert await session.save_session() is False

    @pytest.mark.asyncio
    async def test_ensure_logged_in_waits_for_running_login_watch(self):
        session, frame = self.make_session("https://www.amazon.in/ap/signin")
        login_done = asyncio.Event()

        async def manual_login(page):
            await login_done.wait()
            page.url = "https://www.amazon.in/"
            return True

        with patch("shopping_agent.browser.session.wait_for_user_login", AsyncMock(side_effect=manual_login)) as wait:
            watch = asyncio.create_task(session._on_frame_navigated(frame))
            for _ in range(3):
                await asyncio.sleep(0)
            resumed = asyncio.create_task(session.ensure_logged_in())
            for _ in range(3):
                await asyncio.sleep(0)

            assert not resumed.done()

            login_done.set()
            await asyncio.gather(watch, resumed)

        # The page left the login screen while blocked, so no second wait
        wait.assert_awaited_once()
        session.store.save.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_ensure_logged_in_skips_regular_page(self):
        session, _ = self.make_session("https://www.swiggy.com/")

        with patch("shopping_agent.browser.session.wait_for_user_login", AsyncMock()) as wait:
            await session.ensure_logged_in()

        wait.assert_not_awaited()
        session.store.save.assert_not_awaited()
