"""Browser session persistence across restarts."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from playwright.async_api import BrowserContext

from shopping_agent.config import settings

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Persists one Playwright storage state (cookies + origins) to a JSON file.

    Every task shares this file, so a login done by hand in one task carries
    over to the next.
    """

    def __init__(self, path: Optional[str | Path] = None):
        """
        Initialize session store.

        Args:
            path: Session file path (defaults to settings.session_file)
        """
        self.path = Path(path or settings.session_file)

    def load_storage_state(self) -> Optional[Dict[str, Any]]:
        """
        Read the saved storage state.

        Returns:
            Storage state dictionary, or None if missing or unreadable
        """
        if not self.path.exists():
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                state = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read session file {self.path}: {e}")
            return None

        return state if isinstance(state, dict) else None

    def save_storage_state(self, state: Dict[str, Any]) -> None:
        """Write a storage state dictionary to disk."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(state, f, indent=2, default=str)

    async def save(self, context: BrowserContext) -> bool:
        """
        Snapshot the context's cookies and local storage.

        Returns:
            True if written, False if the snapshot or write failed
        """
        try:
            state = await context.storage_state()
            self.save_storage_state(state)
        except Exception as e:
            logger.warning(f"Could not save session: {e}")
            return False

        logger.info("Session saved")
        return True

    async def load(self, context: BrowserContext) -> bool:
        """
        Restore saved cookies into a fresh context.

        Returns:
            True if cookies were added, False otherwise
        """
        state = self.load_storage_state()
        if state is None:
            return False

        try:
            await context.add_cookies(state.get("cookies", []))
        except Exception as e:
            logger.warning(f"Could not load session: {e}")
            return False

        logger.info("Session loaded")
        return True

    def clear(self) -> None:
        """Delete the saved session."""
        if self.path.exists():
            self.path.unlink()


# Global session store instance
session_store = SessionStore()
