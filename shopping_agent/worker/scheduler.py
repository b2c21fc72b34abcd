"""APScheduler job definitions."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from shopping_agent.ai.llm_service import llm_service

logger = logging.getLogger(__name__)


def reset_llm_budget() -> None:
    """Start a new day of LLM cost tracking."""
    stats = llm_service.get_stats()
    logger.info(
        f"Daily LLM usage: {stats['call_count']} calls, ${stats['daily_cost']:.4f}"
    )
    llm_service.reset_daily_stats()


def setup_scheduler() -> AsyncIOScheduler:
    """Create the scheduler with its jobs registered (not started)."""
    scheduler = AsyncIOScheduler()

    scheduler.add_job(
        reset_llm_budget,
        CronTrigger(hour=0, minute=0),
        id="reset_llm_budget",
        name="Reset daily LLM cost tracking",
        replace_existing=True,
    )

    logger.info("Scheduled daily LLM budget reset")
    return scheduler
