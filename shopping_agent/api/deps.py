"""FastAPI dependencies."""

from shopping_agent.ai.llm_service import LLMService, llm_service
from shopping_agent.worker.tasks import TaskRunner, task_runner


async def get_llm_service() -> LLMService:
    """Dependency for the intent classifier."""
    return llm_service


async def get_task_runner() -> TaskRunner:
    """Dependency for the browser task runner."""
    return task_runner
