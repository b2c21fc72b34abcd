"""Direct web automation endpoint (no model in the loop)."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from shopping_agent.api.deps import get_task_runner
from shopping_agent.worker.tasks import TaskRunner

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["web-tasks"])


class WebTaskRequest(BaseModel):
    """Request model for a direct web task."""
    task: Optional[str] = None
    query: Optional[str] = None
    headless: bool = False


@router.post("/web-task")
async def web_task(
    request: WebTaskRequest,
    runner: TaskRunner = Depends(get_task_runner),
):
    """Run a named web task such as "search_product"."""
    try:
        result = await runner.run_web_task(request.task or "", request.query, request.headless)
    except Exception as e:
        logger.error(f"Web task error: {e}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": str(e)},
        )
    return result
