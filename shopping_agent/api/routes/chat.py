"""Chat endpoint: classify the message, then run the chosen browser task."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from shopping_agent.ai.llm_service import LLMService, parse_agent_reply
from shopping_agent.ai.prompts import AgentTask, ChatMessage
from shopping_agent.api.deps import get_llm_service, get_task_runner
from shopping_agent.worker.tasks import TaskRunner

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


class ChatRequest(BaseModel):
    """Request model for a chat turn."""
    message: Optional[str] = None
    history: Optional[List[ChatMessage]] = None


@router.post("/chat")
async def chat(
    request: ChatRequest,
    llm: LLMService = Depends(get_llm_service),
    runner: TaskRunner = Depends(get_task_runner),
):
    """Answer a chat message, running a web task when the model asks for one."""
    if not request.message or not request.message.strip():
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": "Message required"},
        )

    logger.info(f"User: {request.message}")

    try:
        history = [turn.model_dump() for turn in request.history or []]
        ai_response = await llm.call_agent(request.message, history)
        logger.info(f"AI: {ai_response[:100]}...")

        reply = parse_agent_reply(ai_response)

        if reply.get("needsWebTask") and reply.get("task"):
            try:
                task = AgentTask.model_validate(reply["task"])
            except ValidationError as e:
                logger.warning(f"Model returned an unusable task: {e}")
                reply["taskResult"] = {"error": "Task failed: invalid task from model"}
            else:
                logger.info(f"Executing: {task.type}")
                reply["taskResult"] = await runner.execute_task(task)

    except Exception as e:
        logger.error(f"Chat error: {e}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": str(e)},
        )

    return {"success": True, "data": reply}
