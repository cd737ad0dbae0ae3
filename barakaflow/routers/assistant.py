import logging
from datetime import date, datetime

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from barakaflow.config import settings
from barakaflow.dependencies import get_assistant_service, get_current_user, get_db
from barakaflow.models.user import User as UserModel
from barakaflow.schemas.assistant import (
    ChatMessage, ChatReply, ChatRequest, DayOptimizationResponse, SuggestionsResponse,
)
from barakaflow.services import tasks as task_service
from barakaflow.services.assistant import AssistantService
from barakaflow.services.assistant_errors import AssistantError, AssistantNotConfigured
from barakaflow.services.prompts import ScheduledTask, TaskContext
from barakaflow.services.recurrence import tasks_for_date
from barakaflow.services.task_views import sort_by_time_of_day

logger = logging.getLogger(__name__)

NO_TASKS_MESSAGE = "No tasks scheduled for this day."

router = APIRouter(tags=["assistant"])


async def _task_context(db: AsyncSession, task_id: int, user_id: int) -> TaskContext:
    task = task_service.to_schema(await task_service.get_task_by_id(db, task_id, user_id))
    return TaskContext.from_task(task)


async def _day_schedule(db: AsyncSession, user_id: int, day: date) -> list[ScheduledTask]:
    tasks = [task_service.to_schema(t) for t in await task_service.list_tasks(db, user_id)]
    on_day = sort_by_time_of_day(tasks_for_date(tasks, day, settings.tzinfo), settings.tzinfo)
    return [
        ScheduledTask(
            id=t.id, title=t.title, description=t.description,
            start_time=t.start_time, end_time=t.end_time,
        )
        for t in on_day
    ]


def _today() -> date:
    return datetime.now(settings.tzinfo).date()


@router.post("/tasks/{task_id}/suggestions", response_model=SuggestionsResponse)
async def task_suggestions(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
    assistant: AssistantService = Depends(get_assistant_service),
):
    context = await _task_context(db, task_id, current_user.id)
    return await assistant.suggest(context)

@router.get("/tasks/{task_id}/chat", response_model=list[ChatMessage])
async def task_chat_history(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
    assistant: AssistantService = Depends(get_assistant_service),
):
    await task_service.get_task_by_id(db, task_id, current_user.id)
    return assistant.chat_history(f"task:{current_user.id}:{task_id}")

@router.post("/tasks/{task_id}/chat", response_model=ChatReply)
async def task_chat(
    task_id: int,
    body: ChatRequest,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
    assistant: AssistantService = Depends(get_assistant_service),
):
    context = await _task_context(db, task_id, current_user.id)
    conversation_id = f"task:{current_user.id}:{task_id}"
    reply = await assistant.task_chat(conversation_id, context, body.message)
    return {"reply": reply, "history": assistant.chat_history(conversation_id)}

@router.post("/assistant/day", response_model=DayOptimizationResponse)
async def optimize_day(
    day: date | None = Query(None, alias="date"),
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
    assistant: AssistantService = Depends(get_assistant_service),
):
    day = day or _today()
    schedule = await _day_schedule(db, current_user.id, day)
    if not schedule:
        return DayOptimizationResponse(date=day, message=NO_TASKS_MESSAGE)

    optimization = await assistant.optimize_day(str(current_user.id), day, schedule)
    return DayOptimizationResponse(
        date=day, task_ids=[t.id for t in schedule], optimization=optimization,
    )

@router.post("/assistant/day/chat", response_model=ChatReply)
async def day_chat(
    body: ChatRequest,
    day: date | None = Query(None, alias="date"),
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
    assistant: AssistantService = Depends(get_assistant_service),
):
    day = day or _today()
    schedule = await _day_schedule(db, current_user.id, day)
    conversation_id = f"day:{current_user.id}:{day.isoformat()}"
    if not schedule:
        return {"reply": NO_TASKS_MESSAGE, "history": assistant.chat_history(conversation_id)}
    reply = await assistant.day_chat(conversation_id, schedule, body.message)
    return {"reply": reply, "history": assistant.chat_history(conversation_id)}


async def assistant_error_handler(request: Request, exc: AssistantError):
    status_code = 503 if isinstance(exc, AssistantNotConfigured) else 502
    logger.warning("Assistant request %s failed: %s", request.url.path, exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "retryable": exc.retryable},
    )
