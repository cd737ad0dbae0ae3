from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from barakaflow.config import settings
from barakaflow.dependencies import get_db, get_current_user
from barakaflow.models.user import User as UserModel
from barakaflow.schemas.task import (
    LikeRequest, MessageResponse, Task as TaskSchema, TaskBoard, TaskCreate, TaskFilter, TaskPatch, UpdateCreate,
)
from barakaflow.services import tasks as task_service
from barakaflow.services import updates as update_service
from barakaflow.services.recurrence import tasks_for_date
from barakaflow.services.task_views import filter_tasks, partition_tasks, sort_by_time_of_day

router = APIRouter(prefix="/tasks", tags=["tasks"])


async def _visible_tasks(db: AsyncSession, user_id: int, q: str | None, filter_name: str) -> list[TaskSchema]:
    tasks = [task_service.to_schema(t) for t in await task_service.list_tasks(db, user_id)]
    return filter_tasks(tasks, query=q, filter_name=filter_name, tz=settings.tzinfo)


@router.get("", response_model=list[TaskSchema])
async def list_tasks(
    q: str | None = None,
    filter: TaskFilter = "all",
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    return await _visible_tasks(db, current_user.id, q, filter)

@router.post("", response_model=TaskSchema, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreate,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    task = await task_service.create_task(db, task_data, current_user.id)
    return task_service.to_schema(task)

@router.get("/board", response_model=TaskBoard)
async def task_board(
    q: str | None = None,
    filter: TaskFilter = "all",
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    todo, completed = partition_tasks(await _visible_tasks(db, current_user.id, q, filter))
    return TaskBoard(todo=todo, completed=completed)

@router.get("/for-date", response_model=list[TaskSchema])
async def tasks_on_date(
    day: date = Query(..., alias="date"),
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    tasks = [task_service.to_schema(t) for t in await task_service.list_tasks(db, current_user.id)]
    return sort_by_time_of_day(tasks_for_date(tasks, day, settings.tzinfo), settings.tzinfo)

@router.get("/{task_id}", response_model=TaskSchema)
async def get_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    return task_service.to_schema(await task_service.get_task_by_id(db, task_id, current_user.id))

@router.put("/{task_id}", response_model=TaskSchema)
async def update_task(
    task_id: int,
    update_data: TaskPatch,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    task = await task_service.update_task(db, task_id, current_user.id, update_data)
    return task_service.to_schema(task)

@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    await task_service.delete_task(db, task_id, current_user.id)
    return {"message": "Task deleted successfully"}

# ── Update threads ──────────────────────────────────────

@router.post("/{task_id}/updates", response_model=TaskSchema, status_code=status.HTTP_201_CREATED)
async def post_update(
    task_id: int,
    body: UpdateCreate,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    task = await task_service.get_task_by_id(db, task_id, current_user.id)
    owners = [current_user.name] + [
        t.owner for t in await task_service.list_tasks(db, current_user.id) if t.owner
    ]
    updates = update_service.add_update(
        task_service.load_updates(task), current_user.name, body.content, owners
    )
    return task_service.to_schema(await task_service.save_updates(db, task, updates))

@router.post("/{task_id}/updates/{update_id}/replies", response_model=TaskSchema, status_code=status.HTTP_201_CREATED)
async def post_reply(
    task_id: int,
    update_id: str,
    body: UpdateCreate,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    task = await task_service.get_task_by_id(db, task_id, current_user.id)
    updates = update_service.add_reply(
        task_service.load_updates(task), update_id, current_user.name, body.content
    )
    return task_service.to_schema(await task_service.save_updates(db, task, updates))

@router.post("/{task_id}/updates/{update_id}/like", response_model=TaskSchema)
async def toggle_like(
    task_id: int,
    update_id: str,
    body: LikeRequest | None = None,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(get_current_user),
):
    task = await task_service.get_task_by_id(db, task_id, current_user.id)
    updates = update_service.toggle_like(
        task_service.load_updates(task), update_id, current_user.name,
        reply_id=body.reply_id if body else None,
    )
    return task_service.to_schema(await task_service.save_updates(db, task, updates))
