import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from fastapi import HTTPException, status

from barakaflow.models.task import Task
from barakaflow.schemas.task import Task as TaskSchema, TaskCreate, TaskPatch, TaskUpdate

logger = logging.getLogger(__name__)


def reconcile_completion(
    completed: bool | None,
    status_value: str | None,
    current_completed: bool = False,
    current_status: str = "not-started",
) -> tuple[bool, str]:
    """
    Single home of the ``completed == (status == "completed")`` invariant.

    - status only: completed follows status
    - completed only: status becomes "completed" or falls back to "not-started"
    - both, disagreeing: status wins
    - neither: current values, repaired if they disagree
    """
    if status_value is not None:
        return status_value == "completed", status_value
    if completed is not None:
        return completed, "completed" if completed else "not-started"
    if current_completed != (current_status == "completed"):
        return current_status == "completed", current_status
    return current_completed, current_status


def dump_updates(updates: list[TaskUpdate]) -> list[dict]:
    return [u.model_dump(mode="json", by_alias=True, exclude_none=True) for u in updates]


def load_updates(task: Task) -> list[TaskUpdate]:
    return [TaskUpdate.model_validate(raw) for raw in (task.updates or [])]


def to_schema(task: Task) -> TaskSchema:
    return TaskSchema.model_validate(task)


async def list_tasks(db: AsyncSession, user_id: int) -> list[Task]:
    result = await db.execute(
        select(Task)
        .filter(Task.user_id == user_id)
        .order_by(Task.created_at.desc(), Task.id.desc())
    )
    return list(result.scalars().all())


async def get_task_by_id(db: AsyncSession, task_id: int, user_id: int) -> Task:
    # Another user's task is reported exactly like a missing one
    result = await db.execute(
        select(Task).filter(Task.id == task_id, Task.user_id == user_id)
    )
    task = result.scalars().first()
    if not task:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return task


async def create_task(db: AsyncSession, task_data: TaskCreate, user_id: int) -> Task:
    completed, status_value = reconcile_completion(task_data.completed, task_data.status)

    new_task = Task(
        user_id=user_id,
        title=task_data.title,
        description=task_data.description,
        owner=task_data.owner,
        completed=completed,
        status=status_value,
        start_time=task_data.start_time,
        end_time=task_data.end_time,
        recurrence=(
            task_data.recurrence.model_dump(mode="json", by_alias=True, exclude_none=True)
            if task_data.recurrence else None
        ),
        updates=dump_updates(task_data.updates),
    )
    db.add(new_task)
    await db.commit()
    await db.refresh(new_task)
    logger.info("Created task %s for user %s", new_task.id, user_id)
    return new_task


async def update_task(db: AsyncSession, task_id: int, user_id: int, patch: TaskPatch) -> Task:
    task = await get_task_by_id(db, task_id, user_id)
    changes = patch.model_dump(exclude_unset=True)

    if "title" in changes and changes["title"] is not None:
        task.title = changes["title"]
    if "description" in changes:
        task.description = changes["description"] or None
    if "owner" in changes:
        task.owner = changes["owner"] or None
    if "start_time" in changes:
        task.start_time = patch.start_time
    if "end_time" in changes:
        task.end_time = patch.end_time
    if "recurrence" in changes:
        task.recurrence = (
            patch.recurrence.model_dump(mode="json", by_alias=True, exclude_none=True)
            if patch.recurrence else None
        )
    if "updates" in changes:
        task.updates = dump_updates(patch.updates or [])

    task.completed, task.status = reconcile_completion(
        changes.get("completed"),
        changes.get("status"),
        current_completed=bool(task.completed),
        current_status=task.status or "not-started",
    )

    await db.commit()
    await db.refresh(task)
    return task


async def save_updates(db: AsyncSession, task: Task, updates: list[TaskUpdate]) -> Task:
    # JSON columns only notice reassignment, not in-place mutation
    task.updates = dump_updates(updates)
    await db.commit()
    await db.refresh(task)
    return task


async def delete_task(db: AsyncSession, task_id: int, user_id: int) -> None:
    task = await get_task_by_id(db, task_id, user_id)
    await db.delete(task)
    await db.commit()
    logger.info("Deleted task %s for user %s", task_id, user_id)
