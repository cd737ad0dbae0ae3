import re
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status

from barakaflow.schemas.task import TaskUpdate


def new_update_id() -> str:
    return uuid.uuid4().hex


def extract_mentions(content: str, candidates: list[str]) -> list[str]:
    """Names from ``candidates`` written as ``@Name`` in ``content``, longest names first.

    A mention ends at a non-word character or the end of the text, so ``@Alice``
    does not mention ``Al``.
    """
    found: list[str] = []
    remaining = content
    for name in sorted({c for c in candidates if c}, key=len, reverse=True):
        pattern = re.compile(rf"@{re.escape(name)}(?!\w)", re.IGNORECASE)
        if pattern.search(remaining):
            found.append(name)
            remaining = pattern.sub("", remaining)
    return found


def _find(updates: list[TaskUpdate], update_id: str) -> TaskUpdate:
    for update in updates:
        if update.id == update_id:
            return update
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Update not found")


def add_update(updates: list[TaskUpdate], author: str, content: str, candidates: list[str]) -> list[TaskUpdate]:
    mentions = extract_mentions(content, candidates)
    update = TaskUpdate(
        id=new_update_id(),
        author=author,
        content=content,
        timestamp=datetime.now(timezone.utc),
        mentions=mentions or None,
    )
    return [*updates, update]


def add_reply(updates: list[TaskUpdate], update_id: str, author: str, content: str) -> list[TaskUpdate]:
    # Replies hang off top-level updates only
    parent = _find(updates, update_id)
    reply = TaskUpdate(
        id=new_update_id(),
        author=author,
        content=content,
        timestamp=datetime.now(timezone.utc),
    )
    parent.replies = [*parent.replies, reply]
    return updates


def _toggle(update: TaskUpdate, name: str) -> None:
    if name in update.liked_by:
        update.liked_by = [n for n in update.liked_by if n != name]
    else:
        update.liked_by = [*update.liked_by, name]
    update.likes = len(update.liked_by)


def toggle_like(updates: list[TaskUpdate], update_id: str, name: str, reply_id: str | None = None) -> list[TaskUpdate]:
    target = _find(updates, update_id)
    if reply_id is not None:
        target = _find(target.replies, reply_id)
    _toggle(target, name)
    return updates
