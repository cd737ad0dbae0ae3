"""
Async HTTP client for the BarakaFlow API.

Keeps the auth token and current user in a ``LocalStore`` and sends the token
as a bearer header on every request. Task payloads are normalized on the way
in: ``_id`` becomes ``id`` and missing ``status``/``updates`` get defaults.
"""
import logging
from datetime import date, datetime, timezone
from typing import Any

import httpx

from barakaflow.client.storage import TOKEN_KEY, USER_KEY, LocalStore

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"


class ApiError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or f"HTTP error! status: {response.status_code}"

    if isinstance(body, dict):
        for field in ("detail", "error", "message"):
            value = body.get(field)
            if isinstance(value, str) and value:
                return value
            if isinstance(value, list) and value:
                # FastAPI validation errors
                return "; ".join(str(item.get("msg", item)) if isinstance(item, dict) else str(item) for item in value)
    return f"HTTP error! status: {response.status_code}"


def normalize_task(raw: dict) -> dict:
    task = dict(raw)
    if "id" not in task and "_id" in task:
        task["id"] = task.pop("_id")
    task.setdefault("createdAt", datetime.now(timezone.utc).isoformat())
    if not task.get("status"):
        task["status"] = "completed" if task.get("completed") else "not-started"
    task["completed"] = bool(task.get("completed"))
    task["updates"] = task.get("updates") or []
    return task


class BarakaFlowClient:
    def __init__(
        self,
        store: LocalStore,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.store = store
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "BarakaFlowClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = {"Content-Type": "application/json"}
        token = self.store.get(TOKEN_KEY)
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._http.request(method, path, headers=headers, **kwargs)
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ApiError(
                f"Cannot connect to server at {self.base_url}. Make sure the backend is running."
            ) from exc

        if response.is_error:
            raise ApiError(_error_message(response), response.status_code)
        if not response.content:
            return None
        return response.json()

    # ── Auth ────────────────────────────────────────────

    def _remember(self, payload: dict) -> dict:
        if payload.get("token"):
            self.store.set(TOKEN_KEY, payload["token"])
            self.store.set(USER_KEY, payload.get("user"))
        return payload

    async def register(self, email: str, password: str, name: str) -> dict:
        payload = await self._request("POST", "/auth/register", json={"email": email, "password": password, "name": name})
        return self._remember(payload)

    async def login(self, email: str, password: str) -> dict:
        payload = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        return self._remember(payload)

    async def verify(self) -> dict:
        return await self._request("GET", "/auth/verify")

    def logout(self) -> None:
        self.store.remove(TOKEN_KEY)
        self.store.remove(USER_KEY)

    def current_user(self) -> dict | None:
        user = self.store.get(USER_KEY)
        return user if isinstance(user, dict) else None

    def is_authenticated(self) -> bool:
        return bool(self.store.get(TOKEN_KEY))

    # ── Tasks ───────────────────────────────────────────

    async def list_tasks(self, q: str | None = None, filter: str | None = None) -> list[dict]:
        params = {k: v for k, v in (("q", q), ("filter", filter)) if v}
        tasks = await self._request("GET", "/tasks", params=params or None)
        return [normalize_task(t) for t in tasks]

    async def create_task(self, data: dict) -> dict:
        return normalize_task(await self._request("POST", "/tasks", json=data))

    async def update_task(self, task_id: int | str, changes: dict) -> dict:
        return normalize_task(await self._request("PUT", f"/tasks/{task_id}", json=changes))

    async def delete_task(self, task_id: int | str) -> None:
        await self._request("DELETE", f"/tasks/{task_id}")

    async def tasks_for_date(self, day: date) -> list[dict]:
        tasks = await self._request("GET", "/tasks/for-date", params={"date": day.isoformat()})
        return [normalize_task(t) for t in tasks]

    # ── Assistant ───────────────────────────────────────

    async def task_suggestions(self, task_id: int | str) -> dict:
        return await self._request("POST", f"/tasks/{task_id}/suggestions")

    async def optimize_day(self, day: date | None = None) -> dict:
        params = {"date": day.isoformat()} if day else None
        return await self._request("POST", "/assistant/day", params=params)
