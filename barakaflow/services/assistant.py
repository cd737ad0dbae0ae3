import logging
from datetime import date, datetime, timezone, tzinfo

from barakaflow.services import prompts
from barakaflow.services.ai_parsing import parse_day_optimization, parse_suggestions
from barakaflow.services.cache import CacheStore, derive_key
from barakaflow.services.llm_client import LLMClient
from barakaflow.services.prompts import ScheduledTask, TaskContext

logger = logging.getLogger(__name__)

SUGGESTION_MAX_TOKENS = 500
DAY_MAX_TOKENS = 800
CHAT_REPLY_MAX_TOKENS = 500


class AssistantService:
    """
    Task suggestions, day optimization and assistant chats.

    Results are cached so that asking again about unchanged input does not
    call the model: suggestions by a hash of the task's content fields, day
    optimizations by date plus the set of task ids they were computed from.
    """

    def __init__(
        self,
        llm: LLMClient,
        cache: CacheStore | None = None,
        suggestion_ttl: float | None = None,
        chat_max_tokens: int = 8000,
        tz: tzinfo | None = None,
    ):
        self.llm = llm
        self.cache = cache if cache is not None else CacheStore()
        self.suggestion_ttl = suggestion_ttl
        self.chat_max_tokens = chat_max_tokens
        self.tz = tz

    # ── Suggestions ─────────────────────────────────────

    @staticmethod
    def suggestion_key(context: TaskContext) -> str:
        return derive_key("suggestions", *context.cache_fields())

    async def suggest(self, context: TaskContext) -> dict:
        key = self.suggestion_key(context)
        cached = self.cache.get(key)
        if isinstance(cached, dict):
            logger.debug("Suggestion cache hit for %r", context.title)
            return cached

        messages = [
            {"role": "system", "content": prompts.SUGGESTION_SYSTEM_PROMPT},
            {"role": "user", "content": prompts.build_suggestion_prompt(context, self.tz)},
        ]
        reply = await self.llm.complete(messages, max_tokens=SUGGESTION_MAX_TOKENS)
        result = parse_suggestions(reply).to_dict()
        self.cache.set(key, result, ttl=self.suggestion_ttl)
        return result

    # ── Day optimization ────────────────────────────────

    @staticmethod
    def day_key(owner_key: str, day: date) -> str:
        return derive_key("day", owner_key, day.isoformat())

    def cached_day(self, owner_key: str, day: date, task_ids: list[str]) -> dict | None:
        key = self.day_key(owner_key, day)
        cached = self.cache.get(key)
        if not isinstance(cached, dict):
            return None
        if sorted(cached.get("taskIds") or []) != sorted(task_ids):
            # Computed from a different set of tasks
            self.cache.invalidate(key)
            return None
        return cached.get("optimization")

    async def optimize_day(self, owner_key: str, day: date, tasks: list[ScheduledTask]) -> dict | None:
        if not tasks:
            return None

        task_ids = [str(task.id) for task in tasks]
        cached = self.cached_day(owner_key, day, task_ids)
        if cached is not None:
            return cached

        messages = [
            {"role": "system", "content": prompts.DAY_SYSTEM_PROMPT},
            {"role": "user", "content": prompts.build_day_optimization_prompt(tasks, self.tz)},
        ]
        reply = await self.llm.complete(messages, max_tokens=DAY_MAX_TOKENS)
        result = parse_day_optimization(reply).to_dict()
        self.cache.set(self.day_key(owner_key, day), {"taskIds": sorted(task_ids), "optimization": result})
        return result

    # ── Chats ───────────────────────────────────────────

    @staticmethod
    def chat_key(conversation_id: str) -> str:
        return f"chat:{conversation_id}"

    def chat_history(self, conversation_id: str) -> list[dict]:
        history = self.cache.get(self.chat_key(conversation_id))
        return history if isinstance(history, list) else []

    def clear_chat(self, conversation_id: str) -> None:
        self.cache.invalidate(self.chat_key(conversation_id))

    def _record(self, conversation_id: str, history: list[dict], message: str, reply: str) -> None:
        now = datetime.now(timezone.utc).isoformat()
        history = [
            *history,
            {"role": "user", "content": message, "timestamp": now},
            {"role": "assistant", "content": reply, "timestamp": now},
        ]
        self.cache.set(self.chat_key(conversation_id), history)

    async def task_chat(self, conversation_id: str, context: TaskContext, message: str) -> str:
        history = self.chat_history(conversation_id)
        messages = prompts.build_task_chat_messages(
            context, message, history, max_tokens=self.chat_max_tokens, tz=self.tz
        )
        reply = await self.llm.complete(messages, max_tokens=CHAT_REPLY_MAX_TOKENS)
        self._record(conversation_id, history, message, reply)
        return reply

    async def day_chat(self, conversation_id: str, tasks: list[ScheduledTask], message: str) -> str:
        history = self.chat_history(conversation_id)
        messages = prompts.build_day_chat_messages(
            tasks, message, history, max_tokens=self.chat_max_tokens, tz=self.tz
        )
        reply = await self.llm.complete(messages, max_tokens=CHAT_REPLY_MAX_TOKENS)
        self._record(conversation_id, history, message, reply)
        return reply
