# Prompt templates for the assistant. Everything here is pure string building;
# no network calls.
import math
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Any

SUGGESTION_SYSTEM_PROMPT = (
    "You are a helpful task management assistant. Provide practical, actionable advice for tasks. "
    "Always respond with valid JSON only, no additional text."
)

DAY_SYSTEM_PROMPT = (
    "You are an expert productivity and energy management coach. Provide practical, actionable advice "
    "for optimizing daily schedules. Always respond with valid JSON only, no additional text."
)

TASK_CHAT_SYSTEM_PROMPT = (
    "You are an expert productivity assistant helping with a specific task. You have access to the task's "
    "full context including title, description, owner, status, timeline, and update history. Provide "
    "specific, actionable advice based on the conversation history and task context."
)

DAY_CHAT_SYSTEM_PROMPT = (
    "You are an expert productivity and energy management coach. Analyze the user's schedule for today and "
    "provide optimization recommendations focused on breaks, energy management, and maintaining peak "
    "performance throughout the day."
)

SUGGESTION_PROMPT = """You are an expert productivity assistant. Analyze the following task with all its context and provide personalized, specific suggestions.

{task_info}

Based on ALL the information provided (title, description, owner, status, timeline, and update history), provide helpful assistance in the following JSON format:
{{
  "tips": ["tip1", "tip2", "tip3"],
  "suggestions": ["suggestion1", "suggestion2", "suggestion3"],
  "approach": "A step-by-step approach on how to tackle this task"
}}

Guidelines:
- Make suggestions SPECIFIC to this task, not generic advice
- Consider the task's current status ({status}) when providing advice
- If there's a timeline, consider time management and scheduling
- If there are updates, consider the conversation history and context
- If there's an owner, tailor suggestions for that person
- Keep tips and suggestions concise (1 sentence each)
- The approach should be 2-3 sentences
- Be practical, actionable, and encouraging"""

DAY_PROMPT = """You are an expert productivity and energy management coach. Analyze the user's schedule for today and provide optimization recommendations focused on breaks, energy management, and maintaining peak performance throughout the day.

Here is the user's schedule for today:
{tasks_list}

Provide your response in JSON format:
{{
  "summary": "A brief 2-3 sentence overview of the day's schedule and overall energy optimization strategy",
  "breakSuggestions": ["specific break suggestion 1 with timing", "specific break suggestion 2 with timing", "specific break suggestion 3 with timing"],
  "energyManagement": ["energy management tip 1", "energy management tip 2", "energy management tip 3"],
  "actionableSteps": ["actionable step 1", "actionable step 2", "actionable step 3"]
}}

Guidelines:
- Focus on WHEN and HOW to take breaks to maintain energy
- Consider the timing and duration of tasks when suggesting breaks
- Provide specific, actionable recommendations (not generic advice)
- Suggest optimal break timing between tasks
- Consider energy levels throughout the day (morning, afternoon, evening)
- Keep each suggestion concise (1-2 sentences)
- Make recommendations practical and easy to implement
- Consider task intensity and suggest appropriate break activities"""

RESPONSE_TOKEN_RESERVE = 500
RECENT_UPDATES = 5


@dataclass
class UpdateContext:
    author: str
    content: str
    timestamp: datetime
    likes: int = 0


@dataclass
class TaskContext:
    title: str
    status: str = "not-started"
    description: str | None = None
    owner: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    updates: list[UpdateContext] = field(default_factory=list)

    @classmethod
    def from_task(cls, task: Any) -> "TaskContext":
        return cls(
            title=task.title,
            status=task.status,
            description=task.description,
            owner=task.owner,
            start_time=task.start_time,
            end_time=task.end_time,
            updates=[
                UpdateContext(author=u.author, content=u.content, timestamp=u.timestamp, likes=u.likes)
                for u in (task.updates or [])
            ],
        )

    def cache_fields(self) -> list:
        """The content fields a cached suggestion depends on."""
        return [
            self.title,
            self.description or "",
            self.owner or "",
            self.status,
            self.start_time.isoformat() if self.start_time else None,
            self.end_time.isoformat() if self.end_time else None,
            [(u.author, u.content) for u in self.updates],
        ]


@dataclass
class ScheduledTask:
    id: Any
    title: str
    start_time: datetime
    end_time: datetime | None = None
    description: str | None = None


def _local(dt: datetime, tz: tzinfo | None) -> datetime:
    return dt.astimezone(tz) if dt.tzinfo is not None else dt


def _clock(dt: datetime) -> str:
    hour = dt.hour % 12 or 12
    return f"{hour}:{dt.minute:02d} {'AM' if dt.hour < 12 else 'PM'}"


def format_clock(dt: datetime, tz: tzinfo | None = None) -> str:
    """``9:05 AM``"""
    return _clock(_local(dt, tz))


def format_moment(dt: datetime, tz: tzinfo | None = None) -> str:
    """``Jan 5, 9:05 AM``"""
    local = _local(dt, tz)
    return f"{local:%b} {local.day}, {_clock(local)}"


def format_task_info(context: TaskContext, tz: tzinfo | None = None) -> str:
    timeline = ""
    if context.start_time and context.end_time:
        timeline = f"\nTimeline: {format_moment(context.start_time, tz)} - {format_moment(context.end_time, tz)}"

    updates_info = ""
    if context.updates:
        recent = context.updates[-RECENT_UPDATES:]
        lines = [
            f"{i}. [{format_moment(u.timestamp, tz)}] {u.author}: {u.content}"
            for i, u in enumerate(recent, start=1)
        ]
        updates_info = "\n\nRecent Update History:\n" + "\n".join(lines)

    description = f'Description: "{context.description}"' if context.description else ""
    return (
        f'Task Title: "{context.title}"\n'
        f"{description}\n"
        f"Owner: {context.owner or 'You'}\n"
        f"Status: {context.status}{timeline}{updates_info}"
    )


def build_suggestion_prompt(context: TaskContext, tz: tzinfo | None = None) -> str:
    return SUGGESTION_PROMPT.format(task_info=format_task_info(context, tz), status=context.status)


def format_schedule(tasks: list[ScheduledTask], tz: tzinfo | None = None) -> str:
    entries = []
    for index, task in enumerate(tasks, start=1):
        detail = f" ({task.description})" if task.description else ""
        if task.end_time is not None:
            minutes = round((task.end_time - task.start_time).total_seconds() / 60)
            timing = f"{format_clock(task.start_time, tz)} - {format_clock(task.end_time, tz)} ({minutes} minutes)"
        else:
            timing = f"{format_clock(task.start_time, tz)} (no end time)"
        entries.append(f'{index}. "{task.title}"{detail}\n   Time: {timing}')
    return "\n\n".join(entries)


def build_day_optimization_prompt(tasks: list[ScheduledTask], tz: tzinfo | None = None) -> str:
    return DAY_PROMPT.format(tasks_list=format_schedule(tasks, tz))


def estimate_tokens(text: str) -> int:
    # Rough rule of thumb: one token per four characters
    return math.ceil(len(text) / 4)


def truncate_conversation(
    system_prompt: str,
    context_data: str,
    messages: list[dict],
    max_tokens: int = 8000,
) -> list[dict]:
    """Newest messages that fit the budget left after system prompt, context and the reply reserve."""
    reserved = estimate_tokens(system_prompt) + estimate_tokens(context_data) + RESPONSE_TOKEN_RESERVE
    available = max_tokens - reserved

    kept: list[dict] = []
    used = 0
    for message in reversed(messages):
        cost = estimate_tokens(message["content"])
        if used + cost > available:
            break
        kept.append(message)
        used += cost
    kept.reverse()
    return kept


def _chat_messages(system: str, history: list[dict], user_message: str) -> list[dict]:
    messages = [{"role": "system", "content": system}]
    for message in history:
        role = "user" if message["role"] == "user" else "assistant"
        messages.append({"role": role, "content": message["content"]})
    messages.append({"role": "user", "content": user_message})
    return messages


def build_task_chat_messages(
    context: TaskContext,
    user_message: str,
    history: list[dict],
    max_tokens: int = 8000,
    tz: tzinfo | None = None,
) -> list[dict]:
    context_data = format_task_info(context, tz)
    kept = truncate_conversation(TASK_CHAT_SYSTEM_PROMPT, context_data, history, max_tokens)
    system = f"{TASK_CHAT_SYSTEM_PROMPT}\n\nTask Context:\n{context_data}"
    return _chat_messages(system, kept, user_message)


def build_day_chat_messages(
    tasks: list[ScheduledTask],
    user_message: str,
    history: list[dict],
    max_tokens: int = 8000,
    tz: tzinfo | None = None,
) -> list[dict]:
    context_data = f"Today's Schedule:\n{format_schedule(tasks, tz)}"
    kept = truncate_conversation(DAY_CHAT_SYSTEM_PROMPT, context_data, history, max_tokens)
    system = f"{DAY_CHAT_SYSTEM_PROMPT}\n\n{context_data}"
    return _chat_messages(system, kept, user_message)
