"""
Parsing of model replies.

Models are asked for JSON but may wrap it in prose or code fences, so the
first brace-delimited object is pulled out of the text and then checked for
the required fields. Passing extraction is no guarantee of a usable answer:
text that merely looks like an object still has to survive field validation.
"""
import json
from dataclasses import asdict, dataclass

from barakaflow.services.assistant_errors import AssistantResponseError


@dataclass
class Suggestions:
    tips: list[str]
    suggestions: list[str]
    approach: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class DayOptimization:
    summary: str
    break_suggestions: list[str]
    energy_management: list[str]
    actionable_steps: list[str]

    def to_dict(self) -> dict:
        return {
            "summary": self.summary,
            "breakSuggestions": self.break_suggestions,
            "energyManagement": self.energy_management,
            "actionableSteps": self.actionable_steps,
        }


def extract_json_object(text: str) -> dict:
    if not text:
        raise AssistantResponseError("Empty response from the assistant")

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        raise AssistantResponseError("Invalid JSON response from the assistant")

    try:
        parsed = json.loads(text[start:end + 1])
    except json.JSONDecodeError:
        # Trailing prose may itself contain braces; settle for the first complete object
        try:
            parsed, _ = json.JSONDecoder().raw_decode(text[start:])
        except json.JSONDecodeError as exc:
            raise AssistantResponseError("Invalid JSON response from the assistant") from exc

    if not isinstance(parsed, dict):
        raise AssistantResponseError("Invalid JSON response from the assistant")
    return parsed


def _string_list(data: dict, key: str) -> list[str]:
    value = data.get(key)
    if not isinstance(value, list):
        raise AssistantResponseError("Invalid response format from the assistant")
    return [str(item) for item in value]


def _text(data: dict, key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise AssistantResponseError("Invalid response format from the assistant")
    return value


def parse_suggestions(text: str) -> Suggestions:
    data = extract_json_object(text)
    return Suggestions(
        tips=_string_list(data, "tips"),
        suggestions=_string_list(data, "suggestions"),
        approach=_text(data, "approach"),
    )


def parse_day_optimization(text: str) -> DayOptimization:
    data = extract_json_object(text)
    return DayOptimization(
        summary=_text(data, "summary"),
        break_suggestions=_string_list(data, "breakSuggestions"),
        energy_management=_string_list(data, "energyManagement"),
        actionable_steps=_string_list(data, "actionableSteps"),
    )
