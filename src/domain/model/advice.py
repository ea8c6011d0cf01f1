# domain/model/advice.py

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class AdviceFocus(str, Enum):
    """What the user wants the advice to concentrate on."""
    OVERVIEW = 'overview'
    SAVINGS = 'savings'
    CUTS = 'cuts'
    BUDGET = 'budget'


FOCUS_HINTS: dict[AdviceFocus, str] = {
    AdviceFocus.OVERVIEW: "Summarize spending patterns and key risks/opportunities.",
    AdviceFocus.SAVINGS: "Give a realistic savings plan based on income vs expenses.",
    AdviceFocus.CUTS: "Suggest concrete expense reductions and quick wins.",
    AdviceFocus.BUDGET: "Recommend category-level budget controls and limits.",
}

LANGUAGE_NAMES = {
    'en': 'English',
    'ru': 'Russian',
}


@dataclass(frozen=True)
class AdviceQuery:
    """Transaction summary a user submits for advice."""
    user_id: str
    focus: AdviceFocus
    goal: str
    currency: str
    totals: dict[str, Any] = field(default_factory=dict)
    transactions: list[dict[str, Any]] = field(default_factory=list)
    language: str = 'en'

    @property
    def language_name(self) -> str:
        return LANGUAGE_NAMES.get(self.language, 'English')


@dataclass(frozen=True)
class LLMCallResult:
    """Result from a single LLM API call (Value Object).

    Attributes:
        model: The model name used for the API call.
        prompt_tokens: Number of tokens in the prompt/input.
        completion_tokens: Number of tokens in the completion/output.
        total_tokens: Total tokens used (prompt + completion).
        provider: Optional provider name (e.g., "openai", "anthropic").
    """
    model: str
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
    provider: str | None = field(default=None)
