"""Advice service: turns a transaction summary into LLM-generated finance advice.

Stateless: builds the prompt, forwards it through LLMPort and returns the text.
"""

import json
import logging

from domain.model.advice import FOCUS_HINTS, AdviceQuery
from port.llm import LLMPort

logger = logging.getLogger(__name__)

ADVICE_TEMPERATURE = 0.3
ADVICE_MAX_TOKENS = 450


class AdviceUnavailableError(Exception):
    """Advice cannot be produced because the provider is not configured."""


def build_messages(query: AdviceQuery) -> list[dict[str, str]]:
    """Build chat messages for an advice request."""
    system = (
        "You are a practical personal finance assistant. "
        "Analyze the user's transactions and give concise, actionable advice. "
        "Return 4-6 bullet points and end with 2 next-step actions. "
        f"Reply in {query.language_name}."
    )
    user = (
        f"User goal/problem: {query.goal}\n"
        f"Focus: {query.focus.value} ({FOCUS_HINTS[query.focus]})\n"
        f"Currency: {query.currency}\n"
        f"Totals: {json.dumps(query.totals, ensure_ascii=False)}\n"
        "Transactions (most recent first):\n"
        f"{json.dumps(query.transactions, ensure_ascii=False, indent=2)}"
    )
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]


class AdviceService:
    def __init__(
        self,
        llm: LLMPort,
        model: str = "openai/gpt-4o-mini",
        timeout: float = 30.0,
        configured: bool = True,
    ):
        self.llm = llm
        self.model = model
        self.timeout = timeout
        self.configured = configured

    async def get_advice(self, query: AdviceQuery) -> str:
        """Return advice text for the query.

        Raises:
            AdviceUnavailableError: no provider API key configured
            LLMError subclasses: provider failures (see port.llm)
        """
        if not self.configured:
            raise AdviceUnavailableError("Missing OpenAI API key")

        content, stats = await self.llm.call(
            messages=build_messages(query),
            model=self.model,
            timeout=self.timeout,
            temperature=ADVICE_TEMPERATURE,
            max_tokens=ADVICE_MAX_TOKENS,
        )

        logger.info("Advice generated", extra={
            "userId": query.user_id,
            "focus": query.focus.value,
            "transactions": len(query.transactions),
            "model": stats.model,
            "total_tokens": stats.total_tokens,
        })
        return content
