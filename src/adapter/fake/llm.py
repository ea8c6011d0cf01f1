"""In-memory implementation of LLMPort for testing."""

from domain.model.advice import LLMCallResult


class FakeLLMAdapter:
    """Fake LLM adapter that returns a preconfigured completion or raises."""

    def __init__(
        self,
        response: str = "- Spend less on takeout",
        error: Exception | None = None,
    ):
        self.response = response
        self.error = error
        self.calls: list[dict] = []

    async def call(
        self,
        messages: list[dict[str, str]],
        model: str = "openai/gpt-4o-mini",
        timeout: float = 30.0,
        **kwargs,
    ) -> tuple[str, LLMCallResult]:
        self.calls.append({
            "messages": messages,
            "model": model,
            "timeout": timeout,
            **kwargs,
        })
        if self.error:
            raise self.error
        stats = LLMCallResult(
            model=model,
            prompt_tokens=10,
            completion_tokens=5,
            total_tokens=15,
        )
        return self.response, stats
