"""Unit tests for LiteLLMAdapter: response mapping and provider error translation."""

import asyncio
import unittest
from unittest.mock import AsyncMock, Mock, patch

import litellm

from adapter.external.litellm import LiteLLMAdapter, _extract_provider_from_model
from port.llm import (
    LLMAuthError,
    LLMEmptyResponseError,
    LLMError,
    LLMRateLimitError,
    LLMTimeoutError,
)

MESSAGES = [{"role": "user", "content": "hello"}]


def _mock_response(content="  - Cook at home  ", usage=True):
    mock_message = Mock()
    mock_message.content = content

    mock_choice = Mock()
    mock_choice.message = mock_message

    mock_response = Mock()
    mock_response.id = "resp-1"
    mock_response.choices = [mock_choice]
    if usage:
        mock_usage = Mock()
        mock_usage.prompt_tokens = 100
        mock_usage.completion_tokens = 50
        mock_usage.total_tokens = 150
        mock_response.usage = mock_usage
    else:
        mock_response.usage = None
    return mock_response


class TestLiteLLMAdapterCall(unittest.TestCase):

    def call(self, adapter=None, **kwargs):
        adapter = adapter or LiteLLMAdapter(api_key="sk-test")
        return asyncio.run(adapter.call(MESSAGES, model="openai/gpt-4o-mini", **kwargs))

    @patch("adapter.external.litellm.acompletion", new_callable=AsyncMock)
    def test_returns_stripped_content_and_usage(self, mock_acompletion):
        mock_acompletion.return_value = _mock_response()

        content, stats = self.call(temperature=0.3)

        self.assertEqual(content, "- Cook at home")
        self.assertEqual(stats.total_tokens, 150)
        self.assertEqual(stats.provider, "openai")
        kwargs = mock_acompletion.call_args.kwargs
        self.assertEqual(kwargs["api_key"], "sk-test")
        self.assertEqual(kwargs["temperature"], 0.3)
        self.assertEqual(kwargs["timeout"], 30.0)

    @patch("adapter.external.litellm.acompletion", new_callable=AsyncMock)
    def test_missing_usage_counts_zero(self, mock_acompletion):
        mock_acompletion.return_value = _mock_response(usage=False)

        _, stats = self.call()

        self.assertEqual(stats.prompt_tokens, 0)
        self.assertEqual(stats.total_tokens, 0)

    @patch("adapter.external.litellm.acompletion", new_callable=AsyncMock)
    def test_without_api_key_does_not_pass_one(self, mock_acompletion):
        mock_acompletion.return_value = _mock_response()

        self.call(adapter=LiteLLMAdapter())

        self.assertNotIn("api_key", mock_acompletion.call_args.kwargs)

    @patch("adapter.external.litellm.acompletion", new_callable=AsyncMock)
    def test_empty_content_raises(self, mock_acompletion):
        mock_acompletion.return_value = _mock_response(content="   ")

        with self.assertRaises(LLMEmptyResponseError):
            self.call()

    def test_empty_messages_raise_value_error(self):
        with self.assertRaises(ValueError):
            asyncio.run(LiteLLMAdapter().call([]))


class TestLiteLLMAdapterErrors(unittest.TestCase):

    def assert_translated(self, error, expected):
        with patch("adapter.external.litellm.acompletion", new_callable=AsyncMock) as mock_acompletion:
            mock_acompletion.side_effect = error
            with self.assertRaises(expected):
                asyncio.run(LiteLLMAdapter().call(MESSAGES))

    def test_timeout(self):
        self.assert_translated(
            litellm.Timeout("test", llm_provider="openai", model="gpt-4o"), LLMTimeoutError
        )

    def test_authentication(self):
        self.assert_translated(
            litellm.AuthenticationError("test", llm_provider="openai", model="gpt-4o"), LLMAuthError
        )

    def test_rate_limit(self):
        self.assert_translated(
            litellm.RateLimitError("test", llm_provider="openai", model="gpt-4o"), LLMRateLimitError
        )

    def test_generic_api_error(self):
        error = litellm.APIError(status_code=500, message="test", llm_provider="openai", model="gpt-4o")
        self.assert_translated(error, LLMError)

    def test_connection_error(self):
        error = litellm.APIConnectionError(message="connection refused", llm_provider="openai", model="gpt-4o")
        self.assert_translated(error, LLMError)

    def test_bad_request(self):
        error = litellm.BadRequestError(message="bad request", model="gpt-4o", llm_provider="openai")
        self.assert_translated(error, LLMError)

    def test_service_unavailable(self):
        error = litellm.ServiceUnavailableError(
            "Service unavailable", llm_provider="openai", model="gpt-4o"
        )
        self.assert_translated(error, LLMError)


class TestExtractProvider(unittest.TestCase):

    def test_prefixed_model(self):
        self.assertEqual(_extract_provider_from_model("anthropic/claude-3-haiku"), "anthropic")

    def test_bare_openai_model(self):
        self.assertEqual(_extract_provider_from_model("gpt-4o-mini"), "openai")

    def test_unknown_model(self):
        self.assertIsNone(_extract_provider_from_model("mystery-model"))


if __name__ == '__main__':
    unittest.main()
