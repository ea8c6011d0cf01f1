"""Unit tests for API dependencies: repository and service wiring.

Tests focus on the wiring logic:
- StoreUnavailableError when the MongoDB client is missing
- Configured database name is used
- Advice service is marked unconfigured without an API key
"""

import unittest
from types import SimpleNamespace
from unittest.mock import MagicMock

from adapter.fake.llm import FakeLLMAdapter
from adapter.mongodb.user_repository import MongoUserRepository
from api.dependencies import get_advice_service, get_token_issuer, get_user_repo
from config import Settings
from domain.model.errors import StoreUnavailableError

SECRET = "dependency-test-secret-with-32-characters!"


def _request(mongo_client=None, database="finmon"):
    state = SimpleNamespace(mongo_client=mongo_client, mongo_database=database)
    return SimpleNamespace(app=SimpleNamespace(state=state))


class TestGetUserRepo(unittest.TestCase):

    def test_returns_mongo_repository_when_connected(self):
        client = MagicMock()

        repo = get_user_repo(_request(client, "finmon_test"))

        self.assertIsInstance(repo, MongoUserRepository)
        client.__getitem__.assert_called_with("finmon_test")

    def test_raises_store_unavailable_without_client(self):
        with self.assertRaises(StoreUnavailableError) as context:
            get_user_repo(_request())

        self.assertEqual(str(context.exception), "Database unavailable")


class TestServiceWiring(unittest.TestCase):

    def test_token_issuer_uses_session_ttl(self):
        issuer = get_token_issuer(Settings(jwt_secret=SECRET, session_ttl_days=2))
        self.assertEqual(issuer.ttl.days, 2)

    def test_advice_service_unconfigured_without_key(self):
        service = get_advice_service(FakeLLMAdapter(), Settings(jwt_secret=SECRET))
        self.assertFalse(service.configured)

    def test_advice_service_uses_configured_model(self):
        settings = Settings(jwt_secret=SECRET, openai_api_key="sk-test", advice_model="openai/gpt-4o")

        service = get_advice_service(FakeLLMAdapter(), settings)

        self.assertTrue(service.configured)
        self.assertEqual(service.model, "openai/gpt-4o")


if __name__ == '__main__':
    unittest.main()
