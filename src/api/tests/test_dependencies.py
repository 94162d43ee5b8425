"""Unit tests for API dependencies — repository and identity-provider injection."""

import unittest
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from fastapi import HTTPException

from api.dependencies import get_identity_provider, get_user_repo
from api.security import get_bearer_token
from adapter.fake.identity_provider import FakeIdentityProvider
from adapter.mongodb.user_repository import MongoUserRepository


class TestGetUserRepo(unittest.TestCase):

    @patch('api.dependencies.get_mongodb_client')
    def test_returns_mongo_repository_when_connected(self, mock_get_client):
        mock_client = MagicMock()
        mock_client.__getitem__.return_value = MagicMock()
        mock_get_client.return_value = mock_client

        repo = get_user_repo()

        self.assertIsInstance(repo, MongoUserRepository)

    @patch('api.dependencies.get_mongodb_client')
    def test_raises_503_when_mongodb_unavailable(self, mock_get_client):
        mock_get_client.return_value = None

        with self.assertRaises(HTTPException) as context:
            get_user_repo()

        self.assertEqual(context.exception.status_code, 503)
        self.assertEqual(context.exception.detail, "Database unavailable")

    @patch('api.dependencies.get_mongodb_client')
    def test_uses_configured_database(self, mock_get_client):
        mock_client = MagicMock()
        mock_get_client.return_value = mock_client

        get_user_repo()

        from api.dependencies import DATABASE_NAME
        mock_client.__getitem__.assert_called_with(DATABASE_NAME)

    @patch('api.dependencies.get_mongodb_client')
    def test_returns_protocol_compatible_object(self, mock_get_client):
        mock_get_client.return_value = MagicMock()

        repo = get_user_repo()

        for method in ['create', 'get_by_email', 'get_by_id', 'update_profile', 'link_provider']:
            self.assertTrue(hasattr(repo, method), f"MongoUserRepository missing protocol method: {method}")


class TestGetIdentityProvider(unittest.TestCase):

    def _request(self, provider):
        return SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace(identity_provider=provider)))

    def test_returns_provider_from_app_state(self):
        provider = FakeIdentityProvider()

        self.assertIs(get_identity_provider(self._request(provider)), provider)

    def test_raises_503_when_not_configured(self):
        with self.assertRaises(HTTPException) as context:
            get_identity_provider(self._request(None))

        self.assertEqual(context.exception.status_code, 503)


class TestGetBearerToken(unittest.TestCase):

    def test_missing_credentials(self):
        with self.assertRaises(HTTPException) as context:
            get_bearer_token(None)

        self.assertEqual(context.exception.status_code, 401)
        self.assertEqual(context.exception.detail, "No token provided")

    def test_returns_token(self):
        credentials = SimpleNamespace(scheme="Bearer", credentials="abc")

        self.assertEqual(get_bearer_token(credentials), "abc")


if __name__ == '__main__':
    unittest.main()
