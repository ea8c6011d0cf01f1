"""Tests for MongoUserRepository with a mocked pymongo collection."""

import unittest
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

from pymongo.errors import DuplicateKeyError, OperationFailure, PyMongoError

from adapter.mongodb.connection import USERS_COLLECTION_NAME
from adapter.mongodb.indexes import create_index_safe
from adapter.mongodb.user_repository import MongoUserRepository
from domain.model.errors import ConflictError, NotFoundError, StoreUnavailableError


def _user_doc(**kwargs) -> dict:
    now = datetime(2026, 1, 23, 12, 0, 0, tzinfo=timezone.utc)
    doc = {
        '_id': 'user-id-123',
        'email': 'test@example.com',
        'password_hash': '$2b$12$hashedpassword',
        'name': 'Test User',
        'created_at': now,
        'updated_at': now,
    }
    doc.update(kwargs)
    return doc


class MongoUserRepositoryTestCase(unittest.TestCase):

    def setUp(self):
        self.collection = MagicMock()
        self.db = MagicMock()
        self.db.__getitem__.return_value = self.collection
        self.repo = MongoUserRepository(self.db)


class TestCreate(MongoUserRepositoryTestCase):

    @patch('adapter.mongodb.user_repository.uuid')
    def test_create_inserts_document_and_returns_user(self, mock_uuid):
        mock_uuid.uuid4.return_value.hex = 'new-user-id-123'

        user = self.repo.create('new@example.com', '$2b$12$hash', None)

        self.db.__getitem__.assert_called_with(USERS_COLLECTION_NAME)
        doc = self.collection.insert_one.call_args[0][0]
        self.assertEqual(doc['_id'], 'new-user-id-123')
        self.assertEqual(doc['email'], 'new@example.com')
        self.assertEqual(doc['password_hash'], '$2b$12$hash')
        self.assertIsNone(doc['name'])
        self.assertEqual(user.id, 'new-user-id-123')
        self.assertEqual(user.created_at, user.updated_at)

    def test_duplicate_key_raises_conflict(self):
        self.collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key error", 11000)

        with self.assertRaises(ConflictError):
            self.repo.create('test@example.com', 'hash', None)

    def test_driver_failure_raises_store_unavailable(self):
        self.collection.insert_one.side_effect = PyMongoError("connection reset")

        with self.assertRaises(StoreUnavailableError):
            self.repo.create('test@example.com', 'hash', None)


class TestLookups(MongoUserRepositoryTestCase):

    def test_get_by_email_maps_document(self):
        self.collection.find_one.return_value = _user_doc()

        user = self.repo.get_by_email('test@example.com')

        self.assertEqual(user.id, 'user-id-123')
        self.assertEqual(user.name, 'Test User')
        self.collection.find_one.assert_called_once_with({'email': 'test@example.com'})

    def test_get_by_id_not_found_returns_none(self):
        self.collection.find_one.return_value = None

        self.assertIsNone(self.repo.get_by_id('missing'))
        self.collection.find_one.assert_called_once_with({'_id': 'missing'})

    def test_lookup_driver_failure_raises_store_unavailable(self):
        self.collection.find_one.side_effect = PyMongoError("timeout")

        with self.assertRaises(StoreUnavailableError):
            self.repo.get_by_email('test@example.com')

    def test_document_without_updated_at_uses_created_at(self):
        doc = _user_doc()
        del doc['updated_at']
        self.collection.find_one.return_value = doc

        user = self.repo.get_by_id('user-id-123')

        self.assertEqual(user.updated_at, user.created_at)


class TestUpdate(MongoUserRepositoryTestCase):

    def test_update_sets_fields_and_returns_new_document(self):
        self.collection.find_one_and_update.return_value = _user_doc(name='Renamed')

        user = self.repo.update('user-id-123', {'name': 'Renamed'})

        self.assertEqual(user.name, 'Renamed')
        args, kwargs = self.collection.find_one_and_update.call_args
        self.assertEqual(args[0], {'_id': 'user-id-123'})
        self.assertEqual(args[1]['$set']['name'], 'Renamed')
        self.assertIn('updated_at', args[1]['$set'])

    def test_update_missing_user_raises_not_found(self):
        self.collection.find_one_and_update.return_value = None

        with self.assertRaises(NotFoundError):
            self.repo.update('missing', {'name': 'Renamed'})

    def test_update_duplicate_email_raises_conflict(self):
        self.collection.find_one_and_update.side_effect = DuplicateKeyError("E11000", 11000)

        with self.assertRaises(ConflictError):
            self.repo.update('user-id-123', {'email': 'taken@example.com'})

    def test_update_rejects_unknown_fields(self):
        with self.assertRaises(ValueError):
            self.repo.update('user-id-123', {'_id': 'other'})
        self.collection.find_one_and_update.assert_not_called()


class TestEnsureIndexes(MongoUserRepositoryTestCase):

    def test_creates_unique_email_index(self):
        self.assertTrue(self.repo.ensure_indexes())

        calls = self.collection.create_index.call_args_list
        email_call = next(c for c in calls if c.kwargs.get('name') == 'idx_users_email')
        self.assertEqual(email_call.args[0], [('email', 1)])
        self.assertTrue(email_call.kwargs['unique'])

    def test_index_failure_returns_false(self):
        self.collection.create_index.side_effect = PyMongoError("not authorized")

        self.assertFalse(self.repo.ensure_indexes())


class TestCreateIndexSafe(unittest.TestCase):

    def test_conflicting_index_with_same_keys_is_replaced(self):
        collection = MagicMock()
        collection.create_index.side_effect = [
            OperationFailure("Index already exists with a different name: email_1"),
            'idx_users_email',
        ]
        collection.index_information.return_value = {
            '_id_': {'key': [('_id', 1)]},
            'email_1': {'key': [('email', 1)]},
        }

        self.assertTrue(create_index_safe(collection, [('email', 1)], name='idx_users_email', unique=True))

        collection.drop_index.assert_called_once_with('email_1')
        self.assertEqual(collection.create_index.call_count, 2)

    def test_unrelated_failure_propagates(self):
        collection = MagicMock()
        collection.create_index.side_effect = OperationFailure("not authorized")

        with self.assertRaises(OperationFailure):
            create_index_safe(collection, [('email', 1)], name='idx_users_email')


if __name__ == '__main__':
    unittest.main()
