"""Tests for MongoUserRepository against a mocked pymongo collection."""

import unittest
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb.connection import USERS_COLLECTION_NAME
from adapter.mongodb.user_repository import MongoUserRepository
from domain.model.errors import DuplicateError, UpstreamError
from domain.model.user import Gender, ProfileUpdate

NOW = datetime(2026, 1, 23, 12, 0, 0, tzinfo=timezone.utc)


def _doc(**kwargs) -> dict:
    doc = {
        '_id': 'user-1',
        'email': 'a@x.com',
        'created_at': NOW,
        'updated_at': NOW,
    }
    doc.update(kwargs)
    return doc


class MongoRepoTestCase(unittest.TestCase):

    def setUp(self):
        self.collection = MagicMock()
        self.db = MagicMock()
        self.db.__getitem__.return_value = self.collection
        self.repo = MongoUserRepository(self.db)


class TestInit(MongoRepoTestCase):

    def test_uses_users_collection(self):
        self.db.__getitem__.assert_called_with(USERS_COLLECTION_NAME)


class TestCreate(MongoRepoTestCase):

    @patch('adapter.mongodb.user_repository.uuid')
    @patch('adapter.mongodb.user_repository.datetime')
    def test_create_password_user(self, mock_datetime, mock_uuid):
        mock_uuid.uuid4.return_value.hex = 'new-user-id'
        mock_datetime.now.return_value = NOW

        user = self.repo.create(email='a@x.com', password_hash='$2b$10$hash', name='Alice')

        self.assertEqual(user.id, 'new-user-id')
        self.assertEqual(user.email, 'a@x.com')
        self.assertEqual(user.password_hash, '$2b$10$hash')
        self.assertEqual(user.created_at, NOW)
        self.assertEqual(user.updated_at, NOW)
        inserted = self.collection.insert_one.call_args[0][0]
        self.assertEqual(inserted['_id'], 'new-user-id')
        self.assertNotIn('google_id', inserted)
        self.assertNotIn('phone', inserted)

    def test_create_provider_user_omits_password(self):
        user = self.repo.create(email='g@x.com', google_id='sub-1', user_photo='https://p')

        inserted = self.collection.insert_one.call_args[0][0]
        self.assertEqual(inserted['google_id'], 'sub-1')
        self.assertNotIn('password_hash', inserted)
        self.assertIsNone(user.password_hash)

    def test_duplicate_key_raises_duplicate_error(self):
        self.collection.insert_one.side_effect = DuplicateKeyError('E11000 duplicate key')

        with self.assertRaises(DuplicateError):
            self.repo.create(email='a@x.com', password_hash='h')

    def test_store_failure_raises_upstream_error(self):
        self.collection.insert_one.side_effect = PyMongoError('down')

        with self.assertRaises(UpstreamError):
            self.repo.create(email='a@x.com', password_hash='h')


class TestReads(MongoRepoTestCase):

    def test_get_by_email_found(self):
        self.collection.find_one.return_value = _doc(gender='female', age=33)

        user = self.repo.get_by_email('a@x.com')

        self.assertEqual(user.id, 'user-1')
        self.assertEqual(user.gender, Gender.FEMALE)
        self.assertEqual(user.age, 33)
        self.collection.find_one.assert_called_once_with({'email': 'a@x.com'})

    def test_get_by_email_not_found(self):
        self.collection.find_one.return_value = None
        self.assertIsNone(self.repo.get_by_email('nobody@x.com'))

    def test_get_by_id(self):
        self.collection.find_one.return_value = _doc()

        user = self.repo.get_by_id('user-1')

        self.assertEqual(user.email, 'a@x.com')
        self.collection.find_one.assert_called_once_with({'_id': 'user-1'})

    def test_read_failure_raises_upstream_error(self):
        self.collection.find_one.side_effect = PyMongoError('down')

        with self.assertRaises(UpstreamError):
            self.repo.get_by_id('user-1')
        with self.assertRaises(UpstreamError):
            self.repo.get_by_email('a@x.com')


class TestUpdateProfile(MongoRepoTestCase):

    def test_sets_only_given_fields(self):
        self.collection.find_one_and_update.return_value = _doc(name='Bob', gender='male')

        user = self.repo.update_profile('user-1', ProfileUpdate(name='Bob', gender=Gender.MALE))

        self.assertEqual(user.name, 'Bob')
        filter_, update = self.collection.find_one_and_update.call_args[0]
        self.assertEqual(filter_, {'_id': 'user-1'})
        self.assertEqual(set(update['$set']), {'name', 'gender', 'updated_at'})
        self.assertEqual(update['$set']['gender'], 'male')
        self.assertNotIn('email', update['$set'])
        self.assertEqual(
            self.collection.find_one_and_update.call_args[1]['return_document'],
            ReturnDocument.AFTER,
        )

    def test_missing_user_returns_none(self):
        self.collection.find_one_and_update.return_value = None
        self.assertIsNone(self.repo.update_profile('missing', ProfileUpdate(name='Bob')))

    def test_store_failure_raises_upstream_error(self):
        self.collection.find_one_and_update.side_effect = PyMongoError('down')

        with self.assertRaises(UpstreamError):
            self.repo.update_profile('user-1', ProfileUpdate(age=20))


class TestLinkProvider(MongoRepoTestCase):

    def test_fills_photo_when_absent(self):
        self.collection.find_one.return_value = _doc(password_hash='h')
        self.collection.find_one_and_update.return_value = _doc(google_id='sub-1', user_photo='https://p')

        user = self.repo.link_provider('user-1', 'sub-1', user_photo='https://p')

        self.assertEqual(user.google_id, 'sub-1')
        update = self.collection.find_one_and_update.call_args[0][1]['$set']
        self.assertEqual(update['google_id'], 'sub-1')
        self.assertEqual(update['user_photo'], 'https://p')

    def test_keeps_existing_photo(self):
        self.collection.find_one.return_value = _doc(user_photo='https://mine')
        self.collection.find_one_and_update.return_value = _doc(google_id='sub-1', user_photo='https://mine')

        self.repo.link_provider('user-1', 'sub-1', user_photo='https://p')

        update = self.collection.find_one_and_update.call_args[0][1]['$set']
        self.assertNotIn('user_photo', update)


if __name__ == '__main__':
    unittest.main()
