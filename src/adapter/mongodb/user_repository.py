"""MongoDB implementation of UserRepository."""

import uuid
from datetime import datetime, timezone
from logging import getLogger

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb.connection import USERS_COLLECTION_NAME
from adapter.mongodb.indexes import USER_INDEXES, reconcile_indexes
from domain.model.errors import DuplicateError, UpstreamError
from domain.model.user import Gender, ProfileUpdate, User

logger = getLogger(__name__)


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        return reconcile_indexes(self.collection, USER_INDEXES)

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        gender = doc.get('gender')
        return User(
            id=doc['_id'],
            email=doc['email'],
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
            name=doc.get('name'),
            phone=doc.get('phone'),
            password_hash=doc.get('password_hash'),
            google_id=doc.get('google_id'),
            user_photo=doc.get('user_photo'),
            age=doc.get('age'),
            gender=Gender(gender) if gender else None,
        )

    # ── write operations ─────────────────────────────────────

    def create(
        self,
        email: str,
        password_hash: str | None = None,
        name: str | None = None,
        phone: str | None = None,
        google_id: str | None = None,
        user_photo: str | None = None,
    ) -> User:
        """Create a new user and return the User object."""
        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        user_doc = {
            '_id': user_id,
            'email': email,
            'created_at': now,
            'updated_at': now,
        }
        optional = {
            'password_hash': password_hash,
            'name': name,
            'phone': phone,
            'google_id': google_id,
            'user_photo': user_photo,
        }
        # google_id has a sparse index, so absent fields must not be stored as null
        user_doc.update({k: v for k, v in optional.items() if v is not None})

        try:
            self.collection.insert_one(user_doc)
        except DuplicateKeyError:
            logger.warning("User creation failed: email already exists")
            raise DuplicateError("User already exists with this email")
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"error": str(e)})
            raise UpstreamError("Failed to create user")

        logger.info("User created", extra={"userId": user_id})
        return self._to_domain(user_doc)

    def update_profile(self, user_id: str, changes: ProfileUpdate) -> User | None:
        """Apply non-None profile fields and bump updated_at."""
        fields = {
            'name': changes.name,
            'phone': changes.phone,
            'age': changes.age,
            'gender': changes.gender.value if changes.gender else None,
        }
        update = {k: v for k, v in fields.items() if v is not None}
        update['updated_at'] = datetime.now(timezone.utc)
        return self._find_and_set(user_id, update, "Failed to update user profile")

    def link_provider(self, user_id: str, google_id: str, user_photo: str | None = None) -> User | None:
        update = {'google_id': google_id, 'updated_at': datetime.now(timezone.utc)}
        if user_photo:
            existing = self.get_by_id(user_id)
            if existing and not existing.user_photo:
                update['user_photo'] = user_photo
        return self._find_and_set(user_id, update, "Failed to link identity provider")

    def _find_and_set(self, user_id: str, update: dict, error_message: str) -> User | None:
        try:
            doc = self.collection.find_one_and_update(
                {'_id': user_id},
                {'$set': update},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(error_message, extra={"userId": user_id, "error": str(e)})
            raise UpstreamError(error_message)
        return self._to_domain(doc) if doc else None

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'email': email})
        except PyMongoError as e:
            logger.error("Failed to get user by email", extra={"error": str(e)})
            raise UpstreamError("Failed to look up user")
        return self._to_domain(doc) if doc else None

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to get user by ID", extra={"userId": user_id, "error": str(e)})
            raise UpstreamError("Failed to look up user")
        return self._to_domain(doc) if doc else None
