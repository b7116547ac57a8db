"""MongoDB implementation of UserRepository."""

import uuid
from datetime import datetime, timezone
from logging import getLogger
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError
from adapter.mongodb.connection import USERS_COLLECTION_NAME
from adapter.mongodb.indexes import ensure_unique_index
from domain.model.errors import DirectoryError, DuplicateError
from domain.model.user import Role, User

logger = getLogger(__name__)


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> None:
        """Create indexes for users collection.

        The unique email index is what keeps concurrent registrations of
        the same address from both succeeding, so failing to put it in
        place raises instead of being logged and ignored.

        Raises:
            DirectoryError: the unique email index is not in place
        """
        ensure_unique_index(self.collection, [('email', 1)], 'idx_users_email')

        try:
            self.collection.create_index([('created_at', -1)], name='idx_users_created_at')
        except PyMongoError as e:
            logger.warning("Failed to create created_at index", extra={"error": str(e)[:200]})

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            email=doc['email'],
            password_hash=doc['password_hash'],
            role=Role(doc.get('role', Role.READER.value)),
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
        )

    def create(self, email: str, password_hash: str, role: Role) -> User:
        """Insert a new user document and return the User object."""
        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        user_doc = {
            '_id': user_id,
            'email': email,
            'password_hash': password_hash,
            'role': role.value,
            'created_at': now,
            'updated_at': now,
        }
        try:
            self.collection.insert_one(user_doc)
        except DuplicateKeyError:
            logger.warning("User creation failed: email already exists", extra={"email": email})
            raise DuplicateError("Email already registered")
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"email": email, "error": str(e)})
            raise DirectoryError("Failed to create user") from e

        logger.info("User created", extra={"userId": user_id, "email": email})
        return self._to_domain(user_doc)

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'email': email})
        except PyMongoError as e:
            logger.error("Failed to get user by email", extra={"email": email, "error": str(e)})
            raise DirectoryError("Failed to look up user") from e
        if doc:
            return self._to_domain(doc)
        return None
