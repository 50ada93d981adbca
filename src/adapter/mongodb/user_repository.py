"""MongoDB implementation of UserRepository."""

import uuid
from datetime import datetime, timezone
from logging import getLogger
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError
from adapter.mongodb import USERS_COLLECTION_NAME
from domain.model.errors import UpstreamUnavailableError
from domain.model.user import AuthProvider, BusinessProfile, User, UserRole

logger = getLogger(__name__)


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('email', 1)], 'idx_users_email', unique=True)
            create_index_safe(
                self.collection, [('google_id', 1)], 'idx_users_google_id', unique=True, sparse=True
            )
            create_index_safe(self.collection, [('role', 1)], 'idx_users_role')
            return True
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            name=doc['name'],
            email=doc['email'],
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
            role=UserRole(doc.get('role', UserRole.CLIENT.value)),
            auth_provider=AuthProvider(doc.get('auth_provider', AuthProvider.LOCAL.value)),
            password_hash=doc.get('password_hash'),
            google_id=doc.get('google_id'),
            avatar=doc.get('avatar', ''),
            phone=doc.get('phone'),
            is_active=doc.get('is_active', True),
            last_login=doc.get('last_login'),
            business=BusinessProfile.from_dict(doc.get('business')),
        )

    def create(
        self,
        email: str,
        name: str,
        role: UserRole = UserRole.CLIENT,
        auth_provider: AuthProvider = AuthProvider.LOCAL,
        password_hash: str | None = None,
        google_id: str | None = None,
        avatar: str = '',
        business: BusinessProfile | None = None,
    ) -> User | None:
        """Create a new user and return the User object."""
        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        user_doc = {
            '_id': user_id,
            'email': email,
            'name': name.strip(),
            'role': role.value,
            'auth_provider': auth_provider.value,
            'avatar': avatar,
            'is_active': True,
            'created_at': now,
            'updated_at': now,
        }
        # Sparse unique indexes skip missing fields, not nulls
        if password_hash:
            user_doc['password_hash'] = password_hash
        if google_id:
            user_doc['google_id'] = google_id
        if business is not None:
            user_doc['business'] = business.to_dict()

        try:
            self.collection.insert_one(user_doc)
        except DuplicateKeyError:
            logger.warning("User creation failed: duplicate key", extra={"email": email})
            return None
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"email": email, "error": str(e)})
            return None

        logger.info("User created", extra={"userId": user_id, "email": email, "role": role.value})
        return self._to_domain(user_doc)

    def get_by_email(self, email: str) -> User | None:
        try:
            doc = self.collection.find_one({'email': email})
        except PyMongoError as e:
            logger.error("Failed to get user by email", extra={"email": email, "error": str(e)})
            raise UpstreamUnavailableError("User lookup failed") from e
        return self._to_domain(doc) if doc else None

    def get_by_id(self, user_id: str) -> User | None:
        try:
            doc = self.collection.find_one({'_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to get user by ID", extra={"userId": user_id, "error": str(e)})
            raise UpstreamUnavailableError("User lookup failed") from e
        return self._to_domain(doc) if doc else None

    def get_by_google_id(self, google_id: str) -> User | None:
        try:
            doc = self.collection.find_one({'google_id': google_id})
        except PyMongoError as e:
            logger.error("Failed to get user by google_id", extra={"error": str(e)})
            raise UpstreamUnavailableError("User lookup failed") from e
        return self._to_domain(doc) if doc else None

    def link_google_id(self, user_id: str, google_id: str) -> bool:
        return self._set_fields(user_id, {'google_id': google_id}, "link google_id")

    def set_password_hash(self, user_id: str, password_hash: str) -> bool:
        return self._set_fields(user_id, {'password_hash': password_hash}, "set password")

    def update_last_login(self, user_id: str) -> bool:
        return self._set_fields(user_id, {'last_login': datetime.now(timezone.utc)}, "update last_login")

    def _set_fields(self, user_id: str, fields: dict, action: str) -> bool:
        try:
            result = self.collection.update_one(
                {'_id': user_id},
                {'$set': {**fields, 'updated_at': datetime.now(timezone.utc)}},
            )
        except PyMongoError as e:
            logger.error(f"Failed to {action}", extra={"userId": user_id, "error": str(e)})
            return False
        if result.modified_count > 0:
            logger.debug(f"User {action}", extra={"userId": user_id})
            return True
        return False

    def count_by_role(self, role: UserRole) -> int:
        try:
            return self.collection.count_documents({'role': role.value})
        except PyMongoError as e:
            raise UpstreamUnavailableError("Failed to count users") from e
