"""In-memory implementation of UserRepository for testing."""

import uuid
from dataclasses import replace
from datetime import datetime, timezone
from domain.model.user import AuthProvider, BusinessProfile, User, UserRole


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}

    # ── write operations ─────────────────────────────────────

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
        if any(u.email == email for u in self.store.values()):
            return None
        if google_id and any(u.google_id == google_id for u in self.store.values()):
            return None

        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)

        user = User(
            id=user_id,
            name=name.strip(),
            email=email,
            created_at=now,
            updated_at=now,
            role=role,
            auth_provider=auth_provider,
            password_hash=password_hash,
            google_id=google_id,
            avatar=avatar,
            business=business,
        )
        self.store[user_id] = user
        return replace(user)

    def link_google_id(self, user_id: str, google_id: str) -> bool:
        return self._update(user_id, google_id=google_id)

    def set_password_hash(self, user_id: str, password_hash: str) -> bool:
        return self._update(user_id, password_hash=password_hash)

    def update_last_login(self, user_id: str) -> bool:
        return self._update(user_id, last_login=datetime.now(timezone.utc))

    def _update(self, user_id: str, **fields) -> bool:
        user = self.store.get(user_id)
        if not user:
            return False
        self.store[user_id] = replace(user, updated_at=datetime.now(timezone.utc), **fields)
        return True

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.email == email:
                return replace(user)
        return None

    def get_by_id(self, user_id: str) -> User | None:
        user = self.store.get(user_id)
        return replace(user) if user else None

    def get_by_google_id(self, google_id: str) -> User | None:
        for user in self.store.values():
            if user.google_id == google_id:
                return replace(user)
        return None

    def count_by_role(self, role: UserRole) -> int:
        return sum(1 for u in self.store.values() if u.role == role)
