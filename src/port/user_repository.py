from typing import Protocol

from domain.model.user import AuthProvider, BusinessProfile, User, UserRole


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Emails passed in are already normalized (trimmed, lower-cased).
    """
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
        """Create a new user. Return User or None if creation failed."""
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def get_by_google_id(self, google_id: str) -> User | None:
        """Find a user by external identity id. Return User or None if not found."""
        ...

    def link_google_id(self, user_id: str, google_id: str) -> bool:
        """Attach an external identity id to an existing user. Return True if successful."""
        ...

    def set_password_hash(self, user_id: str, password_hash: str) -> bool:
        """Replace the stored password hash. Return True if successful."""
        ...

    def update_last_login(self, user_id: str) -> bool:
        """Update the last login timestamp for a user. Return True if successful."""
        ...

    def count_by_role(self, role: UserRole) -> int:
        """Count users with the given role. Raises UpstreamUnavailableError on store failure."""
        ...
