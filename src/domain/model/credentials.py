"""Credential variants accepted by the identity-resolution contract.

Both providers hand the auth service one of these; the route decides which
variant it builds, so no runtime strategy lookup is involved.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class LocalCredentials:
    """Email and raw password submitted to the local provider."""
    email: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class OAuthIdentity:
    """Identity asserted by the OAuth provider after a code exchange."""
    external_id: str
    email: str
    name: str
    avatar: str = ''


Credentials = LocalCredentials | OAuthIdentity
