from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified bearer token (Value Object).

    Derived from the User at issuance and never persisted.
    """
    user_id: str
    role: str
    issued_at: datetime
    expires_at: datetime
