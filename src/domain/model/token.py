from dataclasses import dataclass
from datetime import datetime

from domain.model.user import Role


@dataclass(frozen=True)
class IdentityClaim:
    """Claims decoded from a validated identity token."""
    subject_id: str
    role: Role
    email: str
    issued_at: datetime
    expires_at: datetime

    def to_payload(self) -> dict:
        """Render the claim with JWT claim names (iat/exp as Unix seconds)."""
        return {
            'sub': self.subject_id,
            'role': self.role.value,
            'email': self.email,
            'iat': int(self.issued_at.timestamp()),
            'exp': int(self.expires_at.timestamp()),
        }
