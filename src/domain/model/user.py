from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    """Roles a user can hold."""
    READER = 'reader'
    AUTHOR = 'author'
    ADMIN = 'admin'


DEFAULT_ROLE = Role.READER


@dataclass
class User:
    """Domain model representing a registered user."""
    id: str
    email: str
    password_hash: str
    role: Role
    created_at: datetime
    updated_at: datetime

    def to_summary(self) -> dict:
        """Public view of the user. Never includes the password hash."""
        return {'id': self.id, 'email': self.email, 'role': self.role.value}


@dataclass(frozen=True)
class VerifiedIdentity:
    """Identity whose credentials have been checked."""
    id: str
    email: str
    role: Role

    @classmethod
    def from_user(cls, user: User) -> 'VerifiedIdentity':
        return cls(id=user.id, email=user.email, role=user.role)
