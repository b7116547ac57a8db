from typing import Protocol

from domain.model.user import Role, User


class UserRepository(Protocol):
    """Protocol defining the user directory contract."""
    def create(self, email: str, password_hash: str, role: Role) -> User:
        """Create a new user.

        Raises:
            DuplicateError: a user with this email already exists
            DirectoryError: the directory could not persist the user
        """
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found.

        Raises:
            DirectoryError: the directory could not be queried
        """
        ...
