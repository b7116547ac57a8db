"""Auth service: registration and authentication business logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that the API layer maps to HTTP status codes.
"""

import logging
from functools import lru_cache

import bcrypt

from domain.model.errors import (
    DirectoryError,
    DuplicateError,
    InvalidCredentialsError,
    RegistrationError,
    ValidationError,
)
from domain.model.user import DEFAULT_ROLE, Role, VerifiedIdentity
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10
# bcrypt only reads the first 72 bytes; newer releases raise on longer input
BCRYPT_MAX_PASSWORD_BYTES = 72


def _bcrypt_input(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]


def hash_password(password: str) -> str:
    """Hash password with bcrypt. A fresh salt is embedded in every result."""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(_bcrypt_input(password), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Constant-time comparison of a plaintext password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(_bcrypt_input(plain), hashed.encode("utf-8"))
    except ValueError:
        # Corrupt stored hash
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    """Hash compared against when the email is unknown, so misses cost a full bcrypt check."""
    return hash_password("dummy-password-for-unknown-users")


def _parse_role(role: str | Role | None) -> Role:
    if role is None:
        return DEFAULT_ROLE
    try:
        return Role(role)
    except ValueError:
        allowed = ", ".join(r.value for r in Role)
        raise ValidationError("invalid role", f"role must be one of: {allowed}")


def register(
    repo: UserRepository,
    email: str | None,
    password: str | None,
    role: str | Role | None = None,
) -> dict:
    """Register a new user.

    Returns the public summary `{id, email, role}` of the created user.

    Raises:
        ValidationError: email or password missing, or role outside the
            allowed set
        RegistrationError: the directory rejected the user (e.g. duplicate email)
    """
    if not email or not password:
        raise ValidationError("email and password required")
    parsed_role = _parse_role(role)

    password_hash = hash_password(password)

    try:
        user = repo.create(email=email, password_hash=password_hash, role=parsed_role)
    except DuplicateError:
        raise RegistrationError("Email already registered")
    except DirectoryError:
        raise RegistrationError("Failed to create user")

    logger.info("User registered", extra={"userId": user.id, "email": email})
    return user.to_summary()


def authenticate(repo: UserRepository, email: str | None, password: str | None) -> VerifiedIdentity:
    """Authenticate a user by email and password.

    Unknown email and wrong password raise the same error, and both cost one
    bcrypt comparison, so callers cannot tell which half of the pair was
    wrong. Missing fields count as a miss.

    Raises:
        InvalidCredentialsError: invalid credentials (deliberately vague)
        DirectoryError: the directory could not be queried
    """
    if not email or not password:
        raise InvalidCredentialsError("Invalid email or password")

    user = repo.get_by_email(email)
    if user is None:
        verify_password(password, _dummy_hash())
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Login failed", extra={"email": email})
        raise InvalidCredentialsError("Invalid email or password")

    logger.info("User logged in", extra={"userId": user.id, "email": email})
    return VerifiedIdentity.from_user(user)
