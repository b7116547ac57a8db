"""Token service: issue and validate signed identity tokens (HS256 JWT)."""

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from config.settings import JWT_ALGORITHM, Settings
from domain.model.errors import InvalidTokenError
from domain.model.token import IdentityClaim
from domain.model.user import Role, VerifiedIdentity

logger = logging.getLogger(__name__)

# Tokens are valid for a fixed window from issuance
TOKEN_LIFETIME = timedelta(hours=12)

_REQUIRED_CLAIMS = ('sub', 'role', 'email', 'iat', 'exp')


def issue_token(identity: VerifiedIdentity, settings: Settings, now: datetime | None = None) -> str:
    """Create a signed token for a verified identity.

    The token carries `sub`, `role` and `email` and expires
    TOKEN_LIFETIME (12 hours) after `now`.
    """
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": identity.id,
        "role": identity.role.value,
        "email": identity.email,
        "iat": issued_at,
        "exp": issued_at + TOKEN_LIFETIME,
    }
    return jwt.encode(payload, settings.jwt_secret.get_secret_value(), algorithm=JWT_ALGORITHM)


def validate_token(token: str, settings: Settings) -> IdentityClaim:
    """Verify signature and expiry, then return the embedded claim.

    Raises:
        InvalidTokenError: malformed, forged, tampered or expired token
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret.get_secret_value(),
            algorithms=[JWT_ALGORITHM],
            options={"require_iat": True, "require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        logger.debug(f"JWT verification failed: {e}")
        raise InvalidTokenError("Invalid token")

    if any(payload.get(name) is None for name in _REQUIRED_CLAIMS):
        raise InvalidTokenError("Invalid token")

    try:
        return IdentityClaim(
            subject_id=str(payload["sub"]),
            role=Role(payload["role"]),
            email=str(payload["email"]),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (TypeError, ValueError, OverflowError):
        raise InvalidTokenError("Invalid token")
