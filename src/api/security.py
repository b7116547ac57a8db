"""Bearer token extraction and identity dependencies."""

import logging
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from config.settings import Settings, get_settings
from domain.model.errors import InvalidTokenError
from domain.model.token import IdentityClaim
from services.token_service import validate_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


class MissingTokenError(InvalidTokenError):
    """No bearer credentials were presented."""


def get_current_claim(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
) -> IdentityClaim:
    """Validate the presented bearer token (required).

    Raises:
        MissingTokenError: no `Authorization: Bearer <token>` header
        InvalidTokenError: token fails validation
    """
    if not credentials or not credentials.credentials:
        raise MissingTokenError("Missing token")
    return validate_token(credentials.credentials, settings)
