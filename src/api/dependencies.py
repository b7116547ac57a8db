from fastapi import Depends, HTTPException

from adapter.mongodb.connection import get_mongodb_client
from adapter.mongodb.user_repository import MongoUserRepository
from config.settings import Settings, get_settings
from port.user_repository import UserRepository


def _get_db(settings: Settings):
    """Get MongoDB database, raising 503 if unavailable."""
    client = get_mongodb_client(settings.mongodb_uri)
    if client is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return client[settings.mongodb_database]


def get_user_repo(settings: Settings = Depends(get_settings)) -> UserRepository:
    return MongoUserRepository(_get_db(settings))
