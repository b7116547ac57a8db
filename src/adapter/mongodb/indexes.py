"""Unique index enforcement for MongoDB collections.

Email uniqueness rests entirely on a unique index, so a failure here is
fatal: callers get DirectoryError instead of a False they could ignore.
"""

from logging import getLogger

from pymongo.errors import OperationFailure, PyMongoError

from domain.model.errors import DirectoryError

logger = getLogger(__name__)

# IndexOptionsConflict, IndexKeySpecsConflict
_INDEX_CONFLICT_CODES = {85, 86}


def has_unique_index(collection, keys: list) -> bool:
    """True if some unique index covers exactly `keys`."""
    for info in collection.index_information().values():
        if list(info.get('key', [])) == list(keys) and info.get('unique'):
            return True
    return False


def _drop_conflicting(collection, keys: list, name: str) -> None:
    """Drop indexes that share the name or the key pattern but are not unique."""
    for idx_name, info in collection.index_information().items():
        if idx_name == '_id_':
            continue
        if idx_name == name or list(info.get('key', [])) == list(keys):
            logger.warning("Dropping conflicting index", extra={"index": idx_name})
            collection.drop_index(idx_name)


def ensure_unique_index(collection, keys: list, name: str) -> None:
    """Make sure a unique index on `keys` is in place.

    A non-unique index with the same name or keys is replaced. Existing
    duplicate values make the build fail, and that failure is reported.

    Raises:
        DirectoryError: the unique index could not be created or verified
    """
    try:
        try:
            collection.create_index(keys, name=name, unique=True)
        except OperationFailure as e:
            if e.code not in _INDEX_CONFLICT_CODES:
                raise
            _drop_conflicting(collection, keys, name)
            collection.create_index(keys, name=name, unique=True)
            logger.info("Recreated unique index", extra={"index": name})

        if not has_unique_index(collection, keys):
            raise DirectoryError(f"Unique index {name} is missing")
    except PyMongoError as e:
        logger.error("Failed to ensure unique index", extra={"index": name, "error": str(e)[:200]})
        raise DirectoryError(f"Failed to create unique index {name}") from e
