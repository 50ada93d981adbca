"""Index setup for the users, appointments and services collections."""

from logging import getLogger

from pymongo.errors import PyMongoError

logger = getLogger(__name__)

_CONFLICT_MARKERS = ("already exists", "Conflict")


def create_index_safe(collection, keys: list, name: str, **kwargs) -> bool:
    """Create an index; if an older definition is in the way, replace it."""
    try:
        collection.create_index(keys, name=name, **kwargs)
        return True
    except PyMongoError as e:
        if not any(marker in str(e) for marker in _CONFLICT_MARKERS):
            raise
        stale = _find_stale_index(collection, keys, name)

    if stale is None:
        logger.error("Index conflict left unresolved", extra={"index": name})
        return False

    logger.warning("Replacing index", extra={"stale": stale, "index": name})
    collection.drop_index(stale)
    collection.create_index(keys, name=name, **kwargs)
    return True


def _find_stale_index(collection, keys: list, name: str) -> str | None:
    # Stale: our name on other keys, or our keys under another name
    wanted = dict(keys)
    for existing, info in collection.index_information().items():
        if existing == '_id_':
            continue
        if (existing == name) != (dict(info.get('key', [])) == wanted):
            return existing
    return None


def ensure_all_indexes(db) -> bool:
    """Called once at startup. False if any collection failed."""
    from adapter.mongodb.appointment_repository import MongoAppointmentRepository
    from adapter.mongodb.service_repository import MongoServiceRepository
    from adapter.mongodb.user_repository import MongoUserRepository

    repositories = (MongoUserRepository, MongoAppointmentRepository, MongoServiceRepository)
    return all([repo(db).ensure_indexes() for repo in repositories])
