from adapter.mongodb.connection import (
    APPOINTMENTS_COLLECTION_NAME,
    DATABASE_NAME,
    SERVICES_COLLECTION_NAME,
    USERS_COLLECTION_NAME,
)

__all__ = [
    'APPOINTMENTS_COLLECTION_NAME',
    'DATABASE_NAME',
    'SERVICES_COLLECTION_NAME',
    'USERS_COLLECTION_NAME',
]
