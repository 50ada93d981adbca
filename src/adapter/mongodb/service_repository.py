"""MongoDB implementation of ServiceRepository."""

from logging import getLogger
from pymongo.database import Database
from pymongo.errors import PyMongoError

from adapter.mongodb import SERVICES_COLLECTION_NAME
from domain.model.errors import UpstreamUnavailableError
from domain.model.service import Service, ServiceCategory

logger = getLogger(__name__)


class MongoServiceRepository:
    def __init__(self, db: Database):
        self.collection = db[SERVICES_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('is_active', 1)], 'idx_services_is_active')
            create_index_safe(self.collection, [('business_id', 1)], 'idx_services_business_id')
            return True
        except PyMongoError as e:
            logger.error("Failed to create services indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> Service:
        return Service(
            id=str(doc['_id']),
            name=doc['name'],
            category=ServiceCategory(doc['category']),
            duration=doc['duration'],
            price=doc['price'],
            is_active=doc.get('is_active', True),
            description=doc.get('description'),
            image=doc.get('image'),
            business_id=doc.get('business_id'),
            created_at=doc.get('created_at'),
            updated_at=doc.get('updated_at'),
        )

    def list_active(self) -> list[Service]:
        try:
            docs = list(self.collection.find({'is_active': True}))
        except PyMongoError as e:
            logger.error("Failed to list active services", extra={"error": str(e)})
            raise UpstreamUnavailableError("Service query failed") from e
        return [self._to_domain(doc) for doc in docs]
