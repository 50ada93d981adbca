"""MongoDB implementation of AppointmentRepository."""

from datetime import datetime, timezone
from logging import getLogger

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError

from adapter.mongodb import APPOINTMENTS_COLLECTION_NAME
from domain.model.appointment import Appointment, AppointmentStatus
from domain.model.errors import UpstreamUnavailableError

logger = getLogger(__name__)


def _id_filter(appointment_id: str) -> dict:
    """Match an appointment id whether it was stored as an ObjectId or a string."""
    if ObjectId.is_valid(appointment_id):
        return {'_id': {'$in': [ObjectId(appointment_id), appointment_id]}}
    return {'_id': appointment_id}


class MongoAppointmentRepository:
    """Appointment reads for the dashboard plus status updates.

    Every PyMongoError is re-raised as UpstreamUnavailableError; the
    dashboard service decides whether to fall back or surface it.
    """

    def __init__(self, db: Database):
        self.collection = db[APPOINTMENTS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for appointments collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('date', 1), ('status', 1)], 'idx_appointments_date_status')
            create_index_safe(self.collection, [('user_id', 1)], 'idx_appointments_user_id')
            create_index_safe(self.collection, [('created_at', -1)], 'idx_appointments_created_at')
            return True
        except PyMongoError as e:
            logger.error("Failed to create appointments indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> Appointment:
        """Convert MongoDB document to Appointment domain model."""
        return Appointment(
            id=str(doc['_id']),
            user_id=str(doc['user_id']),
            service=doc['service'],
            specialist=doc['specialist'],
            date=doc['date'],
            time=doc['time'],
            client_name=doc['client_name'],
            client_email=doc['client_email'],
            created_at=doc['created_at'],
            updated_at=doc.get('updated_at', doc['created_at']),
            status=AppointmentStatus(doc.get('status', AppointmentStatus.PENDING.value)),
            price=doc.get('price', 0.0),
            service_id=doc.get('service_id'),
            client_phone=doc.get('client_phone'),
            notes=doc.get('notes'),
        )

    def _count(self, query: dict) -> int:
        try:
            return self.collection.count_documents(query)
        except PyMongoError as e:
            logger.error("Failed to count appointments", extra={"error": str(e)})
            raise UpstreamUnavailableError("Appointment count failed") from e

    def get_by_id(self, appointment_id: str) -> Appointment | None:
        try:
            doc = self.collection.find_one(_id_filter(appointment_id))
        except PyMongoError as e:
            raise UpstreamUnavailableError("Appointment lookup failed") from e
        return self._to_domain(doc) if doc else None

    def count(self) -> int:
        return self._count({})

    def count_in_range(self, start: datetime, end: datetime) -> int:
        return self._count({'date': {'$gte': start, '$lt': end}})

    def count_created_before(self, boundary: datetime) -> int:
        return self._count({'created_at': {'$lt': boundary}})

    def count_created_since(self, boundary: datetime) -> int:
        return self._count({'created_at': {'$gte': boundary}})

    def total_revenue(self) -> float:
        pipeline = [
            {'$match': {'status': AppointmentStatus.COMPLETED.value}},
            {'$group': {'_id': None, 'total': {'$sum': '$price'}}},
        ]
        try:
            result = list(self.collection.aggregate(pipeline))
        except PyMongoError as e:
            logger.error("Failed to aggregate revenue", extra={"error": str(e)})
            raise UpstreamUnavailableError("Revenue aggregation failed") from e
        return float(result[0]['total']) if result else 0.0

    def revenue_by_date(self, since: datetime) -> list[tuple[str, float]]:
        pipeline = [
            {
                '$match': {
                    'status': AppointmentStatus.COMPLETED.value,
                    'date': {'$gte': since},
                }
            },
            {
                '$group': {
                    '_id': {'$dateToString': {'format': '%Y-%m-%d', 'date': '$date'}},
                    'revenue': {'$sum': '$price'},
                }
            },
            {'$sort': {'_id': 1}},
        ]
        try:
            return [(doc['_id'], float(doc['revenue'])) for doc in self.collection.aggregate(pipeline)]
        except PyMongoError as e:
            logger.error("Failed to aggregate revenue series", extra={"error": str(e)})
            raise UpstreamUnavailableError("Revenue series aggregation failed") from e

    def find_in_range(self, start: datetime, end: datetime) -> list[Appointment]:
        try:
            docs = list(self.collection.find({'date': {'$gte': start, '$lt': end}}))
        except PyMongoError as e:
            logger.error("Failed to find appointments in range", extra={"error": str(e)})
            raise UpstreamUnavailableError("Appointment query failed") from e
        return [self._to_domain(doc) for doc in docs]

    def find_recent(self, limit: int = 10) -> list[Appointment]:
        try:
            docs = list(self.collection.find().sort('created_at', DESCENDING).limit(limit))
        except PyMongoError as e:
            logger.error("Failed to find recent appointments", extra={"error": str(e)})
            raise UpstreamUnavailableError("Appointment query failed") from e
        return [self._to_domain(doc) for doc in docs]

    def update_status(self, appointment_id: str, status: AppointmentStatus) -> Appointment | None:
        try:
            doc = self.collection.find_one_and_update(
                _id_filter(appointment_id),
                {'$set': {'status': status.value, 'updated_at': datetime.now(timezone.utc)}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(
                "Failed to update appointment status",
                extra={"appointmentId": appointment_id, "error": str(e)},
            )
            raise UpstreamUnavailableError("Appointment update failed") from e
        return self._to_domain(doc) if doc else None
