"""Tests for MongoAppointmentRepository and MongoServiceRepository with mocked collections."""

import unittest
from datetime import datetime, timezone
from unittest.mock import MagicMock

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from adapter.mongodb.appointment_repository import MongoAppointmentRepository
from adapter.mongodb.indexes import create_index_safe, ensure_all_indexes
from adapter.mongodb.service_repository import MongoServiceRepository
from domain.model.appointment import AppointmentStatus
from domain.model.errors import UpstreamUnavailableError
from domain.model.service import ServiceCategory

NOW = datetime(2026, 10, 19, 10, 0, tzinfo=timezone.utc)


def _appointment_doc(**kwargs) -> dict:
    doc = {
        '_id': 'apt-1',
        'user_id': 'user-1',
        'service': 'Luxury Facial',
        'specialist': 'Sarah J.',
        'date': NOW,
        'time': '10:30 AM',
        'client_name': 'Jessica Reed',
        'client_email': 'jessica@example.com',
        'status': 'confirmed',
        'price': 150,
        'created_at': NOW,
        'updated_at': NOW,
    }
    doc.update(kwargs)
    return doc


class _MongoTestCase(unittest.TestCase):

    def setUp(self):
        self.collection = MagicMock()
        self.db = MagicMock()
        self.db.__getitem__.return_value = self.collection
        self.repo = MongoAppointmentRepository(self.db)


class TestAppointmentReads(_MongoTestCase):

    def test_to_domain(self):
        self.collection.find_one.return_value = _appointment_doc()

        appointment = self.repo.get_by_id('apt-1')

        self.assertEqual(appointment.status, AppointmentStatus.CONFIRMED)
        self.assertEqual(appointment.price, 150)
        self.assertIsNone(appointment.notes)

    def test_count_in_range_is_half_open(self):
        self.collection.count_documents.return_value = 4
        end = datetime(2026, 10, 20, tzinfo=timezone.utc)

        self.assertEqual(self.repo.count_in_range(NOW, end), 4)
        self.collection.count_documents.assert_called_once_with({'date': {'$gte': NOW, '$lt': end}})

    def test_total_revenue_sums_completed(self):
        self.collection.aggregate.return_value = iter([{'_id': None, 'total': 31}])

        self.assertEqual(self.repo.total_revenue(), 31.0)
        pipeline = self.collection.aggregate.call_args[0][0]
        self.assertEqual(pipeline[0], {'$match': {'status': 'completed'}})

    def test_total_revenue_empty(self):
        self.collection.aggregate.return_value = iter([])

        self.assertEqual(self.repo.total_revenue(), 0.0)

    def test_revenue_by_date(self):
        self.collection.aggregate.return_value = iter([
            {'_id': '2026-10-17', 'revenue': 30},
            {'_id': '2026-10-18', 'revenue': 25.5},
        ])

        self.assertEqual(self.repo.revenue_by_date(NOW), [('2026-10-17', 30.0), ('2026-10-18', 25.5)])

    def test_find_recent_sorted_and_limited(self):
        cursor = self.collection.find.return_value
        cursor.sort.return_value.limit.return_value = [_appointment_doc()]

        result = self.repo.find_recent(limit=10)

        cursor.sort.assert_called_once_with('created_at', -1)
        cursor.sort.return_value.limit.assert_called_once_with(10)
        self.assertEqual(len(result), 1)

    def test_every_query_failure_is_upstream_unavailable(self):
        self.collection.count_documents.side_effect = PyMongoError('down')
        self.collection.aggregate.side_effect = PyMongoError('down')
        self.collection.find.side_effect = PyMongoError('down')

        for call in (
            self.repo.count,
            self.repo.total_revenue,
            lambda: self.repo.revenue_by_date(NOW),
            lambda: self.repo.find_in_range(NOW, NOW),
            self.repo.find_recent,
        ):
            with self.assertRaises(UpstreamUnavailableError):
                call()


class TestAppointmentUpdate(_MongoTestCase):

    def test_update_status_returns_updated_document(self):
        self.collection.find_one_and_update.return_value = _appointment_doc(status='completed')

        updated = self.repo.update_status('apt-1', AppointmentStatus.COMPLETED)

        self.assertEqual(updated.status, AppointmentStatus.COMPLETED)
        args, kwargs = self.collection.find_one_and_update.call_args
        self.assertEqual(args[0], {'_id': 'apt-1'})
        self.assertEqual(args[1]['$set']['status'], 'completed')
        self.assertEqual(kwargs['return_document'], ReturnDocument.AFTER)

    def test_update_status_matches_object_id_key(self):
        oid = ObjectId()
        self.collection.find_one_and_update.return_value = _appointment_doc(_id=oid, status='confirmed')

        updated = self.repo.update_status(str(oid), AppointmentStatus.CONFIRMED)

        self.assertEqual(updated.id, str(oid))
        query = self.collection.find_one_and_update.call_args[0][0]
        self.assertEqual(query, {'_id': {'$in': [oid, str(oid)]}})

    def test_get_by_id_matches_object_id_key(self):
        oid = ObjectId()
        self.collection.find_one.return_value = _appointment_doc(_id=oid)

        appointment = self.repo.get_by_id(str(oid))

        self.assertEqual(appointment.id, str(oid))
        self.collection.find_one.assert_called_once_with({'_id': {'$in': [oid, str(oid)]}})

    def test_update_status_unknown_id(self):
        self.collection.find_one_and_update.return_value = None

        self.assertIsNone(self.repo.update_status('missing', AppointmentStatus.CANCELLED))

    def test_update_status_failure(self):
        self.collection.find_one_and_update.side_effect = PyMongoError('down')

        with self.assertRaises(UpstreamUnavailableError):
            self.repo.update_status('apt-1', AppointmentStatus.CANCELLED)


class TestServiceRepository(unittest.TestCase):

    def setUp(self):
        self.collection = MagicMock()
        db = MagicMock()
        db.__getitem__.return_value = self.collection
        self.repo = MongoServiceRepository(db)

    def test_list_active(self):
        self.collection.find.return_value = [
            {'_id': 's1', 'name': 'Cut', 'category': 'hair', 'duration': 45, 'price': 85},
        ]

        services = self.repo.list_active()

        self.collection.find.assert_called_once_with({'is_active': True})
        self.assertEqual(services[0].category, ServiceCategory.HAIR)
        self.assertTrue(services[0].is_active)

    def test_list_active_failure(self):
        self.collection.find.side_effect = PyMongoError('down')

        with self.assertRaises(UpstreamUnavailableError):
            self.repo.list_active()


class TestIndexes(unittest.TestCase):

    def test_create_index_safe_replaces_same_name_with_other_keys(self):
        collection = MagicMock()
        collection.create_index.side_effect = [PyMongoError('Index already exists with different options'), None]
        collection.index_information.return_value = {
            '_id_': {'key': [('_id', 1)]},
            'idx_users_email': {'key': [('email', -1)]},
        }

        self.assertTrue(create_index_safe(collection, [('email', 1)], 'idx_users_email', unique=True))
        collection.drop_index.assert_called_once_with('idx_users_email')

    def test_create_index_safe_replaces_same_keys_under_old_name(self):
        collection = MagicMock()
        collection.create_index.side_effect = [PyMongoError('Index with name: old_email already exists'), None]
        collection.index_information.return_value = {'old_email': {'key': [('email', 1)]}}

        self.assertTrue(create_index_safe(collection, [('email', 1)], 'idx_users_email'))
        collection.drop_index.assert_called_once_with('old_email')

    def test_create_index_safe_unresolved_conflict(self):
        collection = MagicMock()
        collection.create_index.side_effect = PyMongoError('IndexKeySpecsConflict')
        collection.index_information.return_value = {'_id_': {'key': [('_id', 1)]}}

        self.assertFalse(create_index_safe(collection, [('email', 1)], 'idx_users_email'))
        collection.drop_index.assert_not_called()

    def test_create_index_safe_reraises_other_errors(self):
        collection = MagicMock()
        collection.create_index.side_effect = PyMongoError('not authorized')

        with self.assertRaises(PyMongoError):
            create_index_safe(collection, [('email', 1)], 'idx_users_email')

    def test_ensure_all_indexes(self):
        db = MagicMock()

        self.assertTrue(ensure_all_indexes(db))

    def test_ensure_all_indexes_reports_failure(self):
        db = MagicMock()
        db.__getitem__.return_value.create_index.side_effect = PyMongoError('not authorized')

        self.assertFalse(ensure_all_indexes(db))


if __name__ == '__main__':
    unittest.main()
