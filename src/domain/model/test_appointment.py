"""Unit tests for Appointment domain model: status lifecycle and time parsing.

Tests focus on behavior the dashboard relies on:
- AppointmentStatus string↔enum conversion (used by _to_domain adapter)
- Terminal states and allowed transitions
- parse_time_of_day formats (used to order today's appointments)
"""

import unittest
from datetime import datetime, time, timezone

from domain.model.appointment import Appointment, AppointmentStatus, parse_time_of_day


def _appointment(**kwargs) -> Appointment:
    now = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)
    defaults = {
        'id': 'apt-1',
        'user_id': 'user-1',
        'service': 'Luxury Facial',
        'specialist': 'Sarah J.',
        'date': now,
        'time': '10:30 AM',
        'client_name': 'Jessica Reed',
        'client_email': 'jessica@example.com',
        'created_at': now,
        'updated_at': now,
    }
    defaults.update(kwargs)
    return Appointment(**defaults)


class TestAppointmentStatus(unittest.TestCase):

    def test_status_from_stored_string(self):
        self.assertEqual(AppointmentStatus('in_progress'), AppointmentStatus.IN_PROGRESS)
        self.assertEqual(AppointmentStatus.CANCELLED, 'cancelled')

    def test_unknown_status_raises(self):
        with self.assertRaises(ValueError):
            AppointmentStatus('no_show')

    def test_terminal_states(self):
        self.assertTrue(AppointmentStatus.COMPLETED.is_terminal)
        self.assertTrue(AppointmentStatus.CANCELLED.is_terminal)
        self.assertFalse(AppointmentStatus.PENDING.is_terminal)
        self.assertFalse(AppointmentStatus.IN_PROGRESS.is_terminal)

    def test_forward_transitions(self):
        self.assertTrue(AppointmentStatus.PENDING.can_transition_to(AppointmentStatus.CONFIRMED))
        self.assertTrue(AppointmentStatus.CONFIRMED.can_transition_to(AppointmentStatus.IN_PROGRESS))
        self.assertTrue(AppointmentStatus.IN_PROGRESS.can_transition_to(AppointmentStatus.COMPLETED))

    def test_cancel_reachable_from_every_open_state(self):
        for status in AppointmentStatus:
            if not status.is_terminal:
                self.assertIn(AppointmentStatus.CANCELLED, status.allowed_next())

    def test_terminal_states_have_no_successor(self):
        self.assertEqual(AppointmentStatus.COMPLETED.allowed_next(), frozenset())
        self.assertFalse(AppointmentStatus.CANCELLED.can_transition_to(AppointmentStatus.PENDING))


class TestParseTimeOfDay(unittest.TestCase):

    def test_twelve_hour_clock(self):
        self.assertEqual(parse_time_of_day('10:30 AM'), time(10, 30))
        self.assertEqual(parse_time_of_day('02:15 PM'), time(14, 15))

    def test_lowercase_and_padding(self):
        self.assertEqual(parse_time_of_day(' 9:05 pm '), time(21, 5))

    def test_twenty_four_hour_clock(self):
        self.assertEqual(parse_time_of_day('14:00'), time(14, 0))

    def test_hour_only(self):
        self.assertEqual(parse_time_of_day('9 AM'), time(9, 0))

    def test_unparseable_returns_none(self):
        self.assertIsNone(parse_time_of_day('after lunch'))
        self.assertIsNone(parse_time_of_day(''))


class TestAppointment(unittest.TestCase):

    def test_defaults(self):
        appointment = _appointment()
        self.assertEqual(appointment.status, AppointmentStatus.PENDING)
        self.assertEqual(appointment.price, 0.0)
        self.assertIsNone(appointment.notes)

    def test_negative_price_rejected(self):
        with self.assertRaises(ValueError):
            _appointment(price=-1)

    def test_only_completed_counts_as_revenue(self):
        self.assertTrue(_appointment(status=AppointmentStatus.COMPLETED, price=50).counts_as_revenue)
        self.assertFalse(_appointment(status=AppointmentStatus.CONFIRMED, price=50).counts_as_revenue)
        self.assertFalse(_appointment(status=AppointmentStatus.CANCELLED, price=50).counts_as_revenue)

    def test_time_of_day(self):
        self.assertEqual(_appointment(time='12:00 PM').time_of_day, time(12, 0))
        self.assertIsNone(_appointment(time='tbd').time_of_day)


if __name__ == '__main__':
    unittest.main()
