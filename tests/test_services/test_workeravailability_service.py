import unittest
from datetime import date, time
from types import SimpleNamespace as Obj

from fastapi import HTTPException
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.database import Base
from availability.slots import Slot
from worker.models import Worker
from workeravailability.models import WorkerWeeklyPattern, WorkerDateOverride
from workeravailability.schema import WeeklyPatternUpdate, DateOverridePayload
from workeravailability import service

MONDAY = date(2025, 6, 2)
TUESDAY = date(2025, 6, 3)
ALL = {Slot.full, Slot.am, Slot.pm}


class WorkerAvailabilityServiceTests(unittest.TestCase):
    def setUp(self):
        # fresh in-memory DB for each test
        self.engine = create_engine("sqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        Session = sessionmaker(bind=self.engine, future=True)
        self.db = Session()

        self.worker = Worker(display_name="Dave")
        self.db.add(self.worker)
        self.db.flush()

        # Monday 09:00-17:00
        self.db.add(WorkerWeeklyPattern(
            worker_id=self.worker.id, day_of_week=1, is_active=True,
            start_time=time(9, 0), end_time=time(17, 0),
        ))
        self.db.commit()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def _override(self, **kw):
        row = WorkerDateOverride(worker_id=self.worker.id, **kw)
        self.db.add(row)
        self.db.commit()
        return row

    # --- resolution ---

    def test_weekly_pattern_applies(self):
        res = service.resolve(self.db, self.worker.id, MONDAY)
        self.assertTrue(res.available)
        self.assertEqual(res.slots, ALL)
        self.assertEqual(res.source, "weekly")

    def test_no_pattern_means_unavailable(self):
        res = service.resolve(self.db, self.worker.id, TUESDAY)
        self.assertFalse(res.available)
        self.assertEqual(res.slots, set())
        self.assertEqual(res.source, "none")

    def test_inactive_weekly_row_means_unavailable(self):
        self.db.add(WorkerWeeklyPattern(worker_id=self.worker.id, day_of_week=2, is_active=False))
        self.db.commit()
        self.assertFalse(service.resolve(self.db, self.worker.id, TUESDAY).available)

    def test_override_blocks_a_working_day(self):
        self._override(date=MONDAY, is_available=False)
        res = service.resolve(self.db, self.worker.id, MONDAY)
        self.assertFalse(res.available)
        self.assertEqual(res.source, "override")

    def test_override_opens_a_day_off_with_default_hours(self):
        self._override(date=TUESDAY, is_available=True)
        res = service.resolve(self.db, self.worker.id, TUESDAY)
        self.assertTrue(res.available)
        self.assertEqual((res.start_time, res.end_time), (time(9, 0), time(17, 0)))
        self.assertEqual(res.slots, ALL)

    def test_afternoon_override(self):
        self._override(date=MONDAY, is_available=True, start_time=time(13, 0), end_time=time(17, 0))
        self.assertEqual(service.resolve(self.db, self.worker.id, MONDAY).slots, {Slot.pm})

    # --- worker-authored mutations ---

    def test_set_weekly_pattern_upserts(self):
        row = service.set_weekly_pattern(self.db, self.worker.id, 1, WeeklyPatternUpdate(end_time=time(12, 0)))
        self.assertEqual(row.start_time, time(9, 0))
        self.assertEqual(row.end_time, time(12, 0))
        self.assertEqual(self.db.query(WorkerWeeklyPattern).count(), 1)
        self.assertEqual(service.resolve(self.db, self.worker.id, MONDAY).slots, {Slot.am})

    def test_set_weekly_pattern_unknown_worker(self):
        with self.assertRaises(HTTPException) as ctx:
            service.set_weekly_pattern(self.db, 999, 1, WeeklyPatternUpdate(is_active=False))
        self.assertEqual(ctx.exception.status_code, 404)

    def test_set_override_create_then_update(self):
        row, created = service.set_override(self.db, self.worker.id, DateOverridePayload(date=MONDAY, is_available=False))
        self.assertTrue(created)
        self.assertFalse(row.is_available)

        row, created = service.set_override(self.db, self.worker.id, DateOverridePayload(date=MONDAY, is_available=True))
        self.assertFalse(created)
        self.assertTrue(row.is_available)
        self.assertEqual(self.db.query(WorkerDateOverride).count(), 1)

    def test_set_override_clears_booking_hold(self):
        service.apply_booking_hold(self.db, self.worker.id, MONDAY, "am")
        self.db.commit()
        row, _ = service.set_override(
            self.db, self.worker.id,
            DateOverridePayload(date=MONDAY, start_time=time(9, 0), end_time=time(17, 0)),
        )
        self.assertFalse(row.booking_hold)
        self.assertFalse(row.created_by_booking)
        self.assertIsNone(row.base_start_time)

    def test_toggle_creates_unavailable_then_flips(self):
        first = service.toggle_override(self.db, self.worker.id, MONDAY)
        self.assertEqual(first.action, "created_unavailable")
        self.assertFalse(first.is_available)

        second = service.toggle_override(self.db, self.worker.id, MONDAY)
        self.assertEqual(second.action, "toggled")
        self.assertTrue(second.is_available)

    def test_delete_override_checks_owner(self):
        row = self._override(date=MONDAY, is_available=False)
        self.assertFalse(service.delete_override(self.db, self.worker.id + 1, row.id))
        self.assertTrue(service.delete_override(self.db, self.worker.id, row.id))
        self.assertTrue(service.resolve(self.db, self.worker.id, MONDAY).available)

    # --- booking holds ---

    def test_am_hold_leaves_afternoon(self):
        row = service.apply_booking_hold(self.db, self.worker.id, MONDAY, "am")
        self.db.commit()
        self.assertTrue(row.created_by_booking)
        self.assertTrue(row.booking_hold)
        self.assertEqual((row.start_time, row.end_time), (time(12, 0), time(17, 0)))
        self.assertEqual(row.notes, "Partial booking (am booked)")
        self.assertEqual(service.resolve(self.db, self.worker.id, MONDAY).slots, {Slot.pm})

    def test_pm_hold_leaves_morning(self):
        service.apply_booking_hold(self.db, self.worker.id, MONDAY, "pm")
        self.db.commit()
        self.assertEqual(service.resolve(self.db, self.worker.id, MONDAY).slots, {Slot.am})

    def test_full_hold_closes_day(self):
        row = service.apply_booking_hold(self.db, self.worker.id, MONDAY, "full")
        self.db.commit()
        self.assertFalse(row.is_available)
        self.assertEqual(row.notes, "Booked (full day)")

    def test_exact_hold_uses_half_of_time(self):
        service.apply_booking_hold(self.db, self.worker.id, MONDAY, "exact", time(14, 30))
        self.db.commit()
        self.assertEqual(service.resolve(self.db, self.worker.id, MONDAY).slots, {Slot.am})

    def test_hold_on_only_open_half_closes_day(self):
        self._override(date=MONDAY, is_available=True, start_time=time(9, 0), end_time=time(12, 0))
        row = service.apply_booking_hold(self.db, self.worker.id, MONDAY, "am")
        self.db.commit()
        self.assertFalse(row.is_available)
        self.assertEqual(row.notes, "Booked (am)")

    def test_release_removes_override_created_by_booking(self):
        service.apply_booking_hold(self.db, self.worker.id, MONDAY, "am")
        self.db.commit()
        self.assertIsNone(service.release_booking_hold(self.db, self.worker.id, MONDAY, []))
        self.db.commit()
        self.assertIsNone(service.get_override(self.db, self.worker.id, MONDAY))
        self.assertEqual(service.resolve(self.db, self.worker.id, MONDAY).slots, ALL)

    def test_release_restores_worker_override(self):
        self._override(date=TUESDAY, is_available=True, start_time=time(10, 0), end_time=time(16, 0))
        service.apply_booking_hold(self.db, self.worker.id, TUESDAY, "full")
        self.db.commit()

        row = service.release_booking_hold(self.db, self.worker.id, TUESDAY, [])
        self.db.commit()
        self.assertIsNotNone(row)
        self.assertTrue(row.is_available)
        self.assertEqual((row.start_time, row.end_time), (time(10, 0), time(16, 0)))
        self.assertFalse(row.booking_hold)

    def test_release_replays_remaining_bookings(self):
        service.apply_booking_hold(self.db, self.worker.id, MONDAY, "am")
        service.apply_booking_hold(self.db, self.worker.id, MONDAY, "pm")
        self.db.commit()
        self.assertFalse(service.resolve(self.db, self.worker.id, MONDAY).available)

        # the am booking is cancelled, the pm one stays
        remaining = [Obj(time_slot_type="pm", scheduled_time=time(13, 0))]
        service.release_booking_hold(self.db, self.worker.id, MONDAY, remaining)
        self.db.commit()
        self.assertEqual(service.resolve(self.db, self.worker.id, MONDAY).slots, {Slot.am})


if __name__ == "__main__":
    unittest.main()
