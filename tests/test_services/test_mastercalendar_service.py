import unittest
from datetime import date, time

from fastapi import HTTPException
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.database import Base
from mastercalendar.models import MasterDayPattern, MasterBlockedDate
from mastercalendar.schema import MasterDayPatternUpdate, BlockedDateCreate
from mastercalendar import service

MONDAY = date(2025, 6, 2)
SATURDAY = date(2025, 6, 7)
SUNDAY = date(2025, 6, 8)


class MasterCalendarServiceTests(unittest.TestCase):
    def setUp(self):
        # fresh in-memory DB for each test
        self.engine = create_engine("sqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        Session = sessionmaker(bind=self.engine, future=True)
        self.db = Session()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    # --- weekly rules ---

    def test_defaults_are_monday_to_friday(self):
        self.assertTrue(service.is_day_active(self.db, MONDAY))
        self.assertFalse(service.is_day_active(self.db, SATURDAY))
        self.assertFalse(service.is_day_active(self.db, SUNDAY))

    def test_get_master_pattern_materializes_defaults(self):
        rows = service.get_master_pattern(self.db)
        self.assertEqual([r.day_of_week for r in rows], list(range(7)))
        self.assertFalse(rows[0].is_active)  # Sunday
        self.assertTrue(rows[1].is_active)
        self.assertEqual(rows[1].start_time, time(9, 0))
        self.assertEqual(rows[1].end_time, time(17, 0))

        # second read does not duplicate
        service.get_master_pattern(self.db)
        self.assertEqual(self.db.query(MasterDayPattern).count(), 7)

    def test_update_day_pattern_opens_saturday(self):
        row = service.update_day_pattern(self.db, 6, MasterDayPatternUpdate(is_active=True))
        self.assertTrue(row.is_active)
        self.assertTrue(service.is_day_active(self.db, SATURDAY))

    def test_update_day_pattern_is_partial(self):
        service.update_day_pattern(self.db, 1, MasterDayPatternUpdate(start_time=time(8, 0)))
        row = service.update_day_pattern(self.db, 1, MasterDayPatternUpdate(is_active=False))
        self.assertFalse(row.is_active)
        self.assertEqual(row.start_time, time(8, 0))
        self.assertFalse(service.is_day_active(self.db, MONDAY))

    def test_update_day_pattern_rejects_end_before_stored_start(self):
        with self.assertRaises(HTTPException) as ctx:
            service.update_day_pattern(self.db, 2, MasterDayPatternUpdate(end_time=time(8, 0)))
        self.assertEqual(ctx.exception.status_code, 422)

    def test_bad_day_of_week(self):
        with self.assertRaises(HTTPException) as ctx:
            service.get_day_pattern(self.db, 7)
        self.assertEqual(ctx.exception.status_code, 422)

    # --- blocked dates ---

    def test_full_and_partial_blocks(self):
        service.create_blocked_date(self.db, BlockedDateCreate(date=MONDAY, reason="Bank holiday"))
        service.create_blocked_date(self.db, BlockedDateCreate(date=date(2025, 6, 3), blocked_slots=["am"]))

        full = service.is_blocked(self.db, MONDAY)
        self.assertTrue(full.blocked)
        self.assertTrue(full.is_full_block)
        self.assertEqual(full.reason, "Bank holiday")

        partial = service.is_blocked(self.db, date(2025, 6, 3))
        self.assertTrue(partial.blocked)
        self.assertFalse(partial.is_full_block)
        self.assertEqual(partial.partial_slots, ["am"])

        self.assertFalse(service.is_blocked(self.db, date(2025, 6, 4)).blocked)

    def test_duplicate_block_conflicts(self):
        service.create_blocked_date(self.db, BlockedDateCreate(date=MONDAY))
        with self.assertRaises(HTTPException) as ctx:
            service.create_blocked_date(self.db, BlockedDateCreate(date=MONDAY))
        self.assertEqual(ctx.exception.status_code, 409)

    def test_get_blocked_dates_in_range(self):
        for d in (date(2025, 6, 1), MONDAY, date(2025, 6, 30), date(2025, 7, 1)):
            service.create_blocked_date(self.db, BlockedDateCreate(date=d))
        rows = service.get_blocked_dates(self.db, start=MONDAY, end=date(2025, 6, 30))
        self.assertEqual([r.date for r in rows], [MONDAY, date(2025, 6, 30)])

    def test_delete_blocked_date(self):
        row = service.create_blocked_date(self.db, BlockedDateCreate(date=MONDAY))
        self.assertTrue(service.delete_blocked_date(self.db, row.id))
        self.assertFalse(service.delete_blocked_date(self.db, row.id))
        self.assertEqual(self.db.query(MasterBlockedDate).count(), 0)

    def test_toggle_blocks_then_unblocks(self):
        first = service.toggle_blocked_date(self.db, MONDAY, reason="Training")
        self.assertTrue(first.blocked)
        self.assertEqual(first.action, "blocked")
        self.assertIsNotNone(first.id)

        second = service.toggle_blocked_date(self.db, MONDAY)
        self.assertFalse(second.blocked)
        self.assertEqual(second.action, "unblocked")
        self.assertFalse(service.is_blocked(self.db, MONDAY).blocked)


if __name__ == "__main__":
    unittest.main()
