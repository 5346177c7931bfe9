import unittest
from datetime import date, time
from unittest.mock import patch

from fastapi import HTTPException
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.database import Base
from worker.models import Worker, WorkerSkill
from workeravailability.models import WorkerWeeklyPattern
from job.models import Job
from quote.models import Quote
from quote.schema import SelectBookingPayload
from assignment.schema import AssignmentResult
from quote import service

MONDAY = date(2025, 6, 2)


class QuoteServiceTests(unittest.TestCase):
    def setUp(self):
        self.engine = create_engine("sqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        Session = sessionmaker(bind=self.engine, future=True)
        self.db = Session()

        self.worker = Worker(display_name="Dave")
        self.worker.skills = [WorkerSkill(service_id="carpentry")]
        self.db.add(self.worker)
        self.db.flush()
        self.db.add(WorkerWeeklyPattern(worker_id=self.worker.id, day_of_week=1, is_active=True,
                                        start_time=time(9, 0), end_time=time(17, 0)))
        self.quote = Quote(
            short_slug="abc123",
            customer_name="Sam",
            phone="07700900000",
            postcode="SW1A 1AA",
            job_description="Fit a new door",
            service_ids=["carpentry"],
        )
        self.db.add(self.quote)
        self.db.commit()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def _payload(self, **kw):
        data = dict(selected_package="hassleFree", selected_date=MONDAY, time_slot_type="am")
        data.update(kw)
        return SelectBookingPayload(**data)

    def test_select_booking_assigns_worker(self):
        quote, result = service.select_booking(self.db, self.quote.id, self._payload())
        self.assertEqual(result.status, "assigned")
        self.assertEqual(result.worker_id, self.worker.id)
        self.assertEqual(quote.selected_package, "hassleFree")
        self.assertIsNotNone(quote.selected_at)
        self.assertEqual(quote.job_id, result.job_id)

        job = self.db.get(Job, result.job_id)
        self.assertEqual(job.quote_id, self.quote.id)
        self.assertEqual(job.customer_phone, "07700900000")
        self.assertEqual(job.postcode, "SW1A 1AA")

    def test_selection_is_kept_when_no_worker_fits(self):
        quote, result = service.select_booking(self.db, self.quote.id, self._payload(service_ids=["roofing"]))
        self.assertEqual(result.status, "rejected")
        self.assertEqual(result.reason, "no_contractors_available")
        self.assertEqual(quote.selected_date, MONDAY)
        self.assertIsNone(quote.job_id)

    def test_assignment_error_is_returned_not_raised(self):
        with patch("quote.service.assign", return_value=AssignmentResult.rejected("assignment_error")):
            quote, result = service.select_booking(self.db, self.quote.id, self._payload())
        self.assertEqual(result.reason, "assignment_error")
        self.assertEqual(quote.time_slot_type, "am")

    def test_second_booking_conflicts(self):
        service.select_booking(self.db, self.quote.id, self._payload())
        with self.assertRaises(HTTPException) as ctx:
            service.select_booking(self.db, self.quote.id, self._payload(time_slot_type="pm"))
        self.assertEqual(ctx.exception.status_code, 409)

    def test_unknown_quote(self):
        with self.assertRaises(HTTPException) as ctx:
            service.select_booking(self.db, 999, self._payload())
        self.assertEqual(ctx.exception.status_code, 404)

    def test_exact_needs_time(self):
        with self.assertRaises(ValueError):
            self._payload(time_slot_type="exact")
        payload = self._payload(time_slot_type="exact", exact_time_requested=time(10, 30))
        _, result = service.select_booking(self.db, self.quote.id, payload)
        self.assertEqual(self.db.get(Job, result.job_id).scheduled_time, time(10, 30))


if __name__ == "__main__":
    unittest.main()
