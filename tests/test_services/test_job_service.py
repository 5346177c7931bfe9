import unittest
from datetime import date, time

from fastapi import HTTPException
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.database import Base
from availability.slots import Slot
from worker.models import Worker
from job.models import JobStatus
from job.schema import JobCreate
from job import service

MONDAY = date(2025, 6, 2)


class JobServiceTests(unittest.TestCase):
    def setUp(self):
        # fresh in-memory DB for each test
        self.engine = create_engine("sqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        Session = sessionmaker(bind=self.engine, future=True)
        self.db = Session()

        self.w1 = Worker(display_name="W1")
        self.w2 = Worker(display_name="W2")
        self.db.add_all([self.w1, self.w2])
        self.db.commit()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def _job(self, worker, at=None, d=MONDAY, status=JobStatus.pending):
        job = service.create_job(self.db, JobCreate(
            worker_id=worker.id,
            customer_name="Customer",
            job_description="Fix tap",
            scheduled_date=d,
            scheduled_time=at,
        ))
        if status is not JobStatus.pending:
            job.status = status
            self.db.commit()
        return job

    # --- consumption ---

    def test_job_without_time_takes_whole_day(self):
        self._job(self.w1)
        self.assertEqual(service.consumed_slots(self.db, self.w1.id, MONDAY), {Slot.full})

    def test_morning_and_afternoon_jobs(self):
        self._job(self.w1, time(9, 30))
        self._job(self.w1, time(13, 0))
        self.assertEqual(service.consumed_slots(self.db, self.w1.id, MONDAY), {Slot.am, Slot.pm})

    def test_cancelled_and_completed_jobs_free_the_slot(self):
        self._job(self.w1, time(9, 0), status=JobStatus.cancelled)
        self._job(self.w1, time(14, 0), status=JobStatus.completed)
        self.assertEqual(service.consumed_slots(self.db, self.w1.id, MONDAY), set())

    def test_count_jobs_on_skips_cancelled(self):
        self._job(self.w1, time(9, 0))
        self._job(self.w1, time(14, 0), status=JobStatus.cancelled)
        self._job(self.w2, time(9, 0), status=JobStatus.completed)
        self._job(self.w2, time(9, 0), d=date(2025, 6, 3))
        counts = service.count_jobs_on(self.db, [self.w1.id, self.w2.id], MONDAY)
        self.assertEqual(counts, {self.w1.id: 1, self.w2.id: 1})
        self.assertEqual(service.count_jobs_on(self.db, [], MONDAY), {})

    def test_jobs_in_range_filters(self):
        self._job(self.w1, time(9, 0))
        self._job(self.w2, time(9, 0), d=date(2025, 6, 10))
        rows = service.jobs_in_range(self.db, start=MONDAY, end=date(2025, 6, 8))
        self.assertEqual(len(rows), 1)
        rows = service.jobs_in_range(self.db, start=MONDAY, end=date(2025, 6, 30), worker_id=self.w2.id)
        self.assertEqual([j.scheduled_date for j in rows], [date(2025, 6, 10)])

    # --- status machine ---

    def test_accept_stamps_time(self):
        job = self._job(self.w1, time(9, 0))
        job = service.transition_status(self.db, job, JobStatus.accepted)
        self.assertEqual(job.status, JobStatus.accepted)
        self.assertIsNotNone(job.accepted_at)

    def test_full_lifecycle(self):
        job = self._job(self.w1, time(9, 0))
        for s in (JobStatus.accepted, JobStatus.in_progress, JobStatus.completed):
            job = service.transition_status(self.db, job, s)
        self.assertEqual(job.status, JobStatus.completed)
        self.assertIsNotNone(job.completed_at)

    def test_illegal_transition_conflicts(self):
        job = self._job(self.w1, time(9, 0))
        with self.assertRaises(HTTPException) as ctx:
            service.transition_status(self.db, job, JobStatus.completed)
        self.assertEqual(ctx.exception.status_code, 409)

    def test_cancelled_is_terminal(self):
        job = self._job(self.w1, time(9, 0))
        service.cancel_job(self.db, job)
        with self.assertRaises(HTTPException) as ctx:
            service.cancel_job(self.db, job)
        self.assertEqual(ctx.exception.status_code, 409)

    def test_reassign_resets_to_pending(self):
        job = self._job(self.w1, time(9, 0))
        service.transition_status(self.db, job, JobStatus.accepted)
        job = service.reassign_job(self.db, job, self.w2.id)
        self.assertEqual(job.worker_id, self.w2.id)
        self.assertEqual(job.status, JobStatus.pending)
        self.assertIsNone(job.accepted_at)

    def test_reassign_in_progress_conflicts(self):
        job = self._job(self.w1, time(9, 0), status=JobStatus.in_progress)
        with self.assertRaises(HTTPException) as ctx:
            service.reassign_job(self.db, job, self.w2.id)
        self.assertEqual(ctx.exception.status_code, 409)

    def test_require_job_404(self):
        with self.assertRaises(HTTPException) as ctx:
            service.require_job(self.db, 12345)
        self.assertEqual(ctx.exception.status_code, 404)


if __name__ == "__main__":
    unittest.main()
