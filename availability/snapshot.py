"""
Batch loading for range queries.

A 60-day date picker would otherwise cost one query set per date per worker;
instead every row the range can touch is fetched once and indexed here.
"""
from __future__ import annotations
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Iterable

from sqlalchemy.orm import Session

from job.models import Job
from job import service as job_service
from mastercalendar.models import MasterDayPattern, MasterBlockedDate
from mastercalendar import service as master_service
from worker.models import Worker
from worker import service as worker_service
from workeravailability.models import WorkerWeeklyPattern, WorkerDateOverride
from workeravailability import service as availability_store


@dataclass
class CalendarSnapshot:
    start: date
    end: date
    day_patterns: dict[int, MasterDayPattern] = field(default_factory=dict)
    blocks: dict[date, MasterBlockedDate] = field(default_factory=dict)
    workers: list[Worker] = field(default_factory=list)
    weekly: dict[tuple[int, int], WorkerWeeklyPattern] = field(default_factory=dict)
    overrides: dict[tuple[int, date], WorkerDateOverride] = field(default_factory=dict)
    jobs_by_worker_day: dict[tuple[int, date], list[Job]] = field(default_factory=dict)
    jobs_by_day: dict[date, list[Job]] = field(default_factory=dict)

    def jobs_for(self, worker_id: int, d: date) -> list[Job]:
        return self.jobs_by_worker_day.get((worker_id, d), [])

    def jobs_on(self, d: date) -> list[Job]:
        return self.jobs_by_day.get(d, [])


def load_snapshot(
    db: Session,
    start: date,
    end: date,
    *,
    required_service_ids: Optional[Iterable[str]] = None,
) -> CalendarSnapshot:
    workers = worker_service.get_eligible_workers(db, required_service_ids=required_service_ids)
    worker_ids = [w.id for w in workers]

    by_worker_day: dict[tuple[int, date], list[Job]] = defaultdict(list)
    by_day: dict[date, list[Job]] = defaultdict(list)
    for job in job_service.jobs_in_range(db, start=start, end=end):
        by_worker_day[(job.worker_id, job.scheduled_date)].append(job)
        by_day[job.scheduled_date].append(job)

    return CalendarSnapshot(
        start=start,
        end=end,
        day_patterns=master_service.load_day_patterns(db),
        blocks=master_service.load_blocks(db, start, end),
        workers=workers,
        weekly=availability_store.load_weekly(db, worker_ids),
        overrides=availability_store.load_overrides(db, worker_ids, start, end),
        jobs_by_worker_day=dict(by_worker_day),
        jobs_by_day=dict(by_day),
    )
