"""
Backlog cycle: the daily scheduling state machine.

A BacklogCycle owns the backlog and the job id counter. Each cycle
ingests new jobs, drops expired ones, orders the rest, admits up to the
day's capacity and carries the remainder over as the next backlog.
"""

import logging
from typing import Iterable, List, Tuple

from .types import CycleReport, CycleState, CycleTerminated, Job
from .algorithm import (
    admit_jobs,
    calculate_load_variance,
    calculate_total_compute,
    filter_expired,
    sort_jobs,
)


logger = logging.getLogger(__name__)


class BacklogCycle:
    """
    Runs scheduling cycles over a persistent backlog.

    In multi-day mode, ``run_day`` evaluates the backlog against the
    current ``day`` and then advances it by one. ``run_cycle`` runs a
    cycle against an explicit day without touching the day counter.
    """

    def __init__(self, start_day: int = 1):
        self.day = start_day
        self.state = CycleState.IDLE
        self._backlog: List[Job] = []
        self._next_id = 1
        self._incoming = 0
        self._history: List[CycleReport] = []

    @property
    def backlog(self) -> List[Job]:
        """Copy of the pending jobs, in their current order."""
        return list(self._backlog)

    @property
    def history(self) -> List[CycleReport]:
        return list(self._history)

    @property
    def terminated(self) -> bool:
        return self.state is CycleState.TERMINATED

    def submit_job(self, compute_cost: int, deadline: int) -> Job:
        """
        Add a job to the backlog with the next id.

        Args:
            compute_cost: Non-negative compute units
            deadline: Last day the job may be admitted

        Returns:
            The created job
        """
        self._ensure_active()
        self.state = CycleState.INGESTING

        job = Job(job_id=self._next_id, compute_cost=compute_cost, deadline=deadline)
        self._next_id += 1
        self._backlog.append(job)
        self._incoming += 1

        logger.debug(f"Submitted job {job.job_id} (compute={compute_cost}, deadline={deadline})")
        return job

    def run_cycle(self, today: int, capacity: int) -> CycleReport:
        """
        Run one scheduling cycle against ``today``.

        Args:
            today: Day used for the expiry check
            capacity: Maximum number of jobs to admit (non-negative)

        Returns:
            Report of executed, expired and remaining jobs
        """
        self._ensure_active()

        self.state = CycleState.FILTERING
        valid, expired_count = filter_expired(self._backlog, today)

        self.state = CycleState.ORDERING
        ordered = sort_jobs(valid)

        self.state = CycleState.ADMITTING
        executed, remaining = admit_jobs(ordered, capacity)

        self._backlog = remaining
        history = [r.total_compute_executed for r in self._history]
        total_compute = calculate_total_compute(executed)
        history.append(total_compute)

        report = CycleReport(
            day=today,
            capacity=capacity,
            executed_jobs=executed,
            total_compute_executed=total_compute,
            expired_count=expired_count,
            remaining_backlog=list(remaining),
            incoming_count=self._incoming,
            load_variance=calculate_load_variance(history),
        )
        self._history.append(report)
        self._incoming = 0
        self.state = CycleState.SETTLED

        logger.info(
            f"Day {today}: executed {report.executed_count} jobs "
            f"(compute={total_compute}), expired {expired_count}, "
            f"backlog {report.remaining_backlog_size}"
        )
        return report

    def run_day(self, capacity: int) -> CycleReport:
        """Run a cycle for the current day, then advance to the next day."""
        report = self.run_cycle(self.day, capacity)
        self.day += 1
        return report

    def terminate(self) -> None:
        """Stop the cycle; no further jobs or cycles are accepted."""
        self.state = CycleState.TERMINATED
        logger.debug(f"Cycle terminated with {len(self._backlog)} jobs in backlog")

    def _ensure_active(self) -> None:
        if self.state is CycleState.TERMINATED:
            raise CycleTerminated("Backlog cycle has been terminated")


def run_once(jobs: Iterable[Tuple[int, int]], today: int, capacity: int) -> CycleReport:
    """
    Schedule a single batch of jobs in isolation.

    Args:
        jobs: (compute_cost, deadline) pairs, ids assigned in this order
        today: Day used for the expiry check
        capacity: Maximum number of jobs to admit

    Returns:
        Report for the single cycle
    """
    cycle = BacklogCycle(start_day=today)
    for compute_cost, deadline in jobs:
        cycle.submit_job(compute_cost, deadline)
    report = cycle.run_cycle(today, capacity)
    cycle.terminate()
    return report
