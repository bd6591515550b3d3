"""
Multi-day simulation with random job arrivals.

Random generators are always explicit ``random.Random`` instances so a
seeded run is reproducible.
"""

import logging
import random
from typing import List, Optional, Tuple

from .types import CycleReport, Job, SchedulerConfig
from .cycle import BacklogCycle


logger = logging.getLogger(__name__)

# Worst-case burst: jobs due the same day, then a heavy wave due tomorrow
URGENT_BURST = 3
URGENT_COMPUTE = (18, 20)
HEAVY_BURST = 8
HEAVY_COMPUTE = (14, 20)


def random_job_fields(
    count: int,
    today: int,
    max_offset: int = 7,
    max_compute: int = 20,
    rng: Optional[random.Random] = None
) -> List[Tuple[int, int]]:
    """Draw ``count`` random (compute_cost, deadline) pairs."""
    rng = rng or random.Random()
    fields = []
    for _ in range(count):
        compute_cost = rng.randint(1, max_compute)
        deadline = today + rng.randint(0, max(max_offset, 1) - 1)
        fields.append((compute_cost, deadline))
    return fields


def generate_random_jobs(
    cycle: BacklogCycle,
    count: int,
    today: int,
    max_offset: int = 7,
    max_compute: int = 20,
    rng: Optional[random.Random] = None
) -> List[Job]:
    """
    Submit ``count`` random jobs to ``cycle``.

    Compute cost is drawn from 1..max_compute and the deadline from
    today..today + max_offset - 1.

    Args:
        cycle: Cycle receiving the jobs
        count: Number of jobs to create
        today: Earliest possible deadline
        max_offset: Number of distinct deadline days
        max_compute: Largest possible compute cost
        rng: Random generator; a fresh unseeded one if omitted

    Returns:
        The created jobs, in submission order
    """
    fields = random_job_fields(count, today, max_offset, max_compute, rng)
    return [cycle.submit_job(c, d) for c, d in fields]


def inject_worst_case(
    cycle: BacklogCycle,
    today: int,
    rng: Optional[random.Random] = None
) -> List[Job]:
    """
    Flood the backlog with heavy, urgent jobs.

    Submits jobs due ``today`` with near-maximum compute and a larger wave
    due ``today + 1``, to check the backlog stays bounded under load.
    """
    rng = rng or random.Random()
    injected = []
    for _ in range(URGENT_BURST):
        injected.append(cycle.submit_job(rng.randint(*URGENT_COMPUTE), today))
    for _ in range(HEAVY_BURST):
        injected.append(cycle.submit_job(rng.randint(*HEAVY_COMPUTE), today + 1))

    logger.info(f"Injected {len(injected)} worst-case jobs on day {today}")
    return injected


def simulate_days(
    days: int,
    capacity: int,
    jobs_per_day: int = 5,
    seed: Optional[int] = None,
    worst_case_day: Optional[int] = None,
    config: Optional[SchedulerConfig] = None
) -> List[CycleReport]:
    """
    Run the scheduler forward over ``days`` days with random arrivals.

    Each day receives jobs_per_day - 1 to jobs_per_day + 2 new jobs (at
    least one) before its cycle runs.

    Args:
        days: Number of days to simulate
        capacity: Jobs admitted per day
        jobs_per_day: Base number of arrivals per day
        seed: Seed for reproducible runs
        worst_case_day: Day on which to inject the worst-case burst
        config: Source of start day and random job bounds

    Returns:
        One report per simulated day
    """
    config = config or SchedulerConfig()
    rng = random.Random(seed)
    cycle = BacklogCycle(start_day=config.start_day)
    reports = []

    for _ in range(days):
        today = cycle.day
        count = max(1, jobs_per_day + rng.randint(-1, 2))
        generate_random_jobs(
            cycle,
            count,
            today,
            max_offset=config.max_deadline_offset,
            max_compute=config.max_compute,
            rng=rng
        )
        if worst_case_day is not None and today == worst_case_day:
            inject_worst_case(cycle, today, rng=rng)
        reports.append(cycle.run_day(capacity))

    cycle.terminate()
    return reports
