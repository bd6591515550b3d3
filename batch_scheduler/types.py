"""
Data models for the batch scheduler.

This module defines the core data structures used in scheduling:
- Jobs waiting for admission
- Reports produced by each scheduling cycle
- Configuration defaults shared by the server, CLI and simulation
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple
from enum import Enum


class InvalidCapacity(ValueError):
    """Daily capacity is negative or not an integer."""


class InvalidJobFields(ValueError):
    """Compute cost is negative, or a job field is not an integer."""


class CycleTerminated(RuntimeError):
    """A terminated BacklogCycle was asked to do more work."""


class CycleState(Enum):
    """Phases of a scheduling cycle."""
    IDLE = "idle"
    INGESTING = "ingesting"
    FILTERING = "filtering"
    ORDERING = "ordering"
    ADMITTING = "admitting"
    SETTLED = "settled"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class Job:
    """
    A job waiting to be admitted.

    Attributes:
        job_id: Unique identifier, increasing in order of arrival
        compute_cost: Resource units required to execute the job
        deadline: Last day on which the job may be admitted
    """
    job_id: int
    compute_cost: int
    deadline: int

    def to_dict(self) -> Dict[str, int]:
        return {
            'job_id': self.job_id,
            'compute_cost': self.compute_cost,
            'deadline': self.deadline,
        }


@dataclass
class CycleReport:
    """
    Outcome of one scheduling cycle.

    Attributes:
        day: Day the backlog was evaluated against
        capacity: Maximum number of jobs admitted this cycle
        executed_jobs: Admitted jobs, most urgent first
        total_compute_executed: Sum of compute cost over executed jobs
        expired_count: Jobs discarded because their deadline had passed
        remaining_backlog: Valid jobs carried into the next cycle, in order
        incoming_count: Jobs submitted since the previous cycle
        load_variance: Variance of executed compute across cycles so far
    """
    day: int
    capacity: int
    executed_jobs: List[Job]
    total_compute_executed: int
    expired_count: int
    remaining_backlog: List[Job]
    incoming_count: int = 0
    load_variance: float = 0.0

    @property
    def remaining_backlog_size(self) -> int:
        return len(self.remaining_backlog)

    @property
    def executed_count(self) -> int:
        return len(self.executed_jobs)

    def to_dict(self) -> Dict[str, Any]:
        """Render the report as JSON-safe primitives."""
        return {
            'day': self.day,
            'capacity': self.capacity,
            'executed_jobs': [job.to_dict() for job in self.executed_jobs],
            'executed_count': self.executed_count,
            'total_compute_executed': self.total_compute_executed,
            'expired_count': self.expired_count,
            'remaining_backlog': [job.to_dict() for job in self.remaining_backlog],
            'remaining_backlog_size': self.remaining_backlog_size,
            'incoming_count': self.incoming_count,
            'load_variance': self.load_variance,
        }


@dataclass
class SchedulerConfig:
    """
    Defaults for the scheduler front ends.

    Attributes:
        default_capacity: Jobs admitted per day when no capacity is given
        start_day: Day number of the first multi-day cycle
        jobs_per_day: Base number of random arrivals per simulated day
        max_deadline_offset: Random deadlines fall within this many days
        max_compute: Upper bound for random compute costs
        seed: Seed for the simulation random generator
    """
    default_capacity: int = 5
    start_day: int = 1
    jobs_per_day: int = 5
    max_deadline_offset: int = 7
    max_compute: int = 20
    seed: Optional[int] = None

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> 'SchedulerConfig':
        """Build a config from upper-case keys, e.g. a Flask app.config."""
        return cls(
            default_capacity=mapping.get('DEFAULT_CAPACITY', cls.default_capacity),
            start_day=mapping.get('START_DAY', cls.start_day),
            jobs_per_day=mapping.get('JOBS_PER_DAY', cls.jobs_per_day),
            max_deadline_offset=mapping.get('MAX_DEADLINE_OFFSET', cls.max_deadline_offset),
            max_compute=mapping.get('MAX_COMPUTE', cls.max_compute),
            seed=mapping.get('SEED', cls.seed),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'default_capacity': self.default_capacity,
            'start_day': self.start_day,
            'jobs_per_day': self.jobs_per_day,
            'max_deadline_offset': self.max_deadline_offset,
            'max_compute': self.max_compute,
            'seed': self.seed,
        }


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_capacity(value: Any) -> int:
    """
    Check a daily capacity before it reaches the scheduler.

    Args:
        value: Candidate capacity

    Returns:
        The capacity as an int

    Raises:
        InvalidCapacity: If the value is not a non-negative integer
    """
    if not _is_int(value):
        raise InvalidCapacity(f"Capacity must be an integer, got {value!r}")
    if value < 0:
        raise InvalidCapacity(f"Capacity cannot be negative, got {value}")
    return value


def validate_job_fields(compute_cost: Any, deadline: Any) -> Tuple[int, int]:
    """
    Check job fields before the job is submitted.

    Args:
        compute_cost: Candidate compute cost
        deadline: Candidate deadline day

    Returns:
        Tuple of (compute_cost, deadline)

    Raises:
        InvalidJobFields: If either field is not an integer or the
            compute cost is negative
    """
    if not _is_int(compute_cost):
        raise InvalidJobFields(f"Compute cost must be an integer, got {compute_cost!r}")
    if not _is_int(deadline):
        raise InvalidJobFields(f"Deadline must be an integer, got {deadline!r}")
    if compute_cost < 0:
        raise InvalidJobFields(f"Compute cost cannot be negative, got {compute_cost}")
    return compute_cost, deadline
