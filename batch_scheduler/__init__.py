"""
Batch Scheduler Package

A deterministic daily batch admission scheduler: expired jobs are
dropped, the backlog is ordered by deadline and compute cost, and a
fixed number of the most urgent jobs is admitted each day.
"""

__version__ = '0.1.0'

from .types import (
    Job,
    CycleReport,
    CycleState,
    SchedulerConfig,
    InvalidCapacity,
    InvalidJobFields,
    CycleTerminated,
    validate_capacity,
    validate_job_fields
)

from .algorithm import (
    precedes,
    compare_jobs,
    sort_jobs,
    filter_expired,
    admit_jobs,
    calculate_total_compute,
    calculate_load_variance
)

from .cycle import BacklogCycle, run_once

from .simulation import generate_random_jobs, inject_worst_case, simulate_days

from .server import create_app, run_server

__all__ = [
    'Job',
    'CycleReport',
    'CycleState',
    'SchedulerConfig',
    'InvalidCapacity',
    'InvalidJobFields',
    'CycleTerminated',
    'validate_capacity',
    'validate_job_fields',
    'precedes',
    'compare_jobs',
    'sort_jobs',
    'filter_expired',
    'admit_jobs',
    'calculate_total_compute',
    'calculate_load_variance',
    'BacklogCycle',
    'run_once',
    'generate_random_jobs',
    'inject_worst_case',
    'simulate_days',
    'create_app',
    'run_server',
]
