"""
Core scheduling algorithm.

This module implements the pure scheduling logic: ordering jobs by
urgency, discarding jobs whose deadline has passed, and admitting a
bounded number of the most urgent jobs.

The algorithm is deterministic: given the same inputs, it will always
produce the same outputs. No function here mutates its arguments.
"""

from typing import List, Sequence, Tuple

from .types import Job


def precedes(a: Job, b: Job) -> bool:
    """
    Decide whether job ``a`` goes before job ``b``.

    Earlier deadline wins. On equal deadlines the cheaper job wins. When both keys tie,
    ``a`` is considered to go first.

    Args:
        a: Candidate for the earlier position
        b: Candidate for the later position

    Returns:
        True if ``a`` should be ordered before ``b``
    """
    return compare_jobs(a, b) <= 0


def compare_jobs(a: Job, b: Job) -> int:
    """
    Three-way comparison by (deadline, compute cost).

    Returns:
        -1 if ``a`` is more urgent, 1 if ``b`` is, 0 if both keys tie
    """
    if a.deadline != b.deadline:
        return -1 if a.deadline < b.deadline else 1
    if a.compute_cost != b.compute_cost:
        return -1 if a.compute_cost < b.compute_cost else 1
    return 0


def sort_jobs(jobs: Sequence[Job]) -> List[Job]:
    """
    Sort jobs by deadline (ascending) and compute cost (ascending).

    Top-down merge sort: O(n log n) comparisons in the worst case.
    Jobs whose deadline and compute cost both tie keep their input order.

    Args:
        jobs: Jobs to sort

    Returns:
        New sorted list of jobs
    """
    if len(jobs) <= 1:
        return list(jobs)

    mid = len(jobs) // 2
    left = sort_jobs(jobs[:mid])
    right = sort_jobs(jobs[mid:])
    return _merge(left, right)


def _merge(left: List[Job], right: List[Job]) -> List[Job]:
    merged = []
    i = j = 0

    while i < len(left) and j < len(right):
        if compare_jobs(left[i], right[j]) <= 0:
            merged.append(left[i])
            i += 1
        else:
            merged.append(right[j])
            j += 1

    merged.extend(left[i:])
    merged.extend(right[j:])
    return merged


def filter_expired(jobs: Sequence[Job], today: int) -> Tuple[List[Job], int]:
    """
    Drop jobs whose deadline is before ``today``.

    A job due today is still valid. Valid jobs keep their relative order.

    Args:
        jobs: Jobs to check
        today: Reference day

    Returns:
        Tuple of (valid jobs, number of expired jobs)
    """
    valid = [job for job in jobs if job.deadline >= today]
    return valid, len(jobs) - len(valid)


def admit_jobs(ordered_jobs: Sequence[Job], capacity: int) -> Tuple[List[Job], List[Job]]:
    """
    Admit up to ``capacity`` jobs from the front of an ordered backlog.

    Args:
        ordered_jobs: Valid jobs, already sorted by urgency
        capacity: Maximum number of jobs to admit (non-negative)

    Returns:
        Tuple of (executed jobs, remaining jobs), both still in order
    """
    count = min(capacity, len(ordered_jobs))
    return list(ordered_jobs[:count]), list(ordered_jobs[count:])


def calculate_total_compute(jobs: Sequence[Job]) -> int:
    """Sum of compute cost over ``jobs``."""
    return sum(job.compute_cost for job in jobs)


def calculate_load_variance(history: Sequence[int]) -> float:
    """
    Population variance of per-day executed compute.

    Args:
        history: Executed compute totals, one per cycle

    Returns:
        Variance, or 0.0 with fewer than two data points
    """
    if len(history) < 2:
        return 0.0
    mean = sum(history) / len(history)
    return sum((value - mean) ** 2 for value in history) / len(history)
