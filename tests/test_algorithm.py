"""
Unit tests for the scheduling algorithm.

Run with: pytest tests/test_algorithm.py
"""

import random
from functools import cmp_to_key

import pytest

from batch_scheduler.types import Job
from batch_scheduler.algorithm import (
    precedes,
    compare_jobs,
    sort_jobs,
    filter_expired,
    admit_jobs,
    calculate_total_compute,
    calculate_load_variance
)


def make_jobs(fields):
    """Build jobs with ids 1..n from (compute_cost, deadline) pairs."""
    return [Job(i + 1, compute, deadline) for i, (compute, deadline) in enumerate(fields)]


class TestOrdering:
    """Test the pairwise ordering rule."""

    def test_earlier_deadline_first(self):
        """Earlier deadline wins regardless of compute."""
        a = Job(1, compute_cost=50, deadline=1)
        b = Job(2, compute_cost=1, deadline=2)

        assert precedes(a, b)
        assert not precedes(b, a)
        assert compare_jobs(a, b) == -1
        assert compare_jobs(b, a) == 1

    def test_cheaper_job_first_on_equal_deadline(self):
        """On equal deadlines, smaller compute cost wins."""
        a = Job(1, compute_cost=3, deadline=2)
        b = Job(2, compute_cost=5, deadline=2)

        assert precedes(a, b)
        assert not precedes(b, a)
        assert compare_jobs(a, b) == -1

    def test_full_tie(self):
        """Identical keys compare equal and either may go first."""
        a = Job(1, compute_cost=4, deadline=2)
        b = Job(2, compute_cost=4, deadline=2)

        assert precedes(a, b)
        assert precedes(b, a)
        assert compare_jobs(a, b) == 0


class TestJobSorting:
    """Test job sorting logic."""

    def test_sort_by_deadline(self):
        """Jobs should be sorted by deadline (earliest first)."""
        jobs = make_jobs([(5, 3), (2, 3), (9, 1)])

        sorted_jobs = sort_jobs(jobs)

        assert [j.job_id for j in sorted_jobs] == [3, 2, 1]

    def test_sort_by_compute_within_deadline(self):
        """Within the same deadline, cheaper jobs go first."""
        jobs = make_jobs([(5, 2), (3, 2)])

        sorted_jobs = sort_jobs(jobs)

        assert [j.compute_cost for j in sorted_jobs] == [3, 5]

    def test_exact_ties_keep_input_order(self):
        """Jobs with identical keys keep their relative order."""
        jobs = [
            Job(2, compute_cost=5, deadline=2),
            Job(1, compute_cost=5, deadline=2),
            Job(3, compute_cost=1, deadline=2),
            Job(4, compute_cost=5, deadline=2),
        ]

        sorted_jobs = sort_jobs(jobs)

        assert [j.job_id for j in sorted_jobs] == [3, 2, 1, 4]

    def test_empty_and_single(self):
        """Trivial inputs come back unchanged."""
        job = Job(1, compute_cost=1, deadline=1)

        assert sort_jobs([]) == []
        assert sort_jobs([job]) == [job]

    def test_does_not_mutate_input(self):
        """Sorting returns a new list."""
        jobs = make_jobs([(5, 3), (2, 3), (9, 1)])
        original = list(jobs)

        sort_jobs(jobs)

        assert jobs == original

    def test_adjacent_pairs_ordered(self):
        """Every adjacent pair respects deadline then compute order."""
        rng = random.Random(7)
        jobs = make_jobs([(rng.randint(0, 10), rng.randint(0, 6)) for _ in range(200)])

        sorted_jobs = sort_jobs(jobs)

        for a, b in zip(sorted_jobs, sorted_jobs[1:]):
            assert a.deadline < b.deadline or (
                a.deadline == b.deadline and a.compute_cost <= b.compute_cost
            )

    def test_permutation_and_stability(self):
        """Output is the stable sort of the input by (deadline, compute)."""
        rng = random.Random(11)
        jobs = make_jobs([(rng.randint(0, 5), rng.randint(0, 5)) for _ in range(157)])

        sorted_jobs = sort_jobs(jobs)

        assert sorted(j.job_id for j in sorted_jobs) == [j.job_id for j in jobs]
        assert sorted_jobs == sorted(jobs, key=lambda j: (j.deadline, j.compute_cost))

    def test_matches_three_way_comparison(self):
        """Sorting agrees with ordering by compare_jobs, ties kept in input order."""
        rng = random.Random(21)
        jobs = make_jobs([(rng.randint(0, 4), rng.randint(0, 4)) for _ in range(120)])

        assert sort_jobs(jobs) == sorted(jobs, key=cmp_to_key(compare_jobs))
        for a in jobs[:30]:
            for b in jobs[:30]:
                assert precedes(a, b) == (compare_jobs(a, b) <= 0)

    def test_deterministic(self):
        """Repeat runs produce identical output."""
        rng = random.Random(3)
        jobs = make_jobs([(rng.randint(0, 3), rng.randint(0, 3)) for _ in range(50)])

        assert sort_jobs(jobs) == sort_jobs(jobs)


class TestExpiryFilter:
    """Test removal of expired jobs."""

    def test_job_due_today_is_valid(self):
        """A deadline equal to today is still valid."""
        jobs = make_jobs([(1, 5)])

        valid, expired = filter_expired(jobs, today=5)

        assert valid == jobs
        assert expired == 0

    def test_past_deadline_expires(self):
        """A deadline before today expires."""
        jobs = make_jobs([(4, 0)])

        valid, expired = filter_expired(jobs, today=1)

        assert valid == []
        assert expired == 1

    def test_preserves_order_and_counts(self):
        """Valid jobs keep their order and counts add up."""
        jobs = make_jobs([(1, 4), (2, 1), (3, 2), (4, 0), (5, 9)])

        valid, expired = filter_expired(jobs, today=2)

        assert [j.job_id for j in valid] == [1, 3, 5]
        assert all(j.deadline >= 2 for j in valid)
        assert expired == 2
        assert len(valid) + expired == len(jobs)


class TestAdmission:
    """Test capacity-bounded admission."""

    def test_takes_first_n(self):
        """The first N ordered jobs are executed."""
        jobs = sort_jobs(make_jobs([(5, 3), (2, 3), (9, 1)]))

        executed, remaining = admit_jobs(jobs, 2)

        assert [j.job_id for j in executed] == [3, 2]
        assert [j.job_id for j in remaining] == [1]

    def test_zero_capacity(self):
        """Capacity 0 admits nothing."""
        jobs = make_jobs([(1, 1), (2, 2)])

        executed, remaining = admit_jobs(jobs, 0)

        assert executed == []
        assert remaining == jobs

    def test_capacity_exceeds_backlog(self):
        """Capacity larger than the backlog admits everything."""
        jobs = make_jobs([(1, 1), (2, 2)])

        executed, remaining = admit_jobs(jobs, 10)

        assert executed == jobs
        assert remaining == []

    @pytest.mark.parametrize("capacity", [0, 1, 3, 5, 8])
    def test_admission_bound(self, capacity):
        """Executed count is min(N, len) and nothing is lost."""
        jobs = make_jobs([(i, i) for i in range(5)])

        executed, remaining = admit_jobs(jobs, capacity)

        assert len(executed) == min(capacity, len(jobs))
        assert executed + remaining == jobs


class TestMetrics:
    """Test metric helpers."""

    def test_total_compute(self):
        """Should sum compute cost."""
        jobs = make_jobs([(9, 1), (2, 3)])

        assert calculate_total_compute(jobs) == 11
        assert calculate_total_compute([]) == 0

    def test_load_variance(self):
        """Population variance of daily totals."""
        assert calculate_load_variance([10, 20]) == 25.0
        assert calculate_load_variance([7, 7, 7]) == 0.0

    def test_load_variance_needs_two_points(self):
        """Fewer than two totals give zero variance."""
        assert calculate_load_variance([]) == 0.0
        assert calculate_load_variance([42]) == 0.0


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
