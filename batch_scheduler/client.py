"""
Day driver: runs the multi-day loop against a remote scheduler server.
"""

import asyncio
import aiohttp
import logging
import random
from typing import Any, Dict, List, Optional, Tuple

from .simulation import random_job_fields

logger = logging.getLogger(__name__)


class SchedulerUnavailable(RuntimeError):
    """The scheduler server could not be reached or rejected a request."""


class DayDriver:
    def __init__(self, scheduler_url="http://localhost:8001", timeout=10.0):
        self.scheduler_url = scheduler_url.rstrip('/')
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def _request(self, session, method, path, payload=None):
        url = f"{self.scheduler_url}{path}"
        try:
            async with session.request(method, url, json=payload) as resp:
                data = await resp.json()
                if resp.status >= 400:
                    raise SchedulerUnavailable(
                        f"{method} {path} failed with {resp.status}: {data.get('error')}"
                    )
                return data
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Request to {url} failed: {e}")
            raise SchedulerUnavailable(f"Request to {url} failed: {e}") from e

    async def health_check(self, session) -> bool:
        """Check if the scheduler server is healthy"""
        try:
            data = await self._request(session, 'GET', '/health')
        except SchedulerUnavailable as e:
            logger.error(f"Health check failed: {e}")
            return False
        logger.info(f"Scheduler health: {data}")
        return data.get('status') == 'healthy'

    async def submit_jobs(self, session, jobs: List[Tuple[int, int]]) -> List[Dict[str, Any]]:
        payload = {'jobs': [{'compute_cost': c, 'deadline': d} for c, d in jobs]}
        data = await self._request(session, 'POST', '/jobs', payload)
        return data['jobs']

    async def run_cycle(self, session, capacity: int) -> Dict[str, Any]:
        return await self._request(session, 'POST', '/cycle', {'capacity': capacity})

    async def fetch_backlog(self, session) -> Dict[str, Any]:
        return await self._request(session, 'GET', '/backlog')

    async def drive(
        self,
        days: int,
        capacity: int,
        jobs_per_day: int = 5,
        seed: Optional[int] = None,
        max_offset: int = 7,
        max_compute: int = 20
    ) -> List[Dict[str, Any]]:
        """
        Main day loop.

        Each day submits random arrivals due from the server's current
        day onward, then runs that day's cycle.
        """
        logger.info(f"Driving scheduler at {self.scheduler_url} for {days} days")
        rng = random.Random(seed)
        reports = []

        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            if not await self.health_check(session):
                raise SchedulerUnavailable(f"Scheduler at {self.scheduler_url} is not healthy")

            for _ in range(days):
                backlog = await self.fetch_backlog(session)
                today = backlog['day']

                count = max(1, jobs_per_day + rng.randint(-1, 2))
                jobs = random_job_fields(count, today, max_offset, max_compute, rng)
                await self.submit_jobs(session, jobs)

                report = await self.run_cycle(session, capacity)
                logger.info(
                    f"Day {report['day']}: executed {report['executed_count']} "
                    f"(compute={report['total_compute_executed']}), "
                    f"expired {report['expired_count']}, "
                    f"backlog {report['remaining_backlog_size']}"
                )
                reports.append(report)

        return reports

    def run(self, days, capacity, **kwargs):
        """Run the driver"""
        logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        return asyncio.run(self.drive(days, capacity, **kwargs))


if __name__ == "__main__":
    driver = DayDriver()
    driver.run(days=7, capacity=5)
