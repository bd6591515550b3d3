# cli.py
import click

from .types import (
    CycleReport, InvalidCapacity, InvalidJobFields,
    validate_capacity, validate_job_fields
)
from .cycle import BacklogCycle, run_once
from .simulation import simulate_days


@click.group()
def cli():
    """batch-scheduler - daily batch job admission scheduler"""
    pass


# ---------------- Prompt helpers ----------------
def _prompt_count(text):
    while True:
        value = click.prompt(text, type=int)
        if value >= 0:
            return value
        click.echo(f"❌ Count cannot be negative, got {value}")


def _prompt_capacity(text):
    while True:
        try:
            return validate_capacity(click.prompt(text, type=int))
        except InvalidCapacity as e:
            click.echo(f"❌ {e}")


def _prompt_job(text):
    while True:
        compute = click.prompt(f"{text} compute", type=int)
        deadline = click.prompt(f"{text} deadline", type=int)
        try:
            return validate_job_fields(compute, deadline)
        except InvalidJobFields as e:
            click.echo(f"❌ {e}")


# ---------------- Report rendering ----------------
def _echo_jobs(jobs, title):
    click.echo(f"\n{title}")
    click.echo("-" * 33)
    for job in jobs:
        click.echo(f"Job {job.job_id} | Compute: {job.compute_cost} | Deadline: {job.deadline}")
    if not jobs:
        click.echo("None")


def echo_report(report: CycleReport, executed_title="Executed Jobs", backlog_title="Remaining Backlog"):
    _echo_jobs(report.executed_jobs, executed_title)
    _echo_jobs(report.remaining_backlog, backlog_title)
    click.echo(f"\nTotal Compute Today: {report.total_compute_executed}")
    click.echo(f"Expired Jobs: {report.expired_count}")
    click.echo(f"Backlog Size: {report.remaining_backlog_size}")


# ---------------- Single day ----------------
@cli.command(name="run-once")
def run_once_cmd():
    """Schedule a single batch of jobs for one day"""
    count = _prompt_count("Enter number of jobs")
    jobs = [_prompt_job(f"Job {i + 1}") for i in range(count)]
    today = click.prompt("Enter today's day", type=int)
    capacity = _prompt_capacity("Enter number of jobs to execute today (N)")

    report = run_once(jobs, today, capacity)
    echo_report(report, "Selected Jobs for Today", "Remaining Jobs")


# ---------------- Multi day ----------------
@cli.command(name="multi-day")
@click.option("--start-day", default=1, type=int, help="Day number of the first cycle")
def multi_day(start_day):
    """Run day after day with the backlog carried over"""
    cycle = BacklogCycle(start_day=start_day)

    while True:
        click.echo("\n" + "=" * 33)
        click.echo(f"DAY {cycle.day}")
        click.echo("=" * 33)

        count = _prompt_count("Enter number of new jobs today")
        for i in range(count):
            compute, deadline = _prompt_job(f"New job {i + 1}")
            cycle.submit_job(compute, deadline)
        capacity = _prompt_capacity("Enter number of jobs to execute today")

        report = cycle.run_day(capacity)
        echo_report(report)

        if not click.confirm("\nContinue to next day?", default=True):
            break

    cycle.terminate()
    click.echo("\n🛑 System stopped.")


# ---------------- Simulation ----------------
@cli.command()
@click.option("--days", default=7, type=click.IntRange(min=0), help="Number of days to simulate")
@click.option("--capacity", default=5, type=int, help="Jobs executed per day")
@click.option("--jobs-per-day", default=5, type=click.IntRange(min=0), help="Base number of new jobs per day")
@click.option("--seed", default=None, type=int, help="Random seed for a reproducible run")
@click.option("--worst-case-day", default=None, type=int, help="Day to inject a burst of heavy urgent jobs")
def simulate(days, capacity, jobs_per_day, seed, worst_case_day):
    """Simulate several days with random job arrivals"""
    try:
        capacity = validate_capacity(capacity)
    except InvalidCapacity as e:
        raise click.BadParameter(str(e), param_hint="--capacity")

    reports = simulate_days(days, capacity, jobs_per_day=jobs_per_day, seed=seed, worst_case_day=worst_case_day)
    for report in reports:
        click.echo(f"\n📅 Day {report.day} ({report.incoming_count} new jobs)")
        echo_report(report)

    if reports:
        click.echo(f"\n📈 Load variance: {reports[-1].load_variance:.3f}")


# ---------------- Server ----------------
@cli.command()
@click.option("--host", default="0.0.0.0", help="Host to bind to")
@click.option("--port", default=8001, type=int, help="Port to listen on")
@click.option("--capacity", default=5, type=int, help="Default daily capacity")
@click.option("--debug", is_flag=True, help="Enable Flask debug mode")
def serve(host, port, capacity, debug):
    """Start the HTTP API"""
    from .server import run_server

    try:
        capacity = validate_capacity(capacity)
    except InvalidCapacity as e:
        raise click.BadParameter(str(e), param_hint="--capacity")

    run_server(host=host, port=port, debug=debug, config={'DEFAULT_CAPACITY': capacity})


# ---------------- Remote driver ----------------
@cli.command()
@click.option("--url", default="http://localhost:8001", help="Scheduler server URL")
@click.option("--days", default=7, type=click.IntRange(min=0), help="Number of days to drive")
@click.option("--capacity", default=5, type=int, help="Jobs executed per day")
@click.option("--jobs-per-day", default=5, type=click.IntRange(min=0), help="Base number of new jobs per day")
@click.option("--seed", default=None, type=int, help="Random seed for a reproducible run")
def drive(url, days, capacity, jobs_per_day, seed):
    """Drive a running server day by day with random jobs"""
    from .client import DayDriver, SchedulerUnavailable

    try:
        capacity = validate_capacity(capacity)
    except InvalidCapacity as e:
        raise click.BadParameter(str(e), param_hint="--capacity")

    try:
        reports = DayDriver(url).run(days, capacity, jobs_per_day=jobs_per_day, seed=seed)
    except SchedulerUnavailable as e:
        raise click.ClickException(str(e))

    total = sum(r['total_compute_executed'] for r in reports)
    click.echo(f"✅ Drove {len(reports)} days, total compute executed: {total}")


# ---------------- Entrypoint ----------------
if __name__ == "__main__":
    cli()
