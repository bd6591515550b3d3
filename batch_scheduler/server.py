"""
HTTP API server for the batch scheduler.

This module provides a Flask-based REST API that accepts job
submissions, runs daily scheduling cycles and returns cycle reports.
"""

from flask import Flask, request, jsonify
from datetime import datetime
from threading import Lock
from typing import Any, Dict, List, Tuple
import logging

from . import __version__
from .types import (
    InvalidCapacity, InvalidJobFields, SchedulerConfig,
    validate_capacity, validate_job_fields
)
from .cycle import BacklogCycle, run_once
from .simulation import simulate_days


logger = logging.getLogger(__name__)


def _parse_jobs(payload: Any) -> List[Tuple[int, int]]:
    if not isinstance(payload, list):
        raise InvalidJobFields("'jobs' must be a list")

    jobs = []
    for job_data in payload:
        try:
            jobs.append(validate_job_fields(job_data['compute_cost'], job_data['deadline']))
        except (KeyError, TypeError) as e:
            raise InvalidJobFields(f"Missing job field: {e}")
    return jobs


def _optional_int(data: Dict[str, Any], key: str, default: Any = None) -> Any:
    value = data.get(key, default)
    if value is None:
        return default
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"'{key}' must be an integer, got {value!r}")
    return value


def _bounded_int(data: Dict[str, Any], key: str, default: int, upper: int) -> int:
    value = _optional_int(data, key, default)
    if not 0 <= value <= upper:
        raise ValueError(f"'{key}' must be between 0 and {upper}, got {value}")
    return value


def create_app(config: Dict[str, Any] = None) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config: Optional configuration dictionary

    Returns:
        Configured Flask app
    """
    app = Flask(__name__)

    # Default configuration
    app.config.update({
        'TESTING': False,
        'DEFAULT_CAPACITY': 5,
        'START_DAY': 1,
        'JOBS_PER_DAY': 5,
        'MAX_DEADLINE_OFFSET': 7,
        'MAX_COMPUTE': 20,
        'SEED': None,
        'MAX_SIMULATION_DAYS': 3650,
        'MAX_JOBS_PER_DAY': 1000,
    })

    # Apply custom config
    if config:
        app.config.update(config)

    settings = SchedulerConfig.from_mapping(app.config)
    validate_capacity(settings.default_capacity)

    cycle = BacklogCycle(start_day=settings.start_day)
    cycle_lock = Lock()

    @app.route('/health', methods=['GET'])
    def health():
        """Health check endpoint."""
        return jsonify({
            'status': 'healthy',
            'service': 'batch-scheduler',
            'version': __version__,
            'timestamp': datetime.utcnow().isoformat()
        })

    @app.route('/config', methods=['GET'])
    def get_config():
        """Get the effective scheduler configuration."""
        return jsonify(settings.to_dict())

    @app.route('/backlog', methods=['GET'])
    def get_backlog():
        """Get the pending jobs and the next day to be scheduled."""
        with cycle_lock:
            backlog = cycle.backlog
            day = cycle.day
        return jsonify({
            'day': day,
            'backlog': [job.to_dict() for job in backlog],
            'backlog_size': len(backlog)
        })

    @app.route('/jobs', methods=['POST'])
    def submit_jobs():
        """
        Submit jobs to the backlog.

        Request body:
        {
            "jobs": [
                {"compute_cost": 5, "deadline": 3}
            ]
        }

        Response:
        {
            "jobs": [
                {"job_id": 1, "compute_cost": 5, "deadline": 3}
            ]
        }
        """
        data = request.get_json(silent=True)
        if not data or not isinstance(data, dict):
            return jsonify({'error': 'Empty request body'}), 400

        try:
            jobs = _parse_jobs(data.get('jobs', []))
        except InvalidJobFields as e:
            logger.error(f"Invalid job data: {e}")
            return jsonify({'error': f'Invalid job data: {e}'}), 400

        with cycle_lock:
            submitted = [cycle.submit_job(c, d) for c, d in jobs]

        logger.info(f"Accepted {len(submitted)} jobs")
        return jsonify({'jobs': [job.to_dict() for job in submitted]}), 201

    @app.route('/cycle', methods=['POST'])
    def run_scheduling_cycle():
        """
        Run one scheduling cycle over the backlog.

        Request body (all fields optional):
        {
            "capacity": 2,
            "today": 4
        }

        Without "today" the current day is scheduled and the day
        counter advances by one.
        """
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return jsonify({'error': 'Request body must be a JSON object'}), 400

        try:
            capacity = validate_capacity(data.get('capacity', settings.default_capacity))
            today = _optional_int(data, 'today')
        except (InvalidCapacity, ValueError) as e:
            logger.error(f"Invalid cycle request: {e}")
            return jsonify({'error': str(e)}), 400

        with cycle_lock:
            if today is None:
                report = cycle.run_day(capacity)
            else:
                report = cycle.run_cycle(today, capacity)

        return jsonify(report.to_dict()), 200

    @app.route('/run-once', methods=['POST'])
    def run_single_cycle():
        """
        Schedule a standalone batch without touching the shared backlog.

        Request body:
        {
            "jobs": [{"compute_cost": 5, "deadline": 3}],
            "today": 1,
            "capacity": 2
        }
        """
        data = request.get_json(silent=True)
        if not data or not isinstance(data, dict):
            return jsonify({'error': 'Empty request body'}), 400

        try:
            jobs = _parse_jobs(data.get('jobs', []))
            capacity = validate_capacity(data.get('capacity', settings.default_capacity))
            today = _optional_int(data, 'today', settings.start_day)
        except (InvalidJobFields, InvalidCapacity, ValueError) as e:
            logger.error(f"Invalid run-once request: {e}")
            return jsonify({'error': str(e)}), 400

        report = run_once(jobs, today, capacity)
        return jsonify(report.to_dict()), 200

    @app.route('/simulate', methods=['POST'])
    def simulate():
        """
        Run a self-contained multi-day simulation with random arrivals.

        Request body:
        {
            "days": 7,
            "capacity": 3,
            "jobs_per_day": 5,
            "seed": 42,
            "worst_case_day": 3
        }
        """
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return jsonify({'error': 'Request body must be a JSON object'}), 400

        try:
            days = _bounded_int(data, 'days', 7, app.config['MAX_SIMULATION_DAYS'])
            capacity = validate_capacity(data.get('capacity', settings.default_capacity))
            jobs_per_day = _bounded_int(
                data, 'jobs_per_day', settings.jobs_per_day, app.config['MAX_JOBS_PER_DAY']
            )
            seed = _optional_int(data, 'seed', settings.seed)
            worst_case_day = _optional_int(data, 'worst_case_day')
        except (InvalidCapacity, ValueError) as e:
            logger.error(f"Invalid simulation request: {e}")
            return jsonify({'error': str(e)}), 400

        reports = simulate_days(
            days,
            capacity,
            jobs_per_day=jobs_per_day,
            seed=seed,
            worst_case_day=worst_case_day,
            config=settings
        )
        return jsonify({'reports': [r.to_dict() for r in reports]}), 200

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        logger.error(f"Internal server error: {error}", exc_info=True)
        return jsonify({'error': 'Internal server error'}), 500

    return app


def run_server(host: str = '0.0.0.0', port: int = 8001, debug: bool = False,
               config: Dict[str, Any] = None):
    """
    Run the scheduler HTTP server.

    Args:
        host: Host to bind to
        port: Port to listen on
        debug: Enable debug mode
        config: Optional configuration dictionary
    """
    # Configure logging
    logging.basicConfig(
        level=logging.INFO,
        format='[%(asctime)s] %(levelname)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logger.info("=" * 50)
    logger.info("  Batch Scheduler Server")
    logger.info("=" * 50)
    logger.info("")
    logger.info(f"Starting server on {host}:{port}")
    logger.info("")
    logger.info("Endpoints:")
    logger.info(f"  POST {host}:{port}/jobs     - Submit jobs")
    logger.info(f"  POST {host}:{port}/cycle    - Run a scheduling cycle")
    logger.info(f"  POST {host}:{port}/run-once - Schedule a standalone batch")
    logger.info(f"  POST {host}:{port}/simulate - Run a random simulation")
    logger.info(f"  GET  {host}:{port}/backlog  - Pending jobs")
    logger.info(f"  GET  {host}:{port}/config   - Scheduler configuration")
    logger.info(f"  GET  {host}:{port}/health   - Health check")
    logger.info("")

    app = create_app(config)
    app.run(host=host, port=port, debug=debug)


if __name__ == '__main__':
    run_server()
