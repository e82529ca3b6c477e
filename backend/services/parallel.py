"""
Parallel reads — fan-out / join for independent queries

Each task runs in its own worker thread inside a fresh Flask app context,
so it gets its own database session. Results are only returned once every
task has finished; if any task raised, the whole batch fails.

Tasks must return plain data (dicts, lists, numbers). ORM objects are
detached when the worker's app context closes.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait

from flask import current_app

from services.errors import AggregationError

logger = logging.getLogger('parallel')

DEFAULT_WORKERS = 8


def _run_in_context(app, func):
    with app.app_context():
        return func()


def run_parallel(tasks, app=None, max_workers=None):
    """
    Run independent zero-argument callables concurrently.

    Args:
        tasks: mapping of name -> callable
        app: Flask app whose context each task runs in (defaults to current_app)
        max_workers: pool size (defaults to DASHBOARD_QUERY_WORKERS)

    Returns:
        dict of name -> result, in the same order as `tasks`.

    Raises:
        AggregationError: chained to the first failed task (in `tasks` order).
    """
    if not tasks:
        return {}

    app = app or current_app._get_current_object()
    workers = max_workers or app.config.get('DASHBOARD_QUERY_WORKERS', DEFAULT_WORKERS)
    workers = max(1, min(workers, len(tasks)))

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='kube-query') as executor:
        futures = {
            name: executor.submit(_run_in_context, app, func)
            for name, func in tasks.items()
        }
        wait(futures.values())

    failures = [(name, future.exception()) for name, future in futures.items()
                if future.exception() is not None]
    if failures:
        name, error = failures[0]
        logger.error(f"{len(failures)} of {len(tasks)} parallel queries failed; first: {name}: {error}")
        raise AggregationError(name, error) from error

    return {name: future.result() for name, future in futures.items()}
