"""run_parallel: results by name, app context per task, all-or-nothing failure."""

import threading
import time

import pytest
from flask import current_app, has_app_context

from services.errors import AggregationError
from services.parallel import run_parallel


def test_returns_every_result_by_name(app):
    results = run_parallel({'one': lambda: 1, 'two': lambda: 2, 'list': lambda: [3]}, app=app)
    assert results == {'one': 1, 'two': 2, 'list': [3]}


def test_empty_batch(app):
    assert run_parallel({}, app=app) == {}


def test_each_task_runs_in_an_app_context(app):
    def in_app_context():
        return has_app_context() and current_app.name == app.name

    results = run_parallel({f"t{i}": in_app_context for i in range(4)}, app=app)
    assert all(results.values())


def test_tasks_run_on_worker_threads(app):
    main = threading.get_ident()
    results = run_parallel({'a': threading.get_ident, 'b': threading.get_ident}, app=app)
    assert main not in results.values()


def test_uses_current_app_when_none_given(app):
    with app.app_context():
        assert run_parallel({'ok': lambda: 'yes'}) == {'ok': 'yes'}


def test_failure_fails_whole_batch_after_all_tasks_finish(app):
    finished = threading.Event()

    def slow():
        time.sleep(0.1)
        finished.set()
        return 'late'

    def broken():
        raise ValueError('boom')

    with pytest.raises(AggregationError) as exc_info:
        run_parallel({'slow': slow, 'broken': broken}, app=app)

    assert finished.is_set()
    assert exc_info.value.task_name == 'broken'
    assert isinstance(exc_info.value.__cause__, ValueError)


def test_first_failure_in_task_order_is_reported(app):
    def fail(message):
        def task():
            raise RuntimeError(message)
        return task

    with pytest.raises(AggregationError) as exc_info:
        run_parallel({'ok': lambda: 1, 'first': fail('a'), 'second': fail('b')}, app=app)

    assert exc_info.value.task_name == 'first'
