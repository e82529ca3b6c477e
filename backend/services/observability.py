"""
Observability — request logs, endpoint counters and the fallback error handler

Every KUBE log line is a single JSON object. Handlers that want more fields
on a line pass them as `extra={'extra_data': {...}}`.

Each app keeps its own EndpointStats in app.extensions['kube_stats'];
GET /metrics returns totals plus one entry per endpoint.

Exceptions that get past the blueprints' handle_errors are logged with the
request line and answered with the envelope. The client never sees the
exception text.
"""

import json
import logging
import threading
import time
import traceback
from datetime import datetime, timezone

from flask import current_app, g, jsonify, request
from werkzeug.exceptions import HTTPException

STATS_KEY = 'kube_stats'


class JsonFormatter(logging.Formatter):
    """One JSON object per record; `extra_data` is merged into it."""

    def format(self, record):
        entry = {
            'ts': datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        entry.update(getattr(record, 'extra_data', None) or {})
        if record.exc_info and record.exc_info[0]:
            entry['exception'] = traceback.format_exception(*record.exc_info)
        return json.dumps(entry, default=str)


class EndpointStats:
    """Request, error and latency counters keyed by Flask endpoint name."""

    def __init__(self):
        self._lock = threading.Lock()
        self._rows = {}

    def record(self, endpoint, latency_ms, failed=False):
        with self._lock:
            row = self._rows.setdefault(
                endpoint, {'requests': 0, 'errors': 0, 'total_ms': 0.0, 'max_ms': 0.0}
            )
            row['requests'] += 1
            row['total_ms'] += latency_ms
            row['max_ms'] = max(row['max_ms'], latency_ms)
            if failed:
                row['errors'] += 1

    def snapshot(self):
        with self._lock:
            rows = {name: dict(row) for name, row in self._rows.items()}

        per_endpoint = {
            name: {
                'requests': row['requests'],
                'errors': row['errors'],
                'avg_latency_ms': round(row['total_ms'] / row['requests'], 2),
                'max_latency_ms': round(row['max_ms'], 2),
                'error_rate_pct': _pct(row['errors'], row['requests']),
            }
            for name, row in rows.items()
        }
        requests = sum(row['requests'] for row in rows.values())
        errors = sum(row['errors'] for row in rows.values())
        return {
            'totals': {
                'total_requests': requests,
                'total_errors': errors,
                'error_rate_pct': _pct(errors, requests),
            },
            'per_endpoint': per_endpoint,
        }


def _pct(part, whole):
    return round(part / whole * 100, 1) if whole else 0


def _configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())

    # Service modules log through named loggers that propagate to root
    for logger in (app.logger, logging.getLogger()):
        logger.handlers = [handler]
        logger.setLevel(level)


def _track_requests(app, stats):
    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def record_request(response):
        started = g.get('request_started')
        latency_ms = (time.perf_counter() - started) * 1000 if started else 0.0
        stats.record(request.endpoint or request.path, latency_ms, response.status_code >= 400)

        app.logger.info(
            f"{request.method} {request.path} -> {response.status_code} ({latency_ms:.0f}ms)",
            extra={'extra_data': {
                'type': 'request',
                'method': request.method,
                'path': request.path,
                'status': response.status_code,
                'latency_ms': round(latency_ms, 2),
                'ip': request.remote_addr,
            }}
        )
        return response


def _register_fallback_handler(app):
    @app.errorhandler(Exception)
    def handle_unexpected(e):
        if isinstance(e, HTTPException):
            message = 'Route not found' if e.code == 404 else e.description
            return jsonify({'success': False, 'message': message}), e.code

        app.logger.error(
            f"Unhandled {e.__class__.__name__} on {request.method} {request.path}",
            exc_info=True,
            extra={'extra_data': {
                'type': 'error',
                'error_class': e.__class__.__name__,
                'endpoint': request.endpoint,
            }}
        )
        return jsonify({'success': False, 'message': 'Internal server error'}), 500


def setup_observability(app):
    """Wire logging, request stats, /metrics and the fallback handler into `app`."""
    stats = EndpointStats()
    app.extensions[STATS_KEY] = stats

    _configure_logging(app)
    _track_requests(app, stats)
    _register_fallback_handler(app)

    @app.route('/metrics')
    def metrics():
        return jsonify(current_app.extensions[STATS_KEY].snapshot())

    return app
