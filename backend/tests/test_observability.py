"""JSON log lines, per-endpoint stats and the /metrics payload."""

import json
import logging
import sys

from services.observability import EndpointStats, JsonFormatter


def _record(msg='hello', exc_info=None, **extra):
    record = logging.LogRecord('farm_service', logging.WARNING, __file__, 1, msg, None, exc_info)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:

    def test_merges_extra_data(self):
        line = JsonFormatter().format(_record(extra_data={'type': 'request', 'status': 201}))
        entry = json.loads(line)
        assert entry['level'] == 'WARNING'
        assert entry['logger'] == 'farm_service'
        assert entry['message'] == 'hello'
        assert (entry['type'], entry['status']) == ('request', 201)
        assert entry['ts'].endswith('+00:00')

    def test_includes_traceback(self):
        try:
            raise ValueError('boom')
        except ValueError:
            line = JsonFormatter().format(_record(exc_info=sys.exc_info()))
        assert 'ValueError: boom' in ''.join(json.loads(line)['exception'])


class TestEndpointStats:

    def test_snapshot(self):
        stats = EndpointStats()
        stats.record('farm_bp.list_farms', 10.0)
        stats.record('farm_bp.list_farms', 30.0, failed=True)
        stats.record('health', 5.0)

        snap = stats.snapshot()
        assert snap['totals'] == {'total_requests': 3, 'total_errors': 1, 'error_rate_pct': 33.3}
        farms = snap['per_endpoint']['farm_bp.list_farms']
        assert farms['avg_latency_ms'] == 20.0
        assert farms['max_latency_ms'] == 30.0
        assert farms['error_rate_pct'] == 50.0

    def test_empty(self):
        assert EndpointStats().snapshot() == {
            'totals': {'total_requests': 0, 'total_errors': 0, 'error_rate_pct': 0},
            'per_endpoint': {},
        }


def test_metrics_counts_this_app_only(client):
    client.get('/health')
    client.get('/health')
    client.get('/api/nowhere')

    body = client.get('/metrics').get_json()
    assert body['totals']['total_requests'] == 3
    assert body['totals']['total_errors'] == 1
    assert body['per_endpoint']['health']['requests'] == 2
    assert body['per_endpoint']['/api/nowhere']['errors'] == 1
