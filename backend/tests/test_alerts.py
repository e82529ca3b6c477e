"""Alert lifecycle: creation, ordering, status transitions, assignment and stats."""

import pytest

from conftest import create_farm


@pytest.fixture
def farm(client, farmer_a):
    return create_farm(client, farmer_a)


@pytest.fixture
def raise_alert(client, farmer_a, farm):
    def _raise(severity='HIGH', title='Animal down', **extra):
        payload = {
            'type': 'HEALTH', 'severity': severity, 'title': title,
            'message': 'Check herd', 'module': 'farm', 'farmId': farm['id'],
        }
        payload.update(extra)
        resp = client.post('/api/alerts', json=payload, headers=farmer_a.headers)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()['data']['alert']
    return _raise


class TestCreateAlert:

    def test_new_alert_starts_as_new(self, raise_alert, farm):
        alert = raise_alert()
        assert alert['status'] == 'NEW'
        assert alert['farm'] == {'id': farm['id'], 'name': farm['name']}
        assert alert['assignedTo'] is None

    def test_missing_fields_rejected(self, client, farmer_a):
        resp = client.post('/api/alerts', json={'type': 'HEALTH'}, headers=farmer_a.headers)
        assert resp.status_code == 400
        assert 'severity' in resp.get_json()['message']

    def test_cannot_attach_alert_to_someone_elses_farm(self, client, farmer_b, farm):
        resp = client.post('/api/alerts', headers=farmer_b.headers, json={
            'type': 'HEALTH', 'severity': 'HIGH', 'title': 't', 'message': 'm',
            'module': 'farm', 'farmId': farm['id'],
        })
        assert resp.status_code == 404


class TestListAlerts:

    def test_ordered_by_severity_rank_then_newest(self, client, farmer_a, raise_alert):
        for severity, title in (('LOW', 'low'), ('CRITICAL', 'crit-1'), ('WARNING', 'warn'),
                                ('HIGH', 'high'), ('CRITICAL', 'crit-2'), ('INFO', 'info'),
                                ('MEDIUM', 'medium')):
            raise_alert(severity=severity, title=title)

        alerts = client.get('/api/alerts', headers=farmer_a.headers).get_json()['data']['alerts']
        severities = [a['severity'] for a in alerts]
        assert severities == ['CRITICAL', 'CRITICAL', 'HIGH', 'WARNING', 'MEDIUM', 'LOW', 'INFO']

    def test_filters(self, client, farmer_a, raise_alert):
        raise_alert(severity='LOW')
        raise_alert(severity='HIGH', module='park')

        resp = client.get('/api/alerts?module=park', headers=farmer_a.headers)
        alerts = resp.get_json()['data']['alerts']
        assert [a['module'] for a in alerts] == ['park']

    def test_other_farmer_cannot_see_or_fetch(self, client, farmer_b, raise_alert):
        alert = raise_alert()
        listed = client.get('/api/alerts', headers=farmer_b.headers).get_json()['data']['alerts']
        assert listed == []
        assert client.get(f"/api/alerts/{alert['id']}", headers=farmer_b.headers).status_code == 404


class TestStatusTransitions:

    def test_status_is_required(self, client, farmer_a, raise_alert):
        alert = raise_alert()
        resp = client.put(f"/api/alerts/{alert['id']}/status", json={}, headers=farmer_a.headers)
        assert resp.status_code == 400
        assert resp.get_json()['message'] == 'Status is required'

    def test_unknown_status_rejected(self, client, farmer_a, raise_alert):
        alert = raise_alert()
        resp = client.put(f"/api/alerts/{alert['id']}/status", json={'status': 'CLOSED'},
                          headers=farmer_a.headers)
        assert resp.status_code == 400

    def test_resolved_stamps_resolver_and_time(self, client, farmer_a, raise_alert):
        alert = raise_alert()
        resp = client.put(f"/api/alerts/{alert['id']}/status",
                          json={'status': 'RESOLVED', 'actionTaken': 'Vet called'},
                          headers=farmer_a.headers)
        assert resp.status_code == 200
        updated = resp.get_json()['data']['alert']
        assert updated['status'] == 'RESOLVED'
        assert updated['resolvedBy'] == farmer_a.id
        assert updated['resolvedAt'] is not None
        assert updated['actionTaken'] == 'Vet called'

    def test_other_states_stamp_nothing_and_any_order_is_allowed(self, client, farmer_a, raise_alert):
        alert = raise_alert()
        url = f"/api/alerts/{alert['id']}/status"
        for status in ('IN_PROGRESS', 'NEW', 'ACKNOWLEDGED'):
            updated = client.put(url, json={'status': status},
                                 headers=farmer_a.headers).get_json()['data']['alert']
            assert updated['status'] == status
            assert updated['resolvedBy'] is None
            assert updated['resolvedAt'] is None

    def test_unknown_alert_is_404(self, client, farmer_a):
        resp = client.put('/api/alerts/missing/status', json={'status': 'NEW'}, headers=farmer_a.headers)
        assert resp.status_code == 404


class TestAssignment:

    def test_assign_always_acknowledges(self, client, farmer_a, farmer_b, raise_alert):
        alert = raise_alert()
        client.put(f"/api/alerts/{alert['id']}/status", json={'status': 'RESOLVED'},
                   headers=farmer_a.headers)

        resp = client.put(f"/api/alerts/{alert['id']}/assign", json={'assignedToId': farmer_b.id},
                          headers=farmer_a.headers)
        assert resp.status_code == 200
        assigned = resp.get_json()['data']['alert']
        assert assigned['status'] == 'ACKNOWLEDGED'
        assert assigned['assignedTo']['id'] == farmer_b.id

        # assignee can now see it
        assert client.get(f"/api/alerts/{alert['id']}", headers=farmer_b.headers).status_code == 200

    def test_assignee_required(self, client, farmer_a, raise_alert):
        alert = raise_alert()
        resp = client.put(f"/api/alerts/{alert['id']}/assign", json={}, headers=farmer_a.headers)
        assert resp.status_code == 400

    def test_assignee_must_exist(self, client, farmer_a, raise_alert):
        alert = raise_alert()
        resp = client.put(f"/api/alerts/{alert['id']}/assign", json={'assignedToId': 'nobody'},
                          headers=farmer_a.headers)
        assert resp.status_code == 404
        assert resp.get_json()['message'] == 'Assignee not found'


class TestStats:

    def test_counts_only_assigned_alerts_for_non_admin(self, client, farmer_a, farmer_b, admin, raise_alert):
        first = raise_alert(title='first')
        second = raise_alert(title='second')
        raise_alert(title='unassigned')
        for alert in (first, second):
            client.put(f"/api/alerts/{alert['id']}/assign", json={'assignedToId': farmer_b.id},
                       headers=farmer_a.headers)
        client.put(f"/api/alerts/{second['id']}/status", json={'status': 'IN_PROGRESS'},
                   headers=farmer_b.headers)

        b_stats = client.get('/api/alerts/stats', headers=farmer_b.headers).get_json()['data']['stats']
        admin_stats = client.get('/api/alerts/stats', headers=admin.headers).get_json()['data']['stats']

        assert b_stats == {'total': 2, 'new': 0, 'acknowledged': 1, 'inProgress': 1, 'resolved': 0}
        assert admin_stats['total'] == 3
        assert admin_stats['new'] == 1
