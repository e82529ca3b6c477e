import pytest

POLYGON = {'type': 'Polygon', 'coordinates': [[[36.0, -1.0], [36.1, -1.0], [36.1, -1.1], [36.0, -1.0]]]}


@pytest.fixture
def make_zone(client, farmer_a):
    def _make(**overrides):
        payload = {
            'name': 'Kajiado North', 'coordinates': POLYGON, 'area': 5400,
            'region': 'Rift Valley', 'district': 'Kajiado', 'landUseType': 'grassland',
            'degradationLevel': 42.5,
        }
        payload.update(overrides)
        resp = client.post('/api/land/zones', headers=farmer_a.headers, json=payload)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()['data']['zone']
    return _make


def test_zone_keeps_geometry_and_metrics(make_zone):
    zone = make_zone()
    assert zone['coordinates'] == POLYGON
    assert zone['degradationLevel'] == 42.5
    assert zone['soilHealth'] is None


def test_zones_visible_to_every_user(client, farmer_b, make_zone):
    zone = make_zone()
    listed = client.get('/api/land/zones', headers=farmer_b.headers).get_json()['data']['zones']
    assert [z['id'] for z in listed] == [zone['id']]


def test_region_and_district_filters(client, farmer_a, make_zone):
    make_zone(name='a', region='Coast', district='Kilifi')
    make_zone(name='b', region='Coast', district='Kwale')
    make_zone(name='c', region='Eastern', district='Kitui')

    def names(query):
        zones = client.get(f'/api/land/zones{query}', headers=farmer_a.headers).get_json()['data']['zones']
        return sorted(z['name'] for z in zones)

    assert names('?region=Coast') == ['a', 'b']
    assert names('?region=Coast&district=Kwale') == ['b']
    assert names('') == ['a', 'b', 'c']


def test_missing_fields(client, farmer_a):
    resp = client.post('/api/land/zones', headers=farmer_a.headers, json={'name': 'x'})
    assert resp.status_code == 400


def test_surveys_and_changes(client, farmer_a, make_zone):
    zone = make_zone()
    base = f"/api/land/zones/{zone['id']}"

    for date, ndvi in (('2026-01-10', 0.31), ('2026-04-10', 0.44)):
        resp = client.post(f'{base}/surveys', headers=farmer_a.headers,
                           json={'surveyType': 'satellite', 'surveyDate': date, 'ndvi': ndvi})
        assert resp.status_code == 201

    resp = client.post(f'{base}/changes', headers=farmer_a.headers, json={
        'changeType': 'recovery', 'severity': 'LOW',
        'impactDescription': 'Grass cover returning', 'detectedAt': '2026-04-11T08:00:00Z',
    })
    assert resp.status_code == 201

    surveys = client.get(f'{base}/surveys', headers=farmer_a.headers).get_json()['data']['surveys']
    assert [s['ndvi'] for s in surveys] == [0.44, 0.31]

    listed = client.get('/api/land/zones', headers=farmer_a.headers).get_json()['data']['zones'][0]
    assert [s['ndvi'] for s in listed['surveys']] == [0.44]
    assert len(listed['changes']) == 1

    detail = client.get(base, headers=farmer_a.headers).get_json()['data']['zone']
    assert len(detail['surveys']) == 2


def test_change_requires_detection_time(client, farmer_a, make_zone):
    zone = make_zone()
    resp = client.post(f"/api/land/zones/{zone['id']}/changes", headers=farmer_a.headers, json={
        'changeType': 'erosion', 'severity': 'HIGH', 'impactDescription': 'Gully',
    })
    assert resp.status_code == 400
    assert 'detectedAt' in resp.get_json()['message']


def test_unknown_zone(client, farmer_a):
    assert client.get('/api/land/zones/nope', headers=farmer_a.headers).status_code == 404
    resp = client.post('/api/land/zones/nope/surveys', headers=farmer_a.headers,
                       json={'surveyType': 'ground', 'surveyDate': '2026-01-01'})
    assert resp.status_code == 404
