"""Registration, login, profile, tokens, admin-only user management and envelopes."""

from conftest import PASSWORD
from database.db import db
from database.models import Activity, User


def _login(client, email, password=PASSWORD):
    return client.post('/api/auth/login', json={'email': email, 'password': password})


class TestRegister:

    def test_returns_user_and_token(self, client):
        resp = client.post('/api/auth/register', json={
            'email': 'wanjiru@kube.test', 'password': PASSWORD,
            'firstName': 'Wanjiru', 'lastName': 'K', 'services': ['KUBE_FARM', 'KUBE_LAND'],
        })
        assert resp.status_code == 201
        body = resp.get_json()
        assert body['success'] is True
        assert body['message'] == 'User registered successfully'
        user = body['data']['user']
        assert user['role'] == 'FARMER'
        assert user['status'] == 'ACTIVE'
        assert user['services'] == ['KUBE_FARM', 'KUBE_LAND']
        assert 'passwordHash' not in user
        assert body['data']['token']

    def test_missing_fields_named(self, client):
        resp = client.post('/api/auth/register', json={'email': 'x@kube.test'})
        assert resp.status_code == 400
        assert resp.get_json()['message'] == (
            'Please provide all required fields: password, firstName, lastName'
        )

    def test_duplicate_email(self, client, farmer_a):
        resp = client.post('/api/auth/register', json={
            'email': farmer_a.email, 'password': PASSWORD, 'firstName': 'A', 'lastName': 'B',
        })
        assert resp.status_code == 400
        assert resp.get_json()['message'] == 'User already exists with this email'

    def test_unknown_service_rejected(self, client):
        resp = client.post('/api/auth/register', json={
            'email': 'x@kube.test', 'password': PASSWORD, 'firstName': 'A', 'lastName': 'B',
            'services': ['KUBE_FARM', 'KUBE_SPACE'],
        })
        assert resp.status_code == 400
        assert 'KUBE_SPACE' in resp.get_json()['message']

    def test_services_must_be_a_list(self, client):
        resp = client.post('/api/auth/register', json={
            'email': 'x@kube.test', 'password': PASSWORD, 'firstName': 'A', 'lastName': 'B',
            'services': 'KUBE_FARM',
        })
        assert resp.status_code == 400
        assert resp.get_json()['message'] == 'services must be a list'

    def test_numeric_password_rejected(self, client):
        resp = client.post('/api/auth/register', json={
            'email': 'x@kube.test', 'password': 12345678, 'firstName': 'A', 'lastName': 'B',
        })
        assert resp.status_code == 400
        assert resp.get_json()['message'] == 'password must be a string'

    def test_business_account_needs_company(self, client):
        resp = client.post('/api/auth/register', json={
            'email': 'x@kube.test', 'password': PASSWORD, 'firstName': 'A', 'lastName': 'B',
            'businessType': 'B2B',
        })
        assert resp.status_code == 400


class TestLogin:

    def test_success_stamps_last_login_and_records_activity(self, app, client, farmer_a):
        resp = _login(client, farmer_a.email)
        assert resp.status_code == 200
        assert resp.get_json()['data']['user']['lastLoginAt'] is not None

        with app.app_context():
            types = [a.type for a in Activity.query.filter_by(user_id=farmer_a.id).all()]
        assert types == ['USER_LOGIN']

    def test_missing_credentials(self, client):
        assert client.post('/api/auth/login', json={'email': 'a@kube.test'}).status_code == 400

    def test_wrong_password_and_unknown_email_look_the_same(self, client, farmer_a):
        wrong = _login(client, farmer_a.email, 'nope-nope')
        unknown = _login(client, 'ghost@kube.test')
        assert wrong.status_code == unknown.status_code == 401
        assert wrong.get_json() == unknown.get_json() == {'success': False, 'message': 'Invalid credentials'}

    def test_non_string_password_is_bad_credentials(self, client, farmer_a):
        for password in (12345678, ['secret123'], {'p': 1}):
            resp = _login(client, farmer_a.email, password)
            assert resp.status_code == 401
            assert resp.get_json()['message'] == 'Invalid credentials'

    def test_inactive_account_cannot_login(self, app, client, farmer_a):
        with app.app_context():
            db.session.get(User, farmer_a.id).status = 'SUSPENDED'
            db.session.commit()

        resp = _login(client, farmer_a.email)
        assert resp.status_code == 401
        assert resp.get_json()['message'] == 'Invalid credentials'


class TestProfile:

    def test_requires_token(self, client):
        resp = client.get('/api/auth/profile')
        assert resp.status_code == 401
        assert resp.get_json()['success'] is False

    def test_garbage_token(self, client):
        resp = client.get('/api/auth/profile', headers={'Authorization': 'Bearer not.a.jwt'})
        assert resp.status_code == 401

    def test_get_and_update(self, client, farmer_a):
        user = client.get('/api/auth/profile', headers=farmer_a.headers).get_json()['data']['user']
        assert user['email'] == farmer_a.email

        resp = client.put('/api/auth/profile', headers=farmer_a.headers,
                          json={'phone': '+254700000000', 'language': 'sw', 'role': 'ADMIN'})
        updated = resp.get_json()['data']['user']
        assert updated['phone'] == '+254700000000'
        assert updated['language'] == 'sw'
        assert updated['role'] == 'FARMER'


class TestChangePassword:

    def test_short_new_password(self, client, farmer_a):
        resp = client.post('/api/auth/change-password', headers=farmer_a.headers,
                           json={'currentPassword': PASSWORD, 'newPassword': '123'})
        assert resp.status_code == 400

    def test_wrong_current_password(self, client, farmer_a):
        resp = client.post('/api/auth/change-password', headers=farmer_a.headers,
                           json={'currentPassword': 'wrong-one', 'newPassword': 'brand-new'})
        assert resp.status_code == 401
        assert resp.get_json()['message'] == 'Current password is incorrect'

    def test_change_then_login_with_new(self, client, farmer_a):
        resp = client.post('/api/auth/change-password', headers=farmer_a.headers,
                           json={'currentPassword': PASSWORD, 'newPassword': 'brand-new'})
        assert resp.status_code == 200
        assert _login(client, farmer_a.email, 'brand-new').status_code == 200
        assert _login(client, farmer_a.email).status_code == 401

    def test_non_string_passwords_rejected(self, client, farmer_a):
        resp = client.post('/api/auth/change-password', headers=farmer_a.headers,
                           json={'currentPassword': PASSWORD, 'newPassword': 12345678})
        assert resp.status_code == 400
        assert resp.get_json()['message'] == 'newPassword must be a string'
        assert _login(client, farmer_a.email).status_code == 200


def test_refresh_issues_working_token(client, farmer_a):
    token = client.post('/api/auth/refresh', headers=farmer_a.headers).get_json()['data']['token']
    resp = client.get('/api/auth/profile', headers={'Authorization': f'Bearer {token}'})
    assert resp.get_json()['data']['user']['id'] == farmer_a.id


class TestUserManagement:

    def test_non_admin_forbidden(self, client, farmer_a):
        resp = client.get('/api/users', headers=farmer_a.headers)
        assert resp.status_code == 403
        assert resp.get_json() == {'success': False, 'message': 'Admin access required'}

    def test_admin_can_list_create_and_update(self, client, admin, farmer_a):
        users = client.get('/api/users', headers=admin.headers).get_json()['data']['users']
        assert {u['email'] for u in users} == {admin.email, farmer_a.email}

        resp = client.post('/api/users', headers=admin.headers, json={
            'email': 'ranger@kube.test', 'password': PASSWORD,
            'firstName': 'Rafiki', 'lastName': 'R', 'role': 'RANGER',
        })
        assert resp.status_code == 201
        ranger = resp.get_json()['data']['user']
        assert ranger['role'] == 'RANGER'

        resp = client.put(f"/api/users/{ranger['id']}", headers=admin.headers,
                          json={'organization': 'KWS'})
        assert resp.get_json()['data']['user']['organization'] == 'KWS'

    def test_create_with_numeric_password(self, client, admin):
        resp = client.post('/api/users', headers=admin.headers, json={
            'email': 'ranger@kube.test', 'password': 12345678,
            'firstName': 'Rafiki', 'lastName': 'R', 'role': 'RANGER',
        })
        assert resp.status_code == 400
        assert resp.get_json()['message'] == 'password must be a string'

    def test_unknown_user(self, client, admin):
        assert client.get('/api/users/nope', headers=admin.headers).status_code == 404


class TestEnvelope:

    def test_unknown_route(self, client):
        resp = client.get('/api/nowhere')
        assert resp.status_code == 404
        assert resp.get_json() == {'success': False, 'message': 'Route not found'}

    def test_health(self, client):
        body = client.get('/health').get_json()
        assert body['status'] == 'ok'
        assert body['version'] == '1.0.0'

    def test_metrics_endpoint(self, client):
        client.get('/health')
        body = client.get('/metrics').get_json()
        assert body['totals']['total_requests'] >= 1
