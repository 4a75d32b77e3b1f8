"""
Tests for distributor registration, login and the token guard.
"""
from catalogue_hub.utils.access_token import create_shared_access_token


class TestAuthAPI:
    def test_register_returns_user_without_password(self, client):
        response = client.post('/api/auth/register', json={
            'username': 'alice',
            'password': 'secret123',
            'email': 'alice@example.com',
            'company': 'Alice Imports'
        })
        assert response.status_code == 201
        body = response.get_json()
        assert body['access_token']
        assert body['user']['username'] == 'alice'
        assert body['user']['company'] == 'Alice Imports'
        assert 'password' not in body['user']

    def test_register_rejects_duplicate_username(self, client, distributor):
        response = client.post('/api/auth/register', json={
            'username': 'distributor',
            'password': 'secret123',
            'email': 'another@example.com'
        })
        assert response.status_code == 400

    def test_register_requires_fields(self, client):
        response = client.post('/api/auth/register', json={'username': 'bob'})
        assert response.status_code == 400
        errors = response.get_json()['errors']
        assert 'password' in errors
        assert 'email' in errors

    def test_login(self, client, distributor):
        response = client.post('/api/auth/login', json={'username': 'distributor', 'password': 'secret123'})
        assert response.status_code == 200
        body = response.get_json()
        assert body['user']['username'] == 'distributor'
        assert 'password' not in body['user']

        headers = {'Authorization': f"Bearer {body['access_token']}"}
        assert client.get('/api/auth/user', headers=headers).status_code == 200

    def test_login_with_wrong_password(self, client, distributor):
        response = client.post('/api/auth/login', json={'username': 'distributor', 'password': 'wrong'})
        assert response.status_code == 401

    def test_current_user_requires_token(self, client):
        assert client.get('/api/auth/user').status_code == 401

    def test_garbage_token_is_unauthorized(self, client):
        response = client.get('/api/auth/user', headers={'Authorization': 'Bearer not-a-token'})
        assert response.status_code == 401

    def test_shared_catalogue_token_cannot_act_as_distributor(self, app, client, distributor):
        with app.test_request_context():
            token = create_shared_access_token(1, 'buyer@shop.example')
        response = client.get('/api/products', headers={'Authorization': f'Bearer {token}'})
        assert response.status_code == 401

    def test_logout(self, client):
        response = client.post('/api/auth/logout')
        assert response.status_code == 200
