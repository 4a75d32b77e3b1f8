"""
PyTest configuration for the Catalogue Hub API.

Every app-level fixture runs twice, once per storage backend, so the route
tests double as a check that both backends honour the same contract.
"""
import pytest

from catalogue_hub import create_app, db
from catalogue_hub.config import TestConfig


@pytest.fixture(params=['memory', 'database'])
def app(request):
    config = type('BackendTestConfig', (TestConfig,), {'STORAGE_BACKEND': request.param})
    app = create_app(config)
    yield app
    if request.param == 'database':
        with app.app_context():
            db.session.remove()
            db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def storage(app):
    with app.app_context():
        yield app.extensions['storage']


@pytest.fixture
def register(client):
    """Register a distributor and return ``(user, auth_headers)``."""
    def _register(username='distributor', company='Acme Wholesale'):
        response = client.post('/api/auth/register', json={
            'username': username,
            'password': 'secret123',
            'email': f'{username}@example.com',
            'company': company
        })
        assert response.status_code == 201, response.get_json()
        body = response.get_json()
        return body['user'], {'Authorization': f"Bearer {body['access_token']}"}
    return _register


@pytest.fixture
def distributor(register):
    return register('distributor')


@pytest.fixture
def other_distributor(register):
    return register('rival', company='Rival Supplies')


@pytest.fixture
def make_product(client):
    def _make_product(headers, name='Widget', price='10.00', **extra):
        response = client.post('/api/products', json={'name': name, 'price': price, **extra}, headers=headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()
    return _make_product


@pytest.fixture
def make_catalogue(client):
    def _make_catalogue(headers, name='Spring range', product_ids=None, **extra):
        payload = {'name': name, **extra}
        if product_ids is not None:
            payload['productIds'] = product_ids
        response = client.post('/api/catalogues', json=payload, headers=headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()
    return _make_catalogue


@pytest.fixture
def approved_retailer(client, distributor):
    """Walk a retailer through request-access and approval; returns bearer headers."""
    def _approved_retailer(catalogue, email='buyer@shop.example'):
        _, headers = distributor
        link = catalogue['shareableLink']
        response = client.post(f'/api/shared/{link}/request-access', json={
            'name': 'Bea Buyer',
            'email': email,
            'company': 'Corner Shop',
            'message': 'We would like to stock your range'
        })
        assert response.status_code == 201
        request_id = response.get_json()['id']
        response = client.put(f'/api/access-requests/{request_id}', json={'status': 'approved'}, headers=headers)
        assert response.status_code == 200
        response = client.post(f'/api/shared/{link}/check-access', json={'email': email})
        token = response.get_json()['accessToken']
        return {'Authorization': f'Bearer {token}'}
    return _approved_retailer


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: mark test as unit test")
