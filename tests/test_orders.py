"""
Tests for order intake and the distributor's order views.
"""
import re

import pytest

ORDER_ID_PATTERN = re.compile(r'^ORD-[A-Z0-9]{6}$')


@pytest.fixture
def place_order(client):
    def _place_order(user, catalogue=None, amount='20.00', email='buyer@shop.example', **extra):
        payload = {
            'userId': user['id'],
            'retailerName': 'Bea Buyer',
            'retailerEmail': email,
            'retailerCompany': 'Corner Shop',
            'items': [{'productId': 1, 'name': 'Widget', 'quantity': 2, 'price': '10.00'}],
            'amount': amount,
            **extra
        }
        if catalogue is not None:
            payload['catalogueId'] = catalogue['id']
        response = client.post('/api/orders', json=payload)
        assert response.status_code == 201, response.get_json()
        return response.get_json()
    return _place_order


class TestOrderIntake:
    def test_create_assigns_order_number(self, distributor, place_order):
        user, _ = distributor
        order = place_order(user)

        assert ORDER_ID_PATTERN.match(order['orderId'])
        assert order['paymentStatus'] == 'pending'
        assert order['amount'] == '20.00'
        assert order['userId'] == user['id']
        assert order['items'][0]['quantity'] == 2

    def test_order_numbers_are_unique(self, distributor, place_order):
        user, _ = distributor
        numbers = {place_order(user)['orderId'] for _ in range(10)}
        assert len(numbers) == 10

    def test_create_from_catalogue(self, distributor, make_catalogue, place_order):
        user, headers = distributor
        catalogue = make_catalogue(headers)
        order = place_order(user, catalogue)
        assert order['catalogueId'] == catalogue['id']

    def test_missing_fields(self, client, distributor):
        user, _ = distributor
        response = client.post('/api/orders', json={'userId': user['id']})
        assert response.status_code == 400
        errors = response.get_json()['errors']
        for field in ('retailerName', 'retailerEmail', 'items', 'amount'):
            assert field in errors

    def test_amount_too_large(self, client, distributor):
        user, headers = distributor
        response = client.post('/api/orders', json={
            'userId': user['id'],
            'retailerName': 'Bea Buyer',
            'retailerEmail': 'buyer@shop.example',
            'items': [{'productId': 1, 'quantity': 1}],
            'amount': '1e30'
        })
        assert response.status_code == 400
        assert 'amount' in response.get_json()['errors']
        assert client.get('/api/orders', headers=headers).get_json() == []

    def test_unknown_distributor(self, client):
        response = client.post('/api/orders', json={
            'userId': 42,
            'retailerName': 'Bea Buyer',
            'retailerEmail': 'buyer@shop.example',
            'items': [{'productId': 1, 'quantity': 1}],
            'amount': '5.00'
        })
        assert response.status_code == 400
        assert 'userId' in response.get_json()['errors']

    def test_catalogue_of_another_distributor(self, client, distributor, other_distributor, make_catalogue):
        user, _ = distributor
        _, rival_headers = other_distributor
        catalogue = make_catalogue(rival_headers)
        response = client.post('/api/orders', json={
            'userId': user['id'],
            'catalogueId': catalogue['id'],
            'retailerName': 'Bea Buyer',
            'retailerEmail': 'buyer@shop.example',
            'items': [{'productId': 1, 'quantity': 1}],
            'amount': '5.00'
        })
        assert response.status_code == 400
        assert 'catalogueId' in response.get_json()['errors']


class TestDistributorOrders:
    def test_list_is_newest_first(self, client, distributor, place_order):
        user, headers = distributor
        first = place_order(user, amount='1.00')
        second = place_order(user, amount='2.00')

        orders = client.get('/api/orders', headers=headers).get_json()
        assert [o['orderId'] for o in orders] == [second['orderId'], first['orderId']]

    def test_list_renders_order_fields(self, client, distributor, place_order):
        user, headers = distributor
        order = place_order(user)

        listed = client.get('/api/orders', headers=headers).get_json()
        assert listed == [order]

    def test_list_requires_authentication(self, client):
        assert client.get('/api/orders').status_code == 401

    def test_get_single_order(self, client, distributor, other_distributor, place_order):
        user, headers = distributor
        _, rival_headers = other_distributor
        order = place_order(user)

        response = client.get(f"/api/orders/{order['orderId']}", headers=headers)
        assert response.status_code == 200
        assert response.get_json()['id'] == order['id']

        assert client.get(f"/api/orders/{order['orderId']}", headers=rival_headers).status_code == 403
        assert client.get('/api/orders/ORD-NOPE00', headers=headers).status_code == 404

    def test_update_payment_status(self, client, distributor, place_order):
        user, headers = distributor
        order = place_order(user)
        url = f"/api/orders/{order['orderId']}/status"

        response = client.put(url, json={'paymentStatus': 'approved'}, headers=headers)
        assert response.status_code == 200
        assert response.get_json()['paymentStatus'] == 'approved'

        assert client.put(url, json={}, headers=headers).status_code == 400
        assert client.put(url, json={'paymentStatus': 'shipped'}, headers=headers).status_code == 400

    def test_other_distributor_cannot_update_status(self, client, distributor, other_distributor, place_order):
        user, headers = distributor
        _, rival_headers = other_distributor
        order = place_order(user)
        url = f"/api/orders/{order['orderId']}/status"

        assert client.put(url, json={'paymentStatus': 'paid'}, headers=rival_headers).status_code == 403
        assert client.get(f"/api/orders/{order['orderId']}", headers=headers).get_json()['paymentStatus'] == 'pending'
