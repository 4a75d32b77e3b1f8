"""
Unit tests for payload validation and money helpers.
"""
import re

import pytest

from catalogue_hub.utils.util import format_money, generate_order_id, generate_shareable_link, to_decimal
from catalogue_hub.validators import (
    ValidationError, parse_id, parse_id_list, validate_access_decision, validate_catalogue, validate_order,
    validate_email_payload, validate_payment_status, validate_product, validate_user
)

pytestmark = pytest.mark.unit


class TestIds:
    @pytest.mark.parametrize('value, expected', [(3, 3), ('12', 12), (' 7 ', 7)])
    def test_parse_id(self, value, expected):
        assert parse_id(value) == expected

    @pytest.mark.parametrize('value', [0, -1, 'abc', True, None, 1.5])
    def test_parse_id_rejects(self, value):
        with pytest.raises(ValidationError):
            parse_id(value)

    def test_parse_id_list_dedupes_in_order(self):
        assert parse_id_list([3, '1', 3, '2']) == [3, 1, 2]

    def test_parse_id_list_names_field(self):
        with pytest.raises(ValidationError) as exc:
            parse_id_list('1,2')
        assert 'productIds' in exc.value.errors
        with pytest.raises(ValidationError) as exc:
            parse_id_list([1, 'x'])
        assert 'productIds' in exc.value.errors


class TestPayloads:
    def test_user(self):
        cleaned = validate_user({'username': ' alice ', 'password': 'pw', 'email': 'a@b.co', 'extra': 1})
        assert cleaned == {'username': 'alice', 'password': 'pw', 'email': 'a@b.co'}

    def test_user_bad_email(self):
        with pytest.raises(ValidationError) as exc:
            validate_user({'username': 'alice', 'password': 'pw', 'email': 'nope'})
        assert exc.value.errors == {'email': 'Invalid email address'}

    def test_product_normalises_price(self):
        assert validate_product({'name': 'Tea', 'price': 4})['price'] == '4.00'

    def test_product_partial(self):
        assert validate_product({'inStock': False}, partial=True) == {'inStock': False}
        with pytest.raises(ValidationError) as exc:
            validate_product({'price': 'free'}, partial=True)
        assert 'price' in exc.value.errors

    def test_partial_update_cannot_blank_required_fields(self):
        for payload in ({'name': ''}, {'name': None}, {'name': '   '}, {'price': None}, {'price': ''}):
            with pytest.raises(ValidationError) as exc:
                validate_product(payload, partial=True)
            assert exc.value.errors == {next(iter(payload)): 'This field is required'}
        with pytest.raises(ValidationError) as exc:
            validate_catalogue({'name': ''}, partial=True)
        assert exc.value.errors == {'name': 'This field is required'}

    def test_money_must_fit_its_column(self):
        assert validate_product({'name': 'Tea', 'price': '99999999.99'})['price'] == '99999999.99'
        for price in ('100000000', '1e30'):
            with pytest.raises(ValidationError) as exc:
                validate_product({'name': 'Tea', 'price': price})
            assert 'price' in exc.value.errors

        order = {'userId': 1, 'retailerName': 'Bea', 'retailerEmail': 'bea@shop.example',
                 'items': [{'productId': 1, 'quantity': 1}]}
        assert validate_order({**order, 'amount': '9999999999.99'})['amount'] == '9999999999.99'
        with pytest.raises(ValidationError) as exc:
            validate_order({**order, 'amount': '1e30'})
        assert list(exc.value.errors) == ['amount']

    def test_email_payload(self):
        assert validate_email_payload({'email': '  buyer@shop.example '}) == 'buyer@shop.example'
        assert validate_email_payload({}, required=False) is None
        for body in ({}, {'email': ['buyer@shop.example']}, {'email': 42}, {'email': 'not-an-email'}):
            with pytest.raises(ValidationError) as exc:
                validate_email_payload(body)
            assert 'email' in exc.value.errors

    def test_product_rejects_non_boolean_stock(self):
        with pytest.raises(ValidationError) as exc:
            validate_product({'name': 'Tea', 'price': '1', 'inStock': 'yes'})
        assert 'inStock' in exc.value.errors

    def test_catalogue_clears_optional_field(self):
        assert validate_catalogue({'description': None}, partial=True) == {'description': None}

    def test_body_must_be_object(self):
        with pytest.raises(ValidationError):
            validate_catalogue(['name'])

    def test_order(self):
        cleaned = validate_order({
            'userId': '1',
            'retailerName': 'Bea',
            'retailerEmail': 'bea@shop.example',
            'items': [{'productId': 1, 'quantity': 1}],
            'amount': '12.5'
        })
        assert cleaned['userId'] == 1
        assert cleaned['amount'] == '12.50'

    def test_order_items_must_be_non_empty(self):
        with pytest.raises(ValidationError) as exc:
            validate_order({
                'userId': 1, 'retailerName': 'Bea', 'retailerEmail': 'bea@shop.example',
                'items': [], 'amount': '1'
            })
        assert list(exc.value.errors) == ['items']

    def test_statuses(self):
        assert validate_payment_status('cancelled') == 'cancelled'
        assert validate_access_decision('rejected') == 'rejected'
        with pytest.raises(ValidationError):
            validate_payment_status('shipped')
        with pytest.raises(ValidationError):
            validate_access_decision('pending')


class TestHelpers:
    def test_to_decimal(self):
        assert str(to_decimal('2.5')) == '2.50'
        assert str(to_decimal(' 7 ')) == '7.00'
        assert format_money(3) == '3.00'
        assert format_money(None) is None
        for value in ('abc', 'NaN', 'Infinity', '1e30', None, True):
            with pytest.raises(ValueError):
                to_decimal(value)

    def test_generated_identifiers(self):
        assert re.match(r'^catalogue-[A-Za-z0-9]{10}$', generate_shareable_link())
        assert re.match(r'^ORD-[A-Z0-9]{6}$', generate_order_id())
