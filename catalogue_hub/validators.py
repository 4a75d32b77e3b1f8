# catalogue_hub/validators.py
"""Request payload validation.

Each ``validate_*`` function takes the decoded JSON body and returns a cleaned
dict holding only the writable fields, or raises ``ValidationError`` naming
every offending field. ``partial=True`` validates an update where any field
may be omitted, but the ones present must still be valid and a required field
cannot be blanked.
"""
import re
from decimal import Decimal

from catalogue_hub.models import PaymentStatus, AccessStatus
from catalogue_hub.utils.util import to_decimal

EMAIL_REGEX = re.compile(r'^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$')
PAYMENT_STATUSES = tuple(status.value for status in PaymentStatus)
ACCESS_DECISIONS = (AccessStatus.APPROVED.value, AccessStatus.REJECTED.value)
# Precision of Product.price and Order.amount
PRICE_DIGITS = 10
AMOUNT_DIGITS = 12


class ValidationError(Exception):
    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = errors or {}


class _Checker:
    def __init__(self, data, partial):
        if not isinstance(data, dict):
            raise ValidationError('Request body must be a JSON object')
        self.data = data
        self.partial = partial
        self.cleaned = {}
        self.errors = {}

    def _present(self, field, required):
        if field not in self.data:
            if required and not self.partial:
                self.errors[field] = 'This field is required'
            return False
        value = self.data[field]
        if value is None or value == '':
            # Sent but empty: clears an optional field, never a required one
            if required:
                self.errors[field] = 'This field is required'
            else:
                self.cleaned[field] = None
            return False
        return True

    def string(self, field, required=False, max_length=None):
        if not self._present(field, required):
            return
        value = self.data[field]
        if not isinstance(value, str):
            self.errors[field] = 'Must be a string'
        elif required and not value.strip():
            self.errors[field] = 'This field is required'
        elif max_length and len(value) > max_length:
            self.errors[field] = f'Must be at most {max_length} characters'
        else:
            self.cleaned[field] = value.strip() if required else value

    def email(self, field, required=False):
        self.string(field, required=required, max_length=200)
        value = self.cleaned.get(field)
        if not value:
            return
        value = value.strip()
        if EMAIL_REGEX.match(value):
            self.cleaned[field] = value
        else:
            self.cleaned.pop(field)
            self.errors[field] = 'Invalid email address'

    def boolean(self, field):
        if field not in self.data or self.data[field] is None:
            return
        if not isinstance(self.data[field], bool):
            self.errors[field] = 'Must be true or false'
        else:
            self.cleaned[field] = self.data[field]

    def money(self, field, required=False, max_digits=PRICE_DIGITS):
        """``max_digits`` matches the precision of the column the value lands in."""
        if not self._present(field, required):
            return
        try:
            amount = to_decimal(self.data[field])
        except ValueError:
            self.errors[field] = 'Must be a decimal number'
            return
        if amount < 0:
            self.errors[field] = 'Must not be negative'
        elif amount >= Decimal(10) ** (max_digits - 2):
            self.errors[field] = f'Must have at most {max_digits - 2} digits before the decimal point'
        else:
            self.cleaned[field] = f'{amount:.2f}'

    def integer(self, field, required=False):
        if not self._present(field, required):
            return
        try:
            self.cleaned[field] = parse_id(self.data[field])
        except ValidationError:
            self.errors[field] = 'Must be a positive integer'

    def choice(self, field, choices, required=False):
        if not self._present(field, required):
            return
        if self.data[field] not in choices:
            self.errors[field] = f"Must be one of: {', '.join(choices)}"
        else:
            self.cleaned[field] = self.data[field]

    def result(self):
        if self.errors:
            raise ValidationError('Invalid request data', self.errors)
        return self.cleaned


def parse_id(value):
    """Accept an int or a numeric string, as clients send both."""
    if isinstance(value, bool):
        raise ValidationError(f'Invalid id: {value!r}')
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int) or value < 1:
        raise ValidationError(f'Invalid id: {value!r}')
    return value


def parse_id_list(values, field='productIds'):
    if not isinstance(values, list):
        raise ValidationError('Invalid request data', {field: 'Must be a list of ids'})
    try:
        return list(dict.fromkeys(parse_id(value) for value in values))
    except ValidationError as e:
        raise ValidationError('Invalid request data', {field: str(e)})


def validate_user(data):
    checker = _Checker(data, partial=False)
    checker.string('username', required=True, max_length=80)
    checker.string('password', required=True)
    checker.email('email', required=True)
    checker.string('company', max_length=200)
    return checker.result()


def validate_product(data, partial=False):
    checker = _Checker(data, partial)
    checker.string('name', required=True, max_length=200)
    checker.string('description')
    checker.money('price', required=True)
    checker.string('imageUrl', max_length=500)
    checker.string('category', max_length=100)
    checker.boolean('inStock')
    return checker.result()


def validate_catalogue(data, partial=False):
    checker = _Checker(data, partial)
    checker.string('name', required=True, max_length=200)
    checker.string('description')
    checker.boolean('isPublic')
    return checker.result()


def validate_order(data):
    checker = _Checker(data, partial=False)
    checker.integer('userId', required=True)
    checker.integer('catalogueId')
    checker.string('retailerName', required=True, max_length=200)
    checker.email('retailerEmail', required=True)
    checker.string('retailerCompany', max_length=200)
    checker.money('amount', required=True, max_digits=AMOUNT_DIGITS)
    checker.choice('paymentStatus', PAYMENT_STATUSES)
    items = data.get('items')
    if not isinstance(items, list) or not items:
        checker.errors['items'] = 'Must be a non-empty list'
    else:
        checker.cleaned['items'] = items
    return checker.result()


def validate_access_request(data):
    checker = _Checker(data, partial=False)
    checker.string('name', required=True, max_length=200)
    checker.email('email', required=True)
    checker.string('company', required=True, max_length=200)
    checker.string('message')
    return checker.result()


def validate_email_payload(data, required=True):
    """Return the stripped ``email`` of a body, or None when optional and absent."""
    checker = _Checker(data, partial=False)
    checker.email('email', required=required)
    return checker.result().get('email')


def validate_payment_status(value):
    if value not in PAYMENT_STATUSES:
        raise ValidationError(
            'Invalid payment status', {'paymentStatus': f"Must be one of: {', '.join(PAYMENT_STATUSES)}"})
    return value


def validate_access_decision(value):
    if value not in ACCESS_DECISIONS:
        raise ValidationError('Invalid status', {'status': f"Must be one of: {', '.join(ACCESS_DECISIONS)}"})
    return value
