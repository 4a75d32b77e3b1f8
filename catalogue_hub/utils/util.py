# catalogue_hub/utils/util.py
import secrets
import string
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

LINK_ALPHABET = string.ascii_letters + string.digits
ORDER_ID_ALPHABET = string.ascii_uppercase + string.digits
CENTS = Decimal('0.01')


def utcnow():
    """Naive UTC timestamp, the form every backend stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    return value.isoformat() if value else None


def parse_timestamp(value):
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def to_decimal(value):
    """Convert a number or numeric string into a two-place Decimal.

    Raises ValueError for anything that is not a finite number, or too
    large to quantize to cents.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f'Not a number: {value!r}')
    try:
        amount = Decimal(str(value).strip())
        if not amount.is_finite():
            raise ValueError(f'Not a number: {value!r}')
        return amount.quantize(CENTS)
    except (InvalidOperation, TypeError):
        raise ValueError(f'Not a number: {value!r}')


def format_money(value):
    if value is None:
        return None
    return f'{to_decimal(value):.2f}'


def random_token(length, alphabet=LINK_ALPHABET):
    return ''.join(secrets.choice(alphabet) for _ in range(length))


def generate_shareable_link():
    return f'catalogue-{random_token(10)}'


def generate_order_id():
    return f'ORD-{random_token(6, ORDER_ID_ALPHABET)}'
