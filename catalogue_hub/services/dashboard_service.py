# Dashboard service module: per-distributor summary figures
from datetime import timedelta
from decimal import Decimal

from catalogue_hub.models import PaymentStatus
from catalogue_hub.utils.util import parse_timestamp, to_decimal, utcnow

RECENT_DAYS = 30
RECENT_ORDERS_LIMIT = 5


def get_stats(storage, user_id, now=None):
    now = now or utcnow()
    products = storage.get_products(user_id)
    catalogues = storage.get_catalogues(user_id)
    orders = storage.get_orders(user_id)

    since = now - timedelta(days=RECENT_DAYS)
    new_orders = sum(1 for order in orders if parse_timestamp(order['orderDate']) >= since)
    pending_payments = sum(
        (to_decimal(order['amount']) for order in orders
         if order['paymentStatus'] == PaymentStatus.PENDING.value),
        Decimal('0'))
    catalogue_views = sum(catalogue['views'] or 0 for catalogue in catalogues)

    return {
        'totalProducts': len(products),
        'newOrders': new_orders,
        'pendingPayments': f'{pending_payments:.2f}',
        'catalogueViews': catalogue_views
    }


def recent_orders(storage, user_id, limit=RECENT_ORDERS_LIMIT):
    orders = sorted(
        storage.get_orders(user_id),
        key=lambda order: (parse_timestamp(order['orderDate']), order['id']),
        reverse=True)
    return orders[:limit]
