# Order service module for business logic
import logging

from catalogue_hub.validators import ValidationError

logger = logging.getLogger(__name__)


def create_order(storage, data):
    """Create an order from a validated payload.

    The distributor must exist, and a catalogue, when given, must belong to
    that distributor.
    """
    if not storage.get_user(data['userId']):
        raise ValidationError('Invalid request data', {'userId': 'Unknown distributor'})
    catalogue_id = data.get('catalogueId')
    if catalogue_id is not None:
        catalogue = storage.get_catalogue(catalogue_id)
        if not catalogue or catalogue['userId'] != data['userId']:
            raise ValidationError('Invalid request data', {'catalogueId': 'Unknown catalogue'})
    order = storage.create_order(data)
    logger.info(f"Created order {order['orderId']} for distributor {order['userId']}, amount: {order['amount']}")
    return order


def retailer_orders(storage, catalogue, email):
    return [order for order in storage.get_orders_by_email(email) if order['catalogueId'] == catalogue['id']]
