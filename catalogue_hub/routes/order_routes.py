from flask_restx import Namespace, Resource, fields
from flask import request, g
from catalogue_hub.services import order_service
from catalogue_hub.storage import get_storage
from catalogue_hub.utils.auth_middleware import token_required
from catalogue_hub.validators import validate_order, validate_payment_status, PAYMENT_STATUSES
import logging

order_ns = Namespace('orders', description='Order intake and payment tracking', path='/orders')

logger = logging.getLogger(__name__)

order_item = order_ns.model('OrderItem', {
    'productId': fields.Integer(description='Product ID'),
    'name': fields.String(),
    'quantity': fields.Integer(),
    'price': fields.String()
})

order_model = order_ns.model('Order', {
    'userId': fields.Integer(required=True, description='Distributor receiving the order'),
    'catalogueId': fields.Integer(description='Catalogue the order was placed from'),
    'retailerName': fields.String(required=True),
    'retailerEmail': fields.String(required=True),
    'retailerCompany': fields.String(),
    'items': fields.List(fields.Nested(order_item), required=True),
    'amount': fields.String(required=True, description='Decimal total, e.g. "99.90"'),
    'paymentStatus': fields.String(enum=list(PAYMENT_STATUSES), default='pending')
})

# Rendered response for stored orders; order_model above only documents the
# POST body, which validate_order() checks.
order_record = order_ns.clone('OrderRecord', order_model, {
    'id': fields.Integer(readonly=True),
    'orderId': fields.String(readonly=True, description='ORD- number'),
    'items': fields.Raw(description='Line items as submitted'),
    'orderDate': fields.String(readonly=True, description='ISO-8601 UTC timestamp')
})

payment_status_model = order_ns.model('OrderStatusUpdate', {
    'paymentStatus': fields.String(required=True, enum=list(PAYMENT_STATUSES))
})


def load_owned_order(order_id):
    order = get_storage().get_order_by_order_id(order_id)
    if not order:
        return None, ({'message': 'Order not found'}, 404)
    if order['userId'] != g.user['id']:
        return None, ({'message': 'Unauthorized'}, 403)
    return order, None


@order_ns.route('')
class OrderList(Resource):
    @token_required
    @order_ns.doc('list_orders', security='BearerAuth')
    @order_ns.marshal_list_with(order_record)
    def get(self):
        """Orders received by the current distributor, newest first"""
        orders = get_storage().get_orders(g.user['id'])
        logger.info(f"Returning {len(orders)} orders for user {g.user['id']}")
        return orders, 200

    @order_ns.expect(order_model)
    @order_ns.doc('create_order')
    def post(self):
        """Place an order (public, used from shared catalogues)"""
        data = validate_order(request.get_json(silent=True) or {})
        return order_service.create_order(get_storage(), data), 201


@order_ns.route('/<string:order_id>')
class OrderResource(Resource):
    @token_required
    @order_ns.doc('get_order', security='BearerAuth')
    def get(self, order_id):
        """Get one order by its ORD- number"""
        order, error = load_owned_order(order_id)
        if error:
            return error
        return order, 200


@order_ns.route('/<string:order_id>/status')
class OrderStatus(Resource):
    @token_required
    @order_ns.expect(payment_status_model)
    @order_ns.doc('update_order_status', security='BearerAuth')
    def put(self, order_id):
        """Update an order's payment status"""
        data = request.get_json(silent=True) or {}
        if not data.get('paymentStatus'):
            return {'message': 'Payment status is required'}, 400
        status = validate_payment_status(data['paymentStatus'])

        order, error = load_owned_order(order_id)
        if error:
            return error
        updated = get_storage().update_order_payment_status(order_id, status)
        logger.info(f"Order {order_id} payment status changed from {order['paymentStatus']} to {status}")
        return updated, 200
