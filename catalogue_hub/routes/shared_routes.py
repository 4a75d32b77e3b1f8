import logging
from flask import request, g
from flask_restx import Namespace, Resource, fields
from catalogue_hub.services import access_service, catalogue_service, order_service
from catalogue_hub.storage import get_storage
from catalogue_hub.utils.auth_middleware import shared_access_required
from catalogue_hub.validators import validate_access_request, validate_email_payload, validate_payment_status

shared_ns = Namespace('shared', description='Public catalogue access for retailers', path='/shared')

logger = logging.getLogger(__name__)

access_request_model = shared_ns.model('AccessRequest', {
    'name': fields.String(required=True),
    'email': fields.String(required=True),
    'company': fields.String(required=True),
    'message': fields.String()
})

email_model = shared_ns.model('RetailerEmail', {
    'email': fields.String(required=True)
})

payment_status_model = shared_ns.model('PaymentStatusUpdate', {
    'status': fields.String(required=True)
})


@shared_ns.route('/<string:link>/info')
class SharedCatalogueInfo(Resource):
    def get(self, link):
        """Basic catalogue details, visible without approval"""
        catalogue = get_storage().get_catalogue_by_link(link)
        if not catalogue:
            return {'message': 'Catalogue not found'}, 404
        return {'name': catalogue['name'], 'description': catalogue['description']}, 200


@shared_ns.route('/<string:link>/request-access')
class RequestAccess(Resource):
    @shared_ns.expect(access_request_model)
    def post(self, link):
        """Ask the distributor for access to a catalogue"""
        storage = get_storage()
        catalogue = storage.get_catalogue_by_link(link)
        if not catalogue:
            return {'message': 'Catalogue not found'}, 404
        data = validate_access_request(request.get_json(silent=True) or {})
        access_request, created = access_service.request_access(storage, catalogue, data)
        return {'id': access_request['id'], 'status': access_request['status']}, 201 if created else 200


@shared_ns.route('/<string:link>/check-access')
class CheckAccess(Resource):
    @shared_ns.expect(email_model)
    def post(self, link):
        """Poll an access request; returns a bearer token once approved"""
        email = validate_email_payload(request.get_json(silent=True) or {})

        storage = get_storage()
        catalogue = storage.get_catalogue_by_link(link)
        if not catalogue:
            return {'message': 'Catalogue not found'}, 404

        result = access_service.check_access(storage, catalogue, email)
        if result is None:
            return {'message': 'Access request not found'}, 404
        return result, 200


@shared_ns.route('/<string:link>/retailer-info')
class RetailerInfo(Resource):
    @shared_access_required
    @shared_ns.doc('retailer_info', security='BearerAuth')
    def post(self, link):
        """Details the retailer gave when requesting access"""
        email = validate_email_payload(request.get_json(silent=True) or {}, required=False) or g.retailer_email
        if email != g.retailer_email:
            return {'message': 'Unauthorized'}, 403
        access_request = access_service.approved_request(get_storage(), g.catalogue, email)
        if not access_request:
            return {'message': 'Access request not found or not approved'}, 404
        return {
            'name': access_request['name'],
            'email': access_request['email'],
            'company': access_request['company']
        }, 200


@shared_ns.route('/<string:link>/view')
class SharedCatalogueView(Resource):
    @shared_access_required
    @shared_ns.doc('view_shared_catalogue', security='BearerAuth')
    def get(self, link):
        """Full catalogue with products and distributor details"""
        storage = get_storage()
        catalogue_id = g.catalogue['id']
        storage.increment_catalogue_views(catalogue_id)

        distributor = storage.get_user(g.catalogue['userId'])
        if not distributor:
            return {'message': 'Distributor not found'}, 404

        catalogue = catalogue_service.catalogue_with_products(storage, storage.get_catalogue(catalogue_id))
        logger.debug(f"Catalogue ID: {catalogue_id}, Products found: {len(catalogue['products'])}")
        return {**catalogue, 'distributor': distributor}, 200


@shared_ns.route('/<string:link>/orders')
class SharedOrders(Resource):
    @shared_access_required
    @shared_ns.doc('list_retailer_orders', security='BearerAuth')
    def get(self, link):
        """Orders the retailer placed through this catalogue"""
        return order_service.retailer_orders(get_storage(), g.catalogue, g.retailer_email), 200


@shared_ns.route('/<string:link>/orders/<string:order_id>/payment-status')
class SharedOrderPaymentStatus(Resource):
    @shared_access_required
    @shared_ns.expect(payment_status_model)
    @shared_ns.doc('update_retailer_payment_status', security='BearerAuth')
    def put(self, link, order_id):
        """Update the payment status of one of the retailer's orders"""
        data = request.get_json(silent=True) or {}
        status = validate_payment_status(data.get('status'))
        storage = get_storage()

        order = storage.get_order_by_order_id(order_id)
        if not order or order['catalogueId'] != g.catalogue['id']:
            return {'message': 'Order not found'}, 404
        if order['retailerEmail'] != g.retailer_email:
            return {'message': 'Unauthorized'}, 403

        updated = storage.update_order_payment_status(order_id, status)
        logger.info(f"Retailer updated order {order_id} payment status to {status}")
        return updated, 200
