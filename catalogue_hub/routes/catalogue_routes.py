import logging
from flask import request, g
from flask_restx import Namespace, Resource, fields
from catalogue_hub.services import catalogue_service
from catalogue_hub.storage import get_storage
from catalogue_hub.utils.auth_middleware import token_required
from catalogue_hub.validators import validate_catalogue, parse_id_list, ACCESS_DECISIONS

catalogue_ns = Namespace('catalogues', description='Operations related to catalogues', path='/catalogues')

logger = logging.getLogger(__name__)

# Responses are rendered through catalogue_model; catalogue_input only documents
# the request body, which validate_catalogue() checks.
catalogue_model = catalogue_ns.model('Catalogue', {
    'id': fields.Integer(readonly=True),
    'userId': fields.Integer(readonly=True),
    'name': fields.String(required=True),
    'description': fields.String(),
    'shareableLink': fields.String(readonly=True),
    'isPublic': fields.Boolean(default=False),
    'views': fields.Integer(readonly=True),
    'createdAt': fields.String(readonly=True, description='ISO-8601 UTC timestamp')
})

catalogue_input = catalogue_ns.clone('CatalogueInput', catalogue_model, {
    'productIds': fields.List(fields.Integer, description='Products to place in the catalogue')
})


def load_owned_catalogue(catalogue_id):
    catalogue = get_storage().get_catalogue(catalogue_id)
    if not catalogue:
        return None, ({'message': 'Catalogue not found'}, 404)
    if catalogue['userId'] != g.user['id']:
        logger.warning(f"User {g.user['id']} denied access to catalogue {catalogue_id}")
        return None, ({'message': 'Unauthorized'}, 403)
    return catalogue, None


def requested_product_ids(payload):
    if payload.get('productIds') is None:
        return None
    return parse_id_list(payload['productIds'])


@catalogue_ns.route('')
class CatalogueList(Resource):
    @token_required
    @catalogue_ns.doc('list_catalogues', security='BearerAuth')
    @catalogue_ns.marshal_list_with(catalogue_model)
    def get(self):
        """List the current distributor's catalogues"""
        return get_storage().get_catalogues(g.user['id']), 200

    @token_required
    @catalogue_ns.expect(catalogue_input)
    @catalogue_ns.doc('create_catalogue', security='BearerAuth')
    def post(self):
        """Create a catalogue with a fresh shareable link"""
        payload = request.get_json(silent=True) or {}
        data = validate_catalogue(payload)
        product_ids = requested_product_ids(payload)
        try:
            catalogue = catalogue_service.create_catalogue(get_storage(), g.user['id'], data, product_ids)
        except Exception as e:
            logger.error(f"Failed to create catalogue for user {g.user['id']}: {str(e)}")
            return {'message': 'Failed to create catalogue', 'error': str(e)}, 500
        logger.info(f"Catalogue created: ID {catalogue['id']} ({catalogue['shareableLink']})")
        return catalogue, 201


@catalogue_ns.route('/<int:catalogue_id>')
class CatalogueResource(Resource):
    @token_required
    @catalogue_ns.doc('get_catalogue', security='BearerAuth')
    def get(self, catalogue_id):
        """Get a catalogue together with its products"""
        catalogue, error = load_owned_catalogue(catalogue_id)
        if error:
            return error
        return catalogue_service.catalogue_with_products(get_storage(), catalogue), 200

    @token_required
    @catalogue_ns.expect(catalogue_input)
    @catalogue_ns.doc('update_catalogue', security='BearerAuth')
    def put(self, catalogue_id):
        """Update a catalogue; productIds replaces its product set"""
        catalogue, error = load_owned_catalogue(catalogue_id)
        if error:
            return error
        payload = request.get_json(silent=True) or {}
        # Ownership and link are fixed at creation
        changes = validate_catalogue(
            {k: v for k, v in payload.items() if k not in ('userId', 'shareableLink', 'productIds')},
            partial=True)
        product_ids = requested_product_ids(payload)
        try:
            updated = catalogue_service.update_catalogue(get_storage(), catalogue, changes, product_ids)
        except Exception as e:
            logger.error(f"Failed to update catalogue {catalogue_id}: {str(e)}")
            return {'message': 'Failed to update catalogue', 'error': str(e)}, 500
        return updated, 200

    @token_required
    @catalogue_ns.doc('delete_catalogue', security='BearerAuth')
    def delete(self, catalogue_id):
        """Delete a catalogue"""
        catalogue, error = load_owned_catalogue(catalogue_id)
        if error:
            return error
        get_storage().delete_catalogue(catalogue_id)
        logger.info(f"Catalogue deleted: ID {catalogue_id}")
        return {'message': 'Catalogue deleted'}, 200


@catalogue_ns.route('/<int:catalogue_id>/access-requests')
class CatalogueAccessRequests(Resource):
    @token_required
    @catalogue_ns.doc('list_access_requests', security='BearerAuth',
                      params={'status': 'Optional filter: pending, approved or rejected'})
    def get(self, catalogue_id):
        """List access requests for a catalogue, newest first"""
        catalogue, error = load_owned_catalogue(catalogue_id)
        if error:
            return error
        requests = get_storage().get_access_requests(catalogue_id)
        status = request.args.get('status')
        if status:
            if status not in ('pending',) + ACCESS_DECISIONS:
                return {'message': f'Invalid status filter: {status}'}, 400
            requests = [r for r in requests if r['status'] == status]
        return requests, 200
