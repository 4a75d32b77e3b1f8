import logging
from flask import request, g
from flask_restx import Namespace, Resource, fields
from catalogue_hub.services.access_service import decide_access_request, AccessConflict
from catalogue_hub.storage import get_storage
from catalogue_hub.utils.auth_middleware import token_required
from catalogue_hub.validators import validate_access_decision

access_request_ns = Namespace('access-requests', description='Retailer access request decisions',
                              path='/access-requests')

logger = logging.getLogger(__name__)

decision_model = access_request_ns.model('AccessDecision', {
    'status': fields.String(required=True, enum=['approved', 'rejected'])
})


@access_request_ns.route('/<int:request_id>')
class AccessRequestResource(Resource):
    @token_required
    @access_request_ns.expect(decision_model)
    @access_request_ns.doc('decide_access_request', security='BearerAuth')
    def put(self, request_id):
        """Approve or reject a pending access request"""
        data = request.get_json(silent=True) or {}
        status = validate_access_decision(data.get('status'))
        storage = get_storage()

        access_request = storage.get_access_request(request_id)
        if not access_request:
            return {'message': 'Access request not found'}, 404

        catalogue = storage.get_catalogue(access_request['catalogueId'])
        if not catalogue:
            return {'message': 'Catalogue not found'}, 404
        if catalogue['userId'] != g.user['id']:
            return {'message': 'Unauthorized'}, 403

        try:
            return decide_access_request(storage, access_request, status), 200
        except AccessConflict as e:
            return {'message': str(e)}, 409
