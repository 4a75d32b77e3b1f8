import logging
from functools import wraps
from flask import request, g, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity, get_jwt
from catalogue_hub.storage import get_storage
from catalogue_hub.utils.access_token import (
    SHARED_SCOPE, AccessTokenError, AccessTokenExpired, bearer_token, decode_shared_access_token
)

logger = logging.getLogger(__name__)


def token_required(f):
    """Resolve the signed-in distributor into ``g.user``."""
    @wraps(f)
    @jwt_required()
    def decorated(*args, **kwargs):
        if get_jwt().get('scope') == SHARED_SCOPE:
            return {'message': 'Not authenticated'}, 401
        try:
            user_id = int(get_jwt_identity())
        except (TypeError, ValueError):
            return {'message': 'Not authenticated'}, 401
        current_user = get_storage().get_user(user_id)
        if not current_user:
            return {'message': 'User not found'}, 401
        g.user = current_user
        return f(*args, **kwargs)
    return decorated


def shared_access_required(f):
    """Check the retailer bearer token against the catalogue in the URL.

    On success ``g.catalogue`` holds the catalogue and ``g.retailer_email``
    the email the token was issued to.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        token = bearer_token(request.headers)
        if not token:
            return {'message': 'Unauthorized - Missing or invalid authorization header'}, 401
        try:
            token_data = decode_shared_access_token(token)
        except AccessTokenExpired:
            return {'message': 'Token expired'}, 401
        except AccessTokenError as e:
            return {'message': str(e)}, 401

        catalogue = get_storage().get_catalogue_by_link(kwargs.get('link'))
        if not catalogue:
            return {'message': 'Catalogue not found'}, 404
        if catalogue['id'] != token_data['catalogueId']:
            logger.warning(
                f"Token catalogueId {token_data['catalogueId']} doesn't match catalogue id {catalogue['id']}")
            return {'message': 'Invalid token for this catalogue'}, 401

        g.catalogue = catalogue
        g.retailer_email = token_data['email']
        return f(*args, **kwargs)
    return decorated


def setup_auth_middleware(jwt):
    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({'message': 'Not authenticated', 'error': reason}), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return jsonify({'message': 'Invalid token', 'error': reason}), 401

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify({'message': 'Token expired'}), 401
