# catalogue_hub/utils/access_token.py
"""Signed bearer tokens handed to approved retailers.

The token is a JWT signed with ``JWT_SECRET_KEY``. Its claims carry the
catalogue id and the retailer email, so neither can be altered by the
client without invalidating the signature.
"""
import logging
from datetime import timedelta

from flask import current_app
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import ExpiredSignatureError, PyJWTError

logger = logging.getLogger(__name__)

SHARED_SCOPE = 'shared-catalogue'


class AccessTokenError(Exception):
    """Raised for any token that must not grant access."""


class AccessTokenExpired(AccessTokenError):
    pass


def create_shared_access_token(catalogue_id, email, expires_delta=None):
    if expires_delta is None:
        expires_delta = timedelta(days=current_app.config.get('SHARED_ACCESS_TOKEN_DAYS', 7))
    return create_access_token(
        identity=email,
        additional_claims={'scope': SHARED_SCOPE, 'catalogueId': catalogue_id, 'email': email},
        expires_delta=expires_delta
    )


def decode_shared_access_token(token):
    """Return ``{'catalogueId', 'email', 'exp'}`` with ``exp`` in epoch milliseconds."""
    try:
        claims = decode_token(token)
    except ExpiredSignatureError as e:
        raise AccessTokenExpired('Token expired') from e
    except (PyJWTError, JWTExtendedException) as e:
        logger.debug(f"Rejected shared access token: {e}")
        raise AccessTokenError('Invalid token') from e

    if claims.get('scope') != SHARED_SCOPE:
        raise AccessTokenError('Invalid token')
    catalogue_id = claims.get('catalogueId')
    email = claims.get('email') or claims.get('sub')
    if not isinstance(catalogue_id, int) or not email or 'exp' not in claims:
        raise AccessTokenError('Invalid token format')
    return {'catalogueId': catalogue_id, 'email': email, 'exp': claims['exp'] * 1000}


def bearer_token(headers):
    auth_header = headers.get('Authorization', '')
    if not auth_header.startswith('Bearer '):
        return None
    return auth_header[len('Bearer '):].strip() or None
