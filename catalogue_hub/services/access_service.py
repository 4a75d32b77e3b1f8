# Access request service module: the per (catalogue, email) approval flow
import logging

from catalogue_hub.models import AccessStatus
from catalogue_hub.utils.access_token import create_shared_access_token

logger = logging.getLogger(__name__)


class AccessConflict(Exception):
    """The access request has already been decided."""


def request_access(storage, catalogue, data):
    """Create a pending request, or return the existing one for this email.

    Returns ``(access_request, created)``.
    """
    existing = storage.get_access_request_by_email(catalogue['id'], data['email'])
    if existing:
        logger.info(f"Access request {existing['id']} already exists for catalogue {catalogue['id']}")
        return existing, False
    request_id = storage.create_access_request({
        'catalogueId': catalogue['id'],
        'name': data['name'],
        'email': data['email'],
        'company': data['company'],
        'message': data.get('message') or '',
        'status': AccessStatus.PENDING.value
    })
    logger.info(f"Created access request {request_id} for catalogue {catalogue['id']}")
    return storage.get_access_request(request_id), True


def check_access(storage, catalogue, email):
    """Return the check-access payload, or None when no request exists."""
    access_request = storage.get_access_request_by_email(catalogue['id'], email)
    if not access_request:
        return None
    if access_request['status'] != AccessStatus.APPROVED.value:
        return {'granted': False, 'status': access_request['status']}
    access_token = create_shared_access_token(catalogue['id'], email)
    logger.info(f"Issued shared access token for catalogue {catalogue['id']}")
    return {'granted': True, 'accessToken': access_token}


def decide_access_request(storage, access_request, status):
    if access_request['status'] != AccessStatus.PENDING.value:
        raise AccessConflict(f"Access request already {access_request['status']}")
    storage.update_access_request(access_request['id'], status)
    logger.info(f"Access request {access_request['id']} {status}")
    return {'id': access_request['id'], 'status': status}


def approved_request(storage, catalogue, email):
    access_request = storage.get_access_request_by_email(catalogue['id'], email)
    if not access_request or access_request['status'] != AccessStatus.APPROVED.value:
        return None
    return access_request
