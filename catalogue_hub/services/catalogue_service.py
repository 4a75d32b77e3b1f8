# Catalogue service module for business logic
import logging

from catalogue_hub.utils.util import generate_shareable_link

logger = logging.getLogger(__name__)


def owned_product_ids(storage, user_id, product_ids):
    """Keep only the ids of products that belong to ``user_id``, in request order."""
    owned = {product['id'] for product in storage.get_products(user_id)}
    kept = [pid for pid in product_ids if pid in owned]
    skipped = [pid for pid in product_ids if pid not in owned]
    if skipped:
        logger.warning(f"Skipping products {skipped}: not owned by user {user_id}")
    return kept


def new_shareable_link(storage):
    link = generate_shareable_link()
    while storage.get_catalogue_by_link(link) is not None:
        link = generate_shareable_link()
    return link


def create_catalogue(storage, user_id, data, product_ids=None):
    catalogue = storage.create_catalogue({
        **data,
        'userId': user_id,
        'shareableLink': new_shareable_link(storage)
    })
    if product_ids:
        product_ids = owned_product_ids(storage, user_id, product_ids)
        try:
            storage.add_products_to_catalogue(catalogue['id'], product_ids)
        except Exception:
            # Do not leave a half-built catalogue behind
            storage.delete_catalogue(catalogue['id'])
            raise
        logger.info(f"Added {len(product_ids)} products to catalogue ID {catalogue['id']}")
    return catalogue


def update_catalogue(storage, catalogue, changes, product_ids=None):
    updated = storage.update_catalogue(catalogue['id'], changes) if changes else catalogue
    if product_ids is not None:
        product_ids = owned_product_ids(storage, catalogue['userId'], product_ids)
        storage.set_catalogue_products(catalogue['id'], product_ids)
        logger.info(f"Catalogue ID {catalogue['id']} now holds products {product_ids}")
    return updated


def catalogue_with_products(storage, catalogue):
    return {**catalogue, 'products': storage.get_catalogue_products(catalogue['id'])}
