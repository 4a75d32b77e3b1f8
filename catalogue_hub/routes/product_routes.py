import logging
from flask import request, g
from flask_restx import Namespace, Resource, fields
from catalogue_hub.storage import get_storage
from catalogue_hub.utils.auth_middleware import token_required
from catalogue_hub.validators import validate_product

product_ns = Namespace('products', description='Operations related to products', path='/products')

logger = logging.getLogger(__name__)

# Swagger model. Used to render responses; request bodies are checked by
# catalogue_hub.validators, the expect() declarations only document them.
product_model = product_ns.model('Product', {
    'id': fields.Integer(readonly=True),
    'userId': fields.Integer(readonly=True),
    'name': fields.String(required=True),
    'description': fields.String(),
    'price': fields.String(required=True, description='Decimal price, e.g. "12.50"'),
    'imageUrl': fields.String(),
    'category': fields.String(),
    'inStock': fields.Boolean(default=True),
    'createdAt': fields.String(readonly=True, description='ISO-8601 UTC timestamp')
})


def load_owned_product(product_id):
    """Return ``(product, None)`` or ``(None, error_response)``."""
    product = get_storage().get_product(product_id)
    if not product:
        return None, ({'message': 'Product not found'}, 404)
    if product['userId'] != g.user['id']:
        logger.warning(f"User {g.user['id']} denied access to product {product_id}")
        return None, ({'message': 'Unauthorized'}, 403)
    return product, None


@product_ns.route('')
class ProductList(Resource):
    @token_required
    @product_ns.doc('list_products', security='BearerAuth')
    @product_ns.marshal_list_with(product_model)
    def get(self):
        """List the current distributor's products"""
        products = get_storage().get_products(g.user['id'])
        logger.debug(f"Retrieved {len(products)} products for user {g.user['id']}")
        return products, 200

    @token_required
    @product_ns.expect(product_model)
    @product_ns.doc('create_product', security='BearerAuth')
    @product_ns.marshal_with(product_model, code=201)
    def post(self):
        """Create a new product"""
        data = validate_product(request.get_json(silent=True) or {})
        product = get_storage().create_product({**data, 'userId': g.user['id']})
        logger.info(f"Product created successfully: ID {product['id']}")
        return product, 201


@product_ns.route('/<int:product_id>')
class ProductResource(Resource):
    @token_required
    @product_ns.doc('get_product', security='BearerAuth')
    def get(self, product_id):
        """Get a product by ID"""
        product, error = load_owned_product(product_id)
        if error:
            return error
        return product, 200

    @token_required
    @product_ns.expect(product_model)
    @product_ns.doc('update_product', security='BearerAuth')
    def put(self, product_id):
        """Update a product"""
        product, error = load_owned_product(product_id)
        if error:
            return error
        changes = validate_product(request.get_json(silent=True) or {}, partial=True)
        updated = get_storage().update_product(product_id, changes)
        logger.info(f"Product updated successfully: ID {product_id}")
        return updated, 200

    @token_required
    @product_ns.doc('delete_product', security='BearerAuth')
    def delete(self, product_id):
        """Delete a product"""
        product, error = load_owned_product(product_id)
        if error:
            return error
        get_storage().delete_product(product_id)
        logger.info(f"Product deleted successfully: ID {product_id}")
        return {'message': 'Product deleted'}, 200
