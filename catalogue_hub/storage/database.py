import logging
from contextlib import contextmanager

from catalogue_hub import db
from catalogue_hub.models import User, Product, Catalogue, CatalogueProduct, Order, AccessRequest
from catalogue_hub.storage.base import Storage
from catalogue_hub.utils.util import generate_order_id, to_decimal, utcnow

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = {
    'name': 'name',
    'description': 'description',
    'price': 'price',
    'imageUrl': 'image_url',
    'category': 'category',
    'inStock': 'in_stock',
}
CATALOGUE_COLUMNS = {
    'name': 'name',
    'description': 'description',
    'isPublic': 'is_public',
}


def _as_dict(row):
    return row.to_dict() if row is not None else None


class DatabaseStorage(Storage):
    """Storage backed by the Flask-SQLAlchemy session of the current app."""

    @contextmanager
    def _transaction(self):
        try:
            yield db.session
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    # User operations
    def get_user(self, user_id):
        return _as_dict(db.session.get(User, user_id))

    def get_user_by_username(self, username):
        user = User.query.filter_by(username=username).first()
        return user.to_dict(include_password=True) if user else None

    def get_user_by_email(self, email):
        return _as_dict(User.query.filter_by(email=email).first())

    def create_user(self, data):
        user = User(
            username=data['username'],
            password=data['password'],
            email=data['email'],
            company=data.get('company')
        )
        with self._transaction() as session:
            session.add(user)
        return user.to_dict()

    # Product operations
    def get_products(self, user_id):
        products = Product.query.filter_by(user_id=user_id).order_by(Product.id).all()
        return [p.to_dict() for p in products]

    def get_product(self, product_id):
        return _as_dict(db.session.get(Product, product_id))

    def create_product(self, data):
        product = Product(
            user_id=data['userId'],
            name=data['name'],
            description=data.get('description'),
            price=to_decimal(data['price']),
            image_url=data.get('imageUrl'),
            category=data.get('category'),
            in_stock=data.get('inStock', True)
        )
        with self._transaction() as session:
            session.add(product)
        return product.to_dict()

    def update_product(self, product_id, changes):
        product = db.session.get(Product, product_id)
        if product is None:
            return None
        with self._transaction():
            for field, column in PRODUCT_COLUMNS.items():
                if field in changes:
                    value = to_decimal(changes[field]) if field == 'price' else changes[field]
                    setattr(product, column, value)
        return product.to_dict()

    def delete_product(self, product_id):
        product = db.session.get(Product, product_id)
        if product is None:
            return False
        with self._transaction() as session:
            CatalogueProduct.query.filter_by(product_id=product_id).delete()
            session.delete(product)
        return True

    # Catalogue operations
    def get_catalogues(self, user_id):
        catalogues = Catalogue.query.filter_by(user_id=user_id).order_by(Catalogue.id).all()
        return [c.to_dict() for c in catalogues]

    def get_catalogue(self, catalogue_id):
        return _as_dict(db.session.get(Catalogue, catalogue_id))

    def get_catalogue_by_link(self, shareable_link):
        return _as_dict(Catalogue.query.filter_by(shareable_link=shareable_link).first())

    def create_catalogue(self, data):
        catalogue = Catalogue(
            user_id=data['userId'],
            name=data['name'],
            description=data.get('description'),
            shareable_link=data['shareableLink'],
            is_public=data.get('isPublic', False),
            views=0
        )
        with self._transaction() as session:
            session.add(catalogue)
        return catalogue.to_dict()

    def update_catalogue(self, catalogue_id, changes):
        catalogue = db.session.get(Catalogue, catalogue_id)
        if catalogue is None:
            return None
        with self._transaction():
            for field, column in CATALOGUE_COLUMNS.items():
                if field in changes:
                    setattr(catalogue, column, changes[field])
        return catalogue.to_dict()

    def delete_catalogue(self, catalogue_id):
        catalogue = db.session.get(Catalogue, catalogue_id)
        if catalogue is None:
            return False
        with self._transaction() as session:
            CatalogueProduct.query.filter_by(catalogue_id=catalogue_id).delete()
            AccessRequest.query.filter_by(catalogue_id=catalogue_id).delete()
            Order.query.filter_by(catalogue_id=catalogue_id).update({'catalogue_id': None})
            session.delete(catalogue)
        return True

    def increment_catalogue_views(self, catalogue_id):
        # Single UPDATE so concurrent viewers are not lost
        with self._transaction():
            Catalogue.query.filter_by(id=catalogue_id).update(
                {Catalogue.views: db.func.coalesce(Catalogue.views, 0) + 1},
                synchronize_session=False)

    # Catalogue product operations
    def _check_link_targets(self, catalogue_id, product_ids):
        if db.session.get(Catalogue, catalogue_id) is None:
            raise KeyError(f'Catalogue {catalogue_id} does not exist')
        if product_ids:
            found = {pid for (pid,) in db.session.query(Product.id).filter(Product.id.in_(product_ids))}
            missing = [pid for pid in product_ids if pid not in found]
            if missing:
                raise KeyError(f'Products {missing} do not exist')

    def _linked_ids(self, catalogue_id):
        rows = db.session.query(CatalogueProduct.product_id).filter_by(catalogue_id=catalogue_id)
        return {product_id for (product_id,) in rows}

    def add_product_to_catalogue(self, catalogue_id, product_id):
        self._check_link_targets(catalogue_id, [product_id])
        link = CatalogueProduct.query.filter_by(catalogue_id=catalogue_id, product_id=product_id).first()
        if link is None:
            link = CatalogueProduct(catalogue_id=catalogue_id, product_id=product_id)
            with self._transaction() as session:
                session.add(link)
        return link.to_dict()

    def remove_product_from_catalogue(self, catalogue_id, product_id):
        with self._transaction():
            removed = CatalogueProduct.query.filter_by(
                catalogue_id=catalogue_id, product_id=product_id).delete()
        return removed > 0

    def get_catalogue_products(self, catalogue_id):
        products = (
            Product.query
            .join(CatalogueProduct, CatalogueProduct.product_id == Product.id)
            .filter(CatalogueProduct.catalogue_id == catalogue_id)
            .order_by(CatalogueProduct.id)
            .all()
        )
        return [p.to_dict() for p in products]

    def add_products_to_catalogue(self, catalogue_id, product_ids):
        self._check_link_targets(catalogue_id, product_ids)
        existing = self._linked_ids(catalogue_id)
        with self._transaction() as session:
            for product_id in dict.fromkeys(product_ids):
                if product_id not in existing:
                    session.add(CatalogueProduct(catalogue_id=catalogue_id, product_id=product_id))
        return self.get_catalogue_products(catalogue_id)

    def set_catalogue_products(self, catalogue_id, product_ids):
        self._check_link_targets(catalogue_id, product_ids)
        wanted = set(product_ids)
        existing = self._linked_ids(catalogue_id)
        with self._transaction() as session:
            stale = existing - wanted
            if stale:
                CatalogueProduct.query.filter(
                    CatalogueProduct.catalogue_id == catalogue_id,
                    CatalogueProduct.product_id.in_(stale)
                ).delete(synchronize_session=False)
            for product_id in dict.fromkeys(product_ids):
                if product_id not in existing:
                    session.add(CatalogueProduct(catalogue_id=catalogue_id, product_id=product_id))
        return self.get_catalogue_products(catalogue_id)

    # Order operations
    def get_orders(self, user_id):
        orders = (
            Order.query.filter_by(user_id=user_id)
            .order_by(Order.order_date.desc(), Order.id.desc())
            .all()
        )
        return [o.to_dict() for o in orders]

    def get_order(self, order_pk):
        return _as_dict(db.session.get(Order, order_pk))

    def get_order_by_order_id(self, order_id):
        return _as_dict(Order.query.filter_by(order_id=order_id).first())

    def create_order(self, data):
        order_id = data.get('orderId') or generate_order_id()
        while Order.query.filter_by(order_id=order_id).first() is not None:
            order_id = generate_order_id()
        order = Order(
            user_id=data['userId'],
            order_id=order_id,
            catalogue_id=data.get('catalogueId'),
            retailer_name=data['retailerName'],
            retailer_email=data['retailerEmail'],
            retailer_company=data.get('retailerCompany') or '',
            items=data['items'],
            amount=to_decimal(data['amount']),
            payment_status=data.get('paymentStatus') or 'pending',
            order_date=data.get('orderDate') or utcnow()
        )
        with self._transaction() as session:
            session.add(order)
        return order.to_dict()

    def update_order_payment_status(self, order_id, payment_status):
        order = Order.query.filter_by(order_id=order_id).first()
        if order is None:
            return None
        with self._transaction():
            order.payment_status = payment_status
        return order.to_dict()

    def get_orders_by_email(self, email):
        orders = (
            Order.query.filter_by(retailer_email=email)
            .order_by(Order.order_date.desc(), Order.id.desc())
            .all()
        )
        return [o.to_dict() for o in orders]

    # Access request operations
    def create_access_request(self, data):
        access_request = AccessRequest(
            catalogue_id=data['catalogueId'],
            name=data['name'],
            email=data['email'],
            company=data['company'],
            message=data.get('message'),
            status=data.get('status') or 'pending',
            request_date=utcnow()
        )
        with self._transaction() as session:
            session.add(access_request)
        return access_request.id

    def get_access_request(self, request_id):
        return _as_dict(db.session.get(AccessRequest, request_id))

    def get_access_request_by_email(self, catalogue_id, email):
        return _as_dict(AccessRequest.query.filter_by(catalogue_id=catalogue_id, email=email).first())

    def get_access_requests(self, catalogue_id):
        requests = (
            AccessRequest.query.filter_by(catalogue_id=catalogue_id)
            .order_by(AccessRequest.request_date.desc(), AccessRequest.id.desc())
            .all()
        )
        return [r.to_dict() for r in requests]

    def update_access_request(self, request_id, status):
        with self._transaction():
            updated = AccessRequest.query.filter_by(id=request_id).update({'status': status})
        return updated > 0
