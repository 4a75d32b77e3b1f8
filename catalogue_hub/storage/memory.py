import copy
import itertools
import logging
import threading

from catalogue_hub.storage.base import Storage
from catalogue_hub.utils.util import utcnow, isoformat, format_money, generate_order_id

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = ('name', 'description', 'price', 'imageUrl', 'category', 'inStock')
CATALOGUE_FIELDS = ('name', 'description', 'isPublic')


def _newest_first(rows, date_key):
    return sorted(rows, key=lambda row: (row[date_key], row['id']), reverse=True)


class MemStorage(Storage):
    """Dict-backed storage for development and tests.

    Each entity type keeps its own id counter. A single lock guards every
    read-modify-write so the threaded dev server sees consistent state.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self.users = {}
        self.products = {}
        self.catalogues = {}
        self.catalogue_products = {}
        self.orders = {}
        self.access_requests = {}
        self._ids = {
            name: itertools.count(1)
            for name in ('user', 'product', 'catalogue', 'catalogue_product', 'order', 'access_request')
        }

    def _next_id(self, name):
        return next(self._ids[name])

    @staticmethod
    def _copy(row):
        return copy.deepcopy(row) if row is not None else None

    # User operations
    def get_user(self, user_id):
        with self._lock:
            return self._public_user(self.users.get(user_id))

    def get_user_by_username(self, username):
        with self._lock:
            user = next((u for u in self.users.values() if u['username'] == username), None)
            return self._copy(user)

    def get_user_by_email(self, email):
        with self._lock:
            user = next((u for u in self.users.values() if u['email'] == email), None)
            return self._public_user(user)

    def create_user(self, data):
        with self._lock:
            user_id = self._next_id('user')
            user = {
                'id': user_id,
                'username': data['username'],
                'password': data['password'],
                'email': data['email'],
                'company': data.get('company'),
                'createdAt': isoformat(utcnow())
            }
            self.users[user_id] = user
            return self._public_user(user)

    @staticmethod
    def _public_user(user):
        if user is None:
            return None
        return {key: value for key, value in user.items() if key != 'password'}

    # Product operations
    def get_products(self, user_id):
        with self._lock:
            return [self._copy(p) for p in self.products.values() if p['userId'] == user_id]

    def get_product(self, product_id):
        with self._lock:
            return self._copy(self.products.get(product_id))

    def create_product(self, data):
        with self._lock:
            product_id = self._next_id('product')
            product = {
                'id': product_id,
                'userId': data['userId'],
                'name': data['name'],
                'description': data.get('description'),
                'price': format_money(data['price']),
                'imageUrl': data.get('imageUrl'),
                'category': data.get('category'),
                'inStock': data.get('inStock', True),
                'createdAt': isoformat(utcnow())
            }
            self.products[product_id] = product
            return self._copy(product)

    def update_product(self, product_id, changes):
        with self._lock:
            product = self.products.get(product_id)
            if product is None:
                return None
            for field in PRODUCT_FIELDS:
                if field in changes:
                    product[field] = format_money(changes[field]) if field == 'price' else changes[field]
            return self._copy(product)

    def delete_product(self, product_id):
        with self._lock:
            if self.products.pop(product_id, None) is None:
                return False
            for link_id, link in list(self.catalogue_products.items()):
                if link['productId'] == product_id:
                    del self.catalogue_products[link_id]
            return True

    # Catalogue operations
    def get_catalogues(self, user_id):
        with self._lock:
            return [self._copy(c) for c in self.catalogues.values() if c['userId'] == user_id]

    def get_catalogue(self, catalogue_id):
        with self._lock:
            return self._copy(self.catalogues.get(catalogue_id))

    def get_catalogue_by_link(self, shareable_link):
        with self._lock:
            catalogue = next(
                (c for c in self.catalogues.values() if c['shareableLink'] == shareable_link), None)
            return self._copy(catalogue)

    def create_catalogue(self, data):
        with self._lock:
            catalogue_id = self._next_id('catalogue')
            catalogue = {
                'id': catalogue_id,
                'userId': data['userId'],
                'name': data['name'],
                'description': data.get('description'),
                'shareableLink': data['shareableLink'],
                'isPublic': data.get('isPublic', False),
                'views': 0,
                'createdAt': isoformat(utcnow())
            }
            self.catalogues[catalogue_id] = catalogue
            return self._copy(catalogue)

    def update_catalogue(self, catalogue_id, changes):
        with self._lock:
            catalogue = self.catalogues.get(catalogue_id)
            if catalogue is None:
                return None
            for field in CATALOGUE_FIELDS:
                if field in changes:
                    catalogue[field] = changes[field]
            return self._copy(catalogue)

    def delete_catalogue(self, catalogue_id):
        with self._lock:
            if self.catalogues.pop(catalogue_id, None) is None:
                return False
            self._unlink_products(catalogue_id)
            for request_id, request in list(self.access_requests.items()):
                if request['catalogueId'] == catalogue_id:
                    del self.access_requests[request_id]
            for order in self.orders.values():
                if order['catalogueId'] == catalogue_id:
                    order['catalogueId'] = None
            return True

    def increment_catalogue_views(self, catalogue_id):
        with self._lock:
            catalogue = self.catalogues.get(catalogue_id)
            if catalogue is not None:
                catalogue['views'] = (catalogue['views'] or 0) + 1

    # Catalogue product operations
    def _find_link(self, catalogue_id, product_id):
        return next(
            (link for link in self.catalogue_products.values()
             if link['catalogueId'] == catalogue_id and link['productId'] == product_id),
            None)

    def _unlink_products(self, catalogue_id):
        for link_id, link in list(self.catalogue_products.items()):
            if link['catalogueId'] == catalogue_id:
                del self.catalogue_products[link_id]

    def _link(self, catalogue_id, product_id):
        link = self._find_link(catalogue_id, product_id)
        if link is None:
            link_id = self._next_id('catalogue_product')
            link = {'id': link_id, 'catalogueId': catalogue_id, 'productId': product_id}
            self.catalogue_products[link_id] = link
        return link

    def _check_link_targets(self, catalogue_id, product_ids):
        if catalogue_id not in self.catalogues:
            raise KeyError(f'Catalogue {catalogue_id} does not exist')
        missing = [pid for pid in product_ids if pid not in self.products]
        if missing:
            raise KeyError(f'Products {missing} do not exist')

    def add_product_to_catalogue(self, catalogue_id, product_id):
        with self._lock:
            self._check_link_targets(catalogue_id, [product_id])
            return self._copy(self._link(catalogue_id, product_id))

    def remove_product_from_catalogue(self, catalogue_id, product_id):
        with self._lock:
            link = self._find_link(catalogue_id, product_id)
            if link is None:
                return False
            del self.catalogue_products[link['id']]
            return True

    def get_catalogue_products(self, catalogue_id):
        with self._lock:
            links = sorted(
                (link for link in self.catalogue_products.values() if link['catalogueId'] == catalogue_id),
                key=lambda link: link['id'])
            return [self._copy(self.products[link['productId']])
                    for link in links if link['productId'] in self.products]

    def add_products_to_catalogue(self, catalogue_id, product_ids):
        with self._lock:
            self._check_link_targets(catalogue_id, product_ids)
            for product_id in product_ids:
                self._link(catalogue_id, product_id)
            return self.get_catalogue_products(catalogue_id)

    def set_catalogue_products(self, catalogue_id, product_ids):
        with self._lock:
            self._check_link_targets(catalogue_id, product_ids)
            wanted = set(product_ids)
            for link_id, link in list(self.catalogue_products.items()):
                if link['catalogueId'] == catalogue_id and link['productId'] not in wanted:
                    del self.catalogue_products[link_id]
            for product_id in product_ids:
                self._link(catalogue_id, product_id)
            return self.get_catalogue_products(catalogue_id)

    # Order operations
    def get_orders(self, user_id):
        with self._lock:
            rows = [self._copy(o) for o in self.orders.values() if o['userId'] == user_id]
            return _newest_first(rows, 'orderDate')

    def get_order(self, order_pk):
        with self._lock:
            return self._copy(self.orders.get(order_pk))

    def _find_order(self, order_id):
        return next((o for o in self.orders.values() if o['orderId'] == order_id), None)

    def get_order_by_order_id(self, order_id):
        with self._lock:
            return self._copy(self._find_order(order_id))

    def create_order(self, data):
        with self._lock:
            order_id = data.get('orderId') or generate_order_id()
            while self._find_order(order_id) is not None:
                order_id = generate_order_id()
            pk = self._next_id('order')
            order = {
                'id': pk,
                'userId': data['userId'],
                'orderId': order_id,
                'catalogueId': data.get('catalogueId'),
                'retailerName': data['retailerName'],
                'retailerEmail': data['retailerEmail'],
                'retailerCompany': data.get('retailerCompany') or '',
                'items': copy.deepcopy(data['items']),
                'amount': format_money(data['amount']),
                'paymentStatus': data.get('paymentStatus') or 'pending',
                'orderDate': isoformat(data.get('orderDate') or utcnow())
            }
            self.orders[pk] = order
            return self._copy(order)

    def update_order_payment_status(self, order_id, payment_status):
        with self._lock:
            order = self._find_order(order_id)
            if order is None:
                return None
            order['paymentStatus'] = payment_status
            return self._copy(order)

    def get_orders_by_email(self, email):
        with self._lock:
            rows = [self._copy(o) for o in self.orders.values() if o['retailerEmail'] == email]
            return _newest_first(rows, 'orderDate')

    # Access request operations
    def create_access_request(self, data):
        with self._lock:
            request_id = self._next_id('access_request')
            self.access_requests[request_id] = {
                'id': request_id,
                'catalogueId': data['catalogueId'],
                'name': data['name'],
                'email': data['email'],
                'company': data['company'],
                'message': data.get('message'),
                'status': data.get('status') or 'pending',
                'requestDate': isoformat(utcnow())
            }
            return request_id

    def get_access_request(self, request_id):
        with self._lock:
            return self._copy(self.access_requests.get(request_id))

    def get_access_request_by_email(self, catalogue_id, email):
        with self._lock:
            request = next(
                (r for r in self.access_requests.values()
                 if r['catalogueId'] == catalogue_id and r['email'] == email),
                None)
            return self._copy(request)

    def get_access_requests(self, catalogue_id):
        with self._lock:
            rows = [self._copy(r) for r in self.access_requests.values() if r['catalogueId'] == catalogue_id]
            return _newest_first(rows, 'requestDate')

    def update_access_request(self, request_id, status):
        with self._lock:
            request = self.access_requests.get(request_id)
            if request is None:
                return False
            request['status'] = status
            return True
