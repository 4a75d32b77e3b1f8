from .user_model import User
from .product_model import Product
from .catalogue_model import Catalogue
from .relationship_model import CatalogueProduct
from .order_model import Order, PaymentStatus
from .access_request_model import AccessRequest, AccessStatus

__all__ = [
    'User', 'Product', 'Catalogue', 'CatalogueProduct',
    'Order', 'PaymentStatus', 'AccessRequest', 'AccessStatus',
]
