# catalogue_hub/routes/__init__.py
from .auth_routes import auth_ns
from .product_routes import product_ns
from .catalogue_routes import catalogue_ns
from .access_request_routes import access_request_ns
from .shared_routes import shared_ns
from .order_routes import order_ns
from .dashboard_routes import dashboard_ns


def register_namespaces(api):
    api.add_namespace(auth_ns)
    api.add_namespace(product_ns)
    api.add_namespace(catalogue_ns)
    api.add_namespace(access_request_ns)
    api.add_namespace(shared_ns)
    api.add_namespace(order_ns)
    api.add_namespace(dashboard_ns)
