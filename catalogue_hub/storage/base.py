from abc import ABC, abstractmethod


class Storage(ABC):
    """Persistence contract shared by the in-memory and database backends.

    Every read returns plain dicts using the JSON field names of the API
    (``userId``, ``shareableLink`` ...), or ``None`` when nothing matches.
    Writes take dicts with the same keys. Prices and amounts come back as
    two-place decimal strings and timestamps as ISO-8601 strings.
    """

    # User operations
    @abstractmethod
    def get_user(self, user_id):
        ...

    @abstractmethod
    def get_user_by_username(self, username):
        """Look up a user for login; the result carries the password hash."""

    @abstractmethod
    def get_user_by_email(self, email):
        ...

    @abstractmethod
    def create_user(self, data):
        """Persist a user; ``data['password']`` must already be hashed."""

    # Product operations
    @abstractmethod
    def get_products(self, user_id):
        ...

    @abstractmethod
    def get_product(self, product_id):
        ...

    @abstractmethod
    def create_product(self, data):
        ...

    @abstractmethod
    def update_product(self, product_id, changes):
        ...

    @abstractmethod
    def delete_product(self, product_id):
        """Delete a product and its catalogue links. Returns True if it existed."""

    # Catalogue operations
    @abstractmethod
    def get_catalogues(self, user_id):
        ...

    @abstractmethod
    def get_catalogue(self, catalogue_id):
        ...

    @abstractmethod
    def get_catalogue_by_link(self, shareable_link):
        ...

    @abstractmethod
    def create_catalogue(self, data):
        ...

    @abstractmethod
    def update_catalogue(self, catalogue_id, changes):
        ...

    @abstractmethod
    def delete_catalogue(self, catalogue_id):
        """Delete a catalogue with its product links and access requests.

        Orders placed through it are kept, detached from the catalogue.
        """

    @abstractmethod
    def increment_catalogue_views(self, catalogue_id):
        ...

    # Catalogue product operations
    @abstractmethod
    def add_product_to_catalogue(self, catalogue_id, product_id):
        ...

    @abstractmethod
    def remove_product_from_catalogue(self, catalogue_id, product_id):
        ...

    @abstractmethod
    def get_catalogue_products(self, catalogue_id):
        ...

    @abstractmethod
    def add_products_to_catalogue(self, catalogue_id, product_ids):
        """Link every product id in one atomic step; existing links are kept."""

    @abstractmethod
    def set_catalogue_products(self, catalogue_id, product_ids):
        """Make the catalogue contain exactly ``product_ids`` in one atomic step."""

    # Order operations
    @abstractmethod
    def get_orders(self, user_id):
        """Orders received by a distributor, newest first."""

    @abstractmethod
    def get_order(self, order_pk):
        ...

    @abstractmethod
    def get_order_by_order_id(self, order_id):
        ...

    @abstractmethod
    def create_order(self, data):
        """Persist an order, filling ``orderId`` and ``paymentStatus`` when absent."""

    @abstractmethod
    def update_order_payment_status(self, order_id, payment_status):
        ...

    @abstractmethod
    def get_orders_by_email(self, email):
        ...

    # Access request operations
    @abstractmethod
    def create_access_request(self, data):
        """Persist an access request and return its id."""

    @abstractmethod
    def get_access_request(self, request_id):
        ...

    @abstractmethod
    def get_access_request_by_email(self, catalogue_id, email):
        ...

    @abstractmethod
    def get_access_requests(self, catalogue_id):
        """Requests for a catalogue, newest first."""

    @abstractmethod
    def update_access_request(self, request_id, status):
        ...
