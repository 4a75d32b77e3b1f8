import enum
from catalogue_hub import db
from catalogue_hub.utils.util import utcnow, isoformat, format_money


class PaymentStatus(enum.Enum):
    PENDING = 'pending'
    APPROVED = 'approved'
    PAID = 'paid'
    REJECTED = 'rejected'
    CANCELLED = 'cancelled'


class Order(db.Model):
    __tablename__ = 'orders'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    order_id = db.Column(db.String(20), unique=True, nullable=False)
    catalogue_id = db.Column(db.Integer, db.ForeignKey('catalogues.id'), nullable=True)
    retailer_name = db.Column(db.String(200), nullable=False)
    retailer_email = db.Column(db.String(200), nullable=False, index=True)
    retailer_company = db.Column(db.String(200), default='')
    items = db.Column(db.JSON, nullable=False)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    payment_status = db.Column(db.String(20), nullable=False, default=PaymentStatus.PENDING.value)
    order_date = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f'<Order {self.order_id} for User {self.user_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'orderId': self.order_id,
            'catalogueId': self.catalogue_id,
            'retailerName': self.retailer_name,
            'retailerEmail': self.retailer_email,
            'retailerCompany': self.retailer_company or '',
            'items': self.items,
            'amount': format_money(self.amount),
            'paymentStatus': self.payment_status,
            'orderDate': isoformat(self.order_date)
        }
