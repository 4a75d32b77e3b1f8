from catalogue_hub import db
from catalogue_hub.utils.util import utcnow, isoformat, format_money


class Product(db.Model):
    __tablename__ = 'products'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    image_url = db.Column(db.String(500))
    category = db.Column(db.String(100))
    in_stock = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f'<Product {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'name': self.name,
            'description': self.description,
            'price': format_money(self.price),
            'imageUrl': self.image_url,
            'category': self.category,
            'inStock': self.in_stock,
            'createdAt': isoformat(self.created_at)
        }
