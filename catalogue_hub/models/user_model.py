from catalogue_hub import db
from catalogue_hub.utils.util import utcnow, isoformat


class User(db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    password = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    company = db.Column(db.String(200))
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    products = db.relationship('Product', backref='owner', lazy=True)
    catalogues = db.relationship('Catalogue', backref='owner', lazy=True)
    orders = db.relationship('Order', backref='distributor', lazy=True)

    def __repr__(self):
        return f'<User {self.username}>'

    def to_dict(self, include_password=False):
        data = {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'company': self.company,
            'createdAt': isoformat(self.created_at)
        }
        if include_password:
            data['password'] = self.password
        return data
