from catalogue_hub import db


class CatalogueProduct(db.Model):
    __tablename__ = 'catalogue_products'
    __table_args__ = (
        db.UniqueConstraint('catalogue_id', 'product_id', name='uq_catalogue_product'),
    )
    id = db.Column(db.Integer, primary_key=True)
    catalogue_id = db.Column(db.Integer, db.ForeignKey('catalogues.id'), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey('products.id'), nullable=False)

    def __repr__(self):
        return f'<CatalogueProduct catalogue={self.catalogue_id} product={self.product_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'catalogueId': self.catalogue_id,
            'productId': self.product_id
        }
