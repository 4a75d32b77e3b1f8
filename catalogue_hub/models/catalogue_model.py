from catalogue_hub import db
from catalogue_hub.utils.util import utcnow, isoformat


class Catalogue(db.Model):
    __tablename__ = 'catalogues'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    shareable_link = db.Column(db.String(64), unique=True, nullable=False)
    is_public = db.Column(db.Boolean, default=False)
    views = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f'<Catalogue {self.name} ({self.shareable_link})>'

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'name': self.name,
            'description': self.description,
            'shareableLink': self.shareable_link,
            'isPublic': self.is_public,
            'views': self.views or 0,
            'createdAt': isoformat(self.created_at)
        }
