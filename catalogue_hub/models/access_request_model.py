import enum
from catalogue_hub import db
from catalogue_hub.utils.util import utcnow, isoformat


class AccessStatus(enum.Enum):
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'


class AccessRequest(db.Model):
    __tablename__ = 'access_requests'
    id = db.Column(db.Integer, primary_key=True)
    catalogue_id = db.Column(db.Integer, db.ForeignKey('catalogues.id'), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(200), nullable=False)
    company = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text)
    status = db.Column(db.String(20), nullable=False, default=AccessStatus.PENDING.value)
    request_date = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f'<AccessRequest {self.email} -> catalogue {self.catalogue_id} ({self.status})>'

    def to_dict(self):
        return {
            'id': self.id,
            'catalogueId': self.catalogue_id,
            'name': self.name,
            'email': self.email,
            'company': self.company,
            'message': self.message,
            'status': self.status,
            'requestDate': isoformat(self.request_date)
        }
