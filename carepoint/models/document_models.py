# /carepoint/models/document_models.py
from datetime import datetime
from carepoint.extensions import db


class Document(db.Model):
    """A schemaless entity document, addressed by (collection, id)."""
    __tablename__ = 'documents'

    id = db.Column(db.String(64), primary_key=True)
    collection = db.Column(db.String(64), nullable=False, index=True)
    data = db.Column(db.JSON, nullable=False, default=dict)

    # Optimistic concurrency token, bumped on every write.
    version = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {**(self.data or {}), 'id': self.id, 'version': self.version}
