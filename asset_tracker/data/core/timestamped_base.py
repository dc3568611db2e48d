from asset_tracker import db
from datetime import datetime


class TimestampedBase(db.Model):
    """Abstract base class for mutable entities with creation/update stamps"""

    __abstract__ = True

    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


def isoformat(value):
    """Serialize a date/datetime column for JSON responses"""
    return value.isoformat() if value is not None else None
