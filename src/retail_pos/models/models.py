from flask_sqlalchemy import SQLAlchemy
from datetime import datetime
from sqlalchemy import Numeric

db = SQLAlchemy()

class PriceRecord(db.Model):
    __tablename__ = 'prices'

    id = db.Column(db.Integer, primary_key=True)
    product_name = db.Column(db.String(100), nullable=False, index=True)
    price = db.Column(Numeric(10, 2), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'product_name': self.product_name,
            'price': float(self.price),
            'date': self.date.isoformat() if self.date else None
        }

class ChecklistSheet(db.Model):
    __tablename__ = 'checklist_sheet'

    id = db.Column(db.Integer, primary_key=True)
    checklist_sheet_no = db.Column(db.String(50), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    items = db.relationship('ChecklistItem', backref='sheet', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'checklist_sheet_no': self.checklist_sheet_no,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }

class ChecklistItem(db.Model):
    __tablename__ = 'checklist'

    id = db.Column(db.Integer, primary_key=True)
    product_name = db.Column(db.String(100), nullable=False)
    price = db.Column(Numeric(10, 2), nullable=False)
    date = db.Column(db.Date, nullable=False)
    quantity = db.Column(db.Integer, default=1)
    checklist_sheet_id = db.Column(db.Integer, db.ForeignKey('checklist_sheet.id'))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'product_name': self.product_name,
            'price': float(self.price),
            'date': self.date.isoformat() if self.date else None,
            'quantity': self.quantity,
            'checklist_sheet_id': self.checklist_sheet_id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }
