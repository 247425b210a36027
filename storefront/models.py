"""SQLAlchemy models for the storefront application."""
from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, Text, TIMESTAMP, Numeric,
    ForeignKey, Index, CheckConstraint
)
from sqlalchemy.orm import relationship
from .database import Base


def _money(value):
    return float(value) if value is not None else None


class AdminUser(Base):
    """Admin accounts for the management area."""
    __tablename__ = 'admin_user'

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(TIMESTAMP, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {'id': self.id, 'name': self.name}

    def __repr__(self):
        return f"<AdminUser(id={self.id}, name='{self.name}')>"


class PipelineStage(Base):
    """Ordered order-fulfillment stage. The id is the stage position."""
    __tablename__ = 'pipeline'

    id = Column(Integer, primary_key=True, autoincrement=False)
    section_name = Column(String(100), unique=True, nullable=False)

    def to_dict(self):
        return {'id': self.id, 'section_name': self.section_name}

    def __repr__(self):
        return f"<PipelineStage(id={self.id}, section_name='{self.section_name}')>"


class Customer(Base):
    """Customers tracked through the order pipeline."""
    __tablename__ = 'customers'

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    contact_info = Column(Text)
    notes = Column(Text)
    created_at = Column(TIMESTAMP, default=datetime.utcnow, nullable=False)
    updated_at = Column(TIMESTAMP, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships (assignment rows are removed by the FK cascade)
    assignment = relationship(
        'CustomerPipeline', back_populates='customer', uselist=False,
        cascade='all, delete-orphan', passive_deletes=True
    )

    def to_dict(self, stage=None):
        return {
            'id': self.id,
            'name': self.name,
            'contact_info': self.contact_info,
            'notes': self.notes,
            'pipeline_id': stage.id if stage is not None else None,
            'section_name': stage.section_name if stage is not None else None,
        }

    def __repr__(self):
        return f"<Customer(id={self.id}, name='{self.name}')>"


class CustomerPipeline(Base):
    """Current stage of a customer. At most one row per customer."""
    __tablename__ = 'customer_pipeline'

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey('customers.id', ondelete='CASCADE'), nullable=False, unique=True)
    pipeline_id = Column(Integer, ForeignKey('pipeline.id'), nullable=False, index=True)

    # Relationships
    customer = relationship('Customer', back_populates='assignment')
    stage = relationship('PipelineStage')

    def __repr__(self):
        return f"<CustomerPipeline(customer_id={self.customer_id}, pipeline_id={self.pipeline_id})>"


class PremadeListing(Base):
    """Ready-made items with a fixed price."""
    __tablename__ = 'pre_made_listings'

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    image_link = Column(String(1000))
    price = Column(Numeric(10, 2), nullable=False)
    date_listed = Column(TIMESTAMP, default=datetime.utcnow, nullable=False)

    # Indexes
    __table_args__ = (
        Index('idx_premade_date_listed', 'date_listed', 'id'),
        Index('idx_premade_price', 'price', 'id'),
        CheckConstraint('price >= 0', name='check_premade_price'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'image_link': self.image_link,
            'price': _money(self.price),
            'date_listed': self.date_listed.isoformat() if self.date_listed else None,
        }

    def __repr__(self):
        return f"<PremadeListing(id={self.id}, title='{self.title}', price={self.price})>"


class CustomListing(Base):
    """Made-to-order items advertised with a starting price."""
    __tablename__ = 'custom_listings'

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    image_link = Column(String(1000))
    starting_price = Column(Numeric(10, 2), nullable=False)

    __table_args__ = (
        CheckConstraint('starting_price >= 0', name='check_custom_starting_price'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'image_link': self.image_link,
            'starting_price': _money(self.starting_price),
        }

    def __repr__(self):
        return f"<CustomListing(id={self.id}, title='{self.title}')>"
