"""
Storefront - catalog and customer pipeline backend for a custom-goods shop.

This package contains the server components including:
- SQLAlchemy models (AdminUser, PipelineStage, Customer, PremadeListing, CustomListing)
- Authentication helpers (JWT, password hashing)
- Database connection and transaction management
- Pipeline and catalog services
- Flask application and JSON routes
- Alembic migrations
"""

__version__ = '0.1.0'
