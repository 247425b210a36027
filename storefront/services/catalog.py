"""Catalog of pre-made and custom listings. The two kinds are stored and managed independently."""
import logging

from ..database import transaction, store_errors
from ..errors import NotFoundError
from ..models import PremadeListing, CustomListing
from . import require_text, optional_text, parse_price

logger = logging.getLogger(__name__)

# sort option -> ORDER BY clause; anything else falls back to 'newest'
PREMADE_ORDERINGS = {
    'newest': (PremadeListing.date_listed.desc(), PremadeListing.id.desc()),
    'price': (PremadeListing.price.asc(), PremadeListing.id.asc()),
}


def list_premade(db, sort=None):
    ordering = PREMADE_ORDERINGS.get(sort, PREMADE_ORDERINGS['newest'])
    with store_errors(db, 'fetching listings'):
        return db.query(PremadeListing).order_by(*ordering).all()


def _premade_fields(title, description, image_link, price):
    # Validation runs before the store is touched
    return {
        'title': require_text(title, 'Title and price are required'),
        'price': parse_price(price, 'Title and price are required'),
        'description': optional_text(description, 'Description'),
        'image_link': optional_text(image_link, 'Image link'),
    }


def create_premade(db, title, price, description=None, image_link=None) -> PremadeListing:
    fields = _premade_fields(title, description, image_link, price)
    with transaction(db, 'creating listing'):
        listing = PremadeListing(**fields)
        db.add(listing)
    logger.info(f"Created premade listing {listing.id}")
    return listing


def update_premade(db, listing_id: int, title, price, description=None, image_link=None) -> PremadeListing:
    fields = _premade_fields(title, description, image_link, price)
    with transaction(db, 'updating listing'):
        listing = db.get(PremadeListing, listing_id)
        if listing is None:
            raise NotFoundError('Listing not found')
        for key, value in fields.items():
            setattr(listing, key, value)
    return listing


def delete_premade(db, listing_id: int) -> None:
    with transaction(db, 'deleting listing'):
        deleted = db.query(PremadeListing).filter(PremadeListing.id == listing_id).delete(synchronize_session=False)
        if deleted == 0:
            raise NotFoundError('Listing not found')
    logger.info(f"Deleted premade listing {listing_id}")


def list_custom(db):
    with store_errors(db, 'fetching custom listings'):
        return db.query(CustomListing).order_by(CustomListing.id.asc()).all()


def _custom_fields(title, description, image_link, starting_price):
    return {
        'title': require_text(title, 'Title and starting price are required'),
        'starting_price': parse_price(starting_price, 'Title and starting price are required'),
        'description': optional_text(description, 'Description'),
        'image_link': optional_text(image_link, 'Image link'),
    }


def create_custom(db, title, starting_price, description=None, image_link=None) -> CustomListing:
    fields = _custom_fields(title, description, image_link, starting_price)
    with transaction(db, 'creating custom listing'):
        listing = CustomListing(**fields)
        db.add(listing)
    logger.info(f"Created custom listing {listing.id}")
    return listing


def update_custom(db, listing_id: int, title, starting_price, description=None, image_link=None) -> CustomListing:
    fields = _custom_fields(title, description, image_link, starting_price)
    with transaction(db, 'updating custom listing'):
        listing = db.get(CustomListing, listing_id)
        if listing is None:
            raise NotFoundError('Listing not found')
        for key, value in fields.items():
            setattr(listing, key, value)
    return listing


def delete_custom(db, listing_id: int) -> None:
    with transaction(db, 'deleting custom listing'):
        deleted = db.query(CustomListing).filter(CustomListing.id == listing_id).delete(synchronize_session=False)
        if deleted == 0:
            raise NotFoundError('Listing not found')
    logger.info(f"Deleted custom listing {listing_id}")
