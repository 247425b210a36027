"""Public catalog routes, plus admin writes for pre-made listings."""
from flask import Blueprint, jsonify, request

from ..services import catalog
from . import get_session, json_body, admin_required

bp = Blueprint('listings', __name__)


@bp.route('/premade', methods=['GET'])
def list_premade():
    """Query params: sort=newest|price (default newest)"""
    listings = catalog.list_premade(get_session(), request.args.get('sort'))
    return jsonify({'success': True, 'listings': [listing.to_dict() for listing in listings]})


@bp.route('/premade', methods=['POST'])
@admin_required
def create_premade():
    payload = json_body()
    listing = catalog.create_premade(
        get_session(),
        payload.get('title'),
        payload.get('price'),
        description=payload.get('description'),
        image_link=payload.get('image_link'),
    )
    return jsonify({'success': True, 'listing': listing.to_dict()}), 201


@bp.route('/premade/<int:listing_id>', methods=['PUT'])
@admin_required
def update_premade(listing_id):
    payload = json_body()
    listing = catalog.update_premade(
        get_session(),
        listing_id,
        payload.get('title'),
        payload.get('price'),
        description=payload.get('description'),
        image_link=payload.get('image_link'),
    )
    return jsonify({'success': True, 'listing': listing.to_dict()})


@bp.route('/premade/<int:listing_id>', methods=['DELETE'])
@admin_required
def delete_premade(listing_id):
    catalog.delete_premade(get_session(), listing_id)
    return jsonify({'success': True, 'message': 'Listing deleted successfully'})


# Custom listings are read-only over HTTP
@bp.route('/custom', methods=['GET'])
def list_custom():
    listings = catalog.list_custom(get_session())
    return jsonify({'success': True, 'listings': [listing.to_dict() for listing in listings]})
