"""Customer and pipeline routes for the admin board."""
from flask import Blueprint, jsonify

from ..services import pipeline
from . import get_session, json_body, admin_required

bp = Blueprint('customers', __name__)


@bp.route('', methods=['GET'])
@admin_required
def list_customers():
    """All customers, flat and grouped by stage id ('unassigned' for none)."""
    rows = pipeline.list_customers_with_stage(get_session())
    return jsonify({
        'success': True,
        'customers': [customer.to_dict(stage) for customer, stage in rows],
        'customersByStage': pipeline.group_by_stage(rows),
    })


@bp.route('/pipeline', methods=['GET'])
@admin_required
def list_stages():
    stages = pipeline.list_stages(get_session())
    return jsonify({'success': True, 'stages': [stage.to_dict() for stage in stages]})


@bp.route('/board', methods=['GET'])
@admin_required
def board():
    """Stage columns with move-left/right neighbors for each customer card."""
    return jsonify({'success': True, 'columns': pipeline.build_board(get_session())})


@bp.route('', methods=['POST'])
@admin_required
def create_customer():
    payload = json_body()
    customer, stage = pipeline.create_customer(
        get_session(),
        payload.get('name'),
        contact_info=payload.get('contact_info'),
        initial_stage_id=payload.get('pipeline_id'),
    )
    return jsonify({'success': True, 'customer': customer.to_dict(stage)}), 201


@bp.route('/<int:customer_id>', methods=['PUT'])
@admin_required
def update_customer(customer_id):
    payload = json_body()
    customer, stage = pipeline.update_customer(
        get_session(),
        customer_id,
        payload.get('name'),
        contact_info=payload.get('contact_info'),
        notes=payload.get('notes'),
    )
    return jsonify({'success': True, 'customer': customer.to_dict(stage)})


@bp.route('/<int:customer_id>/pipeline', methods=['PUT'])
@admin_required
def move_customer(customer_id):
    payload = json_body()
    customer, stage = pipeline.move_customer(get_session(), customer_id, payload.get('pipeline_id'))
    return jsonify({'success': True, 'customer': customer.to_dict(stage)})


@bp.route('/<int:customer_id>', methods=['DELETE'])
@admin_required
def delete_customer(customer_id):
    pipeline.delete_customer(get_session(), customer_id)
    return jsonify({'success': True, 'message': 'Customer deleted successfully'})
