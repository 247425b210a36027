"""Customer pipeline: stage listing, grouping, and stage assignment.

A customer has zero or one current stage. Moving a customer deletes the
existing assignment row and inserts the new one inside a single transaction,
so a failure leaves the previous assignment intact and never two.
"""
import logging
from typing import List, Optional, Tuple

from ..database import transaction, store_errors
from ..errors import NotFoundError, ValidationError
from ..models import Customer, CustomerPipeline, PipelineStage
from . import require_text, optional_text, parse_id

logger = logging.getLogger(__name__)

UNASSIGNED = 'unassigned'


def list_stages(db) -> List[PipelineStage]:
    """All stages in position order."""
    with store_errors(db, 'fetching pipeline stages'):
        return db.query(PipelineStage).order_by(PipelineStage.id.asc()).all()


def _customers_with_stage_query(db):
    return (
        db.query(Customer, PipelineStage)
        .outerjoin(CustomerPipeline, CustomerPipeline.customer_id == Customer.id)
        .outerjoin(PipelineStage, PipelineStage.id == CustomerPipeline.pipeline_id)
    )


def list_customers_with_stage(db) -> List[Tuple[Customer, Optional[PipelineStage]]]:
    """Every customer with its current stage, or None when unassigned."""
    with store_errors(db, 'fetching customers'):
        return _customers_with_stage_query(db).order_by(Customer.id.asc()).all()


def get_customer_with_stage(db, customer_id: int) -> Tuple[Customer, Optional[PipelineStage]]:
    with store_errors(db, 'fetching customer'):
        row = _customers_with_stage_query(db).filter(Customer.id == customer_id).first()
    if row is None:
        raise NotFoundError('Customer not found')
    return row


def group_by_stage(rows) -> dict:
    """Customer dicts keyed by stage id (as a string) or 'unassigned'."""
    grouped = {}
    for customer, stage in rows:
        key = str(stage.id) if stage is not None else UNASSIGNED
        grouped.setdefault(key, []).append(customer.to_dict(stage))
    return grouped


def adjacent_stages(stages, stage_id) -> Tuple[Optional[PipelineStage], Optional[PipelineStage]]:
    """Previous and next stage by ascending position.

    Unassigned customers (stage_id None) and unknown stage ids have no
    neighbors, so both move directions are disabled for them.
    """
    if stage_id is None:
        return None, None
    ordered = sorted(stages, key=lambda s: s.id)
    for index, stage in enumerate(ordered):
        if stage.id == stage_id:
            previous = ordered[index - 1] if index > 0 else None
            following = ordered[index + 1] if index < len(ordered) - 1 else None
            return previous, following
    return None, None


def build_board(db) -> list:
    """Kanban columns: one per stage in order, then the unassigned column."""
    stages = list_stages(db)
    rows = list_customers_with_stage(db)
    grouped = group_by_stage(rows)

    columns = [
        {'id': stage.id, 'section_name': stage.section_name, 'customers': grouped.get(str(stage.id), [])}
        for stage in stages
    ]
    columns.append({'id': None, 'section_name': 'Unassigned', 'customers': grouped.get(UNASSIGNED, [])})

    for column in columns:
        for card in column['customers']:
            previous, following = adjacent_stages(stages, card['pipeline_id'])
            card['previous_stage_id'] = previous.id if previous else None
            card['next_stage_id'] = following.id if following else None
            card['can_move_left'] = previous is not None
            card['can_move_right'] = following is not None
    return columns


def _get_stage(db, stage_id: int) -> PipelineStage:
    stage = db.get(PipelineStage, stage_id)
    if stage is None:
        raise NotFoundError('Pipeline stage not found')
    return stage


def create_customer(db, name, contact_info=None, initial_stage_id=None):
    """Insert a customer, optionally placing it in a stage in the same transaction."""
    name = require_text(name, 'Name is required')
    stage_id = None
    if initial_stage_id not in (None, ''):
        stage_id = parse_id(initial_stage_id, 'Pipeline ID')
    contact_info = optional_text(contact_info, 'Contact info')

    with transaction(db, 'creating customer'):
        stage = _get_stage(db, stage_id) if stage_id is not None else None
        customer = Customer(name=name, contact_info=contact_info)
        db.add(customer)
        db.flush()
        if stage is not None:
            db.add(CustomerPipeline(customer_id=customer.id, pipeline_id=stage.id))

    logger.info(f"Created customer {customer.id} in stage {stage_id or UNASSIGNED}")
    return get_customer_with_stage(db, customer.id)


def update_customer(db, customer_id: int, name, contact_info=None, notes=None):
    """Replace name, contact info and notes."""
    name = require_text(name, 'Name is required')
    contact_info = optional_text(contact_info, 'Contact info')
    notes = optional_text(notes, 'Notes')

    with transaction(db, 'updating customer'):
        customer = db.get(Customer, customer_id)
        if customer is None:
            raise NotFoundError('Customer not found')
        customer.name = name
        customer.contact_info = contact_info
        customer.notes = notes

    return get_customer_with_stage(db, customer_id)


def move_customer(db, customer_id: int, target_stage_id):
    """Reassign a customer to `target_stage_id`, replacing any current stage."""
    if target_stage_id in (None, ''):
        raise ValidationError('Pipeline ID is required')
    stage_id = parse_id(target_stage_id, 'Pipeline ID')

    with transaction(db, 'moving customer'):
        if db.get(Customer, customer_id) is None:
            raise NotFoundError('Customer not found')
        _get_stage(db, stage_id)

        db.query(CustomerPipeline).filter(
            CustomerPipeline.customer_id == customer_id
        ).delete(synchronize_session=False)
        db.flush()
        db.add(CustomerPipeline(customer_id=customer_id, pipeline_id=stage_id))

    # Identity map may still hold the replaced assignment
    db.expire_all()
    logger.info(f"Moved customer {customer_id} to stage {stage_id}")
    return get_customer_with_stage(db, customer_id)


def delete_customer(db, customer_id: int) -> None:
    """Delete a customer. Its assignment row goes with it via ON DELETE CASCADE."""
    with transaction(db, 'deleting customer'):
        deleted = db.query(Customer).filter(Customer.id == customer_id).delete(synchronize_session=False)
        if deleted == 0:
            raise NotFoundError('Customer not found')
    db.expire_all()
    logger.info(f"Deleted customer {customer_id}")
