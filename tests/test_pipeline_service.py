"""
Tests for the customer pipeline service: stage assignment, grouping and adjacency.
"""
import pytest
from sqlalchemy.exc import OperationalError

from storefront.errors import NotFoundError, ValidationError, StoreError
from storefront.models import Customer, CustomerPipeline, PipelineStage
from storefront.services import pipeline


def _stage_of(db, customer_id):
    for customer, stage in pipeline.list_customers_with_stage(db):
        if customer.id == customer_id:
            return stage.id if stage else None
    raise AssertionError(f"customer {customer_id} not listed")


class TestListing:

    def test_stages_in_position_order(self, db):
        stages = pipeline.list_stages(db)
        assert [s.id for s in stages] == [1, 2, 3, 4, 5, 6, 7]
        assert stages[0].section_name == 'Intake'
        assert stages[-1].section_name == 'Cancelled'

    def test_unassigned_customers_are_listed(self, db):
        customer, stage = pipeline.create_customer(db, 'Bo')
        assert stage is None
        rows = pipeline.list_customers_with_stage(db)
        assert [(c.name, s) for c, s in rows] == [('Bo', None)]

    def test_every_current_stage_exists(self, db):
        pipeline.create_customer(db, 'A', initial_stage_id=1)
        pipeline.create_customer(db, 'B')
        pipeline.create_customer(db, 'C', initial_stage_id=7)
        stage_ids = {s.id for s in pipeline.list_stages(db)}
        for _, stage in pipeline.list_customers_with_stage(db):
            assert stage is None or stage.id in stage_ids

    def test_group_by_stage(self, db):
        pipeline.create_customer(db, 'A', initial_stage_id=1)
        pipeline.create_customer(db, 'B', initial_stage_id=1)
        pipeline.create_customer(db, 'C')
        grouped = pipeline.group_by_stage(pipeline.list_customers_with_stage(db))
        assert set(grouped) == {'1', 'unassigned'}
        assert [c['name'] for c in grouped['1']] == ['A', 'B']
        assert grouped['unassigned'][0]['pipeline_id'] is None
        assert grouped['1'][0]['section_name'] == 'Intake'


class TestCreate:

    def test_name_required(self, db):
        with pytest.raises(ValidationError):
            pipeline.create_customer(db, '')
        with pytest.raises(ValidationError):
            pipeline.create_customer(db, '   ')
        with pytest.raises(ValidationError):
            pipeline.create_customer(db, None)
        assert db.query(Customer).count() == 0

    def test_with_initial_stage(self, db):
        customer, stage = pipeline.create_customer(db, 'Ana', contact_info='ana@example.com', initial_stage_id=1)
        assert customer.contact_info == 'ana@example.com'
        assert stage.section_name == 'Intake'
        assert _stage_of(db, customer.id) == 1

    def test_string_stage_id_accepted(self, db):
        customer, stage = pipeline.create_customer(db, 'Ana', initial_stage_id='3')
        assert stage.id == 3

    def test_unknown_stage_creates_nothing(self, db):
        with pytest.raises(NotFoundError):
            pipeline.create_customer(db, 'Ana', initial_stage_id=99)
        assert db.query(Customer).count() == 0
        assert db.query(CustomerPipeline).count() == 0

    def test_failed_stage_insert_drops_customer(self, db, monkeypatch):
        original_add = db.add

        def add_failing_on_assignment(obj):
            if isinstance(obj, CustomerPipeline):
                raise OperationalError('INSERT', {}, Exception('disk I/O error'))
            original_add(obj)

        monkeypatch.setattr(db, 'add', add_failing_on_assignment)
        with pytest.raises(StoreError) as excinfo:
            pipeline.create_customer(db, 'Ana', initial_stage_id=1)
        monkeypatch.undo()

        assert excinfo.value.message == 'Error creating customer'
        assert db.query(Customer).count() == 0
        assert db.query(CustomerPipeline).count() == 0

    def test_contact_info_must_be_text(self, db):
        with pytest.raises(ValidationError):
            pipeline.create_customer(db, 'Ana', contact_info={'email': 'ana@example.com'})
        assert db.query(Customer).count() == 0


class TestUpdate:

    def test_full_replace(self, db):
        customer, _ = pipeline.create_customer(db, 'Ana', contact_info='old', initial_stage_id=2)
        updated, stage = pipeline.update_customer(db, customer.id, 'Ana B', notes='wants blue')
        assert updated.name == 'Ana B'
        assert updated.contact_info is None
        assert updated.notes == 'wants blue'
        assert stage.id == 2

    def test_unknown_id(self, db):
        with pytest.raises(NotFoundError):
            pipeline.update_customer(db, 999, 'Nobody')

    def test_name_required(self, db):
        customer, _ = pipeline.create_customer(db, 'Ana')
        with pytest.raises(ValidationError):
            pipeline.update_customer(db, customer.id, '')
        db.expire_all()
        assert db.get(Customer, customer.id).name == 'Ana'

    def test_notes_must_be_text(self, db):
        customer, _ = pipeline.create_customer(db, 'Ana', contact_info='555-0100')
        with pytest.raises(ValidationError):
            pipeline.update_customer(db, customer.id, 'Ana', contact_info='555-0100', notes=['call back'])
        db.expire_all()
        assert db.get(Customer, customer.id).notes is None


class TestMove:

    def test_move_replaces_stage(self, db):
        customer, _ = pipeline.create_customer(db, 'Ana', initial_stage_id=1)
        moved, stage = pipeline.move_customer(db, customer.id, 2)
        assert moved.id == customer.id
        assert stage.section_name == 'Payment'
        grouped = pipeline.group_by_stage(pipeline.list_customers_with_stage(db))
        assert [c['name'] for c in grouped['2']] == ['Ana']
        assert '1' not in grouped

    def test_never_two_stages(self, db):
        customer, _ = pipeline.create_customer(db, 'Ana', initial_stage_id=1)
        for target in (3, 5, 5, 2):
            pipeline.move_customer(db, customer.id, target)
            rows = db.query(CustomerPipeline).filter(CustomerPipeline.customer_id == customer.id).all()
            assert [r.pipeline_id for r in rows] == [target]

    def test_move_unassigned_customer(self, db):
        customer, _ = pipeline.create_customer(db, 'Ana')
        pipeline.move_customer(db, customer.id, 4)
        assert _stage_of(db, customer.id) == 4

    def test_missing_target(self, db):
        customer, _ = pipeline.create_customer(db, 'Ana', initial_stage_id=1)
        with pytest.raises(ValidationError):
            pipeline.move_customer(db, customer.id, None)
        assert _stage_of(db, customer.id) == 1

    def test_unknown_customer(self, db):
        with pytest.raises(NotFoundError):
            pipeline.move_customer(db, 999, 1)

    def test_unknown_stage_keeps_current(self, db):
        customer, _ = pipeline.create_customer(db, 'Ana', initial_stage_id=1)
        with pytest.raises(NotFoundError):
            pipeline.move_customer(db, customer.id, 42)
        assert _stage_of(db, customer.id) == 1

    def test_failure_mid_move_rolls_back(self, db, monkeypatch):
        customer, _ = pipeline.create_customer(db, 'Ana', initial_stage_id=1)

        def failing_add(obj):
            raise OperationalError('INSERT', {}, Exception('disk I/O error'))

        monkeypatch.setattr(db, 'add', failing_add)
        with pytest.raises(StoreError) as excinfo:
            pipeline.move_customer(db, customer.id, 2)
        monkeypatch.undo()

        assert excinfo.value.message == 'Error moving customer'
        assert 'disk' not in excinfo.value.message
        assert _stage_of(db, customer.id) == 1


class TestDelete:

    def test_delete_cascades_assignment(self, db):
        customer, _ = pipeline.create_customer(db, 'Ana', initial_stage_id=1)
        keep, _ = pipeline.create_customer(db, 'Bo', initial_stage_id=1)
        customer_id, keep_id = customer.id, keep.id
        pipeline.delete_customer(db, customer_id)

        ids = [c.id for c, _ in pipeline.list_customers_with_stage(db)]
        assert ids == [keep_id]
        assert db.query(CustomerPipeline).filter(CustomerPipeline.customer_id == customer_id).count() == 0
        assert db.query(CustomerPipeline).count() == 1

    def test_unknown_id(self, db):
        with pytest.raises(NotFoundError):
            pipeline.delete_customer(db, 999)


class TestAdjacency:

    def test_neighbors(self, db):
        stages = pipeline.list_stages(db)
        previous, following = pipeline.adjacent_stages(stages, 3)
        assert (previous.id, following.id) == (2, 4)

    def test_ends(self, db):
        stages = pipeline.list_stages(db)
        assert pipeline.adjacent_stages(stages, 1)[0] is None
        assert pipeline.adjacent_stages(stages, 7)[1] is None

    def test_unassigned_has_no_neighbors(self, db):
        stages = pipeline.list_stages(db)
        assert pipeline.adjacent_stages(stages, None) == (None, None)
        assert pipeline.adjacent_stages(stages, 99) == (None, None)

    def test_order_follows_position_not_input_order(self):
        stages = [PipelineStage(id=5, section_name='E'), PipelineStage(id=1, section_name='A'),
                  PipelineStage(id=3, section_name='C')]
        previous, following = pipeline.adjacent_stages(stages, 3)
        assert (previous.id, following.id) == (1, 5)

    def test_board(self, db):
        pipeline.create_customer(db, 'Ana', initial_stage_id=1)
        pipeline.create_customer(db, 'Bo')
        columns = pipeline.build_board(db)
        assert [c['id'] for c in columns] == [1, 2, 3, 4, 5, 6, 7, None]

        ana = columns[0]['customers'][0]
        assert ana['can_move_left'] is False
        assert ana['can_move_right'] is True
        assert ana['next_stage_id'] == 2

        bo = columns[-1]['customers'][0]
        assert bo['can_move_left'] is False
        assert bo['can_move_right'] is False


def test_scenario_intake_to_payment(db):
    """Ana starts in Intake and is moved to Payment."""
    ana, _ = pipeline.create_customer(db, 'Ana', initial_stage_id=1)
    pipeline.move_customer(db, ana.id, 2)

    grouped = pipeline.group_by_stage(pipeline.list_customers_with_stage(db))
    assert [c['name'] for c in grouped.get('2', [])] == ['Ana']
    assert 'Ana' not in [c['name'] for c in grouped.get('1', [])]
