"""Initial storefront schema and pipeline stages

Revision ID: 001
Revises: 
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None

STAGES = [
    (1, 'Intake'),
    (2, 'Payment'),
    (3, 'Production'),
    (4, 'Shipping'),
    (5, 'Delivery'),
    (6, 'Completed'),
    (7, 'Cancelled'),
]


def upgrade():
    op.create_table(
        'admin_user',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(), nullable=False, server_default=sa.func.now()),
    )

    pipeline = op.create_table(
        'pipeline',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column('section_name', sa.String(100), nullable=False, unique=True),
    )

    op.create_table(
        'customers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('contact_info', sa.Text()),
        sa.Column('notes', sa.Text()),
        sa.Column('created_at', sa.TIMESTAMP(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.TIMESTAMP(), nullable=False, server_default=sa.func.now()),
    )

    # One row per customer; deleting the customer removes it
    op.create_table(
        'customer_pipeline',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id', ondelete='CASCADE'),
                  nullable=False, unique=True),
        sa.Column('pipeline_id', sa.Integer(), sa.ForeignKey('pipeline.id'), nullable=False),
    )
    op.create_index('ix_customer_pipeline_pipeline_id', 'customer_pipeline', ['pipeline_id'])

    op.create_table(
        'pre_made_listings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('image_link', sa.String(1000)),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('date_listed', sa.TIMESTAMP(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('price >= 0', name='check_premade_price'),
    )
    op.create_index('idx_premade_date_listed', 'pre_made_listings', ['date_listed', 'id'])
    op.create_index('idx_premade_price', 'pre_made_listings', ['price', 'id'])

    op.create_table(
        'custom_listings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('image_link', sa.String(1000)),
        sa.Column('starting_price', sa.Numeric(10, 2), nullable=False),
        sa.CheckConstraint('starting_price >= 0', name='check_custom_starting_price'),
    )

    op.bulk_insert(pipeline, [{'id': stage_id, 'section_name': name} for stage_id, name in STAGES])


def downgrade():
    op.drop_table('custom_listings')
    op.drop_index('idx_premade_price', table_name='pre_made_listings')
    op.drop_index('idx_premade_date_listed', table_name='pre_made_listings')
    op.drop_table('pre_made_listings')
    op.drop_index('ix_customer_pipeline_pipeline_id', table_name='customer_pipeline')
    op.drop_table('customer_pipeline')
    op.drop_table('customers')
    op.drop_table('pipeline')
    op.drop_table('admin_user')
