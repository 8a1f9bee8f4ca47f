"""Create maintenance issues

Revision ID: 20261019_000002
Revises: 20261019_000001
Create Date: 2026-10-19

Adds repair issues reported on properties by owners and tenants.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000002'
down_revision: Union[str, None] = '20261019_000001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the maintenance_issues table."""
    op.create_table(
        'maintenance_issues',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('reported_by_user_id', sa.Integer(), nullable=False),
        sa.Column('assigned_to_user_id', sa.Integer(), nullable=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column(
            'priority',
            sa.Enum('Low', 'Medium', 'High', 'Emergency', name='maintenance_priority', create_constraint=True),
            nullable=False
        ),
        sa.Column(
            'status',
            sa.Enum('Pending', 'InProgress', 'Completed', 'Cancelled',
                    name='maintenance_status', create_constraint=True),
            nullable=False
        ),
        sa.Column('is_tenant_complaint', sa.Boolean(), nullable=False),
        sa.Column('cost', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('resolved_at', sa.DateTime(), nullable=True),
        sa.Column('resolution_notes', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['property_id'], ['properties.id'],
            name='fk_maintenance_issues_property_id', ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['reported_by_user_id'], ['users.id'], name='fk_maintenance_issues_reported_by_user_id'
        ),
        sa.ForeignKeyConstraint(
            ['assigned_to_user_id'], ['users.id'], name='fk_maintenance_issues_assigned_to_user_id'
        ),
        sa.CheckConstraint('cost IS NULL OR cost >= 0', name='ck_maintenance_issues_cost_non_negative'),
    )
    op.create_index('ix_maintenance_issues_property_id', 'maintenance_issues', ['property_id'])
    op.create_index('ix_maintenance_issues_reported_by_user_id', 'maintenance_issues', ['reported_by_user_id'])
    op.create_index('ix_maintenance_issues_assigned_to_user_id', 'maintenance_issues', ['assigned_to_user_id'])
    op.create_index('ix_maintenance_issues_status', 'maintenance_issues', ['status'])


def downgrade() -> None:
    """Drop the maintenance_issues table."""
    op.drop_index('ix_maintenance_issues_status', table_name='maintenance_issues')
    op.drop_index('ix_maintenance_issues_assigned_to_user_id', table_name='maintenance_issues')
    op.drop_index('ix_maintenance_issues_reported_by_user_id', table_name='maintenance_issues')
    op.drop_index('ix_maintenance_issues_property_id', table_name='maintenance_issues')
    op.drop_table('maintenance_issues')
