"""Create rental tables

Revision ID: 20261019_000001
Revises: None
Create Date: 2026-10-19

Creates users, properties, property images, rental requests, bookings,
payments, tenants and notifications.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all rental tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column(
            'role',
            sa.Enum('Landlord', 'User', 'Admin', name='user_role', create_constraint=True),
            nullable=False
        ),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'properties',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('bedrooms', sa.Integer(), nullable=False),
        sa.Column(
            'status',
            sa.Enum('Available', 'Occupied', 'UnderMaintenance', 'Unavailable',
                    name='property_status', create_constraint=True),
            nullable=False
        ),
        sa.Column(
            'renting_type',
            sa.Enum('Daily', 'Monthly', name='renting_type', create_constraint=True),
            nullable=False
        ),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], name='fk_properties_owner_id'),
        sa.CheckConstraint('price > 0', name='ck_properties_price_positive'),
    )
    op.create_index('ix_properties_owner_id', 'properties', ['owner_id'])
    op.create_index('ix_properties_status', 'properties', ['status'])

    op.create_table(
        'property_images',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('url', sa.String(length=500), nullable=False),
        sa.Column('is_cover', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['property_id'], ['properties.id'],
            name='fk_property_images_property_id', ondelete='CASCADE'
        ),
    )
    op.create_index('ix_property_images_property_id', 'property_images', ['property_id'])

    op.create_table(
        'rental_requests',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('proposed_start_date', sa.Date(), nullable=False),
        sa.Column('lease_duration_months', sa.Integer(), nullable=False),
        sa.Column('proposed_end_date', sa.Date(), nullable=False),
        sa.Column('number_of_guests', sa.Integer(), nullable=False),
        sa.Column('proposed_monthly_rent', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('total_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column(
            'status',
            sa.Enum('Pending', 'Approved', 'Rejected', 'Cancelled',
                    name='rental_request_status', create_constraint=True),
            nullable=False
        ),
        sa.Column('response_date', sa.DateTime(), nullable=True),
        sa.Column('landlord_response', sa.Text(), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['property_id'], ['properties.id'],
            name='fk_rental_requests_property_id', ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_rental_requests_user_id'),
    )
    op.create_index('ix_rental_requests_property_id', 'rental_requests', ['property_id'])
    op.create_index('ix_rental_requests_user_id', 'rental_requests', ['user_id'])
    op.create_index('ix_rental_requests_status', 'rental_requests', ['status'])
    op.create_index('ix_rental_requests_proposed_end_date', 'rental_requests', ['proposed_end_date'])

    op.create_table(
        'bookings',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('number_of_guests', sa.Integer(), nullable=False),
        sa.Column('special_requests', sa.Text(), nullable=True),
        sa.Column('total_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('payment_status', sa.String(length=50), nullable=False),
        sa.Column(
            'status',
            sa.Enum('Upcoming', 'Active', 'Completed', 'Cancelled',
                    name='booking_status', create_constraint=True),
            nullable=False
        ),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['property_id'], ['properties.id'],
            name='fk_bookings_property_id', ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_bookings_user_id'),
    )
    op.create_index('ix_bookings_property_id', 'bookings', ['property_id'])
    op.create_index('ix_bookings_user_id', 'bookings', ['user_id'])
    op.create_index('ix_bookings_start_date', 'bookings', ['start_date'])
    op.create_index('ix_bookings_end_date', 'bookings', ['end_date'])
    op.create_index('ix_bookings_status', 'bookings', ['status'])

    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('booking_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column(
            'payment_type',
            sa.Enum('BookingPayment', 'Refund', name='payment_type', create_constraint=True),
            nullable=False
        ),
        sa.Column(
            'status',
            sa.Enum('Pending', 'Completed', 'Failed', name='payment_status', create_constraint=True),
            nullable=False
        ),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['booking_id'], ['bookings.id'],
            name='fk_payments_booking_id', ondelete='CASCADE'
        ),
    )
    op.create_index('ix_payments_booking_id', 'payments', ['booking_id'])

    op.create_table(
        'tenants',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('rental_request_id', sa.Integer(), nullable=True),
        sa.Column('lease_start_date', sa.Date(), nullable=False),
        sa.Column('lease_end_date', sa.Date(), nullable=True),
        sa.Column('monthly_rent', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column(
            'status',
            sa.Enum('Active', 'LeaseEnded', name='tenant_status', create_constraint=True),
            nullable=False
        ),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_tenants_user_id', ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], name='fk_tenants_property_id'),
        sa.ForeignKeyConstraint(
            ['rental_request_id'], ['rental_requests.id'], name='fk_tenants_rental_request_id'
        ),
        sa.UniqueConstraint('rental_request_id', name='uq_tenants_rental_request_id'),
    )
    op.create_index('ix_tenants_user_id', 'tenants', ['user_id'])
    op.create_index('ix_tenants_property_id', 'tenants', ['property_id'])
    op.create_index('ix_tenants_status', 'tenants', ['status'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('reference_id', sa.Integer(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_notifications_user_id', ondelete='CASCADE'
        ),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])


def downgrade() -> None:
    """Drop all rental tables."""
    op.drop_index('ix_notifications_user_id', table_name='notifications')
    op.drop_table('notifications')
    op.drop_index('ix_tenants_status', table_name='tenants')
    op.drop_index('ix_tenants_property_id', table_name='tenants')
    op.drop_index('ix_tenants_user_id', table_name='tenants')
    op.drop_table('tenants')
    op.drop_index('ix_payments_booking_id', table_name='payments')
    op.drop_table('payments')
    op.drop_index('ix_bookings_status', table_name='bookings')
    op.drop_index('ix_bookings_end_date', table_name='bookings')
    op.drop_index('ix_bookings_start_date', table_name='bookings')
    op.drop_index('ix_bookings_user_id', table_name='bookings')
    op.drop_index('ix_bookings_property_id', table_name='bookings')
    op.drop_table('bookings')
    op.drop_index('ix_rental_requests_proposed_end_date', table_name='rental_requests')
    op.drop_index('ix_rental_requests_status', table_name='rental_requests')
    op.drop_index('ix_rental_requests_user_id', table_name='rental_requests')
    op.drop_index('ix_rental_requests_property_id', table_name='rental_requests')
    op.drop_table('rental_requests')
    op.drop_index('ix_property_images_property_id', table_name='property_images')
    op.drop_table('property_images')
    op.drop_index('ix_properties_status', table_name='properties')
    op.drop_index('ix_properties_owner_id', table_name='properties')
    op.drop_table('properties')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
