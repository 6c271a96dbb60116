"""Initial migration

Revision ID: 001
Revises: 
Create Date: 2024-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create users table
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), unique=True, nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('phone', sa.String(20)),
        sa.Column('role', sa.Enum('CUSTOMER', 'ADMIN', name='userrole'), default='CUSTOMER'),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('refresh_token', sa.String(500)),
        sa.Column('last_login', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )
    
    # Create reservations table
    op.create_table(
        'reservations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('booking_number', sa.String(20), unique=True, nullable=False),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id')),
        sa.Column('customer_name', sa.String(255), nullable=False),
        sa.Column('customer_email', sa.String(255), nullable=False),
        sa.Column('customer_phone', sa.String(20)),
        sa.Column('party_size', sa.Integer(), nullable=False),
        sa.Column('reservation_date', sa.Date(), nullable=False),
        sa.Column('reservation_time', sa.String(5), nullable=False),
        sa.Column('status', sa.String(20), default='confirmed'),
        sa.Column('special_requests', sa.Text()),
        sa.Column('notes', sa.Text()),
        sa.Column('confirmation_sent', sa.DateTime()),
        sa.Column('reminder_sent', sa.DateTime()),
        sa.Column('cancelled_at', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )
    
    # Create orders table
    op.create_table(
        'orders',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('order_number', sa.String(20), unique=True, nullable=False),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id')),
        sa.Column('customer_name', sa.String(255), nullable=False),
        sa.Column('customer_email', sa.String(255), nullable=False),
        sa.Column('customer_phone', sa.String(20)),
        sa.Column('items_json', sa.JSON(), nullable=False),
        sa.Column('subtotal_cents', sa.Integer(), nullable=False, default=0),
        sa.Column('tax_cents', sa.Integer(), default=0),
        sa.Column('total_cents', sa.Integer(), nullable=False, default=0),
        sa.Column('currency', sa.String(3), default='eur'),
        sa.Column('status', sa.String(20), default='pending'),
        sa.Column('payment_status', sa.String(20), default='pending'),
        sa.Column('notes', sa.Text()),
        sa.Column('cancelled_at', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )
    
    # Create payment_intents table
    op.create_table(
        'payment_intents',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('client_secret', sa.String(128), nullable=False),
        sa.Column('order_id', sa.Uuid(), sa.ForeignKey('orders.id')),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False, default='eur'),
        sa.Column('status', sa.String(32), default='requires_payment_method'),
        sa.Column('confirmed_at', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )
    
    # Create indexes
    op.create_index('ix_reservations_slot', 'reservations', ['reservation_date', 'reservation_time'])
    op.create_index('ix_reservations_user_id', 'reservations', ['user_id'])
    op.create_index(
        'uq_reservations_active_email_slot',
        'reservations',
        [sa.text('lower(customer_email)'), 'reservation_date', 'reservation_time'],
        unique=True,
        postgresql_where=sa.text("status IN ('pending', 'confirmed')"),
    )
    op.create_index('ix_orders_user_id', 'orders', ['user_id'])
    op.create_index('ix_payment_intents_order_id', 'payment_intents', ['order_id'])


def downgrade() -> None:
    op.drop_index('ix_payment_intents_order_id')
    op.drop_index('ix_orders_user_id')
    op.drop_index('uq_reservations_active_email_slot')
    op.drop_index('ix_reservations_user_id')
    op.drop_index('ix_reservations_slot')
    
    op.drop_table('payment_intents')
    op.drop_table('orders')
    op.drop_table('reservations')
    op.drop_table('users')
    
    sa.Enum(name='userrole').drop(op.get_bind(), checkfirst=True)
