"""Create campervan tables

Revision ID: 3f1a9c2d7b10
Revises:
Create Date: 2025-06-01

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '3f1a9c2d7b10'
down_revision = None
branch_labels = None
depends_on = None

BOOKING_STATUS = sa.Enum('PENDING', 'APPROVED', 'REJECTED', 'CANCELLED', 'COMPLETED', name='bookingstatus')


def upgrade():
    op.create_table('vans',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('price_per_day', sa.Numeric(10, 2), nullable=False),
        sa.Column('image_url', sa.String(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('bookings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('van_id', sa.Integer(), nullable=True),
        sa.Column('surname_and_name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=False),
        sa.Column('birth_date', sa.Date(), nullable=False),
        sa.Column('telephone', sa.String(length=40), nullable=False),
        sa.Column('nationality', sa.String(length=80), nullable=True),
        sa.Column('departure_date', sa.Date(), nullable=False),
        sa.Column('return_date', sa.Date(), nullable=False),
        sa.Column('requests', sa.Text(), nullable=True),
        sa.Column('terms_accepted', sa.Boolean(), nullable=False),
        sa.Column('status', BOOKING_STATUS, nullable=False),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        sa.Column('approved_by', sa.String(length=120), nullable=True),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['van_id'], ['vans.id'], ),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('blocked_dates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('reason', sa.String(length=255), nullable=True),
        sa.Column('created_by', sa.String(length=120), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('booking_status_history',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('booking_id', sa.Integer(), nullable=False),
        sa.Column('old_status', sa.String(length=20), nullable=True),
        sa.Column('new_status', sa.String(length=20), nullable=False),
        sa.Column('changed_by', sa.String(length=120), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id'], ),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_index('ix_bookings_van_id', 'bookings', ['van_id'])
    op.create_index('ix_bookings_departure_date', 'bookings', ['departure_date'])
    op.create_index('ix_blocked_dates_start_date', 'blocked_dates', ['start_date'])
    op.create_index('ix_booking_status_history_booking_id', 'booking_status_history', ['booking_id'])


def downgrade():
    op.drop_index('ix_booking_status_history_booking_id', table_name='booking_status_history')
    op.drop_index('ix_blocked_dates_start_date', table_name='blocked_dates')
    op.drop_index('ix_bookings_departure_date', table_name='bookings')
    op.drop_index('ix_bookings_van_id', table_name='bookings')
    op.drop_table('booking_status_history')
    op.drop_table('blocked_dates')
    op.drop_table('bookings')
    op.drop_table('vans')
    BOOKING_STATUS.drop(op.get_bind(), checkfirst=True)
