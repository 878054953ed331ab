"""Initial schema: users, locations, properties, bookings, payments, reviews, messages

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-01-01

"""
from alembic import op
import sqlalchemy as sa

from rentals import integrity

# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


user_role = sa.Enum('guest', 'host', 'admin', name='user_role', create_constraint=True)
booking_status = sa.Enum('pending', 'confirmed', 'canceled', name='booking_status', create_constraint=True)
payment_method = sa.Enum('credit_card', 'paypal', 'stripe', 'bank_transfer',
                         name='payment_method', create_constraint=True)
payment_status = sa.Enum('pending', 'completed', 'failed', 'refunded',
                         name='payment_status', create_constraint=True)
message_type = sa.Enum('inquiry', 'booking', 'general', 'support', name='message_type', create_constraint=True)


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    ]


def upgrade():
    op.create_table('users',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('phone_number', sa.String(20), nullable=True),
        sa.Column('role', user_role, nullable=False),
        *_timestamps(),
        sa.CheckConstraint('length(first_name) >= 1 AND length(last_name) >= 1', name='chk_name_length'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])
    op.create_index('ix_users_created_at', 'users', ['created_at'])

    op.create_table('locations',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('country', sa.String(100), nullable=False),
        sa.Column('state_province', sa.String(100), nullable=False),
        sa.Column('city', sa.String(100), nullable=False),
        sa.Column('address', sa.String(255), nullable=False),
        sa.Column('postal_code', sa.String(20), nullable=True),
        sa.Column('latitude', sa.Numeric(10, 8), nullable=True),
        sa.Column('longitude', sa.Numeric(11, 8), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('latitude IS NULL OR (latitude >= -90 AND latitude <= 90)', name='chk_latitude'),
        sa.CheckConstraint('longitude IS NULL OR (longitude >= -180 AND longitude <= 180)', name='chk_longitude'),
        sa.CheckConstraint('length(address) >= 5', name='chk_address_length'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_locations_city', 'locations', ['city'])
    op.create_index('ix_locations_country', 'locations', ['country'])
    op.create_index('ix_locations_postal_code', 'locations', ['postal_code'])
    op.create_index('idx_location_coordinates', 'locations', ['latitude', 'longitude'])

    op.create_table('properties',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('host_id', sa.String(36), nullable=False),
        sa.Column('location_id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('price_per_night', sa.Numeric(10, 2), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('price_per_night > 0', name='chk_price_positive'),
        sa.CheckConstraint('length(name) >= 3', name='chk_property_name_length'),
        sa.CheckConstraint('length(description) >= 10', name='chk_description_length'),
        sa.ForeignKeyConstraint(['host_id'], ['users.id'], ondelete='CASCADE', onupdate='CASCADE'),
        sa.ForeignKeyConstraint(['location_id'], ['locations.id'], ondelete='RESTRICT', onupdate='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_properties_host_id', 'properties', ['host_id'])
    op.create_index('ix_properties_location_id', 'properties', ['location_id'])
    op.create_index('ix_properties_price_per_night', 'properties', ['price_per_night'])
    op.create_index('ix_properties_created_at', 'properties', ['created_at'])

    op.create_table('bookings',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('property_id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('status', booking_status, nullable=False),
        *_timestamps(),
        sa.CheckConstraint('end_date > start_date', name='chk_date_range'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='CASCADE', onupdate='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE', onupdate='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_bookings_property_id', 'bookings', ['property_id'])
    op.create_index('ix_bookings_user_id', 'bookings', ['user_id'])
    op.create_index('ix_bookings_status', 'bookings', ['status'])
    op.create_index('ix_bookings_created_at', 'bookings', ['created_at'])
    op.create_index('idx_booking_dates', 'bookings', ['start_date', 'end_date'])

    op.create_table('payments',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('booking_id', sa.String(36), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('payment_date', sa.DateTime(), nullable=True),
        sa.Column('payment_method', payment_method, nullable=False),
        sa.Column('payment_status', payment_status, nullable=False),
        sa.Column('transaction_id', sa.String(255), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('amount > 0', name='chk_payment_amount'),
        sa.CheckConstraint("payment_status = 'pending' OR transaction_id IS NOT NULL", name='chk_transaction_id'),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id'], ondelete='CASCADE', onupdate='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_payments_booking_id', 'payments', ['booking_id'], unique=True)
    op.create_index('ix_payments_payment_date', 'payments', ['payment_date'])
    op.create_index('ix_payments_payment_method', 'payments', ['payment_method'])
    op.create_index('ix_payments_payment_status', 'payments', ['payment_status'])

    op.create_table('reviews',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('property_id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='chk_rating_range'),
        sa.CheckConstraint('length(comment) >= 10', name='chk_comment_length'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='CASCADE', onupdate='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE', onupdate='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'property_id', name='uk_user_property_review')
    )
    op.create_index('ix_reviews_property_id', 'reviews', ['property_id'])
    op.create_index('ix_reviews_user_id', 'reviews', ['user_id'])
    op.create_index('ix_reviews_rating', 'reviews', ['rating'])
    op.create_index('ix_reviews_created_at', 'reviews', ['created_at'])

    op.create_table('messages',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('sender_id', sa.String(36), nullable=False),
        sa.Column('recipient_id', sa.String(36), nullable=False),
        sa.Column('message_body', sa.Text(), nullable=False),
        sa.Column('sent_at', sa.DateTime(), nullable=False),
        sa.Column('read_at', sa.DateTime(), nullable=True),
        sa.Column('message_type', message_type, nullable=False),
        sa.CheckConstraint('sender_id != recipient_id', name='chk_different_users'),
        sa.CheckConstraint('length(message_body) >= 1', name='chk_message_length'),
        sa.CheckConstraint('read_at IS NULL OR read_at >= sent_at', name='chk_read_after_sent'),
        sa.ForeignKeyConstraint(['sender_id'], ['users.id'], ondelete='CASCADE', onupdate='CASCADE'),
        sa.ForeignKeyConstraint(['recipient_id'], ['users.id'], ondelete='CASCADE', onupdate='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_messages_sender_id', 'messages', ['sender_id'])
    op.create_index('ix_messages_recipient_id', 'messages', ['recipient_id'])
    op.create_index('ix_messages_sent_at', 'messages', ['sent_at'])
    op.create_index('ix_messages_message_type', 'messages', ['message_type'])
    op.create_index('idx_message_unread', 'messages', ['recipient_id', 'read_at'])

    # Triggers
    dialect = op.get_bind().dialect.name
    if dialect == 'sqlite':
        for statement in integrity.SQLITE_TRIGGERS:
            op.execute(statement)
        op.execute(integrity.SQLITE_HOST_TRIGGER)
    elif dialect == 'postgresql':
        op.execute(integrity.POSTGRES_OVERLAP_FUNCTION)
        op.execute(integrity.POSTGRES_OVERLAP_TRIGGER)
        op.execute(integrity.POSTGRES_HOST_FUNCTION)
        op.execute(integrity.POSTGRES_HOST_TRIGGER)
        op.execute(integrity.POSTGRES_BTREE_GIST)
        op.execute(integrity.POSTGRES_OVERLAP_EXCLUSION)
    elif dialect == 'mysql':
        for statement in integrity.MYSQL_TRIGGERS:
            op.execute(statement)
        op.execute(integrity.MYSQL_HOST_TRIGGER)


def downgrade():
    dialect = op.get_bind().dialect.name
    if dialect == 'postgresql':
        op.execute('ALTER TABLE bookings DROP CONSTRAINT IF EXISTS ex_booking_no_overlap')
        op.execute('DROP TRIGGER IF EXISTS tr_update_user_to_host ON properties')
        op.execute('DROP TRIGGER IF EXISTS tr_prevent_booking_overlap ON bookings')
        op.execute('DROP FUNCTION IF EXISTS update_user_to_host()')
        op.execute('DROP FUNCTION IF EXISTS prevent_booking_overlap()')

    op.drop_table('messages')
    op.drop_table('reviews')
    op.drop_table('payments')
    op.drop_table('bookings')
    op.drop_table('properties')
    op.drop_table('locations')
    op.drop_table('users')

    if dialect == 'postgresql':
        for enum_type in (message_type, payment_status, payment_method, booking_status, user_role):
            enum_type.drop(op.get_bind(), checkfirst=True)
