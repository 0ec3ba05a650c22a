'''Create users, events, attendees and event_registrations tables'''
from alembic import op
import sqlalchemy as sa
from sqlalchemy.sql import func

# revision identifiers, used by Alembic.
revision = 'initial_checkin'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('users',
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('email', sa.String(length=255), nullable=False),
                    sa.Column('name', sa.String(length=255), nullable=True),
                    sa.Column('role', sa.Enum('USER', 'ADMIN', name='userrole'), nullable=False),
                    sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=func.now(), nullable=False),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('email')
                   )

    op.create_table('events',
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('name', sa.String(length=255), nullable=False),
                    sa.Column('description', sa.Text(), nullable=True),
                    sa.Column('date', sa.String(length=10), nullable=False),
                    sa.Column('start_time', sa.String(length=5), nullable=True),
                    sa.Column('end_time', sa.String(length=5), nullable=True),
                    sa.Column('location', sa.String(length=255), nullable=True),
                    sa.Column('max_capacity', sa.Integer(), nullable=True),
                    sa.Column('is_active', sa.Boolean(), nullable=False),
                    sa.Column('created_by', sa.Integer(), nullable=False),
                    sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=func.now(), nullable=False),
                    sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=func.now(), nullable=False),
                    sa.ForeignKeyConstraint(['created_by'], ['users.id']),
                    sa.PrimaryKeyConstraint('id')
                   )
    op.create_index('ix_events_date', 'events', ['date'])
    op.create_index('ix_events_is_active', 'events', ['is_active'])

    op.create_table('attendees',
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('name', sa.String(length=255), nullable=False),
                    sa.Column('place_of_residence', sa.String(length=255), nullable=True),
                    sa.Column('phone_number', sa.String(length=50), nullable=True),
                    sa.Column('gender', sa.Enum('MALE', 'FEMALE', 'OTHER', name='gender'), nullable=False),
                    sa.Column('email', sa.String(length=255), nullable=True),
                    sa.Column('is_first_time_guest', sa.Boolean(), nullable=False),
                    sa.Column('registered_by', sa.Integer(), nullable=False),
                    sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=func.now(), nullable=False),
                    sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=func.now(), nullable=False),
                    sa.ForeignKeyConstraint(['registered_by'], ['users.id']),
                    sa.PrimaryKeyConstraint('id')
                   )
    op.create_index('ix_attendees_name', 'attendees', ['name'])
    op.create_index('ix_attendees_phone_number', 'attendees', ['phone_number'])

    op.create_table('event_registrations',
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('event_id', sa.Integer(), nullable=False),
                    sa.Column('attendee_id', sa.Integer(), nullable=False),
                    sa.Column('registration_date', sa.String(length=10), nullable=False),
                    sa.Column('registration_time', sa.TIMESTAMP(timezone=True), nullable=False),
                    sa.Column('registered_by', sa.Integer(), nullable=False),
                    sa.Column('has_attended', sa.Boolean(), nullable=False),
                    sa.Column('attendance_time', sa.TIMESTAMP(timezone=True), nullable=True),
                    sa.Column('first_time_at_registration', sa.Boolean(), nullable=False),
                    sa.ForeignKeyConstraint(['event_id'], ['events.id']),
                    sa.ForeignKeyConstraint(['attendee_id'], ['attendees.id']),
                    sa.ForeignKeyConstraint(['registered_by'], ['users.id']),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('event_id', 'attendee_id', name='uq_event_attendee_registration'),
                    sa.CheckConstraint('NOT has_attended OR attendance_time IS NOT NULL', name='ck_attended_has_time')
                   )
    op.create_index('ix_event_registrations_event_id', 'event_registrations', ['event_id'])
    op.create_index('ix_event_registrations_attendee_id', 'event_registrations', ['attendee_id'])
    op.create_index('ix_event_registrations_registration_date', 'event_registrations', ['registration_date'])


def downgrade():
    op.drop_table('event_registrations')
    op.drop_table('attendees')
    op.drop_table('events')
    op.drop_table('users')
