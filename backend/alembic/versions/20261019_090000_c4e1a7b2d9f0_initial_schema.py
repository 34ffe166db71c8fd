"""initial schema

Revision ID: c4e1a7b2d9f0
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = 'c4e1a7b2d9f0'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

contact_preference = postgresql.ENUM('EMAIL', 'SMS', 'BOTH', name='contactpreference', create_type=False)
alert_kind = postgresql.ENUM('SUDDEN_FLUCTUATION', 'DAILY_SUMMARY', name='alertkind', create_type=False)
message_kind = postgresql.ENUM('ALERT', 'DAILY_SUMMARY', 'WARNING', name='messagekind', create_type=False)
channel = postgresql.ENUM('EMAIL', 'SMS', name='channel', create_type=False)
baseline_type = postgresql.ENUM('HEATING', 'COOLING', name='baselinetype', create_type=False)
ENUM_TYPES = (contact_preference, alert_kind, message_kind, channel, baseline_type)


def _id_index(table: str) -> None:
    op.create_index(op.f(f'ix_{table}_id'), table, ['id'], unique=False)


def upgrade() -> None:
    bind = op.get_bind()
    for enum_type in ENUM_TYPES:
        enum_type.create(bind, checkfirst=True)

    op.create_table(
        'cities',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('state', sa.String(length=50), nullable=True),
        sa.Column('nws_office', sa.String(length=10), nullable=False),
        sa.Column('nws_grid_x', sa.Integer(), nullable=False),
        sa.Column('nws_grid_y', sa.Integer(), nullable=False),
        sa.Column('alert_temp_delta', sa.Float(), nullable=False),
        sa.Column('alert_window_hours', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('alert_temp_delta > 0', name='check_alert_temp_delta_positive'),
        sa.CheckConstraint('alert_window_hours >= 1', name='check_alert_window_hours_min'),
        sa.PrimaryKeyConstraint('id'),
    )
    _id_index('cities')
    op.create_index(op.f('ix_cities_name'), 'cities', ['name'], unique=False)

    op.create_table(
        'buildings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('city_id', sa.Integer(), sa.ForeignKey('cities.id'), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_paused', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    _id_index('buildings')
    op.create_index(op.f('ix_buildings_city_id'), 'buildings', ['city_id'], unique=False)

    op.create_table(
        'recipients',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('building_id', sa.Integer(), sa.ForeignKey('buildings.id'), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('preference', contact_preference, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    _id_index('recipients')
    op.create_index(op.f('ix_recipients_building_id'), 'recipients', ['building_id'], unique=False)

    op.create_table(
        'temperature_snapshots',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('city_id', sa.Integer(), sa.ForeignKey('cities.id'), nullable=False),
        sa.Column('recorded_at', sa.DateTime(), nullable=False),
        sa.Column('temperature_f', sa.Float(), nullable=False),
        sa.Column('forecast_data', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    _id_index('temperature_snapshots')
    op.create_index(op.f('ix_temperature_snapshots_city_id'), 'temperature_snapshots', ['city_id'], unique=False)
    op.create_index(op.f('ix_temperature_snapshots_recorded_at'), 'temperature_snapshots', ['recorded_at'], unique=False)

    op.create_table(
        'alert_events',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('city_id', sa.Integer(), sa.ForeignKey('cities.id'), nullable=False),
        sa.Column('kind', alert_kind, nullable=False),
        sa.Column('measurement_data', sa.JSON(), nullable=False),
        sa.Column('threshold_snapshot', sa.JSON(), nullable=False),
        sa.Column('triggered_at', sa.DateTime(), nullable=True),
        sa.Column('processed', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    _id_index('alert_events')
    op.create_index(op.f('ix_alert_events_city_id'), 'alert_events', ['city_id'], unique=False)
    op.create_index(op.f('ix_alert_events_triggered_at'), 'alert_events', ['triggered_at'], unique=False)

    op.create_table(
        'messages',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('alert_event_id', sa.Integer(), sa.ForeignKey('alert_events.id'), nullable=True),
        sa.Column('building_id', sa.Integer(), sa.ForeignKey('buildings.id'), nullable=False),
        sa.Column('recipient_id', sa.Integer(), sa.ForeignKey('recipients.id'), nullable=False),
        sa.Column('kind', message_kind, nullable=False),
        sa.Column('channel', channel, nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('upload_token', sa.String(length=64), nullable=True),
        sa.Column('sent_at', sa.DateTime(), nullable=True),
        sa.Column('delivered', sa.Boolean(), nullable=False),
        sa.Column('delivery_status', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    _id_index('messages')
    op.create_index(op.f('ix_messages_alert_event_id'), 'messages', ['alert_event_id'], unique=False)
    op.create_index(op.f('ix_messages_building_id'), 'messages', ['building_id'], unique=False)
    op.create_index(op.f('ix_messages_recipient_id'), 'messages', ['recipient_id'], unique=False)
    op.create_index(op.f('ix_messages_kind'), 'messages', ['kind'], unique=False)
    op.create_index(op.f('ix_messages_upload_token'), 'messages', ['upload_token'], unique=True)
    op.create_index(op.f('ix_messages_sent_at'), 'messages', ['sent_at'], unique=False)
    op.create_index(op.f('ix_messages_created_at'), 'messages', ['created_at'], unique=False)

    op.create_table(
        'message_templates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('city_id', sa.Integer(), sa.ForeignKey('cities.id'), nullable=False),
        sa.Column('kind', message_kind, nullable=False),
        sa.Column('subject', sa.String(length=255), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    _id_index('message_templates')
    op.create_index(op.f('ix_message_templates_city_id'), 'message_templates', ['city_id'], unique=False)

    op.create_table(
        'compliance_uploads',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('message_id', sa.Integer(), sa.ForeignKey('messages.id'), nullable=False),
        sa.Column('building_id', sa.Integer(), sa.ForeignKey('buildings.id'), nullable=False),
        sa.Column('file_name', sa.String(length=500), nullable=True),
        sa.Column('uploaded_at', sa.DateTime(), nullable=False),
        sa.Column('compliance_window_hours', sa.Integer(), nullable=False),
        sa.Column('is_compliant', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    _id_index('compliance_uploads')
    op.create_index(op.f('ix_compliance_uploads_message_id'), 'compliance_uploads', ['message_id'], unique=False)
    op.create_index(op.f('ix_compliance_uploads_building_id'), 'compliance_uploads', ['building_id'], unique=False)

    op.create_table(
        'utility_bills',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('building_id', sa.Integer(), sa.ForeignKey('buildings.id'), nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('electric_kwh', sa.Float(), nullable=True),
        sa.Column('gas_therms', sa.Float(), nullable=True),
        sa.Column('fuel_oil_gallons', sa.Float(), nullable=True),
        sa.Column('district_steam_mbtu', sa.Float(), nullable=True),
        sa.Column('total_kbtu', sa.Float(), nullable=False),
        sa.Column('uploaded_by', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('building_id', 'month', 'year', name='uq_utility_building_month_year'),
        sa.CheckConstraint('month >= 1 AND month <= 12', name='check_utility_month'),
        sa.CheckConstraint('total_kbtu >= 0', name='check_total_kbtu_non_negative'),
    )
    _id_index('utility_bills')
    op.create_index(op.f('ix_utility_bills_building_id'), 'utility_bills', ['building_id'], unique=False)

    op.create_table(
        'degree_days',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('city_id', sa.Integer(), sa.ForeignKey('cities.id'), nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('heating_degree_days', sa.Float(), nullable=False),
        sa.Column('cooling_degree_days', sa.Float(), nullable=False),
        sa.Column('uploaded_by', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('city_id', 'month', 'year', name='uq_degree_days_city_month_year'),
        sa.CheckConstraint('month >= 1 AND month <= 12', name='check_degree_days_month'),
    )
    _id_index('degree_days')
    op.create_index(op.f('ix_degree_days_city_id'), 'degree_days', ['city_id'], unique=False)

    op.create_table(
        'energy_baselines',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('building_id', sa.Integer(), sa.ForeignKey('buildings.id'), nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('baseline_type', baseline_type, nullable=False),
        sa.Column('avg_consumption_per_degree_day', sa.Float(), nullable=False),
        sa.Column('period_start', sa.Date(), nullable=False),
        sa.Column('period_end', sa.Date(), nullable=False),
        sa.Column('data_points', sa.Integer(), nullable=False),
        sa.Column('calculated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('building_id', 'month', 'baseline_type', name='uq_baseline_building_month_type'),
    )
    _id_index('energy_baselines')
    op.create_index(op.f('ix_energy_baselines_building_id'), 'energy_baselines', ['building_id'], unique=False)

    op.create_table(
        'energy_reports',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('building_id', sa.Integer(), sa.ForeignKey('buildings.id'), nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('utility_bill_id', sa.Integer(), sa.ForeignKey('utility_bills.id'), nullable=True),
        sa.Column('degree_days_id', sa.Integer(), sa.ForeignKey('degree_days.id'), nullable=True),
        sa.Column('consumption_per_hdd', sa.Float(), nullable=False),
        sa.Column('consumption_per_cdd', sa.Float(), nullable=False),
        sa.Column('baseline_consumption_per_hdd', sa.Float(), nullable=False),
        sa.Column('baseline_consumption_per_cdd', sa.Float(), nullable=False),
        sa.Column('savings_percentage', sa.Float(), nullable=False),
        sa.Column('savings_kbtu', sa.Float(), nullable=False),
        sa.Column('report_data', sa.JSON(), nullable=True),
        sa.Column('generated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('building_id', 'month', 'year', name='uq_report_building_month_year'),
    )
    _id_index('energy_reports')
    op.create_index(op.f('ix_energy_reports_building_id'), 'energy_reports', ['building_id'], unique=False)


def downgrade() -> None:
    for table in (
        'energy_reports', 'energy_baselines', 'degree_days', 'utility_bills', 'compliance_uploads',
        'message_templates', 'messages', 'alert_events', 'temperature_snapshots', 'recipients',
        'buildings', 'cities',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum_type in reversed(ENUM_TYPES):
        enum_type.drop(bind, checkfirst=True)
