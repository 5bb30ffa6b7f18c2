"""Add companies and per-category service record tables

Revision ID: 001_add_service_record_tables
Revises: 000_create_trigger_function
Create Date: 2025-05-12

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID, JSONB

# revision identifiers, used by Alembic.
revision = '001_add_service_record_tables'
down_revision = '000_create_trigger_function'
branch_labels = None
depends_on = None

RECORD_TABLES = (
    'service_records',
    'spot_welder_records',
    'lift_service_records',
    'compressors_records',
)


def _equipment_slot_columns():
    columns = []
    for i in range(1, 9):
        columns.append(sa.Column(f'equipment{i}_name', sa.String(255), nullable=False, server_default=''))
        columns.append(sa.Column(f'equipment{i}_serial', sa.String(100), nullable=False, server_default=''))
    return columns


def upgrade():
    """Create companies and the four service record tables"""

    op.create_table('companies',
        sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('uuid_generate_v4()')),
        sa.Column('company_name', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    for table in RECORD_TABLES:
        op.create_table(table,
            sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('uuid_generate_v4()')),
            sa.Column('company_id', UUID(as_uuid=True), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False),

            sa.Column('certificate_number', sa.String(50), nullable=True,
                      comment="BWS-<digits>, or BWS-EMG-<digits> when allocation degraded"),
            sa.Column('service_date', sa.Date, nullable=False),
            sa.Column('retest_date', sa.Date, nullable=True,
                      comment="service_date + 364 days unless overridden"),
            sa.Column('engineer_name', sa.String(255), nullable=True),

            *_equipment_slot_columns(),

            sa.Column('details', JSONB, nullable=False, server_default=sa.text("'{}'::jsonb"),
                      comment="Category-specific measurements and checks"),
            sa.Column('notes', sa.Text, nullable=False, server_default=''),

            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        )

        op.create_index(f'idx_{table}_company_service_date', table, ['company_id', sa.text('service_date DESC')])
        op.create_index(f'idx_{table}_certificate_number', table, ['certificate_number'])

        op.execute(f"""
            CREATE TRIGGER update_{table}_updated_at
            BEFORE UPDATE ON {table}
            FOR EACH ROW
            EXECUTE FUNCTION update_updated_at_column();
        """)


def downgrade():
    for table in reversed(RECORD_TABLES):
        op.drop_table(table)
    op.drop_table('companies')
