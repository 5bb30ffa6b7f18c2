"""Add service certificate number sequence

Revision ID: 002_add_certificate_sequence
Revises: 001_add_service_record_tables
Create Date: 2025-05-12

Numbering starts at 24570 so new certificates follow on from existing ones.
"""
from alembic import op

# revision identifiers, used by Alembic.
revision = '002_add_certificate_sequence'
down_revision = '001_add_service_record_tables'
branch_labels = None
depends_on = None


def upgrade():
    op.execute("CREATE SEQUENCE IF NOT EXISTS service_certificate_seq START 24570;")
    op.execute("GRANT USAGE ON SEQUENCE service_certificate_seq TO PUBLIC;")


def downgrade():
    op.execute("DROP SEQUENCE IF EXISTS service_certificate_seq;")
