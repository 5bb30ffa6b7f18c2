"""Create uuid extension and updated_at trigger function

Revision ID: 000_create_trigger_function
Revises:
Create Date: 2025-05-12

The trigger function keeps updated_at current on every row modification,
including writes that bypass the ORM.
"""
from alembic import op

# revision identifiers, used by Alembic.
revision = '000_create_trigger_function'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp";')

    op.execute("""
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = CURRENT_TIMESTAMP;
            RETURN NEW;
        END;
        $$ language 'plpgsql';
    """)


def downgrade():
    # CASCADE drops the per-table triggers as well
    op.execute("DROP FUNCTION IF EXISTS update_updated_at_column() CASCADE;")
