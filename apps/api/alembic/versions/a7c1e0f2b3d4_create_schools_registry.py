"""create schools registry

Revision ID: a7c1e0f2b3d4
Revises:
Create Date: 2026-10-19 09:00:00.000000

This migration:
1. Creates the schools table (id, name, county, timestamps)
2. Adds a unique index on (county, lower(name)) so that concurrent sign-ups
   cannot register the same school twice
3. Enables row-level security with a public read policy and an insert
   policy for sign-up visitors, limited to the name and county columns

Step 3 only grants to the `anon` and `authenticated` roles when they exist
(hosted Postgres providers create them); plain PostgreSQL installs keep RLS
enabled for non-owner roles and skip the grants.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "a7c1e0f2b3d4"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the schools table, its indexes and access policies."""
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto")

    op.create_table(
        "schools",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=False),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("county", sa.String(length=50), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index(op.f("ix_schools_county"), "schools", ["county"], unique=False)
    op.create_index(
        "uq_schools_county_lower_name",
        "schools",
        ["county", sa.text("lower(name)")],
        unique=True,
    )

    op.execute("ALTER TABLE schools ENABLE ROW LEVEL SECURITY")
    op.execute(
        """
        DO $$
        BEGIN
            IF EXISTS (SELECT 1 FROM pg_roles WHERE rolname = 'anon') THEN
                GRANT SELECT ON schools TO anon, authenticated;
                GRANT INSERT (name, county) ON schools TO anon, authenticated;
                CREATE POLICY "Public read access for schools"
                    ON schools FOR SELECT
                    TO anon, authenticated
                    USING (true);
                CREATE POLICY "Allow public inserts for new schools"
                    ON schools FOR INSERT
                    TO anon, authenticated
                    WITH CHECK (true);
            END IF;
        END
        $$;
        """
    )


def downgrade() -> None:
    """Drop the schools table and its policies."""
    op.execute('DROP POLICY IF EXISTS "Allow public inserts for new schools" ON schools')
    op.execute('DROP POLICY IF EXISTS "Public read access for schools" ON schools')
    op.drop_index("uq_schools_county_lower_name", table_name="schools")
    op.drop_index(op.f("ix_schools_county"), table_name="schools")
    op.drop_table("schools")
