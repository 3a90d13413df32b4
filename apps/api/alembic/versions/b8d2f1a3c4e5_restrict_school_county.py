"""restrict school county to the known counties

Revision ID: b8d2f1a3c4e5
Revises: a7c1e0f2b3d4
Create Date: 2026-10-26 10:00:00.000000

This migration:
1. Adds a CHECK constraint so schools.county must be one of the 47 counties.
   The constraint also binds the public insert policy, so sign-up visitors
   cannot register a school in an unknown county either.

The county list is copied here rather than imported so later changes to the
application catalogue need their own migration.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "b8d2f1a3c4e5"
down_revision: str | Sequence[str] | None = "a7c1e0f2b3d4"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

COUNTIES = (
    "Baringo", "Bomet", "Bungoma", "Busia", "Elgeyo-Marakwet", "Embu", "Garissa",
    "Homa Bay", "Isiolo", "Kajiado", "Kakamega", "Kericho", "Kiambu", "Kilifi",
    "Kirinyaga", "Kisii", "Kisumu", "Kitui", "Kwale", "Laikipia", "Lamu", "Machakos",
    "Makueni", "Mandera", "Marsabit", "Meru", "Migori", "Mombasa", "Murang'a",
    "Nairobi", "Nakuru", "Nandi", "Narok", "Nyamira", "Nyandarua", "Nyeri",
    "Samburu", "Siaya", "Taita-Taveta", "Tana River", "Tharaka-Nithi", "Trans Nzoia",
    "Turkana", "Uasin Gishu", "Vihiga", "Wajir", "West Pokot",
)


def upgrade() -> None:
    """Reject schools outside the county catalogue."""
    op.create_check_constraint(
        "ck_schools_county_known",
        "schools",
        sa.column("county").in_(COUNTIES),
    )


def downgrade() -> None:
    """Allow any county again."""
    op.drop_constraint("ck_schools_county_known", "schools", type_="check")
