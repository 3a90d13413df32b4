"""
School Models

Database model for the school registry. A school is identified logically
by its (county, case-insensitive name) pair; the database id is assigned
on insert and never changes.
"""

from sqlalchemy import CheckConstraint, Index, String, column, text
from sqlalchemy.orm import Mapped, mapped_column

from mwalimu.core.database import BaseModel
from mwalimu.modules.schools.counties import KENYAN_COUNTIES


class School(BaseModel):
    """
    School registry record.

    Created the first time a user resolves a (name, county) pair that is not
    yet known. Never updated or deleted by the API.
    """

    __tablename__ = "schools"
    __table_args__ = (
        # Closes the find-or-create race across processes; the registry
        # re-reads the winner when an insert trips it.
        Index(
            "uq_schools_county_lower_name",
            "county",
            text("lower(name)"),
            unique=True,
        ),
        CheckConstraint(column("county").in_(KENYAN_COUNTIES), name="ck_schools_county_known"),
    )

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    county: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<School(id={self.id}, name={self.name}, county={self.county})>"
