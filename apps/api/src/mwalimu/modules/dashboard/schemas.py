"""
Dashboard Schemas

Pydantic models for the data shown on each role's dashboard.
"""

from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ResourceCategory = Literal["Textbooks", "Digital Devices", "Lab Equipment", "Stationery"]
ResourceStock = Literal["Available", "Low Stock", "Out of Stock"]


class Resource(BaseModel):
    """A stocked teaching resource."""

    id: str
    name: str
    category: ResourceCategory
    quantity: int = Field(..., ge=0)
    status: ResourceStock


class SchoolClass(BaseModel):
    """A class taught by a teacher."""

    id: int
    name: str
    students: int = Field(..., ge=0)
    avg_performance: int = Field(..., ge=0, le=100)


class Task(BaseModel):
    """A to-do item on a teacher's dashboard."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    task: str
    class_name: str = Field(..., alias="class")
    due_date: date
    completed: bool = False


class Metric(BaseModel):
    """A headline figure and its change since the last period."""

    value: int
    change: int


class LearningPulse(BaseModel):
    status: str
    topic: str


class ResourceSummary(BaseModel):
    value: int = Field(..., ge=0, le=100)
    summary: str


class CountyDashboard(BaseModel):
    """County-wide resource stock."""

    county: str
    resources: list[Resource]


class SchoolDashboard(BaseModel):
    """Operational figures for one school."""

    school_id: str
    compliance_status: Metric
    learning_pulse: LearningPulse
    student_teacher_ratio: Metric
    resource_status: ResourceSummary
    resources: list[Resource]


class TeacherDashboard(BaseModel):
    """A teacher's classes and tasks, with the administrators they report to."""

    classes: list[SchoolClass]
    tasks: list[Task]
    school_head_name: str | None = None
    county_officer_name: str | None = None
