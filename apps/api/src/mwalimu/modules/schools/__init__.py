"""
Schools module - County school registry.

Schools are resolved by (name, county): a lookup that ignores case and
surrounding whitespace, followed by an insert when nothing matches. Used by
the sign-up form, so the endpoints are public and creation is rate limited.

API Endpoints:
- GET /schools?county=... - List the schools of a county
- POST /schools - Resolve a school, creating it if needed
- GET /schools/counties - List supported counties
"""

from mwalimu.modules.schools.jobs import register_school_jobs
from mwalimu.modules.schools.router import router
from mwalimu.modules.schools.service import SchoolRegistry

__all__ = ["router", "register_school_jobs", "SchoolRegistry"]
