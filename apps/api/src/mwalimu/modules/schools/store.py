"""
School Store Contract

The interface the school registry needs from its backing record store, the
record type it exchanges, and the store-level failures it may raise.

Store failures are classified here, close to the driver, so that the
registry only ever sees three kinds: a policy denial, a uniqueness
violation, or a generic store error.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE codes
SQLSTATE_INSUFFICIENT_PRIVILEGE = "42501"  # also raised for row-level security violations
SQLSTATE_UNIQUE_VIOLATION = "23505"

# Last-resort message fragments, used only when no SQLSTATE is available
POLICY_DENIAL_MESSAGES = (
    "violates row-level security policy",
    "permission denied",
)


@dataclass(frozen=True)
class SchoolRecord:
    """A school as returned by the store."""

    id: str
    name: str
    county: str


class StoreError(Exception):
    """Raised when the record store cannot complete a request."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code
        super().__init__(message)


class StorePolicyDenied(StoreError):
    """Raised when the store's access-control policy rejects a write."""


class StoreUniqueViolation(StoreError):
    """Raised when an insert collides with an existing record under a unique constraint."""


class SchoolStore(Protocol):
    """Record store operations used by the school registry."""

    async def find_by_name(self, name: str, county: str) -> SchoolRecord | None:
        """
        Case-insensitive lookup of a school by name within a county.

        Returns at most one record; None means no rows matched.
        """
        ...

    async def list_by_county(self, county: str, search: str | None = None) -> list[SchoolRecord]:
        """List schools in a county ordered by name ascending."""
        ...

    async def insert(self, name: str, county: str) -> SchoolRecord:
        """Insert a school and return it with its store-assigned id."""
        ...


def classify_store_failure(sqlstate: str | None, message: str) -> type[StoreError]:
    """
    Pick the store error type for a driver failure.

    The SQLSTATE code is authoritative. Matching on message text is a
    fallback for drivers that do not expose a code, and is logged because
    it breaks silently if the wording changes.

    Args:
        sqlstate: Five-character SQLSTATE code, if the driver exposed one
        message: Driver error message

    Returns:
        StorePolicyDenied, StoreUniqueViolation or StoreError
    """
    if sqlstate == SQLSTATE_INSUFFICIENT_PRIVILEGE:
        return StorePolicyDenied
    if sqlstate == SQLSTATE_UNIQUE_VIOLATION:
        return StoreUniqueViolation
    if sqlstate:
        return StoreError

    lowered = message.lower()
    if any(fragment in lowered for fragment in POLICY_DENIAL_MESSAGES):
        logger.warning(
            "Classified store failure as a policy denial from its message text; "
            "the driver did not report a SQLSTATE code"
        )
        return StorePolicyDenied
    return StoreError
