"""
School Registry Service

Business logic for resolving (name, county) pairs to school records.

Resolution is a find-or-create:
1. Trim the name and reject empty input before touching the store
2. Look the school up case-insensitively within its county
3. Insert it when the lookup finds nothing

Two concurrent first-time callers can both miss in step 2 and both insert.
Without a uniqueness constraint in the store that produces two records for
the same school; callers must accept either one. When the store does enforce
uniqueness, the losing insert fails with a unique violation and the registry
re-reads and returns the winner's record.

The registry keeps no state between calls and never retries, apart from
that single re-read.
"""

import logging

from mwalimu.modules.schools.counties import is_valid_county
from mwalimu.modules.schools.store import (
    SchoolRecord,
    SchoolStore,
    StoreError,
    StorePolicyDenied,
    StoreUniqueViolation,
)

logger = logging.getLogger(__name__)

WRITE_POLICY_HINT = (
    "The schools table's access policy does not allow this insert. "
    "Grant INSERT on schools to the sign-up role (anonymous visitors included), "
    "restricted to the name and county columns."
)


class SchoolRegistryError(Exception):
    """Base exception for school registry errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class InvalidSchoolInputError(SchoolRegistryError):
    """Raised when the school name or county is empty, or the county is not a known one."""

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(
            message=message or f"A non-empty {field} is required.",
            error_code="INVALID_INPUT",
            status_code=422,
        )


class StoreUnavailableError(SchoolRegistryError):
    """Raised when the record store fails for any reason other than a policy denial."""

    def __init__(self, message: str = "The school registry is temporarily unavailable. Please try again."):
        super().__init__(
            message=message,
            error_code="STORE_UNAVAILABLE",
            status_code=503,
        )


class WritePolicyDeniedError(SchoolRegistryError):
    """Raised when the store's access policy rejects creating a school."""

    def __init__(self, hint: str = WRITE_POLICY_HINT):
        self.hint = hint
        super().__init__(
            message=f"Failed to add school due to a security policy. {hint}",
            error_code="WRITE_POLICY_DENIED",
            status_code=403,
        )


def normalize_school_name(name: str) -> str:
    """Trim surrounding whitespace from a school name."""
    return name.strip()


class SchoolRegistry:
    """Resolves and lists school records in a county."""

    def __init__(self, store: SchoolStore):
        self._store = store

    async def list_schools(self, county: str, search: str | None = None) -> list[SchoolRecord]:
        """
        List the schools of a county ordered by name.

        The county is not checked against the known counties; an unknown
        county simply has no schools. Ordering is the store's (case-sensitive)
        collation.

        Args:
            county: County name
            search: Optional case-insensitive name filter

        Returns:
            Schools in the county ordered by name ascending

        Raises:
            InvalidSchoolInputError: If county is empty
            StoreUnavailableError: If the store fails
        """
        if not county or not county.strip():
            raise InvalidSchoolInputError("county")

        search = search.strip() if search else None

        try:
            return await self._store.list_by_county(county, search=search or None)
        except StoreError as e:
            logger.error(f"Error fetching schools for {county}: {e.message}")
            raise StoreUnavailableError() from e

    async def resolve_or_create_school(self, name: str, county: str) -> SchoolRecord:
        """
        Find a school by name in a county, or create it if it does not exist.

        Args:
            name: School name; surrounding whitespace is ignored and the
                match is case-insensitive
            county: One of the 47 county names, matched exactly

        Returns:
            The existing or newly created school

        Raises:
            InvalidSchoolInputError: If the trimmed name or the county is empty,
                or the county is not a known county
            WritePolicyDeniedError: If the store's access policy rejects the insert
            StoreUnavailableError: For any other store failure
        """
        trimmed_name = normalize_school_name(name)
        if not trimmed_name:
            raise InvalidSchoolInputError("name")
        if not county or not county.strip():
            raise InvalidSchoolInputError("county")
        if not is_valid_county(county):
            raise InvalidSchoolInputError("county", f"Unknown county '{county}'.")

        # A failed lookup aborts; creating after an unknown lookup result
        # could mask a store fault as a duplicate.
        try:
            existing = await self._store.find_by_name(trimmed_name, county)
        except StoreError as e:
            logger.error(f"Error checking for existing school: {e.message}")
            raise StoreUnavailableError() from e

        if existing is not None:
            logger.debug(f"Resolved existing school {existing.id} for '{trimmed_name}' in {county}")
            return existing

        try:
            created = await self._store.insert(trimmed_name, county)
        except StorePolicyDenied as e:
            logger.error(f"School insert rejected by access policy: {e.message}")
            raise WritePolicyDeniedError() from e
        except StoreUniqueViolation as e:
            logger.info(f"Concurrent create detected for '{trimmed_name}' in {county}, re-reading")
            return await self._reread_winner(trimmed_name, county, e)
        except StoreError as e:
            logger.error(f"Error adding school: {e.message}")
            raise StoreUnavailableError() from e

        logger.info(f"Registered school {created.id}: {created.name} ({created.county})")
        return created

    async def _reread_winner(
        self,
        name: str,
        county: str,
        violation: StoreUniqueViolation,
    ) -> SchoolRecord:
        """Return the record another caller created first."""
        try:
            winner = await self._store.find_by_name(name, county)
        except StoreError as e:
            logger.error(f"Error re-reading school after unique violation: {e.message}")
            raise StoreUnavailableError() from e

        if winner is None:
            logger.error(
                f"Unique violation for '{name}' in {county} but no matching school found"
            )
            raise StoreUnavailableError() from violation

        return winner
