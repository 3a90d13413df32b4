"""
County Catalogue

The closed set of Kenyan counties a school may belong to, and the two-digit
county codes used when generating staff display names.

Codes follow alphabetical order of the county name: Baringo -> "01",
Bomet -> "02", and so on.
"""

import secrets

KENYAN_COUNTIES: tuple[str, ...] = (
    "Mombasa",
    "Kwale",
    "Kilifi",
    "Tana River",
    "Lamu",
    "Taita-Taveta",
    "Garissa",
    "Wajir",
    "Mandera",
    "Marsabit",
    "Isiolo",
    "Meru",
    "Tharaka-Nithi",
    "Embu",
    "Kitui",
    "Machakos",
    "Makueni",
    "Nyandarua",
    "Nyeri",
    "Kirinyaga",
    "Murang'a",
    "Kiambu",
    "Turkana",
    "West Pokot",
    "Samburu",
    "Trans Nzoia",
    "Uasin Gishu",
    "Elgeyo-Marakwet",
    "Nandi",
    "Baringo",
    "Laikipia",
    "Nakuru",
    "Narok",
    "Kajiado",
    "Kericho",
    "Bomet",
    "Kakamega",
    "Vihiga",
    "Bungoma",
    "Busia",
    "Siaya",
    "Kisumu",
    "Homa Bay",
    "Migori",
    "Kisii",
    "Nyamira",
    "Nairobi",
)

COUNTY_CODES: dict[str, str] = {
    county: f"{index:02d}" for index, county in enumerate(sorted(KENYAN_COUNTIES), start=1)
}

UNKNOWN_COUNTY_CODE = "00"


def is_valid_county(county: str) -> bool:
    """Check whether a county name is one of the 47 known counties."""
    return county in COUNTY_CODES


def get_county_code(county: str) -> str:
    """Get the two-digit code for a county, or "00" when unknown."""
    return COUNTY_CODES.get(county, UNKNOWN_COUNTY_CODE)


def generate_display_name(role: str, county: str | None) -> str | None:
    """
    Build a display name for a staff account at sign-up.

    Staff accounts get <ROLEPREFIX><county code><4 random digits, 1000-9999>, e.g.
    "COUNTYOFFICER301234" for a county officer in Nairobi. Students and
    accounts without a county get no generated name.

    Args:
        role: Role name such as "COUNTY_OFFICER" or "TEACHER"
        county: County the account belongs to (optional)

    Returns:
        The generated display name, or None
    """
    if role == "STUDENT" or not county:
        return None

    role_prefix = role.replace("_", "", 1).upper()
    suffix = 1000 + secrets.randbelow(9000)
    return f"{role_prefix}{get_county_code(county)}{suffix}"
