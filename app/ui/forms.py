"""
Helpers that turn submitted HTML forms into service input.

Browsers send every field as a string; empty inputs mean "not provided" for
optional fields, and an unchecked checkbox is simply absent.
"""

from typing import Any, Dict, Optional

PROFILE_FIELDS = (
    "full_name",
    "email",
    "whatsapp",
    "linkedin_url",
    "area",
    "other_area",
    "current_role",
    "years_experience",
    "english_level",
    "location",
    "work_preference",
)

# Cleared (set to None) when submitted blank on the edit form
CLEARABLE_FIELDS = ("other_area", "location", "notes", "hired_company", "hired_date", "hired_salary_usd")

# Ignored when submitted blank on the edit form
KEEP_WHEN_BLANK = ("area", "english_level", "work_preference", "years_experience", "full_name", "email", "current_role")

HIRE_FIELDS = ("hired_company", "hired_date", "hired_salary_usd")


def _value(form, name: str) -> Optional[str]:
    value = form.get(name)
    return value if isinstance(value, str) else None


def is_checked(form, name: str) -> bool:
    return (_value(form, name) or "").lower() in ("on", "true", "1", "yes")


def profile_fields(form) -> Dict[str, Any]:
    """Fields for create and the public application form."""
    data: Dict[str, Any] = {}
    for name in PROFILE_FIELDS:
        value = _value(form, name)
        if value is not None:
            data[name] = value
    if not (data.get("years_experience") or "").strip():
        data["years_experience"] = 0
    data["willing_to_relocate"] = is_checked(form, "willing_to_relocate")
    return data


def update_fields(form) -> Dict[str, Any]:
    """Fields for the member edit form (partial update)."""
    data: Dict[str, Any] = {}
    for name in (*PROFILE_FIELDS, "notes", *HIRE_FIELDS):
        value = _value(form, name)
        if value is None:
            continue
        if not value.strip():
            if name in CLEARABLE_FIELDS:
                data[name] = None
            elif name in KEEP_WHEN_BLANK:
                continue
            else:
                data[name] = ""
            continue
        data[name] = value
    data["willing_to_relocate"] = is_checked(form, "willing_to_relocate")
    return data


def hire_fields(form) -> Optional[Dict[str, Any]]:
    """Hire info from the board prompt, or None when every field was left blank."""
    data = {name: (_value(form, name) or "").strip() for name in HIRE_FIELDS}
    if not any(data.values()):
        return None
    return data
