"""
Enumerations shared by models and schemas.

Values are stored as plain strings so the database does not need native enum types.
"""

import enum


class Area(str, enum.Enum):
    """Professional area of a member."""

    DEVELOPMENT = "DEVELOPMENT"
    DESIGN = "DESIGN"
    MARKETING = "MARKETING"
    OPERATIONS = "OPERATIONS"
    SALES = "SALES"
    DATA = "DATA"
    FINANCE = "FINANCE"
    OTHER = "OTHER"


class EnglishLevel(str, enum.Enum):
    BASIC = "BASIC"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    NATIVE = "NATIVE"


class WorkPreference(str, enum.Enum):
    REMOTE = "REMOTE"
    HYBRID = "HYBRID"
    ONSITE = "ONSITE"


AREA_LABELS = {
    Area.DEVELOPMENT: "Development",
    Area.DESIGN: "Design",
    Area.MARKETING: "Marketing",
    Area.OPERATIONS: "Operations",
    Area.SALES: "Sales",
    Area.DATA: "Data",
    Area.FINANCE: "Finance",
    Area.OTHER: "Other",
}

ENGLISH_LEVEL_LABELS = {
    EnglishLevel.BASIC: "Basic",
    EnglishLevel.INTERMEDIATE: "Intermediate",
    EnglishLevel.ADVANCED: "Advanced",
    EnglishLevel.NATIVE: "Native",
}

WORK_PREFERENCE_LABELS = {
    WorkPreference.REMOTE: "Remote",
    WorkPreference.HYBRID: "Hybrid",
    WorkPreference.ONSITE: "On-site",
}
