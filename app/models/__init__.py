"""
Models package.

Import all models here so they are registered with SQLAlchemy.
This file also makes it easy to import models from one place.
"""

from app.models.user import User
from app.models.stage import Stage
from app.models.member import Member, AreaSelection
from app.models.referral import Referral

# Export all models
__all__ = [
    "User",
    "Stage",
    "Member",
    "AreaSelection",
    "Referral",
]
