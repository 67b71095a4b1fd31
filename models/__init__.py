# -*- coding: utf-8 -*-
"""
Family Registry Data Models
"""

from .individual import Individual, Role, Gender, RoleMatch, RoleMatchKind, FEMALE_ROLES
from .family import Family, FamilyBundle, ShelterType
from .draft import Draft, DraftStatus
from .camp import Camp, Delegate
from .aid import AidParcel, AidDelivery, ParcelStatus
from .notification import Notification
from .user import User

__all__ = [
    "Individual",
    "Role",
    "Gender",
    "RoleMatch",
    "RoleMatchKind",
    "FEMALE_ROLES",
    "Family",
    "FamilyBundle",
    "ShelterType",
    "Draft",
    "DraftStatus",
    "Camp",
    "Delegate",
    "AidParcel",
    "AidDelivery",
    "ParcelStatus",
    "Notification",
    "User",
]
