"""
Role permission table.

Maps a role string to the set of features it may use. Any string resolves:
roles outside the table get the employee permissions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional


# ============================================================================
# ROLES
# ============================================================================

class Role(str, Enum):
    """Roles issued by the authentication service."""
    ADMIN = "admin"
    HR_MANAGER = "hr_manager"
    SUPERVISOR = "supervisor"
    PSYCHIATRIST = "psychiatrist"
    EMPLOYEE = "employee"


# Role used for any unrecognized role string
FALLBACK_ROLE = Role.EMPLOYEE

KNOWN_ROLES = {role.value: role for role in Role}


def normalize_role(role: Optional[str]) -> Role:
    """Resolve a role string to a known Role (exact match) or the fallback role."""
    if isinstance(role, Role):
        return role
    return KNOWN_ROLES.get(role, FALLBACK_ROLE)


# ============================================================================
# PERMISSIONS
# ============================================================================

ALL = "all"


@dataclass(frozen=True)
class PermissionSet:
    """Features granted to a role; ``grants_all`` short-circuits every check."""
    features: FrozenSet[str] = frozenset()
    grants_all: bool = False

    def __contains__(self, feature: str) -> bool:
        return self.grants_all or feature in self.features

    def to_list(self):
        if self.grants_all:
            return [ALL]
        return sorted(self.features)


ROLE_PERMISSIONS: Dict[Role, PermissionSet] = {
    Role.ADMIN: PermissionSet(grants_all=True),
    Role.SUPERVISOR: PermissionSet(frozenset({
        "dashboard", "stressScore", "aiChat", "consultants", "taskManagement",
        "supervisorTaskManagement", "supervisorStressMonitoring",
        "teamBookings", "teamStressScores",
    })),
    Role.HR_MANAGER: PermissionSet(frozenset({
        "dashboard", "stressScore", "aiChat", "consultants", "taskManagement",
        "teamBookings", "teamStressScores",
    })),
    Role.PSYCHIATRIST: PermissionSet(frozenset({
        "dashboard", "stressScore", "aiChat", "consultants",
    })),
    Role.EMPLOYEE: PermissionSet(frozenset({
        "dashboard", "stressScore", "aiChat", "consultants", "taskManagement",
    })),
}


def permissions_for(role: Optional[str]) -> PermissionSet:
    """Permission set of a role; unknown roles get the employee set."""
    return ROLE_PERMISSIONS[normalize_role(role)]


def can_access_feature(feature: str, role: Optional[str]) -> bool:
    return feature in permissions_for(role)


def should_redirect_to_admin(role: Optional[str]) -> bool:
    # Exact and case-sensitive: "Admin" is not an admin
    return role == Role.ADMIN.value


def is_admin(role: Optional[str]) -> bool:
    return should_redirect_to_admin(role)
