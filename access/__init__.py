"""
Role-based access and routing for the MindEase wellness dashboard.

Usage:
    from access import get_dashboard_url, can_access_feature
    get_dashboard_url("hr_manager")                   # "/hr-dashboard"
    can_access_feature("stressScore", "employee")     # True

Package Structure:
    - roles.py: Roles and the role permission table
    - routes.py: Dashboard URLs, role URL maps and navigation items
    - guard.py: Protected route decisions
"""

from .roles import (
    Role,
    ALL,
    FALLBACK_ROLE,
    PermissionSet,
    ROLE_PERMISSIONS,
    normalize_role,
    permissions_for,
    can_access_feature,
    should_redirect_to_admin,
    is_admin,
)

from .routes import (
    ADMIN_DASHBOARD_URL,
    HR_DASHBOARD_URL,
    DEFAULT_DASHBOARD_URL,
    SIGNIN_URL,
    BASE_URLS,
    ROLE_URL_OVERRIDES,
    get_dashboard_url,
    get_role_based_urls,
    get_nav_items,
)

from .guard import (
    GuardDecision,
    resolve_route_guard,
    post_login_redirect,
    effective_role,
)


__all__ = [
    # Roles
    "Role",
    "ALL",
    "FALLBACK_ROLE",
    "PermissionSet",
    "ROLE_PERMISSIONS",
    "normalize_role",
    "permissions_for",
    "can_access_feature",
    "should_redirect_to_admin",
    "is_admin",

    # Routes
    "ADMIN_DASHBOARD_URL",
    "HR_DASHBOARD_URL",
    "DEFAULT_DASHBOARD_URL",
    "SIGNIN_URL",
    "BASE_URLS",
    "ROLE_URL_OVERRIDES",
    "get_dashboard_url",
    "get_role_based_urls",
    "get_nav_items",

    # Guard
    "GuardDecision",
    "resolve_route_guard",
    "post_login_redirect",
    "effective_role",
]
