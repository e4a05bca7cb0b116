"""
Role-based dashboard and feature routes.

URL maps are built in two steps: the base feature routes every role
shares, then the role's own entries applied on top (same key replaces the
base route).
"""

from typing import Dict, List, Optional

from .roles import Role, normalize_role


ADMIN_DASHBOARD_URL = "/admin-dashboard"
HR_DASHBOARD_URL = "/hr-dashboard"
DEFAULT_DASHBOARD_URL = "/dashboard"
SIGNIN_URL = "/signin"

DASHBOARD_URLS: Dict[Role, str] = {
    Role.ADMIN: ADMIN_DASHBOARD_URL,
    Role.HR_MANAGER: HR_DASHBOARD_URL,
}

BASE_URLS: Dict[str, str] = {
    "stressScore": "/stress-score",
    "aiChat": "/ai-chat",
    "consultants": "/consultants",
    "taskManagement": "/task-management",
}

ROLE_URL_OVERRIDES: Dict[Role, Dict[str, str]] = {
    Role.ADMIN: {
        "users": "/admin/users",
        "departments": "/admin/departments",
        "teams": "/admin/teams",
        "consultants": "/admin/consultants",
    },
    Role.SUPERVISOR: {
        "supervisorTaskManagement": "/supervisor/task-management",
        "supervisorStressMonitoring": "/supervisor/stress-monitoring",
        "teamBookings": "/consultant/team-bookings",
        "teamStressScores": "/stress/team-scores",
    },
    Role.HR_MANAGER: {
        "hrDashboard": HR_DASHBOARD_URL,
        "teamBookings": "/consultant/team-bookings",
        "teamStressScores": "/stress/team-scores",
    },
}


def get_dashboard_url(role: Optional[str]) -> str:
    """Landing page after sign-in. Every role without its own dashboard gets /dashboard."""
    return DASHBOARD_URLS.get(normalize_role(role), DEFAULT_DASHBOARD_URL)


def get_role_based_urls(role: Optional[str]) -> Dict[str, str]:
    """Feature name -> route for a role. Returns a new dict on every call."""
    urls = {"dashboard": get_dashboard_url(role)}
    urls.update(BASE_URLS)
    urls.update(ROLE_URL_OVERRIDES.get(normalize_role(role), {}))
    return urls


# ============================================================================
# NAVIGATION
# ============================================================================

PUBLIC_NAV_ITEMS = [
    {"path": "/", "label": "Home"},
    {"path": "/features", "label": "Features"},
    {"path": "/about", "label": "About"},
    {"path": "/contact", "label": "Contact"},
]

AUTHENTICATED_NAV_ITEMS = [
    {"path": "/dashboard", "label": "Dashboard"},
    {"path": "/task-management", "label": "Task Management"},
    {"path": "/stress-score", "label": "Stress Assessment"},
    {"path": "/ai-chat", "label": "AI Chat"},
    {"path": "/consultants", "label": "Consultants"},
]

SUPERVISOR_NAV_ITEMS = [
    {"path": "/dashboard", "label": "Dashboard"},
    {"path": "/supervisor/task-management", "label": "Team Tasks"},
    {"path": "/supervisor/stress-monitoring", "label": "Team Stress"},
    {"path": "/task-management", "label": "My Tasks"},
    {"path": "/stress-score", "label": "My Stress"},
    {"path": "/ai-chat", "label": "AI Chat"},
    {"path": "/consultants", "label": "Consultants"},
]

ADMIN_NAV_ITEMS = [
    {"path": ADMIN_DASHBOARD_URL, "label": "Admin Dashboard"},
]


def get_nav_items(role: Optional[str], is_authenticated: bool = True) -> List[Dict[str, str]]:
    """Navigation bar entries for a visitor (signed out) or a signed-in role."""
    if not is_authenticated:
        items = PUBLIC_NAV_ITEMS
    elif role == Role.ADMIN.value:
        items = ADMIN_NAV_ITEMS
    elif role == Role.SUPERVISOR.value:
        items = SUPERVISOR_NAV_ITEMS
    else:
        items = AUTHENTICATED_NAV_ITEMS
    return [dict(item) for item in items]
