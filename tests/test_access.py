"""
Role-based access: Unit Tests

Permission table, dashboard resolution, role URL maps and route guards.
"""
import pytest

from access import (
    ALL,
    BASE_URLS,
    Role,
    get_dashboard_url,
    get_nav_items,
    get_role_based_urls,
    can_access_feature,
    effective_role,
    is_admin,
    normalize_role,
    permissions_for,
    post_login_redirect,
    resolve_route_guard,
    should_redirect_to_admin,
)

ALL_ROLES = [role.value for role in Role]


# ===================================================================
#  Dashboard URLs
# ===================================================================

class TestDashboardUrl:
    def test_admin(self):
        assert get_dashboard_url("admin") == "/admin-dashboard"

    def test_hr_manager(self):
        assert get_dashboard_url("hr_manager") == "/hr-dashboard"

    @pytest.mark.parametrize("role", ["employee", "supervisor", "psychiatrist", "bogus-role", "", None, "ADMIN"])
    def test_everyone_else(self, role):
        assert get_dashboard_url(role) == "/dashboard"

    def test_post_login_redirect(self):
        for role in ALL_ROLES:
            assert post_login_redirect(role) == get_dashboard_url(role)


# ===================================================================
#  Admin redirect
# ===================================================================

class TestAdminRedirect:
    def test_exact_match_only(self):
        assert should_redirect_to_admin("admin")
        assert is_admin("admin")
        for role in ["Admin", "ADMIN", " admin", "admin ", "hr_manager", None]:
            assert not should_redirect_to_admin(role)


# ===================================================================
#  Permissions
# ===================================================================

class TestPermissions:
    def test_employee(self):
        assert can_access_feature("stressScore", "employee")
        assert can_access_feature("taskManagement", "employee")
        assert not can_access_feature("supervisorTaskManagement", "employee")

    @pytest.mark.parametrize("feature", ["users", "stressScore", "anything-at-all", "", ALL])
    def test_admin_can_access_everything(self, feature):
        assert can_access_feature(feature, "admin")

    def test_psychiatrist_has_no_task_management(self):
        assert not can_access_feature("taskManagement", "psychiatrist")
        assert can_access_feature("aiChat", "psychiatrist")

    def test_supervisor_and_hr(self):
        assert can_access_feature("supervisorStressMonitoring", "supervisor")
        assert can_access_feature("teamStressScores", "hr_manager")
        assert not can_access_feature("supervisorStressMonitoring", "hr_manager")

    @pytest.mark.parametrize("role", ["bogus", "", None, "Admin"])
    def test_unknown_role_gets_employee_permissions(self, role):
        assert permissions_for(role) == permissions_for("employee")
        assert normalize_role(role) is Role.EMPLOYEE

    @pytest.mark.parametrize("role", ["employee", "supervisor", "hr_manager", "psychiatrist", "bogus"])
    def test_unknown_feature_denied(self, role):
        assert not can_access_feature("launchMissiles", role)

    def test_all_is_not_a_feature_for_non_admins(self):
        assert not can_access_feature(ALL, "employee")

    def test_permission_lists(self):
        assert permissions_for("admin").to_list() == [ALL]
        assert permissions_for("psychiatrist").to_list() == ["aiChat", "consultants", "dashboard", "stressScore"]

    def test_effective_role(self):
        assert effective_role("supervisor") == "supervisor"
        assert effective_role("nope") == "employee"


# ===================================================================
#  Role URL maps
# ===================================================================

class TestRoleBasedUrls:
    def test_employee_gets_base(self):
        assert get_role_based_urls("employee") == {"dashboard": "/dashboard", **BASE_URLS}

    def test_admin_override(self):
        urls = get_role_based_urls("admin")
        assert urls["dashboard"] == "/admin-dashboard"
        assert urls["consultants"] == "/admin/consultants"
        assert urls["users"] == "/admin/users"
        assert urls["stressScore"] == "/stress-score"

    def test_supervisor_extras(self):
        urls = get_role_based_urls("supervisor")
        assert urls["supervisorTaskManagement"] == "/supervisor/task-management"
        assert urls["teamBookings"] == "/consultant/team-bookings"
        assert urls["dashboard"] == "/dashboard"

    def test_hr_manager_extras(self):
        urls = get_role_based_urls("hr_manager")
        assert urls["dashboard"] == "/hr-dashboard"
        assert urls["hrDashboard"] == "/hr-dashboard"
        assert urls["teamStressScores"] == "/stress/team-scores"

    def test_unknown_role(self):
        assert get_role_based_urls("bogus") == get_role_based_urls("employee")

    def test_fresh_dict(self):
        urls = get_role_based_urls("employee")
        urls["stressScore"] = "/hacked"
        assert get_role_based_urls("employee")["stressScore"] == "/stress-score"
        assert BASE_URLS["stressScore"] == "/stress-score"

    def test_every_role_is_total(self):
        for role in ALL_ROLES + ["x", None]:
            urls = get_role_based_urls(role)
            assert set(BASE_URLS) <= set(urls)
            assert urls["dashboard"] == get_dashboard_url(role)


# ===================================================================
#  Navigation
# ===================================================================

class TestNavItems:
    def test_public(self):
        paths = [item["path"] for item in get_nav_items(None, is_authenticated=False)]
        assert paths == ["/", "/features", "/about", "/contact"]

    def test_admin(self):
        assert get_nav_items("admin") == [{"path": "/admin-dashboard", "label": "Admin Dashboard"}]

    def test_supervisor(self):
        labels = [item["label"] for item in get_nav_items("supervisor")]
        assert "Team Tasks" in labels and "Team Stress" in labels

    def test_others(self):
        assert get_nav_items("hr_manager") == get_nav_items("employee")
        assert get_nav_items("employee")[0] == {"path": "/dashboard", "label": "Dashboard"}


# ===================================================================
#  Route guard
# ===================================================================

class TestRouteGuard:
    def test_unauthenticated(self):
        decision = resolve_route_guard("admin", is_authenticated=False)
        assert not decision.allowed
        assert decision.redirect_to == "/signin"

    def test_authenticated_without_requirement(self):
        assert resolve_route_guard("employee", True).allowed

    def test_role_mismatch(self):
        decision = resolve_route_guard("employee", True, required_role="admin")
        assert decision.to_dict() == {"allowed": False, "redirect_to": "/dashboard"}

    def test_role_match(self):
        assert resolve_route_guard("admin", True, required_role="admin").allowed
