"""
Protected route decisions.

Given what the session provider knows about the visitor, decide whether a
protected page renders or where to send them instead.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .roles import normalize_role
from .routes import DEFAULT_DASHBOARD_URL, SIGNIN_URL, get_dashboard_url


@dataclass(frozen=True)
class GuardDecision:
    allowed: bool
    redirect_to: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"allowed": self.allowed, "redirect_to": self.redirect_to}


def resolve_route_guard(role: Optional[str], is_authenticated: bool,
                        required_role: Optional[str] = None) -> GuardDecision:
    """
    Decide access to a protected route.

    - Not signed in: redirect to the sign-in page.
    - A required role that does not match exactly: redirect to the
      generic dashboard.
    - Otherwise the page renders.
    """
    if not is_authenticated:
        return GuardDecision(allowed=False, redirect_to=SIGNIN_URL)

    if required_role and role != required_role:
        return GuardDecision(allowed=False, redirect_to=DEFAULT_DASHBOARD_URL)

    return GuardDecision(allowed=True)


def post_login_redirect(role: Optional[str]) -> str:
    """Where to land right after a successful sign-in."""
    return get_dashboard_url(role)


def effective_role(role: Optional[str]) -> str:
    """Role string the session should act as (signed-in users without a role act as employees)."""
    return normalize_role(role).value
