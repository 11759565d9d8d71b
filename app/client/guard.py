"""Route guard: decides per navigation whether to render, wait, or redirect."""

import re
from dataclasses import dataclass, field
from typing import Optional

from app.client.session import SessionStore
from app.domain.models.user import ROLE_ADMIN, ROLE_USER

LOGIN_PATH = "/login"
HOME_PATH = "/"
ADMIN_HOME_PATH = "/admin"


@dataclass(frozen=True)
class Route:
    pattern: str
    protected: bool = False
    require_role: Optional[str] = None

    def matches(self, path: str) -> bool:
        regex = "^" + re.sub(r":[A-Za-z_]+", r"[^/]+", self.pattern) + "$"
        return re.match(regex, path) is not None


ROUTES = [
    Route("/"),
    Route("/login"),
    Route("/register"),
    Route("/product/:id"),
    Route("/cart"),
    Route("/profile", protected=True),
    Route("/admin", protected=True, require_role=ROLE_ADMIN),
    Route("/admin/users", protected=True, require_role=ROLE_ADMIN),
    Route("/admin/categories", protected=True, require_role=ROLE_ADMIN),
    Route("/admin/products", protected=True, require_role=ROLE_ADMIN),
    Route("/admin/orders", protected=True, require_role=ROLE_ADMIN),
    Route("/admin/credits", protected=True, require_role=ROLE_ADMIN),
]


@dataclass
class GuardDecision:
    action: str  # allow, wait, redirect
    to: Optional[str] = None
    state: dict = field(default_factory=dict)

    @property
    def allowed(self) -> bool:
        return self.action == "allow"


def resolve_route(path: str) -> Optional[Route]:
    return next((route for route in ROUTES if route.matches(path)), None)


class RouteGuard:
    def __init__(self, session: SessionStore):
        self.session = session

    def check(self, location: str, require_role: Optional[str] = None) -> GuardDecision:
        """Gate a protected location, remembering where the user was headed."""
        if self.session.is_loading:
            return GuardDecision("wait")

        if not self.session.is_auth:
            return GuardDecision("redirect", to=LOGIN_PATH, state={"from": location})

        if require_role and self.session.role != require_role:
            home = ADMIN_HOME_PATH if self.session.role == ROLE_ADMIN and require_role == ROLE_USER else HOME_PATH
            return GuardDecision("redirect", to=home)

        return GuardDecision("allow")

    def navigate(self, location: str) -> GuardDecision:
        path = location.split("?", 1)[0]
        route = resolve_route(path)
        # Unknown and public paths render directly (the not-found page included)
        if route is None or not route.protected:
            return GuardDecision("allow")
        return self.check(location, route.require_role)

    def after_login_redirect(self, decision_state: dict) -> str:
        """Where to send the user once they have logged in from a guard redirect."""
        origin = decision_state.get("from")
        if origin and origin != LOGIN_PATH:
            return origin
        return ADMIN_HOME_PATH if self.session.role == ROLE_ADMIN else HOME_PATH
