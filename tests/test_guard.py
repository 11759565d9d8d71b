import pytest
from apscheduler.schedulers.background import BackgroundScheduler

from app.client.guard import RouteGuard, resolve_route
from app.client.session import SessionStore
from app.client.storage import LocalStorage


@pytest.fixture
def session():
    return SessionStore(LocalStorage(), scheduler=BackgroundScheduler())


@pytest.fixture
def guard(session):
    return RouteGuard(session)


def test_public_routes_always_render(guard):
    for path in ("/", "/login", "/register", "/product/12", "/cart", "/no-such-page"):
        assert guard.navigate(path).allowed


def test_anonymous_is_sent_to_login_with_origin(guard):
    decision = guard.navigate("/profile")
    assert decision.action == "redirect"
    assert decision.to == "/login"
    assert decision.state == {"from": "/profile"}


def test_waits_while_logging_in(session, guard):
    session.begin_login()
    assert guard.navigate("/admin/orders").action == "wait"


def test_user_cannot_open_admin(session, guard):
    session.login({"id": 1, "role": "USER"}, "a", "r")

    decision = guard.navigate("/admin/users")

    assert decision.action == "redirect"
    assert decision.to == "/"
    assert guard.navigate("/profile").allowed


def test_admin_opens_admin(session, guard):
    session.login({"id": 2, "role": "ADMIN"}, "a", "r")
    assert guard.navigate("/admin").allowed
    assert guard.navigate("/admin/credits").allowed


def test_admin_on_user_only_location(session, guard):
    session.login({"id": 2, "role": "ADMIN"}, "a", "r")

    decision = guard.check("/checkout", require_role="USER")

    assert decision.to == "/admin"


def test_after_login_goes_back(session, guard):
    decision = guard.navigate("/profile")
    session.login({"id": 1, "role": "USER"}, "a", "r")

    assert guard.after_login_redirect(decision.state) == "/profile"
    assert guard.after_login_redirect({}) == "/"


def test_route_table():
    assert resolve_route("/product/abc").pattern == "/product/:id"
    assert resolve_route("/admin/orders").require_role == "ADMIN"
    assert resolve_route("/product/1/extra") is None
