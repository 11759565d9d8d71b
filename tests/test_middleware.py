from datetime import timedelta

from app.application.services import token_service
from tests.factories import bearer, make_product


class TestAuthenticateToken:
    def test_missing_token(self, client, db):
        response = client.get("/cart")
        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "message": "No access token provided",
            "statusCode": 401,
        }

    def test_garbage_token(self, client, db):
        response = client.get("/cart", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid or expired token"

    def test_expired_access_token(self, client, user):
        response = client.get("/cart", headers=bearer(user, expires_delta=timedelta(seconds=-1)))
        assert response.status_code == 401

    def test_refresh_token_is_not_an_access_token(self, client, user):
        refresh = token_service.create_refresh_token(user)
        response = client.get("/cart", headers={"Authorization": f"Bearer {refresh}"})
        assert response.status_code == 401

    def test_deleted_user(self, client, db, user):
        headers = bearer(user)
        db.delete(user)
        db.commit()

        response = client.get("/cart", headers=headers)
        assert response.status_code == 401
        assert response.json()["message"] == "User not found"

    def test_valid_bearer(self, client, user_headers):
        response = client.get("/cart", headers=user_headers)
        assert response.status_code == 200
        assert response.json()["cart"] is None
        assert "X-New-Access-Token" not in response.headers


class TestRefreshFallback:
    def test_refresh_header_reissues_access_token(self, client, user):
        refresh = token_service.create_refresh_token(user)
        response = client.get("/cart", headers={"X-Refresh-Token": refresh})

        assert response.status_code == 200
        new_token = response.headers["X-New-Access-Token"]
        claims = token_service.decode_access_token(new_token)
        assert claims["id"] == user.id
        assert claims["role"] == user.role

    def test_refresh_cookie_reissues_access_token(self, client, user):
        cookie = f"refreshToken={token_service.create_refresh_token(user)}"
        response = client.get("/cart", headers={"Cookie": cookie})

        assert response.status_code == 200
        assert "X-New-Access-Token" in response.headers

    def test_invalid_refresh_token(self, client, db):
        response = client.get("/cart", headers={"X-Refresh-Token": "bogus"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid refresh token"

    def test_bearer_wins_over_refresh_token(self, client, user):
        headers = dict(bearer(user), **{"X-Refresh-Token": token_service.create_refresh_token(user)})
        response = client.get("/cart", headers=headers)

        assert response.status_code == 200
        assert "X-New-Access-Token" not in response.headers

    def test_refresh_claims_are_trusted_for_role(self, client, admin):
        refresh = token_service.create_refresh_token(admin)
        response = client.get("/api/v1/admin/unverified-users", headers={"X-Refresh-Token": refresh})

        assert response.status_code == 200
        assert "X-New-Access-Token" in response.headers


class TestRoles:
    def test_user_cannot_reach_admin_routes(self, client, user_headers):
        response = client.get("/api/v1/admin/unverified-users", headers=user_headers)
        assert response.status_code == 403
        assert response.json()["message"] == "Access denied. Required role: ADMIN"

    def test_admin_routes_require_authentication(self, client, db):
        response = client.get("/api/v1/admin/orders/pending")
        assert response.status_code == 401


class TestOptionalAuth:
    def test_anonymous_sees_only_active_products(self, client, db, category, product):
        make_product(db, category, name="Retired", is_active=False)

        response = client.get("/api/v1/category/products-by-category", params={"categoryId": category.id})

        assert response.status_code == 200
        assert [p["name"] for p in response.json()["products"]] == ["Pixel"]

    def test_admin_sees_inactive_products(self, client, db, category, product, admin_headers):
        make_product(db, category, name="Retired", is_active=False)

        response = client.get(
            "/api/v1/category/products-by-category",
            params={"categoryId": category.id},
            headers=admin_headers,
        )

        assert sorted(p["name"] for p in response.json()["products"]) == ["Pixel", "Retired"]

    def test_bad_token_falls_back_to_anonymous(self, client, db, category, product):
        response = client.get(
            "/api/v1/category/products-by-category",
            params={"categoryId": category.id},
            headers={"Authorization": "Bearer junk"},
        )
        assert response.status_code == 200
        assert len(response.json()["products"]) == 1


def test_request_id_header(client, db):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.headers.get("X-Request-ID")
