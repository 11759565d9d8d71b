"""HTTP client for the storefront backend, bound to a SessionStore.

Every request carries the session's bearer token. A 401 triggers one
refresh-and-retry; when the refresh fails the session is logged out.
"""

from typing import Any, Optional

import httpx
import structlog

from app.client.cart import CartStore
from app.client.session import SessionStore
from app.client.storage import LocalStorage
from app.config import get_settings
from app.core.exceptions import ErrorResponse
from app.core.middleware import NEW_ACCESS_TOKEN_HEADER

settings = get_settings()
logger = structlog.get_logger(__name__)

REFRESH_PATH = f"{settings.API_PREFIX}/user/refresh"


class StorefrontClient:
    def __init__(self, session: SessionStore, http: Optional[httpx.Client] = None):
        self.session = session
        self.http = http or httpx.Client(
            base_url=settings.API_ROOT_URL.rstrip("/"),
            timeout=settings.API_TIMEOUT_SECONDS,
        )
        if self.session.refresher is None:
            self.session.refresher = self._refresh_with

    def close(self) -> None:
        self.http.close()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.session.access_token:
            headers["Authorization"] = f"Bearer {self.session.access_token}"
        return headers

    def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            return self.http.request(method, path, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            logger.error("Backend unreachable", method=method, path=path, error=str(e))
            raise ErrorResponse(f"Network error: {e}", 503) from e

    def _request(self, method: str, path: str, retry: bool = True, **kwargs) -> dict[str, Any]:
        response = self._send(method, path, **kwargs)

        if response.status_code == 401 and retry and self.session.refresh_token:
            new_token = self.refresh_access_token()
            if new_token:
                self.session.set_token(new_token)
                response = self._send(method, path, **kwargs)
            else:
                self.session.logout()

        reissued = response.headers.get(NEW_ACCESS_TOKEN_HEADER)
        if reissued:
            self.session.set_token(reissued)

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.is_error:
            message = data.get("message") if isinstance(data, dict) else None
            raise ErrorResponse(message or response.reason_phrase or "Request failed", response.status_code)
        return data

    def _api(self, path: str) -> str:
        return f"{settings.API_PREFIX}{path}"

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def _refresh_with(self, refresh_token: str) -> Optional[str]:
        try:
            data = self._request("POST", REFRESH_PATH, retry=False, json={"refreshToken": refresh_token})
        except ErrorResponse as e:
            logger.warning("Refresh rejected", status_code=e.status_code, reason=e.message)
            return None
        return data.get("accessToken")

    def refresh_access_token(self) -> Optional[str]:
        if not self.session.refresh_token:
            return None
        return self._refresh_with(self.session.refresh_token)

    def register(self, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", self._api("/user/register"), json=payload)

    def login(self, email: str, password: str, remember_me: bool = False) -> dict[str, Any]:
        self.session.begin_login()
        try:
            data = self._request("POST", self._api("/user/login"), retry=False, json={"email": email, "password": password})
        except ErrorResponse:
            self.session.login_failed()
            raise
        self.session.login(data["user"], data["accessToken"], data["refreshToken"], remember_me)
        return data

    def logout(self) -> None:
        self.session.logout()

    def forgot_password(self, email: str) -> dict[str, Any]:
        return self._request("POST", self._api("/user/forgot-password"), json={"email": email})

    def verify_otp(self, token: str, otp) -> dict[str, Any]:
        return self._request("POST", self._api("/user/verify-otp"), json={"token": token, "otp": otp})

    def reset_password(self, token: str, password: str) -> dict[str, Any]:
        return self._request("POST", self._api("/user/reset-password"), json={"token": token, "password": password})

    def resend_verification_otp(self, email: str) -> dict[str, Any]:
        return self._request("POST", self._api("/user/resend-verification-otp"), json={"email": email})

    def resend_forgot_password_otp(self, email: str) -> dict[str, Any]:
        return self._request("POST", self._api("/user/resend-forgot-password-otp"), json={"email": email})

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def get_categories(self) -> list[dict[str, Any]]:
        return self._request("GET", self._api("/category/getCatergory"))["categories"]

    def get_products_by_category(self, category_id: int) -> list[dict[str, Any]]:
        data = self._request("GET", self._api("/category/products-by-category"), params={"categoryId": category_id})
        return data["products"]

    def get_product(self, product_id: int) -> dict[str, Any]:
        return self._request("GET", self._api("/category/getProduct"), params={"productId": product_id})["product"]

    # ------------------------------------------------------------------
    # Cart and orders (served from the root, outside the API prefix)
    # ------------------------------------------------------------------

    def add_to_cart(self, product_id: int, color: str, size: str, quantity: int = 1) -> dict[str, Any]:
        payload = {"productId": product_id, "color": color, "size": size, "quantity": quantity}
        return self._request("POST", "/cart", json=payload)["item"]

    def get_cart(self) -> Optional[dict[str, Any]]:
        return self._request("GET", "/cart")["cart"]

    def place_order(
        self,
        items: Optional[list[dict[str, Any]]] = None,
        payment_option: str = "FULL_PAYMENT",
        total: Optional[float] = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"paymentOption": payment_option}
        if items is not None:
            payload["items"] = items
        if total is not None:
            payload["total"] = total
        return self._request("POST", "/orders", json=payload)["order"]

    def get_orders(self) -> list[dict[str, Any]]:
        return self._request("GET", "/orders")["orders"]

    def checkout(self, cart: CartStore, payment_option: str = "FULL_PAYMENT") -> dict[str, Any]:
        """Order the local cart's lines and empty it once the order is accepted."""
        order = self.place_order(cart.as_order_items(), payment_option, total=cart.total)
        cart.clear_cart()
        return order

    # ------------------------------------------------------------------
    # Admin console
    # ------------------------------------------------------------------

    def get_unverified_users(self) -> list[dict[str, Any]]:
        return self._request("GET", self._api("/admin/unverified-users"))["users"]

    def verify_user(self, user_id: int) -> dict[str, Any]:
        return self._request("PATCH", self._api("/admin/verifyUser"), params={"userId": user_id})["user"]

    def create_category(self, category_name: str, image_url: str) -> dict[str, Any]:
        payload = {"categoryName": category_name, "imageUrl": image_url}
        return self._request("POST", self._api("/admin/create-category"), json=payload)["category"]

    def create_product(self, category_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request(
            "POST", self._api("/admin/create-product"), params={"categoryId": category_id}, json=payload
        )["product"]

    def get_pending_orders(self) -> list[dict[str, Any]]:
        return self._request("GET", self._api("/admin/orders/pending"))["pendingOrders"]

    def approve_order(self, order_id, new_status: str = "paid") -> dict[str, Any]:
        payload = {"orderId": order_id, "newStatus": new_status}
        return self._request("POST", self._api("/admin/orders/approve"), json=payload)

    def mark_order_shipped(self, order_id: int) -> dict[str, Any]:
        return self._request("POST", self._api("/admin/orders/shipped"), json={"orderId": order_id})

    def set_credit_limit(self, user_id: int, credit_bal: float) -> dict[str, Any]:
        payload = {"userId": user_id, "creditBal": credit_bal}
        return self._request("POST", self._api("/admin/set-credit-limit"), json=payload)["user"]

    def update_credit_limit(self, user_id: int, new_credit: float) -> dict[str, Any]:
        payload = {"userId": user_id, "newCredit": new_credit}
        return self._request("POST", self._api("/admin/update-credit-limit"), json=payload)["user"]


def connect(storage_path: Optional[str] = None, http: Optional[httpx.Client] = None) -> tuple[StorefrontClient, CartStore]:
    """Open a client over persistent local storage, restoring a remembered session."""
    storage = LocalStorage(storage_path or settings.CLIENT_STORAGE_PATH)
    session = SessionStore(storage)
    client = StorefrontClient(session, http=http)
    session.initialize_auth()
    return client, CartStore(storage)
