"""
Python client for the storefront API.

`StorefrontClient` mirrors the server resources one call per endpoint. Every
call goes through a `Store`, which keeps one `Slice` per resource with the
status of the last request (idle, pending, fulfilled, rejected), the last
payload and the last error, so callers can render loading and error states
without tracking requests themselves.

    with httpx.Client(base_url="http://localhost:8000") as http:
        api = StorefrontClient(http)
        api.login("a@b.com", "Pass1234")
        products = api.list_products(page=1, limit=12, sort="price", order="asc")
        api.store["products"].total
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

IDLE = "idle"
PENDING = "pending"
FULFILLED = "fulfilled"
REJECTED = "rejected"


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


@dataclass
class Slice:
    status: str = IDLE
    data: Any = None
    error: Optional[ApiError] = None
    total: Optional[int] = None


@dataclass
class Store:
    slices: Dict[str, Slice] = field(default_factory=dict)

    def __getitem__(self, name: str) -> Slice:
        return self.slices.setdefault(name, Slice())

    def dispatch(self, name: str, call: Callable[[], httpx.Response], keep: bool = True) -> Any:
        """Run `call` while tracking its status under `name`.

        On success the decoded body becomes the slice data (unless keep is
        False, for calls whose body should not replace what is shown). On
        failure the slice is marked rejected and the ApiError is raised.
        """
        state = self[name]
        state.status = PENDING
        state.error = None
        try:
            response = call()
        except httpx.HTTPError as exc:
            state.status = REJECTED
            state.error = ApiError(0, str(exc))
            raise state.error from exc
        if response.is_error:
            try:
                message = response.json().get("message", response.reason_phrase)
            except ValueError:
                message = response.reason_phrase
            state.status = REJECTED
            state.error = ApiError(response.status_code, message)
            logger.debug("%s rejected: %s", name, state.error)
            raise state.error

        body = response.json() if response.content else None
        if "x-total-count" in response.headers:
            state.total = int(response.headers["x-total-count"])
        if keep:
            state.data = body
        state.status = FULFILLED
        return body


class StorefrontClient:
    def __init__(self, http: httpx.Client, store: Optional[Store] = None):
        self.http = http
        self.store = store or Store()
        self._headers: Dict[str, str] = {}

    def use_token(self, token: Optional[str]):
        """Send a bearer token instead of relying on the session cookie."""
        if token:
            self._headers = {"Authorization": f"Bearer {token}"}
        else:
            self._headers = {}

    def _call(self, method: str, url: str, **kwargs) -> Callable[[], httpx.Response]:
        return lambda: self.http.request(method, url, headers=self._headers, **kwargs)

    # auth
    def signup(self, name: str, email: str, password: str) -> Dict[str, Any]:
        return self.store.dispatch("auth", self._call("POST", "/auth/signup", json={"name": name, "email": email, "password": password}))

    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self.store.dispatch("auth", self._call("POST", "/auth/login", json={"email": email, "password": password}))

    def check_auth(self) -> Dict[str, Any]:
        return self.store.dispatch("auth", self._call("GET", "/auth/check-auth"))

    def logout(self):
        self.store.dispatch("auth", self._call("POST", "/auth/logout"), keep=False)
        self.store["auth"].data = None
        self.use_token(None)

    # catalog
    def list_products(self, **params) -> List[Dict[str, Any]]:
        query = {k: v for k, v in params.items() if v is not None}
        return self.store.dispatch("products", self._call("GET", "/products", params=query))

    def get_product(self, product_id: str) -> Dict[str, Any]:
        return self.store.dispatch("product", self._call("GET", f"/products/{product_id}"))

    def list_brands(self) -> List[Dict[str, Any]]:
        return self.store.dispatch("brands", self._call("GET", "/brands"))

    def list_categories(self) -> List[Dict[str, Any]]:
        return self.store.dispatch("categories", self._call("GET", "/categories"))

    # cart
    def add_to_cart(self, product_id: str, quantity: int = 1) -> Dict[str, Any]:
        item = self.store.dispatch("cart", self._call("POST", "/cart", json={"product": product_id, "quantity": quantity}), keep=False)
        self.store["cart"].data = (self.store["cart"].data or []) + [item]
        return item

    def fetch_cart(self, user_id: str) -> List[Dict[str, Any]]:
        return self.store.dispatch("cart", self._call("GET", f"/cart/{user_id}"))

    def update_cart_item(self, cart_id: str, quantity: int) -> Dict[str, Any]:
        item = self.store.dispatch("cart", self._call("PUT", f"/cart/{cart_id}", json={"quantity": quantity}), keep=False)
        self.store["cart"].data = [item if i["_id"] == item["_id"] else i for i in self.store["cart"].data or []]
        return item

    def remove_cart_item(self, cart_id: str) -> Dict[str, Any]:
        item = self.store.dispatch("cart", self._call("DELETE", f"/cart/{cart_id}"), keep=False)
        self.store["cart"].data = [i for i in self.store["cart"].data or [] if i["_id"] != cart_id]
        return item

    def reset_cart(self, user_id: str):
        self.store.dispatch("cart", self._call("DELETE", f"/cart/user/{user_id}"), keep=False)
        self.store["cart"].data = []

    # orders
    def create_order(self, items: List[Dict[str, Any]], address: List[Dict[str, Any]], payment_mode: str, total: Optional[float] = None) -> Dict[str, Any]:
        payload = {"item": items, "address": address, "paymentMode": payment_mode}
        if total is not None:
            payload["total"] = total
        return self.store.dispatch("order", self._call("POST", "/orders", json=payload))

    def fetch_orders(self, user_id: str) -> List[Dict[str, Any]]:
        return self.store.dispatch("orders", self._call("GET", f"/orders/user/{user_id}"))

    def update_order_status(self, order_id: str, status: str) -> Dict[str, Any]:
        return self.store.dispatch("order", self._call("PUT", f"/orders/{order_id}", json={"status": status}))

    # addresses
    def add_address(self, **address) -> Dict[str, Any]:
        return self.store.dispatch("address", self._call("POST", "/addresses", json=address))

    def fetch_addresses(self, user_id: str) -> List[Dict[str, Any]]:
        return self.store.dispatch("addresses", self._call("GET", f"/addresses/user/{user_id}"))

    # users
    def fetch_user(self, user_id: str) -> Dict[str, Any]:
        return self.store.dispatch("user", self._call("GET", f"/users/{user_id}"))

    def update_user(self, user_id: str, **changes) -> Dict[str, Any]:
        return self.store.dispatch("user", self._call("PATCH", f"/users/{user_id}", json=changes))

    def list_users(self, exclude_admins: bool = False) -> List[Dict[str, Any]]:
        params = {"excludeAdmins": "true"} if exclude_admins else None
        return self.store.dispatch("users", self._call("GET", "/users", params=params))

    def toggle_user_status(self, user_id: str) -> Dict[str, Any]:
        updated = self.store.dispatch("userToggle", self._call("PATCH", f"/users/{user_id}/toggle-status"))
        users = self.store["users"].data
        if users:
            self.store["users"].data = [updated if u["_id"] == updated["_id"] else u for u in users]
        return updated
