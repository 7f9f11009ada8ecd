"""
Client-side session holder for the restaurant API.

An AuthSession is an explicit object: create one per user session and pass
it to whatever needs to call the API. It keeps the token and the loaded user,
adds the x-auth-token header to protected calls and derives is_admin from
the loaded user every time it is asked.
"""
from typing import Any, Dict, List, Optional
import httpx
from utils.logger import get_logger

logger = get_logger("Client_Session")

AUTH_HEADER = "x-auth-token"


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, detail: Any):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class NotAuthenticated(Exception):
    """A protected call was attempted without a logged-in session."""


def _detail(response: httpx.Response) -> Any:
    try:
        return response.json().get("detail")
    except (ValueError, AttributeError):
        return response.text


class AuthSession:
    def __init__(self, base_url: str = "", http: Optional[httpx.Client] = None, timeout: float = 10.0):
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self.token: Optional[str] = None
        self.user: Optional[Dict[str, Any]] = None
        self.error: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None and self.user is not None

    @property
    def is_admin(self) -> bool:
        return bool(self.user) and self.user.get("role") == "admin"

    def headers(self) -> Dict[str, str]:
        return {AUTH_HEADER: self.token} if self.token else {}

    def require_auth(self) -> None:
        if not self.is_authenticated:
            raise NotAuthenticated("Login required")

    def require_admin(self) -> None:
        self.require_auth()
        if not self.is_admin:
            raise NotAuthenticated("Admin login required")

    # --- session lifecycle -------------------------------------------------

    def _start(self, path: str, payload: dict, fallback_error: str) -> bool:
        self.error = None
        try:
            response = self.http.post(path, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Request to {path} failed: {e}")
            self.error = "Server error. Please try again."
            return False
        if response.is_success:
            self.token = response.json()["token"]
            return self.load_user()
        self.error = _detail(response) or fallback_error
        return False

    def register(self, name: str, email: str, password: str) -> bool:
        return self._start("/api/auth/register", {"name": name, "email": email, "password": password}, "Registration failed")

    def login(self, email: str, password: str) -> bool:
        return self._start("/api/auth/login", {"email": email, "password": password}, "Invalid credentials")

    def load_user(self) -> bool:
        """Fetch the current user for the stored token; a rejected token ends the session."""
        if not self.token:
            self.logout()
            return False
        try:
            response = self.http.get("/api/auth/user", headers=self.headers())
        except httpx.HTTPError as e:
            logger.error(f"Error loading user: {e}")
            self.logout()
            return False
        if not response.is_success:
            self.logout()
            return False
        self.user = response.json()
        return True

    def logout(self) -> None:
        self.token = None
        self.user = None

    # --- API calls ---------------------------------------------------------

    def _call(self, method: str, path: str, auth: bool = False, **kwargs) -> Any:
        if auth:
            self.require_auth()
            kwargs["headers"] = {**kwargs.get("headers", {}), **self.headers()}
        response = self.http.request(method, path, **kwargs)
        if not response.is_success:
            raise ApiError(response.status_code, _detail(response))
        return response.json()

    def list_menu(self, menu_type: Optional[str] = None) -> List[dict]:
        params = {"type": menu_type} if menu_type else None
        return self._call("GET", "/api/menu", params=params)

    def get_menu_item(self, item_id: str) -> dict:
        return self._call("GET", f"/api/menu/{item_id}")

    def create_menu_item(self, fields: Dict[str, Any], image: tuple) -> dict:
        """image is an httpx file tuple: (filename, content, content_type)"""
        return self._call("POST", "/api/menu", auth=True, data=fields, files={"image": image})

    def update_menu_item(self, item_id: str, fields: Dict[str, Any], image: Optional[tuple] = None) -> dict:
        files = {"image": image} if image else None
        return self._call("PUT", f"/api/menu/{item_id}", auth=True, data=fields, files=files)

    def delete_menu_item(self, item_id: str) -> dict:
        return self._call("DELETE", f"/api/menu/{item_id}", auth=True)

    def create_booking(self, booking: Dict[str, Any]) -> dict:
        return self._call("POST", "/api/booking", auth=True, json=booking)

    def my_bookings(self) -> List[dict]:
        return self._call("GET", "/api/booking/user", auth=True)

    def list_bookings(self) -> List[dict]:
        return self._call("GET", "/api/booking", auth=True)

    def search_bookings(self, query: str) -> List[dict]:
        return self._call("GET", "/api/booking/search", auth=True, params={"query": query})

    def delete_booking(self, booking_id: str) -> dict:
        return self._call("DELETE", f"/api/booking/{booking_id}", auth=True)

    def send_contact(self, contact: Dict[str, Any]) -> dict:
        return self._call("POST", "/api/contact", json=contact)

    def list_contacts(self) -> List[dict]:
        return self._call("GET", "/api/contact", auth=True)

    def search_contacts(self, query: str) -> List[dict]:
        return self._call("GET", "/api/contact/search", auth=True, params={"query": query})

    def delete_contact(self, contact_id: str) -> dict:
        return self._call("DELETE", f"/api/contact/{contact_id}", auth=True)
