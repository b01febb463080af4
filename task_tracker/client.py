"""HTTP client for the task API.

Login state lives in an explicit ``ClientSession`` that callers pass around;
nothing here reads or writes module-level state.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

PENDING = "Pending"
COMPLETED = "Completed"
MIN_PASSWORD_LENGTH = 6


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


def _error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.reason_phrase
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return resp.reason_phrase


@dataclass
class ClientSession:
    base_url: str
    token: Optional[str] = None
    user: Optional[Dict[str, Any]] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def clear(self) -> None:
        self.token = None
        self.user = None


class TaskClient:
    def __init__(self, session: ClientSession, transport: Optional[httpx.BaseTransport] = None, timeout: float = 10.0):
        self.session = session
        self._http = httpx.Client(base_url=session.base_url, transport=transport, timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "TaskClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _send(self, method: str, path: str, headers: Optional[Dict[str, str]] = None, **kwargs) -> Any:
        resp = self._http.request(method, path, headers=headers, **kwargs)
        if resp.is_error:
            message = _error_message(resp)
            logger.debug("%s %s -> %s %s", method, path, resp.status_code, message)
            raise ApiError(resp.status_code, message)
        return resp.json()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        if not self.session.is_authenticated:
            raise ApiError(401, "Not authenticated")
        headers = {"Authorization": f"Bearer {self.session.token}"}
        return self._send(method, path, headers=headers, **kwargs)

    def _start_session(self, path: str, body: Dict[str, str]) -> Dict[str, Any]:
        data = self._send("POST", path, json=body)
        self.session.token = data.get("token")
        self.session.user = data.get("user")
        if not self.session.is_authenticated:
            raise ApiError(502, "Auth service returned no token")
        return data

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """Sign in through the external auth service and fill the session."""
        if not email or not password:
            raise ValueError("Please fill in all fields")
        return self._start_session("/auth/login", {"email": email, "password": password})

    def register(self, name: str, email: str, password: str, confirm_password: str) -> Dict[str, Any]:
        """Create an account; the auth service signs the new user in straight away."""
        name, email = name.strip(), email.strip()
        if not name:
            raise ValueError("Name is required")
        if not email:
            raise ValueError("Email is required")
        if not password:
            raise ValueError("Password is required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        if password != confirm_password:
            raise ValueError("Passwords do not match")
        return self._start_session("/auth/register", {"name": name, "email": email, "password": password})

    def logout(self) -> None:
        self.session.clear()

    def list_tasks(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"status": status} if status else None
        return self._request("GET", "/tasks", params=params)

    def get_task(self, task_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/tasks/{task_id}")

    def create_task(
        self,
        title: str,
        description: str = "",
        due_date: Optional[str] = None,
        priority: str = "Medium",
        status: str = PENDING,
    ) -> Dict[str, Any]:
        title = title.strip()
        if not title:
            raise ValueError("Title is required")
        body = {
            "title": title,
            "description": description.strip(),
            "dueDate": due_date or None,
            "priority": priority,
            "status": status,
        }
        return self._request("POST", "/tasks", json=body)

    def update_task(self, task_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        body = dict(fields)
        if "title" in body:
            body["title"] = (body["title"] or "").strip()
            if not body["title"]:
                raise ValueError("Title is required")
        if isinstance(body.get("description"), str):
            body["description"] = body["description"].strip()
        return self._request("PUT", f"/tasks/{task_id}", json=body)

    def delete_task(self, task_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/tasks/{task_id}")

    def toggle_status(self, task: Dict[str, Any]) -> Dict[str, Any]:
        new_status = PENDING if task.get("status") == COMPLETED else COMPLETED
        return self.update_task(task["_id"], {"status": new_status})
