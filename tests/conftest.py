import json
import re
import sys
from pathlib import Path
from typing import Dict, List, Optional

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from auranode.config import Settings
from auranode.panel import PanelClient


PANEL_URL = "https://panel.example.com"
API_KEY = "ptla_test_key"

_USER_PATH = re.compile(r"^/api/application/users/(\d+)$")


class FakePanel:
    """Minimal stand-in for the panel application API, served through MockTransport."""

    def __init__(self) -> None:
        self.users: List[Dict[str, object]] = []
        self.servers: Dict[int, List[Dict[str, object]]] = {}
        self.requests: List[httpx.Request] = []
        self.error: Optional[Exception] = None
        self.status_override: Optional[int] = None

    def add_user(self, email: str, username: str, first_name: str = "Steve", last_name: str = "Miner") -> int:
        user_id = len(self.users) + 1
        self.users.append(
            {
                "id": user_id,
                "uuid": f"user-uuid-{user_id}",
                "email": email,
                "username": username,
                "first_name": first_name,
                "last_name": last_name,
                "root_admin": False,
            }
        )
        return user_id

    def add_server(self, user_id: int, uuid: str, name: str) -> None:
        self.servers.setdefault(user_id, []).append(
            {
                "object": "server",
                "attributes": {
                    "id": len(self.servers.get(user_id, [])) + 1,
                    "uuid": uuid,
                    "identifier": uuid[:8],
                    "name": name,
                    "description": "",
                    "suspended": False,
                    "limits": {"memory": 2048, "disk": 10240, "cpu": 80},
                    "user": user_id,
                },
            }
        )

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.status_override is not None:
            return httpx.Response(self.status_override, text="upstream failure")

        path = request.url.path
        if path == "/api/application/users" and request.method == "POST":
            return self._create_user(request)
        if path == "/api/application/users" and request.method == "GET":
            email = request.url.params.get("filter[email]")
            matches = [self._user_resource(user) for user in self.users if user["email"] == email]
            return httpx.Response(200, json={"object": "list", "data": matches})

        match = _USER_PATH.match(path)
        if match and request.method == "GET":
            user = self._find(int(match.group(1)))
            if user is None:
                return httpx.Response(404, json={"errors": [{"code": "NotFoundHttpException", "detail": "Not found."}]})
            resource = self._user_resource(user)
            if request.url.params.get("include") == "servers":
                resource["attributes"]["relationships"] = {
                    "servers": {"object": "list", "data": list(self.servers.get(int(user["id"]), []))}
                }
            return httpx.Response(200, json=resource)

        return httpx.Response(404, json={"errors": [{"detail": "Unknown route"}]})

    def _create_user(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        for user in self.users:
            if user["email"] == payload["email"]:
                return self._validation_error("The email has already been taken.")
            if user["username"] == payload["username"]:
                return self._validation_error("The username has already been taken.")
        user_id = self.add_user(
            payload["email"],
            payload["username"],
            payload["first_name"],
            payload["last_name"],
        )
        return httpx.Response(201, json=self._user_resource(self._find(user_id)))

    def _find(self, user_id: int) -> Optional[Dict[str, object]]:
        for user in self.users:
            if user["id"] == user_id:
                return user
        return None

    @staticmethod
    def _user_resource(user: Dict[str, object]) -> Dict[str, object]:
        return {"object": "user", "attributes": dict(user)}

    @staticmethod
    def _validation_error(detail: str) -> httpx.Response:
        return httpx.Response(
            422,
            json={
                "errors": [
                    {"code": "ValidationException", "status": "422", "detail": detail},
                    {"code": "ValidationException", "status": "422", "detail": "Second error."},
                ]
            },
        )


@pytest.fixture
def fake_panel() -> FakePanel:
    return FakePanel()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        panel_url=PANEL_URL,
        panel_api_key=API_KEY,
        session_secret="tests-secret-key",
    )


@pytest.fixture
def panel_client(fake_panel: FakePanel) -> PanelClient:
    return PanelClient(PANEL_URL, API_KEY, transport=fake_panel.transport())
