import json
from datetime import datetime
import pytest

import httpx

from app.client.api import CrownSideClient
from app.client.errors import ApiError
from app.client.session import Session

USER = {"id": "u1", "email": "maya@crownside.app", "role": "STYLIST"}


def test_login_persists_and_load_restores(tmp_path):
    path = tmp_path / "nested" / "session.json"
    Session(str(path)).login(USER, "token-1")

    assert json.loads(path.read_text()) == {"user": USER, "token": "token-1"}

    restored = Session(str(path)).load()
    assert restored.user == USER
    assert restored.token == "token-1"
    assert restored.auth_headers == {"Authorization": "Bearer token-1"}


def test_logout_clears_memory_and_file(tmp_path):
    path = tmp_path / "session.json"
    session = Session(str(path))
    session.login(USER, "token-1")
    session.logout()

    assert not path.exists()
    assert session.user is None
    assert not session.is_authenticated
    assert session.auth_headers == {}


def test_missing_or_corrupt_file_means_logged_out(tmp_path):
    assert not Session(str(tmp_path / "absent.json")).load().is_authenticated

    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{not json")
    assert not Session(str(corrupt)).load().is_authenticated


@pytest.mark.asyncio
async def test_client_login_stores_token_and_sends_it(tmp_path):
    seen = []

    def handler(request):
        seen.append(request)
        if request.url.path == "/api/v1/auth/login":
            return httpx.Response(200, json={"access_token": "fresh", "token_type": "bearer", "user": USER})
        return httpx.Response(200, json={"schedule": [], "exceptions": []})

    session = Session(str(tmp_path / "session.json"))
    async with CrownSideClient(session, base_url="http://test/api/v1", transport=httpx.MockTransport(handler)) as client:
        await client.request("GET", "/availability/s1")
        assert "Authorization" not in seen[-1].headers
        user = await client.login("maya@crownside.app", "secret-pass")
        await client.request("GET", "/availability/s1")

    assert user == USER
    assert seen[-1].headers["Authorization"] == "Bearer fresh"
    assert Session(str(tmp_path / "session.json")).load().token == "fresh"


@pytest.mark.asyncio
async def test_rejected_token_logs_out(tmp_path):
    def handler(request):
        return httpx.Response(401, json={"detail": "Could not validate credentials"})

    session = Session(str(tmp_path / "session.json"))
    session.login(USER, "stale")

    async with CrownSideClient(session, base_url="http://test/api/v1", transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(ApiError) as error:
            await client.request("GET", "/auth/me")

    assert error.value.status_code == 401
    assert not session.is_authenticated
    assert not (tmp_path / "session.json").exists()


@pytest.mark.asyncio
async def test_check_slot_query(tmp_path):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"available": True, "reason": None})

    async with CrownSideClient(Session(str(tmp_path / "s.json")), base_url="http://test/api/v1",
                               transport=httpx.MockTransport(handler)) as client:
        result = await client.check_slot("s1", datetime(2024, 5, 6, 10, 0), duration=45)

    assert result == {"available": True, "reason": None}
    assert seen[0].url.path == "/api/v1/availability/s1/check"
    assert seen[0].url.params["at"] == "2024-05-06T10:00:00"
    assert seen[0].url.params["duration"] == "45"
