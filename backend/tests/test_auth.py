import httpx
import pytest
from fastapi import HTTPException

from careertrack.config import Settings
from careertrack.services.auth import fetch_supabase_user

SETTINGS = Settings(supabase_url="https://project.supabase.co/", supabase_service_role_key="service-key")


async def test_valid_token_resolves_user():
    seen = {}

    def handler(request: httpx.Request):
        seen["url"] = str(request.url)
        seen["authorization"] = request.headers["authorization"]
        seen["apikey"] = request.headers["apikey"]
        return httpx.Response(200, json={"id": "abc-123", "email": "alice@example.com"})

    user = await fetch_supabase_user("token-1", SETTINGS, transport=httpx.MockTransport(handler))

    assert user.id == "abc-123"
    assert user.email == "alice@example.com"
    assert seen == {
        "url": "https://project.supabase.co/auth/v1/user",
        "authorization": "Bearer token-1",
        "apikey": "service-key",
    }


async def test_rejected_token_is_401():
    transport = httpx.MockTransport(lambda request: httpx.Response(401, json={"msg": "invalid JWT"}))
    with pytest.raises(HTTPException) as exc_info:
        await fetch_supabase_user("bad", SETTINGS, transport=transport)
    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Invalid token"


async def test_unreachable_auth_server_is_401():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(HTTPException) as exc_info:
        await fetch_supabase_user("token", SETTINGS, transport=httpx.MockTransport(handler))
    assert exc_info.value.status_code == 401


async def test_missing_configuration_is_500():
    with pytest.raises(HTTPException) as exc_info:
        await fetch_supabase_user("token", Settings(supabase_url="", supabase_service_role_key=""))
    assert exc_info.value.status_code == 500
