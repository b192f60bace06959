"""
Tests for the admin login captcha.
"""

import pytest

from backend.app.core.config import Settings
from backend.app.core.exceptions import UnauthorizedError
from backend.app.main import create_app
from backend.app.services.captcha_service import CaptchaService


@pytest.mark.asyncio
async def test_generate_returns_png_data_url():
    service = CaptchaService()
    challenge = await service.generate()
    assert challenge["image_base64"].startswith("data:image/png;base64,")
    assert challenge["captcha_id"] in service._challenges


@pytest.mark.asyncio
async def test_verify_is_single_use():
    service = CaptchaService()
    challenge = await service.generate()
    answer = service._challenges[challenge["captcha_id"]].answer

    service.verify(challenge["captcha_id"], f" {answer} ")
    with pytest.raises(UnauthorizedError):
        service.verify(challenge["captcha_id"], answer)


@pytest.mark.asyncio
async def test_wrong_answer_consumes_challenge():
    service = CaptchaService()
    challenge = await service.generate()
    answer = service._challenges[challenge["captcha_id"]].answer

    with pytest.raises(UnauthorizedError, match="验证码错误"):
        service.verify(challenge["captcha_id"], "0000")
    with pytest.raises(UnauthorizedError):
        service.verify(challenge["captcha_id"], answer)


@pytest.mark.asyncio
async def test_expired_challenge_is_rejected():
    service = CaptchaService(expire_seconds=-1)
    challenge = await service.generate()
    answer = service._challenges[challenge["captcha_id"]].answer
    with pytest.raises(UnauthorizedError, match="已过期"):
        service.verify(challenge["captcha_id"], answer)


@pytest.mark.asyncio
async def test_admin_login_with_captcha(tmp_path):
    import httpx
    from httpx import ASGITransport

    app = create_app(
        Settings(
            token="test-token",
            admin_password="admin-secret",
            admin_captcha_enabled=True,
            data_dir=tmp_path,
        )
    )
    state = app.state.value_store
    transport = ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        r = await client.get("/admin/login")
        assert "data:image/png;base64," in r.text
        captcha_id = client.cookies.get("captcha_sid")
        answer = state.captcha._challenges[captcha_id].answer

        r = await client.post(
            "/admin/login",
            data={"password": "admin-secret", "captcha_value": answer},
        )
        assert r.status_code == 303
        assert len(state.sessions) == 1
