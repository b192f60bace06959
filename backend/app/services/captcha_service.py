"""管理面板登录验证码服务

验证码答案只保存在进程内存中，一次性使用，5 分钟过期。
"""

import asyncio
import base64
import logging
import random
import string
import time
import uuid
from dataclasses import dataclass
from io import BytesIO

from captcha.image import ImageCaptcha

from backend.app.core.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

# 验证码配置
CAPTCHA_LENGTH = 4
CAPTCHA_EXPIRE_SECONDS = 5 * 60
CAPTCHA_CHARS = string.digits.replace("0", "").replace("1", "")

# 图片生成器
_image_captcha = ImageCaptcha(width=160, height=60)


def _generate_code(length: int = CAPTCHA_LENGTH) -> str:
    """生成随机数字验证码"""
    return "".join(random.choices(CAPTCHA_CHARS, k=length))


def _generate_image_base64(code: str) -> str:
    """将验证码文本渲染为 base64 图片"""
    image = _image_captcha.generate_image(code)
    buf = BytesIO()
    image.save(buf, format="PNG")
    b64 = base64.b64encode(buf.getvalue()).decode("ascii")
    return f"data:image/png;base64,{b64}"


@dataclass
class _Challenge:
    answer: str
    expires_at: float


class CaptchaService:
    def __init__(self, expire_seconds: int = CAPTCHA_EXPIRE_SECONDS) -> None:
        self.expire_seconds = expire_seconds
        self._challenges: dict[str, _Challenge] = {}

    async def generate(self) -> dict[str, str]:
        """生成验证码，返回 {captcha_id, image_base64}"""
        # 顺带清理过期记录
        self._cleanup_expired()

        code = _generate_code()
        captcha_id = str(uuid.uuid4())
        self._challenges[captcha_id] = _Challenge(
            answer=code,
            expires_at=time.monotonic() + self.expire_seconds,
        )

        loop = asyncio.get_running_loop()
        image_base64 = await loop.run_in_executor(None, _generate_image_base64, code)

        logger.debug("验证码已生成: captcha_id=%s", captcha_id)
        return {
            "captcha_id": captcha_id,
            "image_base64": image_base64,
        }

    def verify(self, captcha_id: str | None, user_input: str) -> None:
        """校验验证码，失败则抛出 UnauthorizedError。

        无论对错，校验后都会删除该验证码（一次性使用）。
        """
        record = self._challenges.pop(captcha_id or "", None)
        if record is None:
            raise UnauthorizedError("验证码已过期或不存在，请刷新重试")

        if record.expires_at < time.monotonic():
            raise UnauthorizedError("验证码已过期，请刷新重试")

        if record.answer.lower() != user_input.strip().lower():
            raise UnauthorizedError("验证码错误")

    def _cleanup_expired(self) -> None:
        now = time.monotonic()
        expired = [k for k, v in self._challenges.items() if v.expires_at < now]
        for key in expired:
            del self._challenges[key]
        if expired:
            logger.debug("已清理 %d 条过期验证码", len(expired))
