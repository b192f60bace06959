"""密码校验与随机密钥生成"""

import hmac
import secrets

import bcrypt

_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(
        plain_password.encode("utf-8"),
        hashed_password.encode("utf-8"),
    )


def get_password_hash(password: str) -> str:
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def check_admin_password(candidate: str, configured: str) -> bool:
    """校验管理面板密码，配置值为 bcrypt 哈希时按哈希比对，否则按明文比对"""
    if not candidate:
        return False
    if configured.startswith(_BCRYPT_PREFIXES):
        try:
            return verify_password(candidate, configured)
        except ValueError:
            return False
    return constant_time_equals(candidate, configured)


def constant_time_equals(left: str, right: str) -> bool:
    return hmac.compare_digest(left.encode("utf-8"), right.encode("utf-8"))


def generate_secret(nbytes: int = 16) -> str:
    """生成十六进制随机密钥（Token、会话 ID 共用）"""
    return secrets.token_hex(nbytes)
