from backend.app.core.security import (
    check_admin_password,
    generate_secret,
    get_password_hash,
    verify_password,
)

__all__ = [
    "check_admin_password",
    "generate_secret",
    "get_password_hash",
    "verify_password",
]
