#!/usr/bin/env python3
"""生成管理面板密码的 bcrypt 哈希，填入 .env 的 ADMIN_PASSWORD"""

import getpass
import sys
from pathlib import Path

# 添加项目根目录到 Python 路径
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from backend.app.core.security import get_password_hash


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("密码不能为空")
    return get_password_hash(password)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="生成管理面板密码哈希")
    parser.add_argument("--password", default=None, help="密码")

    args = parser.parse_args()

    # 如果密码为空，通过交互式输入获取密码
    password = args.password
    if not password:
        password = getpass.getpass("请输入管理面板密码: ")
        if not password:
            print("❌ 密码不能为空，操作已取消")
            sys.exit(1)
        # 确认密码
        password_confirm = getpass.getpass("请再次输入密码确认: ")
        if password != password_confirm:
            print("❌ 两次输入的密码不一致，操作已取消")
            sys.exit(1)

    print("✅ 请将以下内容写入 .env:")
    print(f"ADMIN_PASSWORD='{hash_password(password)}'")
