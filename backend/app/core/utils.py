"""公共工具函数"""

import time
from datetime import datetime

from fastapi import Request


def now_ms() -> int:
    """当前时间的毫秒级时间戳"""
    return int(time.time() * 1000)


def format_ms(timestamp: int) -> str:
    """毫秒时间戳转为本地时间字符串，管理面板展示用"""
    return datetime.fromtimestamp(timestamp / 1000).strftime("%Y/%m/%d %H:%M:%S")


def client_ip(request: Request) -> str:
    """获取请求来源 IP"""
    if request.client is None:
        return "unknown"
    return request.client.host


def paginate(items: list, page: int, page_size: int) -> tuple[list, int, int]:
    """按页切分列表，返回 (当前页数据, 修正后的页码, 总页数)"""
    total_pages = max(1, (len(items) + page_size - 1) // page_size)
    page = min(max(page, 1), total_pages)
    start = (page - 1) * page_size
    return items[start : start + page_size], page, total_pages
