"""管理面板会话

会话 ID 只保存在进程内存中：进程重启或主动登出即失效，没有超时。
与 API Token 完全独立。
"""

from backend.app.core.security import generate_secret


class AdminSessionManager:
    def __init__(self) -> None:
        self._sessions: set[str] = set()

    def __len__(self) -> int:
        return len(self._sessions)

    def create_session(self) -> str:
        sid = generate_secret()
        self._sessions.add(sid)
        return sid

    def is_valid(self, sid: str | None) -> bool:
        return bool(sid) and sid in self._sessions

    def destroy_session(self, sid: str | None) -> None:
        if sid:
            self._sessions.discard(sid)

    def clear(self) -> None:
        self._sessions.clear()
