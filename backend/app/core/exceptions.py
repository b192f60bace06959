"""业务异常定义

所有异常都在 API 边界被捕获并转换为 HTTP 响应，不会导致进程退出。
"""

from fastapi import status


class ValueStoreError(Exception):
    """变量存储相关异常的基类"""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(ValueStoreError):
    status_code = status.HTTP_404_NOT_FOUND


class AlreadyExistsError(ValueStoreError):
    status_code = status.HTTP_409_CONFLICT


class InvalidGroupError(ValueStoreError):
    status_code = status.HTTP_400_BAD_REQUEST


class ProtectedError(ValueStoreError):
    """试图删除或修改受保护的默认实体（默认分组、Default Token）"""

    status_code = status.HTTP_403_FORBIDDEN


class StorageError(ValueStoreError):
    """数据文件读写失败"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class UnauthorizedError(ValueStoreError):
    status_code = status.HTTP_401_UNAUTHORIZED
