"""Core 异常体系

预期内的失败（未找到、持久化失败、外部能力不可用）由调用方转换为结果值，
只有调用顺序错误等编程错误才会向上传播。
"""


class NotekeeperError(Exception):
    """Core 包基础异常"""

    def __init__(self, message: str, recoverable: bool = True) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 调用方是否可以继续当前会话
        """
        super().__init__(message)
        self.recoverable = recoverable


class InvalidInputError(NotekeeperError):
    """输入校验失败（空标题、未知分类等）

    在调用 repository 之前抛出，repository 假定输入已校验。
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}", recoverable=True)
        self.field = field


class PersistenceError(NotekeeperError):
    """Durable Store 读写失败

    写失败时事务已回滚，之前保存的值保持不变。
    """

    def __init__(self, key: str, operation: str, original_error: Exception) -> None:
        """
        Args:
            key: 存储键
            operation: "load" 或 "save"
            original_error: 原始异常
        """
        super().__init__(
            f"存储 {operation} 失败: key={key} -- {original_error}",
            recoverable=True,
        )
        self.key = key
        self.operation = operation
        self.original_error = original_error


class InvalidTransitionError(NotekeeperError):
    """日历关联流程的非法状态流转（调用顺序错误）"""

    def __init__(self, from_state: str, to_state: str) -> None:
        super().__init__(
            f"Cannot transition from {from_state} to {to_state}",
            recoverable=False,
        )
        self.from_state = from_state
        self.to_state = to_state


class CalendarPermissionError(NotekeeperError):
    """日历权限未授予"""

    def __init__(self, message: str = "日历权限未授予") -> None:
        super().__init__(message, recoverable=True)


class CalendarUnavailableError(NotekeeperError):
    """日历列表不可用或所选日历不存在"""


class EventCreationError(NotekeeperError):
    """外部日历事件创建失败"""

    def __init__(self, calendar_id: str, original_error: Exception) -> None:
        super().__init__(
            f"日历事件创建失败: calendar={calendar_id} -- {original_error}",
            recoverable=True,
        )
        self.calendar_id = calendar_id
        self.original_error = original_error


class SharingUnavailableError(NotekeeperError):
    """当前平台不支持分享"""

    def __init__(self, message: str = "当前平台不支持分享") -> None:
        super().__init__(message, recoverable=True)


class TransientFileError(NotekeeperError):
    """临时文件系统不可用"""

    def __init__(self, path: str, original_error: Exception) -> None:
        super().__init__(
            f"临时文件操作失败: {path} -- {original_error}",
            recoverable=True,
        )
        self.path = path
        self.original_error = original_error
