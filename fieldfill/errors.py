"""
异常定义

填充过程本身从不抛错（注解格式错误一律降级为零值/保持原值），
唯一的致命错误是调用方传入了非记录对象，属于编程错误，立即抛出。
"""


class FillError(Exception):
    """fieldfill 异常基类"""


class NotARecordError(FillError, TypeError):
    """传入的对象不是 dataclass 实例或 pydantic 模型实例"""

    def __init__(self, obj: object):
        self.obj = obj
        super().__init__(
            f"期望 dataclass 实例或 pydantic 模型实例，实际得到 {type(obj).__name__}"
        )
