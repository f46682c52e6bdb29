"""
fieldfill：按字段注解为 dataclass / pydantic 记录填充默认值或随机测试数据

- apply_defaults：解析注解文本为字面量填入空字段
- apply_factory：用随机非零值填入空字段
"""

from fieldfill.engine import Filler, Kind, RuleTable
from fieldfill.errors import FillError, NotARecordError
from fieldfill.observability.logging_config import setup_logging, setup_logging_from_settings
from fieldfill.rules import apply_defaults, apply_factory

__all__ = [
    "Filler",
    "FillError",
    "Kind",
    "NotARecordError",
    "RuleTable",
    "apply_defaults",
    "apply_factory",
    "setup_logging",
    "setup_logging_from_settings",
]
