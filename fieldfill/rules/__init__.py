"""两种填充模式：defaults（注解字面量）与 factory（随机值）"""

from fieldfill.rules.defaults import apply_defaults, build_defaults_filler
from fieldfill.rules.factory import apply_factory, build_factory_filler

__all__ = ["apply_defaults", "apply_factory", "build_defaults_filler", "build_factory_filler"]
