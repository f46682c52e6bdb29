"""
全局配置模块：通过 pydantic-settings 读取 FIELDFILL_ 前缀的环境变量 / .env
"""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """填充引擎配置"""

    model_config = SettingsConfigDict(
        env_prefix="FIELDFILL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── 注解键名 ──
    DEFAULTS_TAG: str = "default"  # field(metadata={"default": "33"})
    FACTORY_TAG: str = "factory"

    # ── 随机填充 ──
    FACTORY_SEED: int | None = None  # 设置后 factory 模式可复现

    # ── 日志 ──
    LOG_ENV: str = "development"  # development | production
    LOG_LEVEL: str = "INFO"

    @model_validator(mode="after")
    def _check_tags(self) -> "Settings":
        """两种模式的注解键必须非空且不能相同"""
        if not self.DEFAULTS_TAG or not self.FACTORY_TAG:
            raise ValueError("DEFAULTS_TAG / FACTORY_TAG 不能为空")
        if self.DEFAULTS_TAG == self.FACTORY_TAG:
            raise ValueError(f"DEFAULTS_TAG 与 FACTORY_TAG 不能相同: {self.DEFAULTS_TAG}")
        return self


@lru_cache
def get_settings() -> Settings:
    """单例获取配置（带缓存）"""
    return Settings()
