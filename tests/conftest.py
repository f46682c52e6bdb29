from datetime import datetime

import pytest

from fieldfill.config import Settings
from fieldfill.rules.defaults import build_defaults_filler

FIXED_NOW = datetime(2020, 6, 10, 12, 0, 0)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def defaults_filler(settings):
    """时间固定在 2020-06-10 12:00:00 的 defaults 填充器"""
    return build_defaults_filler(settings, clock=lambda: FIXED_NOW)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW
