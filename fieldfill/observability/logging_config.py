"""
结构化日志配置：structlog + contextvars
- 开发环境：彩色文本输出
- 生产环境：JSON 输出

fieldfill 作为库只在 debug 级别记录解析降级等信息。日志经标准库 logging
的 "fieldfill" logger 输出，未调用 setup_logging 时沿用标准库默认级别（WARNING），
debug 事件不会输出；使用方在启动时调用 setup_logging 决定是否输出。
"""

import logging
import sys

import structlog

LOGGER_NAME = "fieldfill"


def get_logger(name: str = LOGGER_NAME):
    """库内模块使用的 logger：structlog 接口，级别与输出由标准库 logging 决定"""
    return structlog.wrap_logger(
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def setup_logging(env: str = "development", level: str = "INFO") -> None:
    """初始化结构化日志"""

    level_no = logging.getLevelName(level.upper())
    if not isinstance(level_no, int):
        level_no = logging.INFO

    # 共享处理器链
    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if env == "production":
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    # 只接管 fieldfill 自己的 logger，不改动根 logger
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level_no)
    logger.propagate = False


def setup_logging_from_settings() -> None:
    """按 FIELDFILL_LOG_ENV / FIELDFILL_LOG_LEVEL 初始化日志"""
    from fieldfill.config import get_settings

    settings = get_settings()
    setup_logging(settings.LOG_ENV, settings.LOG_LEVEL)
