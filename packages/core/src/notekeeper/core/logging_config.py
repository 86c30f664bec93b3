"""structlog 配置模块

dev 模式：pretty print 可读输出
json 模式：结构化 JSON 输出
宿主应用在打开会话之前调用一次 setup_logging()；
open_session 通过 contextvars 绑定 session_id，之后的每条日志都带上它。
"""

import logging
import os

import structlog

# 第三方库日志在非 DEBUG 级别下压到 WARNING
_NOISY_LOGGERS = ("aiosqlite",)


def _select_renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer()


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """初始化 structlog 配置

    Args:
        log_format: "json" 或 "dev"，缺省取 NOTEKEEPER_LOG_FORMAT（默认 dev）
        log_level: 日志级别名，缺省取 NOTEKEEPER_LOG_LEVEL（默认 INFO），
            无法识别时退回 INFO
    """
    log_format = log_format or os.environ.get("NOTEKEEPER_LOG_FORMAT", "dev")
    log_level = log_level or os.environ.get("NOTEKEEPER_LOG_LEVEL", "INFO")
    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        level = logging.INFO

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=_select_renderer(log_format),
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level if level <= logging.DEBUG else logging.WARNING)


def bind_session(session_id: str) -> None:
    """把 session_id 绑定到当前上下文的所有日志"""
    structlog.contextvars.bind_contextvars(session_id=session_id)


def unbind_session() -> None:
    structlog.contextvars.unbind_contextvars("session_id")
