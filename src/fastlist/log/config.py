"""
日志配置模型.

Handler 描述单个处理器, output 可取:
- std: StandardHandler, 按级别分流 stdout/stderr
- stdout / stderr: 普通流处理器
- rich: StyledStandardHandler
- 其他值: 视为文件路径, 使用 WatchedFileHandler
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from typing import Annotated, Callable, Literal

from fastlist.log.console import StyledStandardHandler
from fastlist.log.helpers import EnhancedFormatter, StandardHandler
from fastlist.pydantic_utils import BaseModelEx, check, convert

TEXT_FORMAT_DEFAULT = "{asctime} {levelname}: {message}"
LEVEL_TYPE = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]

_STREAM_HANDLERS: dict[str, Callable[[], logging.Handler]] = {
    "std": StandardHandler,
    "stdout": lambda: logging.StreamHandler(sys.stdout),
    "stderr": lambda: logging.StreamHandler(sys.stderr),
    "rich": StyledStandardHandler,
}


def _normalize_output(value: str) -> str:
    lowered = value.strip().lower()
    return lowered if lowered in _STREAM_HANDLERS else value


def _validate_text_format(value: str) -> None:
    logging.StrFormatStyle(value).validate()


Level = Annotated[LEVEL_TYPE, convert(str.upper)]


class Handler(BaseModelEx):
    output: Annotated[str, convert(_normalize_output)] = "std"
    output_format: Literal["text", "json"] = "text"
    text_format: Annotated[str, check(_validate_text_format)] = TEXT_FORMAT_DEFAULT
    level: Level = "INFO"


class Log(BaseModelEx):
    name: str | None = None
    level: Level = "INFO"
    propagate: bool = True
    handlers: list[Handler] | None = None


def get_handler(config: Handler) -> logging.Handler:
    """
    按配置创建处理器.

    异常:
        FileNotFoundError, PermissionError: 文件输出无法打开
    """
    factory = _STREAM_HANDLERS.get(config.output)
    handler = factory() if factory else logging.handlers.WatchedFileHandler(config.output)

    if isinstance(handler, StyledStandardHandler):
        # rich 自行排版, 只需要消息本身
        handler.setFormatter(EnhancedFormatter("{message}"))
    else:
        handler.setFormatter(
            EnhancedFormatter(config.text_format, output_format=config.output_format)
        )
    handler.setLevel(config.level)
    return handler


def get_logger(config: Log, logger: logging.Logger | str | None = None) -> logging.Logger:
    """
    按配置装配日志记录器, 已有处理器全部替换.

    logger 为 None 时使用 config.name 对应的记录器.
    """
    if not isinstance(logger, logging.Logger):
        logger = logging.getLogger(logger if logger is not None else config.name)

    logger.setLevel(config.level)
    logger.propagate = config.propagate
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    for handler_config in config.handlers or ():
        logger.addHandler(get_handler(handler_config))
    return logger
