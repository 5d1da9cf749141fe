"""
fastlist 日志工具.

- StandardHandler: 按级别分流到标准输出/标准错误
- EnhancedFormatter: text 或 json 输出, json 附带 extra 字段
- LoggerAdapter: `%` 风格与 `{` 风格的日志调用, `{` 风格的关键字参数同时写入 extra
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Literal

# LogRecord 自带的属性, json 输出时不作为扩展字段
_RECORD_FIELDS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def get_logger_adapter(name: str | None = None, **extra: Any) -> LoggerAdapter:
    return LoggerAdapter(logging.getLogger(name), **extra)


class StandardHandler(logging.StreamHandler):
    """threshold 以下的记录写入 stdout, 其余写入 stderr."""

    def __init__(self, threshold: int = logging.WARNING) -> None:
        super().__init__(sys.stdout)
        self.threshold = threshold

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stdout if record.levelno < self.threshold else sys.stderr
        super().emit(record)


class EnhancedFormatter(logging.Formatter):
    """
    `{` 风格格式化器.

    Args:
        fmt: text 输出使用的格式串.
        datefmt: 时间格式.
        output_format: text 输出格式串展开结果; json 输出单行 JSON 对象,
            包含时间/级别/记录器/消息, 以及所有 extra 字段.
    """

    def __init__(
        self,
        fmt: str = "{asctime} {levelname}: {message}",
        datefmt: str | None = None,
        *,
        output_format: Literal["text", "json"] = "text",
    ) -> None:
        super().__init__(fmt, datefmt, style="{")
        self.output_format = output_format

    def format(self, record: logging.LogRecord) -> str:
        if self.output_format == "text":
            return super().format(record)

        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RECORD_FIELDS and not key.startswith("_")
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class LoggerAdapter:
    """
    封装 `logging.Logger`, 合并固定的 extra 字段.

    - `debug`: `%` 占位符格式, 与 logging 相同
    - `debugf`/`warningf`: 消息按 str.format 以关键字参数展开,
      这些关键字参数也作为 extra 字段写入记录, 供 json 输出或过滤使用
    """

    def __init__(self, logger: logging.Logger, **extra: Any) -> None:
        self.logger = logger
        self.extra = extra

    def isEnabledFor(self, level: int) -> bool:
        return self.logger.isEnabledFor(level)

    def debug(self, msg: str, *args: Any) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(msg, *args, extra=self.extra, stacklevel=2)

    def debugf(self, msg: str, **fields: Any) -> None:
        self._logf(logging.DEBUG, msg, False, fields)

    def warningf(self, msg: str, *, exc_info: bool = False, **fields: Any) -> None:
        self._logf(logging.WARNING, msg, exc_info, fields)

    def _logf(
        self, level: int, msg: str, exc_info: bool, fields: dict[str, Any]
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        self.logger.log(
            level,
            msg.format(**fields),
            exc_info=exc_info,
            extra={**self.extra, **fields},
            stacklevel=3,
        )
