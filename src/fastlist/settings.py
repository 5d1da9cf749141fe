"""
链表运行配置.

配置项均经过 Pydantic 校验, 空值回退到默认值:
- logger_name: 链表使用的日志记录器名称
- trace_resolves: 是否为每次索引解析输出 DEBUG 日志(锚点与跳数)
- log: 可选的日志配置, 由 configure_logging 应用
"""

from __future__ import annotations

import logging
from typing import Annotated, Any, Mapping

from pydantic import ValidationError

from fastlist.errors import SettingsError
from fastlist.log.config import Log, get_logger
from fastlist.pydantic_utils import BaseModelEx, check, format_validation_error

LOGGER_NAME_DEFAULT = "fastlist"


class ListSettings(BaseModelEx):
    logger_name: Annotated[
        str,
        check(str.strip, check_result=True, description="logger name is blank"),
    ] = LOGGER_NAME_DEFAULT
    trace_resolves: bool = False
    log: Log | None = None


def load_settings(data: Mapping[str, Any] | None = None) -> ListSettings:
    """
    从映射构造配置.

    参数:
        data: 原始配置, None 表示全部使用默认值.

    返回:
        ListSettings: 校验后的配置.

    异常:
        SettingsError: 校验失败, errors 属性携带结构化错误列表.
    """
    try:
        return ListSettings.model_validate(dict(data or {}))
    except ValidationError as ex:
        errors = format_validation_error(ex)
        fields = ", ".join(error["field"] for error in errors)
        raise SettingsError(f"Invalid settings: {fields}", errors=errors, cause=ex)


def configure_logging(settings: ListSettings) -> logging.Logger:
    """
    应用配置中的日志设置, 返回链表使用的日志记录器.

    未提供 log 配置时不修改日志记录器.
    """
    if settings.log is None:
        return logging.getLogger(settings.logger_name)
    return get_logger(settings.log, logger=settings.logger_name)
