"""
Pydantic v2 配置模型辅助工具.

- convert: 验证前转换字段值
- check: 验证后检查字段值
- format_validation_error: ValidationError 转为结构化列表
- BaseModelEx: 空值字段回退到默认值
"""

from __future__ import annotations

from typing import Any, Callable

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)
from pydantic_core import PydanticCustomError

_EMPTY_VALUES = ([], {}, (), set(), "", None)


def format_validation_error(exc: ValidationError) -> list[dict[str, Any]]:
    """每个错误转为 field/message/type/input 四个键的字典."""
    return [
        {
            "field": ".".join(map(str, error["loc"])),
            "message": error["msg"],
            "type": error["type"],
            "input": error.get("input"),
        }
        for error in exc.errors()
    ]


def _failure(title: str, ex: Exception, description: str | None) -> PydanticCustomError:
    return PydanticCustomError(title, "{reason}", {"reason": description or str(ex)})


def convert(func: Callable[[Any], Any], description: str | None = None) -> BeforeValidator:
    """
    验证前以 func 转换字段值, None 原样通过.

    func 抛出的任何异常都转为字段校验错误, description 可覆盖错误信息.
    """

    def validator(data: Any) -> Any:
        if data is None:
            return data
        try:
            return func(data)
        except Exception as ex:
            raise _failure("Convert failed", ex, description)

    return BeforeValidator(validator)


def check(
    func: Callable[[Any], Any],
    *,
    check_result: bool = False,
    description: str | None = None,
) -> AfterValidator:
    """
    验证后以 func 检查字段值, 字段值本身不变, None 不检查.

    check_result 为 True 时, func 返回假值也视为检查失败.
    """

    def validator(data: Any) -> Any:
        if data is None:
            return data
        try:
            result = func(data)
        except Exception as ex:
            raise _failure("Check failed", ex, description)
        if check_result and not result:
            raise _failure("Check failed", ValueError("check returned false"), description)
        return data

    return AfterValidator(validator)


class BaseModelEx(BaseModel):
    """字段值为空(空容器/空字符串/None)且字段有默认值时, 使用默认值."""

    @field_validator("*", mode="wrap")
    @classmethod
    def use_field_default(
        cls,
        value: Any,
        handler: ValidatorFunctionWrapHandler,
        info: ValidationInfo,
    ) -> Any:
        if info.field_name is None or value not in _EMPTY_VALUES:
            return handler(value)
        field = cls.model_fields[info.field_name]
        if field.is_required():
            return handler(value)
        return field.get_default(call_default_factory=True)
