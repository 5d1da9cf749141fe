"""
定义 fastlist 使用的异常体系.

异常层级结构如下:
    - FastListError: 所有异常的统一基类, 支持链式追踪.
        - InvalidIndexError: 索引越界/负数索引/空链表访问.
        - ListDeletedError: 链表被 delete() 之后继续使用.
        - ListChangedError: 迭代过程中链表被清空.
        - ValueReleaseError: 释放节点数据的回调执行失败.
        - SettingsError: 配置校验失败.
"""

from __future__ import annotations

from typing import Any


class FastListError(Exception):
    """
    所有 fastlist 异常的基类,具备错误链追踪能力.

    参数:
    - `*args`: 异常消息内容;
    - `cause`: 可选的原始异常,用于记录异常链(自动赋值给 `__cause__`).
    """

    def __init__(self, *args: Any, cause: Exception | None = None) -> None:
        super().__init__(*args)
        self.cause: Exception | None = cause
        self.__cause__ = cause


class InvalidIndexError(FastListError, IndexError):
    """
    索引无效.

    说明:
    - 索引为负数, 或不小于链表长度;
    - 对空链表的任何索引访问;
    - 同时继承 IndexError, 兼容序列协议的调用方.
    """

    def __init__(self, index: int, size: int, *, cause: Exception | None = None) -> None:
        super().__init__(
            f"Index {index} out of range for list of size {size}", cause=cause
        )
        self.index = index
        self.size = size


class ListDeletedError(FastListError):
    """链表已被删除, 不可再访问."""


class ListChangedError(FastListError, RuntimeError):
    """迭代过程中链表被 clear/delete, 迭代无法继续."""


class ValueReleaseError(FastListError):
    """释放回调抛出异常. 链表本身已被完整清空."""


class SettingsError(FastListError):
    """
    配置校验失败.

    `errors` 为 format_validation_error 生成的结构化错误列表.
    """

    def __init__(
        self,
        *args: Any,
        errors: list[dict[str, Any]] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(*args, cause=cause)
        self.errors: list[dict[str, Any]] = errors or []
