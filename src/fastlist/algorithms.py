"""
基于索引访问的通用查找算法.

算法只通过 FastLinkedList.get 读取元素, 相邻两次访问的索引距离越小,
游标缓存节省的跳数越多:
- binary_search: 相邻中点的距离逐步减半, 每步通常从游标出发
- linear_search: 顺序扫描, 每步只需一次跳转
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Generic, NamedTuple, TypeVar

from fastlist.linked_list import FastLinkedList

T = TypeVar("T")
S = TypeVar("S")


class Outcome(Enum):
    """比较函数的结果: 命中, 或下一步继续查找的半区."""

    MATCH = "match"
    LEFT = "left"
    RIGHT = "right"


class SearchResult(NamedTuple, Generic[T]):
    index: int
    value: T


Comparator = Callable[[T, S], Outcome | tuple[bool, bool]]


def outcome_from_flags(matched: bool, move_right: bool) -> Outcome:
    """
    将 (matched, move_right) 形式的比较结果转换为 Outcome.

    Args:
        matched (bool): 是否命中.
        move_right (bool): 未命中时是否在右半区继续查找.
    """
    if matched:
        return Outcome.MATCH
    return Outcome.RIGHT if move_right else Outcome.LEFT


def natural_compare(value: Any, target: Any) -> Outcome:
    """适用于有序元素的比较函数: target 大于 value 时向右查找."""
    if value == target:
        return Outcome.MATCH
    return Outcome.RIGHT if target > value else Outcome.LEFT


def binary_search(
    lst: FastLinkedList[T],
    target: S,
    compare: Comparator[T, S] = natural_compare,
) -> SearchResult[T] | None:
    """
    在链表上执行二分查找.

    每一步以中点元素和 target 调用 compare, 命中即返回; 区间耗尽返回 None.

    Args:
        lst (FastLinkedList[T]): 已按 compare 的次序排列的链表.
        target (S): 查找目标.
        compare (Comparator[T, S]): 比较函数, 返回 Outcome
            或 (matched, move_right) 元组.

    Returns:
        SearchResult[T] | None: 命中元素的索引和值; 未找到为 None.

    Raises:
        TypeError: compare 返回了无法识别的结果.
    """
    start, end = 0, len(lst) - 1

    while start <= end:
        middle = start + (end - start) // 2
        value = lst.get(middle)

        outcome = compare(value, target)
        if isinstance(outcome, tuple):
            outcome = outcome_from_flags(*outcome)
        elif not isinstance(outcome, Outcome):
            raise TypeError(f"Unsupported comparison result: {outcome!r}")

        if outcome is Outcome.MATCH:
            return SearchResult(middle, value)
        if outcome is Outcome.RIGHT:
            start = middle + 1
        else:
            end = middle - 1

    return None


def linear_search(
    lst: FastLinkedList[T], predicate: Callable[[T], bool]
) -> SearchResult[T] | None:
    """
    顺序查找第一个满足谓词的元素.

    Args:
        lst (FastLinkedList[T]): 待查找链表.
        predicate (Callable[[T], bool]): 判定函数, 返回 True 则命中.

    Returns:
        SearchResult[T] | None: 第一个命中元素的索引和值; 未找到为 None.
    """
    for index in range(len(lst)):
        value = lst.get(index)
        if predicate(value):
            return SearchResult(index, value)
    return None
