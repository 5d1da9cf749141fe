"""
FastLinkedList 模块

提供带游标缓存的双向链表实现.
链表记录最近一次访问的索引与节点(游标), 按索引访问时从头/尾/游标三者中
选择跳数最少的起点出发, 顺序扫描与二分查找的相邻访问因此只需少量跳转.

节点保存在链表内部的节点池中, 以整数句柄寻址; prev/next 与游标都只保存句柄.
句柄在同一链表实例内不会复用, clear 之后旧句柄查找会抛出 KeyError.

主要组件:
- Node: 节点, 包含 value/prev/next 属性
- Anchor: 解析索引时的起点
- Resolution: 最近一次索引解析的起点与跳数
- FastLinkedList: 核心链表类

示例:
    >>> fl = FastLinkedList([10, 20, 30, 40, 50])
    >>> fl.get(2)
    30
    >>> fl.get(3)
    40
    >>> fl.last_resolution
    Resolution(index=3, anchor=<Anchor.CURSOR: 'cursor'>, hops=1)
"""

from __future__ import annotations

import itertools
from enum import Enum
from typing import Any, Callable, Generic, Iterable, Iterator, NamedTuple, TypeVar, cast

from fastlist.errors import (
    InvalidIndexError,
    ListChangedError,
    ListDeletedError,
    ValueReleaseError,
)
from fastlist.log.helpers import get_logger_adapter
from fastlist.settings import ListSettings

T = TypeVar("T")


class Anchor(Enum):
    HEAD = "head"
    TAIL = "tail"
    CURSOR = "cursor"


class Resolution(NamedTuple):
    index: int
    anchor: Anchor
    hops: int


class Node(Generic[T]):
    """
    链表节点.

    Attributes:
        value (T): 节点存储的数据.
        prev (int | None): 前驱节点句柄, 头节点为 None.
        next (int | None): 后继节点句柄, 尾节点为 None.
    """

    __slots__ = ("value", "prev", "next")

    def __init__(self, value: T) -> None:
        self.value: T = value
        self.prev: int | None = None
        self.next: int | None = None

    def __repr__(self) -> str:
        return f"Node({self.value!r}, prev={self.prev}, next={self.next})"


def new_list() -> FastLinkedList[Any]:
    """创建一个空链表."""
    return FastLinkedList()


class FastLinkedList(Generic[T]):
    """
    带游标缓存的双向链表.

    不变量:
    - 链表为空时 head/tail/游标节点均为 None, 游标索引为 0;
    - 非空时游标节点恰好位于游标索引处(从头节点前进游标索引次可达).

    非线程安全, 包括只读的 get: 每次解析都会改写游标.
    """

    def __init__(
        self,
        items: Iterable[T] | None = None,
        *,
        releaser: Callable[[T], None] | None = None,
        settings: ListSettings | None = None,
    ) -> None:
        """
        初始化链表.

        Args:
            items (Iterable[T] | None): 可选的初始元素, 按顺序追加.
            releaser (Callable[[T], None] | None): 释放数据的回调,
                clear/delete 时对每个数据恰好调用一次.
            settings (ListSettings | None): 运行配置, 默认使用 ListSettings().
        """
        self._settings = settings or ListSettings()
        self._log = get_logger_adapter(self._settings.logger_name)
        self._releaser = releaser

        self._nodes: dict[int, Node[T]] = {}
        self._handles = itertools.count()
        self._head: int | None = None
        self._tail: int | None = None
        self._size = 0
        self._cursor_index = 0
        self._cursor_node: int | None = None
        self._deleted = False
        self._epoch = 0

        self.last_resolution: Resolution | None = None

        if items is not None:
            self.extend(items)

    def __len__(self) -> int:
        return self.size

    def __getitem__(self, index: int) -> T:
        """
        返回指定索引的元素, 等同于 get(index).

        不支持负数索引与切片.
        """
        return self.get(index)

    def __iter__(self) -> Iterator[T]:
        """正向迭代元素, 不读取也不改写游标."""
        return self._iter_values(self._head, forward=True)

    def __reversed__(self) -> Iterator[T]:
        """反向迭代元素, 不读取也不改写游标."""
        return self._iter_values(self._tail, forward=False)

    def __repr__(self) -> str:
        if self._deleted:
            return f"<{self.__class__.__name__} (deleted)>"
        items = ", ".join(repr(value) for value in self)
        return f"{self.__class__.__name__}([{items}])"

    def __enter__(self) -> FastLinkedList[T]:
        return self

    def __exit__(self, *args: object) -> None:
        self.delete()

    # ===========================================================================

    @property
    def size(self) -> int:
        self._check_alive()
        return self._size

    @property
    def cursor_position(self) -> int:
        self._check_alive()
        return self._cursor_index

    @property
    def cursor_node(self) -> int | None:
        """游标节点句柄, 空链表为 None."""
        self._check_alive()
        return self._cursor_node

    @property
    def head(self) -> int | None:
        self._check_alive()
        return self._head

    @property
    def tail(self) -> int | None:
        self._check_alive()
        return self._tail

    @property
    def deleted(self) -> bool:
        return self._deleted

    def is_empty(self) -> bool:
        return self.size == 0

    def get_node(self, handle: int) -> Node[T]:
        """
        按句柄获取节点.

        Raises:
            KeyError: 句柄不属于当前链表(例如 clear 之前取得的句柄).
        """
        self._check_alive()
        return self._nodes[handle]

    # ===========================================================================

    def add(self, value: T) -> int:
        """
        在尾部追加元素. O(1).

        追加不移动已有节点, 因此非空链表的游标保持不变.

        Args:
            value (T): 要追加的数据.

        Returns:
            int: 新节点句柄.
        """
        self._check_alive()
        handle = self._new_node(value)
        if self._tail is None:
            self._head = self._tail = self._cursor_node = handle
            self._cursor_index = 0
        else:
            self._nodes[handle].prev = self._tail
            self._nodes[self._tail].next = handle
            self._tail = handle
        self._size += 1
        return handle

    def extend(self, items: Iterable[T]) -> None:
        for value in items:
            self.add(value)

    def insert_at(self, value: T, index: int) -> int:
        """
        在指定索引处插入元素.

        - index == 0: 新节点成为头节点, 位于原头节点之前;
        - index == size-1: 新节点成为尾节点, 位于原尾节点之后;
        - 其余: 新节点插入到原 index-1 与 index 两个节点之间.

        插入位置之后的游标索引顺延一位; 游标恰在插入位置时指向新节点.

        Args:
            value (T): 要插入的数据.
            index (int): 插入位置, 需满足 0 <= index < size.
                在 size 处追加请使用 add.

        Returns:
            int: 新节点句柄.

        Raises:
            InvalidIndexError: 索引超出范围.
        """
        self._check_alive()
        self._check_index(index)

        if index == 0:
            handle = self._new_node(value)
            self._nodes[handle].next = self._head
            self._nodes[self._head].prev = handle  # type: ignore[index]
            self._head = handle
            position = 0
        elif index == self._size - 1:
            handle = self._new_node(value)
            self._nodes[handle].prev = self._tail
            self._nodes[self._tail].next = handle  # type: ignore[index]
            self._tail = handle
            position = self._size
        else:
            after = self.resolve(index)
            before = self.resolve(index - 1)
            handle = self._new_node(value)
            node = self._nodes[handle]
            node.prev, node.next = before, after
            self._nodes[before].next = handle
            self._nodes[after].prev = handle
            position = index

        self._size += 1
        if self._cursor_index == position:
            self._cursor_node = handle
        elif self._cursor_index > position:
            self._cursor_index += 1

        self._log.debug("Inserted node %d at position %d", handle, position)
        return handle

    # ===========================================================================

    def resolve(self, index: int) -> int:
        """
        解析索引对应的节点句柄, 并把游标移动到该位置.

        依次检查快速路径(头/尾/游标本身), 否则比较三个起点的跳数:
        头节点在任何平局中胜出; 尾节点仅在严格少于游标跳数时胜出.

        Args:
            index (int): 节点索引, 需满足 0 <= index < size.

        Returns:
            int: 节点句柄.

        Raises:
            InvalidIndexError: 索引超出范围或链表为空.
        """
        self._check_alive()
        self._check_index(index)

        hops = 0
        if index == 0:
            anchor, handle = Anchor.HEAD, self._head
        elif index == self._size - 1:
            anchor, handle = Anchor.TAIL, self._tail
        elif index == self._cursor_index:
            anchor, handle = Anchor.CURSOR, self._cursor_node
        else:
            from_head = index
            from_tail = self._size - 1 - index
            from_cursor = abs(self._cursor_index - index)

            if from_head <= from_cursor and from_head <= from_tail:
                anchor, hops = Anchor.HEAD, from_head
                handle = self._walk(self._head, hops, forward=True)
            elif from_tail < from_cursor:
                anchor, hops = Anchor.TAIL, from_tail
                handle = self._walk(self._tail, hops, forward=False)
            else:
                anchor, hops = Anchor.CURSOR, from_cursor
                handle = self._walk(
                    self._cursor_node, hops, forward=index > self._cursor_index
                )

        handle = cast(int, handle)
        self._cursor_index = index
        self._cursor_node = handle
        self.last_resolution = Resolution(index, anchor, hops)

        if self._settings.trace_resolves:
            self._log.debugf(
                "resolve {index}: {anchor} +{hops}",
                index=index,
                anchor=anchor.value,
                hops=hops,
            )
        return handle

    def node(self, index: int) -> Node[T]:
        """获取指定索引的节点, 解析规则同 resolve."""
        return self._nodes[self.resolve(index)]

    def get(self, index: int) -> T:
        """
        获取指定索引的元素.

        Args:
            index (int): 元素索引, 需满足 0 <= index < size.

        Returns:
            T: 对应位置的元素.

        Raises:
            InvalidIndexError: 索引超出范围或链表为空.
        """
        return self._nodes[self.resolve(index)].value

    # ===========================================================================

    def for_each(self, func: Callable[[T], Any]) -> None:
        """
        自头至尾对每个元素调用 func. 不使用也不改写游标.

        Args:
            func (Callable[[T], Any]): 接收元素的回调, 返回值被忽略.

        Raises:
            ListChangedError: 回调中清空或删除了链表.
        """
        for value in self:
            func(value)

    def clear(self) -> None:
        """
        清空链表, 对每个元素调用释放回调, 游标复位.

        释放回调出错时仍会释放其余元素, 链表保持清空状态,
        最后抛出 ValueReleaseError(cause 为第一个错误).

        Raises:
            ValueReleaseError: 释放回调抛出异常.
        """
        self._check_alive()
        nodes, handle = self._nodes, self._head
        count = self._size

        self._nodes = {}
        self._head = self._tail = self._cursor_node = None
        self._size = self._cursor_index = 0
        self.last_resolution = None
        self._epoch += 1

        failure: Exception | None = None
        while handle is not None:
            node = nodes.pop(handle)
            handle = node.next
            if self._releaser is None:
                continue
            try:
                self._releaser(node.value)
            except Exception as ex:
                self._log.warningf(
                    "Failed to release value {value!r}", value=node.value, exc_info=True
                )
                if failure is None:
                    failure = ex

        self._log.debug("Cleared %d nodes", count)
        if failure is not None:
            raise ValueReleaseError("Failed to release list values", cause=failure)

    def delete(self) -> None:
        """
        清空并删除链表. 之后除 delete 外的任何操作都会抛出 ListDeletedError.

        重复调用 delete 不做任何事.
        """
        if self._deleted:
            return
        try:
            self.clear()
        finally:
            self._deleted = True
            self._log.debug("Deleted list")

    # ===========================================================================

    def _new_node(self, value: T) -> int:
        handle = next(self._handles)
        self._nodes[handle] = Node(value)
        return handle

    def _walk(self, handle: int | None, hops: int, forward: bool) -> int | None:
        for _ in range(hops):
            node = self._nodes[handle]  # type: ignore[index]
            handle = node.next if forward else node.prev
        return handle

    def _iter_values(self, handle: int | None, forward: bool) -> Iterator[T]:
        self._check_alive()
        epoch = self._epoch
        while handle is not None:
            node = self._nodes[handle]
            yield node.value
            if self._epoch != epoch:
                raise ListChangedError("List was cleared during iteration")
            handle = node.next if forward else node.prev

    def _check_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"Indices must be integers, not {type(index).__name__}")
        if index < 0 or index >= self._size:
            raise InvalidIndexError(index, self._size)

    def _check_alive(self) -> None:
        if self._deleted:
            raise ListDeletedError("List has been deleted")
