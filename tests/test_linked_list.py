"""
FastLinkedList 测试套件

覆盖索引解析(起点选择/跳数/游标更新)/插入时的游标修复/清空与删除.
"""

import pytest

from fastlist.errors import (
    InvalidIndexError,
    ListChangedError,
    ListDeletedError,
    ValueReleaseError,
)
from fastlist.linked_list import Anchor, FastLinkedList, Resolution, new_list


@pytest.fixture
def empty_list():
    """创建一个空链表"""
    return new_list()


@pytest.fixture
def filled_list():
    """创建一个包含 5 个元素的链表"""
    return FastLinkedList([10, 20, 30, 40, 50])


def walk_forward(lst):
    handle = lst.head
    steps = 0
    while lst.get_node(handle).next is not None:
        handle = lst.get_node(handle).next
        steps += 1
    return handle, steps


def walk_backward(lst):
    handle = lst.tail
    steps = 0
    while lst.get_node(handle).prev is not None:
        handle = lst.get_node(handle).prev
        steps += 1
    return handle, steps


def expected_hops(size, cursor, index):
    if index in (0, size - 1, cursor):
        return 0
    return min(index, size - 1 - index, abs(cursor - index))


class TestConstruction:
    """测试链表初始化与访问器"""

    def test_new_list(self, empty_list):
        assert empty_list.size == 0
        assert len(empty_list) == 0
        assert empty_list.cursor_position == 0
        assert empty_list.cursor_node is None
        assert empty_list.head is None
        assert empty_list.tail is None
        assert empty_list.is_empty()
        assert list(empty_list) == []

    def test_initialization_with_items(self, filled_list):
        assert filled_list.size == 5
        assert list(filled_list) == [10, 20, 30, 40, 50]
        assert not filled_list.is_empty()

    def test_repr(self, filled_list):
        assert repr(filled_list) == "FastLinkedList([10, 20, 30, 40, 50])"


class TestAdd:
    """测试尾部追加"""

    def test_first_add_anchors_cursor(self, empty_list):
        handle = empty_list.add("a")
        assert empty_list.head == handle
        assert empty_list.tail == handle
        assert empty_list.cursor_node == handle
        assert empty_list.cursor_position == 0

    def test_add_keeps_cursor(self, filled_list):
        filled_list.get(2)
        handle = filled_list.cursor_node
        filled_list.add(60)
        assert filled_list.cursor_position == 2
        assert filled_list.cursor_node == handle
        assert filled_list.size == 6
        assert filled_list.get(5) == 60

    def test_scenario_a(self, empty_list):
        for value in [10, 20, 30, 40, 50]:
            empty_list.add(value)
        assert empty_list.get(0) == 10
        assert empty_list.get(4) == 50
        assert empty_list.size == 5


class TestResolve:
    """测试索引解析"""

    def test_cache_transparency(self, filled_list):
        values = [10, 20, 30, 40, 50]
        for start in range(5):
            for index in range(5):
                filled_list.get(start)
                assert filled_list.get(index) == values[index]
                assert filled_list[index] == values[index]

    def test_cursor_after_resolve(self, filled_list):
        for index in [3, 1, 4, 0, 2, 2]:
            handle = filled_list.resolve(index)
            assert filled_list.cursor_position == index
            assert filled_list.cursor_node == handle
            assert filled_list.get_node(handle).value == (index + 1) * 10

    def test_hop_count(self):
        size = 12
        lst = FastLinkedList(range(size))
        for cursor in range(size):
            for index in range(size):
                lst.resolve(cursor)
                lst.resolve(index)
                assert lst.last_resolution.hops == expected_hops(size, cursor, index)

    def test_fast_paths(self, filled_list):
        filled_list.resolve(2)
        filled_list.resolve(0)
        assert filled_list.last_resolution == Resolution(0, Anchor.HEAD, 0)
        filled_list.resolve(4)
        assert filled_list.last_resolution == Resolution(4, Anchor.TAIL, 0)
        filled_list.resolve(1)
        filled_list.resolve(1)
        assert filled_list.last_resolution == Resolution(1, Anchor.CURSOR, 0)

    def test_scenario_b_cursor_wins_tie_with_tail(self, filled_list):
        filled_list.get(2)
        assert filled_list.get(3) == 40
        # 距尾 1, 距游标 1: 尾节点需严格更近才会被选中
        assert filled_list.last_resolution == Resolution(3, Anchor.CURSOR, 1)

    def test_head_wins_ties(self):
        lst = FastLinkedList(range(9))
        lst.resolve(6)
        lst.resolve(3)
        # 距头 3, 距游标 3, 距尾 5
        assert lst.last_resolution == Resolution(3, Anchor.HEAD, 3)

        lst.resolve(0)
        lst.resolve(4)
        # 距头 4, 距尾 4, 距游标 4
        assert lst.last_resolution == Resolution(4, Anchor.HEAD, 4)

    def test_tail_strictly_closer(self):
        lst = FastLinkedList(range(10))
        lst.resolve(1)
        lst.resolve(7)
        assert lst.last_resolution == Resolution(7, Anchor.TAIL, 2)

    def test_cursor_backward(self):
        lst = FastLinkedList(range(10))
        lst.resolve(6)
        assert lst.get(4) == 4
        assert lst.last_resolution == Resolution(4, Anchor.CURSOR, 2)

    def test_idempotent_get(self, filled_list):
        assert filled_list.get(3) == 40
        state = (filled_list.cursor_position, filled_list.cursor_node)
        assert filled_list.get(3) == 40
        assert (filled_list.cursor_position, filled_list.cursor_node) == state

    def test_sequential_scan_is_one_hop_per_step(self):
        lst = FastLinkedList(range(20))
        for index in range(1, 19):
            lst.get(index)
            assert lst.last_resolution.hops <= 1

    def test_node(self, filled_list):
        node = filled_list.node(2)
        assert node.value == 30
        assert filled_list.get_node(node.prev).value == 20
        assert filled_list.get_node(node.next).value == 40

    @pytest.mark.parametrize("index", [-1, 5, 100])
    def test_invalid_index(self, filled_list, index):
        with pytest.raises(InvalidIndexError) as exc_info:
            filled_list.get(index)
        assert exc_info.value.index == index
        assert exc_info.value.size == 5

    def test_invalid_index_is_index_error(self, filled_list):
        with pytest.raises(IndexError):
            filled_list[7]

    def test_non_integer_index(self, filled_list):
        with pytest.raises(TypeError):
            filled_list[1:3]

    @pytest.mark.parametrize("index", [0.0, 2.0, True, "1"])
    def test_non_integer_index_leaves_cursor_untouched(self, filled_list, index):
        filled_list.get(3)
        with pytest.raises(TypeError):
            filled_list.get(index)
        with pytest.raises(TypeError):
            filled_list.insert_at(99, index)
        assert filled_list.cursor_position == 3
        assert type(filled_list.cursor_position) is int
        assert filled_list.get(1) == 20
        assert list(filled_list) == [10, 20, 30, 40, 50]

    def test_empty_list_access(self, empty_list):
        with pytest.raises(InvalidIndexError):
            empty_list.get(0)
        with pytest.raises(InvalidIndexError):
            empty_list.resolve(0)


class TestInsertAt:
    """测试按索引插入"""

    def test_scenario_c(self, filled_list):
        filled_list.insert_at(99, 2)
        assert list(filled_list) == [10, 20, 99, 30, 40, 50]
        assert filled_list.size == 6

    def test_insert_at_head(self, filled_list):
        handle = filled_list.insert_at(5, 0)
        assert list(filled_list) == [5, 10, 20, 30, 40, 50]
        assert filled_list.head == handle

    def test_insert_at_last_index_becomes_tail(self, filled_list):
        handle = filled_list.insert_at(99, 4)
        assert list(filled_list) == [10, 20, 30, 40, 50, 99]
        assert filled_list.tail == handle

    def test_insert_into_single_element_list(self):
        lst = FastLinkedList(["b"])
        lst.insert_at("a", 0)
        assert list(lst) == ["a", "b"]
        assert lst.cursor_position == 0
        assert lst.get_node(lst.cursor_node).value == "a"

    def test_cursor_at_insert_position_points_to_new_node(self, filled_list):
        handle = filled_list.insert_at(5, 0)
        assert filled_list.cursor_position == 0
        assert filled_list.cursor_node == handle

    def test_cursor_after_insert_position_shifts(self, filled_list):
        filled_list.get(3)
        filled_list.insert_at(5, 0)
        assert filled_list.cursor_position == 4
        assert filled_list.get_node(filled_list.cursor_node).value == 40

    def test_cursor_before_insert_position_unchanged(self, filled_list):
        filled_list.get(3)
        filled_list.insert_at(99, 4)
        assert filled_list.cursor_position == 3
        assert filled_list.get_node(filled_list.cursor_node).value == 40

    def test_cache_transparency_after_inserts(self, filled_list):
        expected = [10, 20, 30, 40, 50]
        for value, index in [(1, 3), (2, 1), (3, 0), (4, 6), (5, 2), (6, 4)]:
            filled_list.get(index)
            filled_list.insert_at(value, index)
            if index == len(expected) - 1:
                expected.append(value)
            else:
                expected.insert(index, value)
            for i in range(len(expected)):
                assert filled_list.get(i) == expected[i]
        assert list(filled_list) == expected

    def test_structural_invariant(self, filled_list):
        for value, index in [(1, 2), (2, 0), (3, 6), (4, 3), (5, 1)]:
            filled_list.insert_at(value, index)
            filled_list.add(value)
        size = filled_list.size
        assert walk_forward(filled_list) == (filled_list.tail, size - 1)
        assert walk_backward(filled_list) == (filled_list.head, size - 1)
        assert list(reversed(filled_list)) == list(filled_list)[::-1]

    @pytest.mark.parametrize("index", [-1, 5])
    def test_invalid_index(self, filled_list, index):
        with pytest.raises(InvalidIndexError):
            filled_list.insert_at(99, index)
        assert filled_list.size == 5

    def test_insert_into_empty_list(self, empty_list):
        with pytest.raises(InvalidIndexError):
            empty_list.insert_at(1, 0)


class TestForEach:
    """测试遍历"""

    def test_for_each_order(self, filled_list):
        seen = []
        filled_list.for_each(seen.append)
        assert seen == [10, 20, 30, 40, 50]

    def test_for_each_does_not_touch_cursor(self, filled_list):
        filled_list.get(3)
        state = (filled_list.cursor_position, filled_list.cursor_node)
        filled_list.for_each(lambda value: None)
        assert (filled_list.cursor_position, filled_list.cursor_node) == state

    def test_clear_inside_for_each(self, filled_list):
        with pytest.raises(ListChangedError):
            filled_list.for_each(lambda value: filled_list.clear())
        assert filled_list.size == 0

    def test_delete_inside_iteration(self, filled_list):
        with pytest.raises(ListChangedError):
            for _ in reversed(filled_list):
                filled_list.delete()
        assert filled_list.deleted

    def test_add_inside_for_each_is_visited(self):
        lst = FastLinkedList([1, 2])
        seen = []

        def visit(value):
            seen.append(value)
            if value < 3:
                lst.add(value + 2)

        lst.for_each(visit)
        assert seen == [1, 2, 3, 4]


class TestClearAndDelete:
    """测试清空与删除"""

    def test_scenario_e(self, filled_list):
        filled_list.get(3)
        filled_list.clear()
        assert filled_list.size == 0
        assert filled_list.cursor_position == 0
        assert filled_list.cursor_node is None
        assert filled_list.head is None
        assert filled_list.tail is None
        with pytest.raises(InvalidIndexError):
            filled_list.get(0)

    def test_reuse_after_clear(self, filled_list):
        filled_list.clear()
        filled_list.add(1)
        assert filled_list.cursor_position == 0
        assert filled_list.get(0) == 1

    def test_stale_handle_after_clear(self, filled_list):
        handle = filled_list.resolve(2)
        filled_list.clear()
        filled_list.extend([1, 2, 3])
        with pytest.raises(KeyError):
            filled_list.get_node(handle)

    def test_releaser_called_once_per_value(self):
        released = []
        lst = FastLinkedList([1, 2, 3], releaser=released.append)
        lst.clear()
        assert released == [1, 2, 3]
        lst.clear()
        assert released == [1, 2, 3]

    def test_releaser_failure(self):
        released = []

        def releaser(value):
            if value == 2:
                raise RuntimeError("boom")
            released.append(value)

        lst = FastLinkedList([1, 2, 3], releaser=releaser)
        with pytest.raises(ValueReleaseError) as exc_info:
            lst.clear()
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert released == [1, 3]
        assert lst.size == 0

    def test_delete(self, filled_list):
        filled_list.delete()
        assert filled_list.deleted
        with pytest.raises(ListDeletedError):
            filled_list.get(0)
        with pytest.raises(ListDeletedError):
            filled_list.add(1)
        with pytest.raises(ListDeletedError):
            len(filled_list)
        filled_list.delete()
        assert repr(filled_list) == "<FastLinkedList (deleted)>"

    def test_context_manager_deletes(self):
        released = []
        with FastLinkedList(["a", "b"], releaser=released.append) as lst:
            assert lst.get(1) == "b"
        assert lst.deleted
        assert released == ["a", "b"]
