import pytest

from gdtoolkit.orderedmap import KVPair, LinkList, OrderedMap


def sample_strings():
    return ["test0", "test1", "test2", "test3", "test4"]


def sample_pairs():
    return [KVPair(f"test{i}", i) for i in range(5)]


def test_link_list_add_keeps_order():
    expected = sample_strings()
    ls = LinkList()
    for value in expected:
        ls.add(value)
    assert list(ls) == expected
    assert len(ls) == 5


def test_link_list_str():
    ls = LinkList()
    ls.add("test0")
    ls.add("test1")
    assert str(ls) == "LinkList[test0, test1, ]"


def test_set_data():
    om = OrderedMap()
    for pair in sample_pairs():
        om.set(pair.key, pair.value)
    assert len(om) == 5


def test_get_data():
    data = sample_pairs()
    om = OrderedMap(data)
    for pair in data:
        assert pair.key in om
        assert om.get(pair.key) == pair.value
    assert "invlalid-key" not in om
    assert om.get("invlalid-key") is None


def test_delete_data():
    data = sample_pairs()
    om = OrderedMap(data)
    key = data[2].key
    assert key in om
    om.delete(key)
    assert key not in om
    assert len(om) == 4


def test_delete_missing_key_keeps_length():
    om = OrderedMap(sample_pairs())
    om.delete("absent")
    assert len(om) == 5


def test_items_in_insert_order():
    sample = sample_pairs()
    om = OrderedMap(sample)
    got = list(om.items())
    assert len(got) == len(sample)
    for pair, expected in zip(got, sample):
        assert pair.compare(expected)


def test_reversed_items():
    sample = sample_pairs()
    om = OrderedMap(sample)
    assert [p.key for p in om.reversed_items()] == [p.key for p in reversed(sample)]


def test_len_non_empty_and_empty():
    assert len(OrderedMap(sample_pairs())) == 5
    assert len(OrderedMap()) == 0


def test_reset_keeps_position_and_readd_moves_to_end():
    om = OrderedMap([("a", 1), ("b", 2), ("c", 3)])
    om.set("a", 10)
    assert list(om) == ["a", "b", "c"]
    assert om.get("a") == 10
    om.delete("a")
    om.set("a", 11)
    assert list(om) == ["b", "c", "a"]


def test_get_and_set_example():
    om = OrderedMap()
    om.set("a", 1)
    om.set("b", 2)
    om.set("c", 3)
    om.set("d", 4)
    assert om.get("b") == 2
    om.delete("c")
    assert "c" not in om


def test_iterator_example():
    om = OrderedMap()
    for i in range(100):
        om.set(i, f"{i * i}")
    pairs = list(om.items())
    assert [p.key for p in pairs] == list(range(100))
    assert pairs[7].value == "49"


def test_str_format():
    om = OrderedMap([("a", 1), ("b", 2)])
    assert str(om) == "OrderedMap[a:1,  b:2, ]"


def test_kvpair_str_and_compare():
    pair = KVPair("a", 1)
    assert str(pair) == "a:1"
    assert pair.compare(KVPair("a", 1))
    assert not pair.compare(KVPair("a", 2))


@pytest.mark.parametrize("key", ["test0", "test4"])
def test_contains(key):
    assert key in OrderedMap(sample_pairs())