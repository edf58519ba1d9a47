import json

import pytest

from gdtoolkit.nodeinfo import NodeInfo


def test_to_json_wire_format():
    node = NodeInfo(ip="10.0.0.1", port=8080, offline=False, weight=3)
    assert node.to_json() == '{"ip":"10.0.0.1","port":8080,"offline":false,"weight":3}'


def test_round_trip():
    node = NodeInfo(ip="10.0.0.2", port=9000, offline=True, weight=7)
    assert NodeInfo.from_json(node.to_json()) == node


def test_from_json_bytes_and_case_insensitive_keys():
    node = NodeInfo.from_json(b'{"IP":"10.0.0.3","Port":81,"extra":1}')
    assert node.ip == "10.0.0.3"
    assert node.port == 81
    assert node.offline is False
    assert node.weight == 0


def test_from_json_null_gives_defaults():
    assert NodeInfo.from_json("null") == NodeInfo()


def test_to_json_keys():
    assert set(json.loads(NodeInfo().to_json())) == {"ip", "port", "offline", "weight"}


@pytest.mark.parametrize(
    "data",
    [
        "not json",
        "[1, 2]",
        '{"port": "80"}',
        '{"port": 80.5}',
        '{"offline": 1}',
        '{"weight": -1}',
        '{"ip": 5}',
    ],
)
def test_from_json_invalid(data):
    with pytest.raises(ValueError):
        NodeInfo.from_json(data)