import json
from dataclasses import dataclass

import pytest

from gdtoolkit import misc


def _outer():
    return misc.func_name(1)


def test_func_name():
    assert _outer() == "_outer"
    assert misc.func_name(0) == "func_name"
    assert misc.func_name(10**6) == ""


def test_human_size_pinned():
    assert misc.human_size(512) == "512B"
    assert misc.human_size(1536) == "1.5KB"


def test_human_size_suffixes():
    assert misc.human_size(3 * 1024 * 1024).endswith("MB")
    assert misc.human_size(5 * 1024**3).endswith("GB")
    with pytest.raises(ValueError):
        misc.human_size(-1)


def test_parse_memory_size():
    assert misc.parse_memory_size("2k") == 2048
    assert misc.parse_memory_size("1m") == misc.parse_memory_size("1024k")
    assert misc.parse_memory_size("1G") == misc.parse_memory_size("1024M")
    assert misc.parse_memory_size("7K") == misc.parse_memory_size("7k")


def test_parse_memory_size_errors():
    with pytest.raises(ValueError, match="unsupport suffix"):
        misc.parse_memory_size("10t")
    with pytest.raises(ValueError):
        misc.parse_memory_size("")
    assert misc.parse_memory_size("xk") == 0


def test_marshal_no_html_escape_no_newline():
    data = {"a": "<b>&", "n": [1, 2]}
    out = misc.marshal(data)
    assert b"<b>&" in out
    assert not out.endswith(b"\n")
    assert json.loads(out) == data


def test_marshal_dataclass_and_errors():
    @dataclass
    class Point:
        x: int
        y: int

    assert json.loads(misc.marshal(Point(1, 2))) == {"x": 1, "y": 2}
    with pytest.raises(TypeError):
        misc.marshal(object())
    with pytest.raises(ValueError):
        misc.marshal(float("nan"))


def test_with_recover_catches(capsys):
    seen = []

    def boom():
        raise RuntimeError("bad")

    result = misc.with_recover(boom, seen.append)
    assert isinstance(result, RuntimeError)
    assert seen == [result]
    assert "panic_recovered" in capsys.readouterr().err


def test_with_recover_no_error():
    calls = []
    assert misc.with_recover(lambda: calls.append(1), None) is None
    assert calls == [1]


@pytest.mark.parametrize("payload", [b"hello", b"", bytes(range(256))])
def test_gd_round_trip(payload):
    encoded = misc.gd_encode(payload, "key")
    assert misc.gd_decode(encoded, "key") == payload


def test_gd_decode_invalid():
    with pytest.raises(ValueError):
        misc.gd_decode("!!!", "key")


def test_rand_string():
    text = misc.rand_string(40)
    assert len(text) == 40
    assert set(text) <= set(misc.LETTERS)


def test_trace_id():
    first = misc.trace_id()
    assert len(first) == 36
    assert first.startswith(b"gd".hex())
    int(first, 16)
    assert first != misc.trace_id()


def test_fatal_with_sms_alert(capsys):
    misc.fatal_with_sms_alert("boom")
    assert capsys.readouterr().err == "fatal boom\n"