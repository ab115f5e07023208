"""Tests for the command line."""

import io
import types

import pytest

from bencode_decode.main import format_value, main
from bencode_decode.values import ByteString, Dictionary, Integer, List


@pytest.fixture
def bencoded(tmp_path):
    def write(data: bytes) -> str:
        path = tmp_path / "input.bencode"
        path.write_bytes(data)
        return str(path)

    return write


# ---------------------------------------------------------------------------
# format_value
# ---------------------------------------------------------------------------

def test_format_leaves():
    assert format_value(ByteString(b"spam")) == "'spam'"
    assert format_value(Integer(-3)) == "-3"

def test_format_binary():
    assert format_value(ByteString(b"\x00\xff")) == "hex(2 bytes):'00ff'"

def test_format_long_binary_is_truncated():
    text = format_value(ByteString(b"\x00" * 40))
    assert text == "hex(40 bytes):'" + "00" * 20 + "...'"

def test_format_nested():
    value = Dictionary({b"a": List([Integer(1)]), b"b": List([])})
    assert format_value(value) == "{\n  'a': [\n    1\n  ]\n  'b': []\n}"


# ---------------------------------------------------------------------------
# main
# ---------------------------------------------------------------------------

def test_main_prints_tree(bencoded, capsys):
    main([bencoded(b"d4:spam4:eggs3:cow3:mooe")])
    assert capsys.readouterr().out == "{\n  'cow': 'moo'\n  'spam': 'eggs'\n}\n"

def test_main_tokens(bencoded, capsys):
    main(["--tokens", bencoded(b"l4:spami3ee")])
    assert capsys.readouterr().out.splitlines() == [
        "LIST_START",
        "BYTE_STRING b'spam'",
        "INTEGER 3",
        "END",
    ]

def test_main_all(bencoded, capsys):
    main(["-a", bencoded(b"i1ei2e")])
    assert capsys.readouterr().out.splitlines() == ["1", "2"]

def test_main_first_value_only(bencoded, capsys):
    main([bencoded(b"i1ei2e")])
    assert capsys.readouterr().out.splitlines() == ["1"]

def test_main_empty_input(bencoded, capsys):
    main([bencoded(b"")])
    assert capsys.readouterr().out == ""

def test_main_torrent(bencoded, capsys):
    path = bencoded(
        b"d8:announce17:http://a/announce4:infod6:lengthi3e4:name5:a.txt"
        b"12:piece lengthi16384e6:pieces20:" + b"\x00" * 20 + b"ee"
    )
    main(["--torrent", path])
    out = capsys.readouterr().out
    assert "name: a.txt" in out
    assert "tracker: http://a/announce" in out
    assert "file: a.txt (3 bytes)" in out

def test_main_malformed_exits(bencoded):
    with pytest.raises(SystemExit) as exc:
        main([bencoded(b"di5ei5ee")])
    assert exc.value.code == 1

def test_main_missing_file(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main([str(tmp_path / "missing")])
    assert exc.value.code == 1

def test_main_stdin_stays_open(monkeypatch, capsys):
    buf = io.BufferedReader(io.BytesIO(b"i7e"))
    monkeypatch.setattr("sys.stdin", types.SimpleNamespace(buffer=buf))
    main(["-"])
    assert capsys.readouterr().out == "7\n"
    assert not buf.closed
