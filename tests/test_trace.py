import pytest

from csim import TraceRecord, TraceSourceError, iter_trace, parse_line, read_trace


@pytest.mark.parametrize(
    "line,expected",
    [
        (" L 10,1\n", TraceRecord("L", 0x10, 1)),
        (" S 7ff0005b8,8\n", TraceRecord("S", 0x7FF0005B8, 8)),
        (" M 7ff000,8", TraceRecord("M", 0x7FF000, 8)),
        (" M 0421c7f0,4 trailing junk\n", TraceRecord("M", 0x421C7F0, 4)),
        (" L ABCDEF,2\n", TraceRecord("L", 0xABCDEF, 2)),
        (" L 0x10,1\n", TraceRecord("L", 0x10, 1)),
        (" S 0X7ff000,8\n", TraceRecord("S", 0x7FF000, 8)),
    ],
)
def test_parse_data_access(line, expected):
    assert parse_line(line) == expected


@pytest.mark.parametrize(
    "line",
    [
        "I  0400d7d4,8\n",
        "==31080== Lackey, an example Valgrind tool\n",
        "\n",
        "L 10,1\n",
        " X 10,1\n",
        " L 10\n",
        " L zz,1\n",
        " L 1ffffffffffffffff,1\n",
    ],
)
def test_parse_skips_other_lines(line):
    assert parse_line(line) is None


def test_record_formatting():
    rec = TraceRecord("M", 0x7FF000, 8)
    assert str(rec) == "M 7ff000,8"
    assert "0x7ff000" in repr(rec)


def test_iter_trace_keeps_order():
    lines = [" S 1,1", "I  2,4", " L 2,2", "garbage", " M 3,3"]
    kinds = [(r.kind, r.address) for r in iter_trace(lines)]
    assert kinds == [("S", 1), ("L", 2), ("M", 3)]


def test_iter_trace_is_lazy():
    def lines():
        yield " L 10,1"
        raise AssertionError("read too far")

    it = iter_trace(lines())
    assert next(it).address == 0x10


def test_read_trace(yi_trace):
    records = list(read_trace(yi_trace))
    assert len(records) == 7
    assert records[0] == TraceRecord("L", 0x10, 1)
    assert records[-1] == TraceRecord("M", 0x12, 1)


def test_read_trace_missing_file(tmp_path):
    missing = str(tmp_path / "nope.trace")
    with pytest.raises(TraceSourceError) as info:
        read_trace(missing)
    assert info.value.path == missing
    assert "No such file" in str(info.value)
    assert isinstance(info.value, OSError)


def test_read_trace_only_instruction_lines(write_trace):
    path = write_trace("I  0400d7d4,8\nI  0400d7d8,4\n")
    assert list(read_trace(path)) == []
