import pytest

from rje.tape import Tape, parse
from rje.tape import CHANNELS, PAGE_LINES


def test_default():
    tape = Tape()
    assert tape.spec == "0:H,3:A,65:C"
    assert tape.resolve(0, "A") == (3, 2)
    assert tape.resolve(4, "C") == (65, 60)
    assert tape.resolve(65, "C") == (131, 65)
    assert tape.resolve(3, "A") == (69, 65)
    assert tape.resolve(0, "H") == (66, 65)
    assert tape.resolve(10, "H") == (66, 55)


def test_spacing():
    tape = Tape()
    assert tape.resolve(0, "/") == (1, 0)
    assert tape.resolve(0, "S") == (2, 1)
    assert tape.resolve(0, "T") == (3, 2)
    assert tape.resolve(64, "T") == (67, 2)


def test_unpunched():
    tape = Tape()
    for channel in "BDEFG":
        for line in range(PAGE_LINES):
            assert tape.resolve(line, channel) == (line + 1, 0)


def test_empty_spec():
    tape = Tape("")
    for channel in CHANNELS:
        assert tape.resolve(30, channel) == (31, 0)


def test_idempotent():
    spec = "0:H,3:A,65:C,20:B,40:B"
    assert Tape.build(spec) == Tape.build(spec)
    assert Tape(spec).table == Tape.build(spec)


def test_unsorted():
    tape = Tape("40:B,10:B")
    assert tape.resolve(0, "B") == (10, 9)
    assert tape.resolve(9, "B") == (10, 0)
    assert tape.resolve(10, "B") == (40, 29)
    assert tape.resolve(40, "B") == (76, 35)
    assert tape.resolve(65, "B") == (76, 10)


def test_bottom_of_form():
    assert Tape("0:D").table == Tape("-5:D").table
    assert Tape("0:D").table == Tape("66:D").table
    assert Tape("0:D").resolve(65, "D") == (66, 0)


def test_every_line_defined():
    table = Tape().table
    assert len(table) == PAGE_LINES
    for dests in table:
        assert sorted(dests) == list(CHANNELS)
        assert all(dest > 0 for dest in dests.values())


def test_unrecognized(caplog):
    tape = Tape()
    assert tape.resolve(7, "Z") == (8, 0)
    assert tape.resolve(7, "AB") == (8, 0)
    assert "Unrecognized carriage control" in caplog.text


def test_parse():
    assert parse("0:H, 3:a,65:C") == [(0, "H"), (3, "A"), (65, "C")]
    assert parse("") == []


def test_parse_errors():
    with pytest.raises(ValueError):
        parse("3")

    with pytest.raises(ValueError):
        parse("x:A")

    with pytest.raises(ValueError):
        parse("3:J")

    with pytest.raises(ValueError):
        parse("67:A")
