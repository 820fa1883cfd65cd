import pytest

from rje import _util
from rje.codec import Codec


def test_card_image():
    assert _util.card_image("ABC") == "ABC" + " " * 77
    assert _util.card_image("ABC\n") == "ABC" + " " * 77
    assert _util.card_image("X" * 90) == "X" * 80
    assert _util.card_image("", 4) == "    "


def test_job_number():
    assert _util.job_number("600001") == "600001"
    assert _util.job_number(" 600001\n") == "600001"
    assert _util.job_number(42) == "000042"
    for value in ("60001", "6000011", "60000A", "", 1234567):
        with pytest.raises(ValueError):
            _util.job_number(value)


def test_host_port():
    assert _util.host_port("mvs1") == ("mvs1", 3780)
    assert _util.host_port("mvs1:3781") == ("mvs1", 3781)
    assert _util.host_port("mvs1", 23) == ("mvs1", 23)
    with pytest.raises(ValueError):
        _util.host_port("mvs1:port")


def test_codec():
    codec = Codec()
    assert codec.encoding == "cp1047"
    assert codec.code_page == 1047
    assert codec.encode("A/S4") == b"\xc1\x61\xe2\xf4"
    assert codec.decode(b"\xc8\xc5\xd3\xd3\xd6") == "HELLO"
    assert Codec("cp037").encode("HELLO") == codec.encode("HELLO")


def test_codec_errors():
    with pytest.raises(ValueError):
        Codec("ascii")

    with pytest.raises(LookupError):
        Codec("cp99999")
