import os

import pytest

os.environ["RJE_LOGGING"] = ""

from rje import cli


def test_submit_args():
    args = cli.parse_args(["--tape", "0:H,5:A", "mvs1:3781",
                           "submit", "600001"])
    assert args.command == "submit"
    assert args.jobno == "600001"
    assert args.tape == "0:H,5:A"
    assert args.host == "mvs1:3781"
    assert args.debug is None


def test_retrieve_args():
    args = cli.parse_args(["--debug", "--nak-policy", "abort",
                           "mvs1", "retrieve", "--punch", "deck.out"])
    assert args.command == "retrieve"
    assert args.punch == "deck.out"
    assert args.debug is True
    assert args.nak_policy == "abort"


def test_retrieve_default_punch():
    args = cli.parse_args(["mvs1", "retrieve"])
    assert args.punch == "punch.out"


def test_bad_args():
    with pytest.raises(SystemExit):
        cli.parse_args(["mvs1", "submit", "12345"])

    with pytest.raises(SystemExit):
        cli.parse_args(["mvs1"])

    with pytest.raises(SystemExit):
        cli.parse_args(["--nak-policy", "ignore", "mvs1", "retrieve"])


def test_no_host(capsys):
    assert cli.main(["127.0.0.1:9", "submit", "600001"]) == 1
    assert capsys.readouterr().err.startswith("rje: ")
