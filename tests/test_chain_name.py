from __future__ import annotations

import pytest

from chainargs.errors import ChainSelectionConflictError


def test_default_is_main(args):
    assert args.get_chain_name() == "main"


@pytest.mark.parametrize(
    "tokens, expected",
    [
        (["-regtest"], "regtest"),
        (["-testnet"], "testnet"),
        (["-chain=regtest"], "regtest"),
        (["-testnet=0"], "main"),
        (["-regtest", "-noregtest"], "main"),
        (["-noregtest", "-testnet"], "testnet"),
    ],
)
def test_selectors(args, tokens, expected):
    args.parse_parameters(tokens)
    assert args.get_chain_name() == expected


def test_regtest_and_chain_conflict(args):
    args.parse_parameters(["-regtest", "-chain=testnet"])
    with pytest.raises(ChainSelectionConflictError):
        args.get_chain_name()


def test_regtest_and_testnet_conflict(args):
    args.parse_parameters(["-regtest", "-testnet"])
    with pytest.raises(ChainSelectionConflictError, match="Can use at most one"):
        args.get_chain_name()


def test_config_selector(args):
    args.read_config_stream(["testnet=1"], "test.conf")
    assert args.get_chain_name() == "testnet"


def test_network_section_selector_ignored(args):
    args.read_config_stream(["[regtest]", "regtest=1"], "test.conf")
    assert args.get_chain_name() == "main"


def test_command_line_negation_falls_through_to_config(args):
    args.read_config_stream(["regtest=1"], "test.conf")
    args.parse_parameters(["-noregtest"])
    assert args.get_chain_name() == "regtest"
