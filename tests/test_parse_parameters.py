from __future__ import annotations

import logging

import pytest

from chainargs.errors import (
    IncludeConfError,
    InvalidParameterError,
    NegationForbiddenError,
)


def test_basic_tokens(args):
    args.parse_parameters(["-foo", "-bar=baz", "--multi=1", "-multi=2"])
    assert args.get_bool_arg("-foo") is True
    assert args.get_arg("-foo") == ""
    assert args.get_arg("-bar") == "baz"
    assert args.get_args("-multi") == ["1", "2"]
    assert args.get_arg("-multi") == "2"
    assert args.scoped_values()["command-line"] == {
        "foo": [""],
        "bar": ["baz"],
        "multi": ["1", "2"],
    }


def test_stops_at_first_positional(args):
    args.parse_parameters(["-foo=1", "positional", "-bar=2"])
    assert args.is_arg_set("-foo")
    assert not args.is_arg_set("-bar")


def test_bare_marker_stops_parsing(args):
    args.parse_parameters(["-foo", "-", "-bar"])
    assert args.is_arg_set("-foo")
    assert not args.is_arg_set("-bar")


def test_negation(args, caplog):
    with caplog.at_level(logging.WARNING):
        args.parse_parameters(["-nofoo"])
    assert args.get_setting("-foo") is False
    assert args.is_arg_negated("-foo")
    assert args.get_bool_arg("-foo", True) is False
    assert args.get_arg("-foo") == "0"
    assert "double-negative" not in caplog.text


def test_double_negation_is_true_and_logged(args, caplog):
    with caplog.at_level(logging.WARNING):
        args.parse_parameters(["-nofoo=0"])
    assert args.get_setting("-foo") is True
    assert not args.is_arg_negated("-foo")
    assert "double-negative -foo=0" in caplog.text


def test_negation_with_truthy_value(args):
    args.parse_parameters(["-nofoo=1"])
    assert args.get_setting("-foo") is False


def test_negation_resets_earlier_values(args):
    args.parse_parameters(["-multi=a", "-nomulti", "-multi=b"])
    assert args.get_args("-multi") == ["b"]
    assert args.get_arg("-multi") == "b"


def test_unknown_parameter(args):
    with pytest.raises(InvalidParameterError, match="Invalid parameter -unknown=1"):
        args.parse_parameters(["-unknown=1"])


def test_section_qualified_key_rejected(args):
    with pytest.raises(InvalidParameterError, match=r"Invalid parameter -testnet\.foo=1"):
        args.parse_parameters(["-testnet.foo=1"])
    # even when the part after the dot names a registered setting
    with pytest.raises(InvalidParameterError):
        args.parse_parameters(["-foo.bar=1"])


def test_failed_batch_keeps_no_state(args):
    args.parse_parameters(["-foo=1"])
    with pytest.raises(InvalidParameterError):
        args.parse_parameters(["-bar=1", "-unknown"])
    assert not args.is_arg_set("-foo")
    assert not args.is_arg_set("-bar")


def test_negation_forbidden(args):
    with pytest.raises(NegationForbiddenError, match="Negating of -name is meaningless"):
        args.parse_parameters(["-noname"])
    args.parse_parameters(["-name=alice"])
    assert args.get_arg("-name") == "alice"


def test_includeconf_rejected_but_parsed(args):
    with pytest.raises(IncludeConfError) as excinfo:
        args.parse_parameters(["-includeconf=a.conf", "-foo", "-includeconf=b.conf"])
    assert excinfo.value.messages == [
        "-includeconf cannot be used from commandline; -includeconf=a.conf",
        "-includeconf cannot be used from commandline; -includeconf=b.conf",
    ]
    assert isinstance(excinfo.value, InvalidParameterError)
    assert args.is_arg_set("-foo")


def test_negated_includeconf_is_allowed(args):
    args.parse_parameters(["-noincludeconf"])
    assert args.is_arg_negated("-includeconf")


def test_reparse_clears_previous_command_line(args):
    args.parse_parameters(["-foo=1"])
    args.parse_parameters(["-bar=2"])
    assert not args.is_arg_set("-foo")
    assert args.get_arg("-bar") == "2"
