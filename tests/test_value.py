from __future__ import annotations

import pytest

from chainargs.value import (
    INT64_MAX,
    INT64_MIN,
    atoi64,
    interpret_bool,
    setting_to_bool,
    setting_to_int,
    setting_to_string,
)


def test_setting_to_string():
    assert setting_to_string(None) is None
    assert setting_to_string(None, "dflt") == "dflt"
    assert setting_to_string(False) == "0"
    assert setting_to_string(True) == "1"
    assert setting_to_string(42) == "42"
    assert setting_to_string("abc") == "abc"


def test_setting_to_int():
    assert setting_to_int(None) is None
    assert setting_to_int(None, 7) == 7
    assert setting_to_int(False) == 0
    assert setting_to_int(True) == 1
    assert setting_to_int(12) == 12
    assert setting_to_int("34") == 34
    assert setting_to_int("  -5xyz") == -5
    assert setting_to_int("abc") == 0


def test_setting_to_int_out_of_range():
    with pytest.raises(ValueError):
        setting_to_int(2**63)
    with pytest.raises(ValueError):
        setting_to_int(1.5)


def test_atoi64_saturates():
    assert atoi64("99999999999999999999") == INT64_MAX
    assert atoi64("-99999999999999999999") == INT64_MIN
    assert atoi64("+12") == 12
    assert atoi64("+-12") == 0
    assert atoi64("") == 0


def test_setting_to_bool():
    assert setting_to_bool(None) is None
    assert setting_to_bool(None, True) is True
    assert setting_to_bool(True) is True
    assert setting_to_bool(False) is False
    assert setting_to_bool("1") is True
    assert setting_to_bool("0") is False


def test_string_to_bool_quirks_are_preserved():
    # empty means "given without a value"; words parse as zero
    assert interpret_bool("") is True
    assert interpret_bool("00") is False
    assert interpret_bool("0abc") is False
    assert interpret_bool("foo") is False
    assert interpret_bool("false") is False
    assert interpret_bool("true") is False
    assert interpret_bool("2") is True
    assert interpret_bool(" 1 ") is True
