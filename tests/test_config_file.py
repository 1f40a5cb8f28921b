from __future__ import annotations

import logging
from pathlib import Path

import pytest

from chainargs.config_file import SectionInfo, parse_config_lines
from chainargs.errors import ConfigFileError, NegationForbiddenError

CONF = """\
# comment line
foo=1
bar = spaced value  # trailing comment
multi
nomulti=0
[testnet]
foo=2
[bogus]
foo=3
regtest.bar=4
"""


def test_parse_config_lines():
    options, sections = parse_config_lines(CONF.splitlines(), "x.conf")
    assert [(o.key, o.value, o.line) for o in options] == [
        ("foo", "1", 2),
        ("bar", "spaced value", 3),
        ("multi", "", 4),
        ("nomulti", "0", 5),
        ("testnet.foo", "2", 7),
        ("bogus.foo", "3", 9),
        ("bogus.regtest.bar", "4", 10),
    ]
    assert sections == [
        SectionInfo("testnet", "x.conf", 6),
        SectionInfo("bogus", "x.conf", 8),
        SectionInfo("bogus.regtest", "x.conf", 10),
    ]


def test_dotted_key_in_default_section_records_section():
    options, sections = parse_config_lines(["regtest.foo=1"], "x.conf")
    assert options[0].key == "regtest.foo"
    assert sections == [SectionInfo("regtest", "x.conf", 1)]


def test_leading_dash_rejected():
    with pytest.raises(ConfigFileError, match="line 2.*without leading -"):
        parse_config_lines(["foo=1", "-bar=2"], "x.conf")


def test_stream_into_sections(args, caplog):
    with caplog.at_level(logging.WARNING):
        args.read_config_stream(CONF.splitlines(), "x.conf")
    config = args.scoped_values()["config"]
    assert config[""] == {"foo": ["1"], "bar": ["spaced value"], "multi": ["", True]}
    assert config["testnet"] == {"foo": ["2"]}
    assert config["bogus"] == {"foo": ["3"]}
    assert "Ignoring unknown configuration value bogus.regtest.bar" in caplog.text
    assert [s.name for s in args.get_unrecognized_sections()] == ["bogus", "bogus.regtest"]


def test_bare_key_reads_as_true(args):
    args.read_config_stream(["foo"], "x.conf")
    assert args.get_bool_arg("-foo") is True


def test_strict_invalid_keys(args):
    with pytest.raises(ConfigFileError, match="Invalid configuration value nosuch"):
        args.read_config_stream(["nosuch=1"], "x.conf", ignore_invalid_keys=False)


def test_config_negation_forbidden(args):
    with pytest.raises(NegationForbiddenError):
        args.read_config_stream(["noname=1"], "x.conf")


def test_read_config_files(args, datadir: Path):
    (datadir / "chainargs.conf").write_text("foo=main\nincludeconf=extra.conf\n[regtest]\nincludeconf=reg.conf\n")
    (datadir / "extra.conf").write_text("bar=extra\n")
    (datadir / "reg.conf").write_text("multi=reg\n")
    args.read_config_files()
    assert args.get_arg("-foo") == "main"
    assert args.get_arg("-bar") == "extra"
    # regtest includes are only followed when regtest is selected
    assert args.get_arg("-multi") is None


def test_read_config_files_follows_chain_includes(args, datadir: Path):
    (datadir / "chainargs.conf").write_text("regtest=1\n[regtest]\nincludeconf=reg.conf\n")
    (datadir / "reg.conf").write_text("[regtest]\nmulti=reg\n")
    args.read_config_files()
    args.select_config_network(args.get_chain_name())
    assert args.get_arg("-multi") == "reg"


def test_nested_includes_ignored(args, datadir: Path, caplog):
    (datadir / "chainargs.conf").write_text("includeconf=a.conf\n")
    (datadir / "a.conf").write_text("foo=a\nincludeconf=b.conf\n")
    (datadir / "b.conf").write_text("bar=b\n")
    with caplog.at_level(logging.WARNING):
        args.read_config_files()
    assert args.get_arg("-foo") == "a"
    assert args.get_arg("-bar") is None
    assert "ignoring -includeconf=b.conf" in caplog.text


def test_missing_include_fails(args, datadir: Path):
    (datadir / "chainargs.conf").write_text("includeconf=missing.conf\n")
    with pytest.raises(ConfigFileError, match="Failed to include configuration file missing.conf"):
        args.read_config_files()


def test_noincludeconf_skips_includes(args, datadir: Path):
    (datadir / "chainargs.conf").write_text("includeconf=extra.conf\n")
    (datadir / "extra.conf").write_text("bar=extra\n")
    args.parse_parameters(["-noincludeconf"])
    args.read_config_files()
    assert args.get_arg("-bar") is None


def test_missing_default_conf_is_fine(args):
    args.read_config_files()
    assert args.scoped_values()["config"] == {}


def test_missing_explicit_conf_fails(args, tmp_path: Path):
    args.parse_parameters([f"-conf={tmp_path / 'nope.conf'}"])
    with pytest.raises(ConfigFileError, match="could not be opened"):
        args.read_config_files()


def test_datadir_from_config_must_exist(args, datadir: Path, tmp_path: Path):
    (datadir / "chainargs.conf").write_text(f"datadir={tmp_path / 'absent'}\n")
    with pytest.raises(ConfigFileError, match="does not exist"):
        args.read_config_files()


def test_rereading_replaces_config(args, datadir: Path):
    conf = datadir / "chainargs.conf"
    conf.write_text("foo=1\n[bogus]\n")
    args.read_config_files()
    conf.write_text("bar=2\n")
    args.read_config_files()
    assert args.get_arg("-foo") is None
    assert args.get_arg("-bar") == "2"
    assert args.get_unrecognized_sections() == []
