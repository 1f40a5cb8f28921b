from __future__ import annotations

import argparse
import json
import logging
import sys

from .errors import ArgsError
from .manager import ArgsManager
from .options import setup_base_options
from .registry import ArgFlags, OptionsCategory
from .value import write_value

logger = logging.getLogger(__name__)


def _load(args: argparse.Namespace) -> ArgsManager:
    """Build a manager from the node tokens given after ``--``."""
    mgr = ArgsManager(args.app)
    setup_base_options(mgr)
    extra = [(name, ArgFlags.ALLOW_ANY | ArgFlags.SENSITIVE) for name in args.sensitive]
    extra += [(name, ArgFlags.ALLOW_ANY) for name in args.allow]
    for name, flags in extra:
        arg = f"-{name.lstrip('-')}"
        if mgr.get_arg_flags(arg) is not None:
            logger.warning("Ignoring extra option %s: already registered", arg)
            continue
        mgr.add_arg(arg, "", flags, OptionsCategory.OPTIONS)
    mgr.parse_parameters(args.node_args)
    mgr.read_config_files()
    mgr.select_config_network(mgr.get_chain_name())
    if mgr.get_settings_path() is not None:
        mgr.read_settings_file()
    return mgr


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def get_cmd(args: argparse.Namespace) -> int:
    mgr = _load(args)
    val = mgr.get_arg(args.name)
    if val is None:
        return 1
    print(val)
    return 0


def list_cmd(args: argparse.Namespace) -> int:
    mgr = _load(args)
    for val in mgr.get_args(args.name):
        print(val)
    return 0


def chain_cmd(args: argparse.Namespace) -> int:
    mgr = _load(args)
    print(mgr.get_chain_name())
    return 0


def sections_cmd(args: argparse.Namespace) -> int:
    mgr = _load(args)
    for info in mgr.get_unrecognized_sections():
        print(f"{info.file}:{info.line}: [{info.name}]")
    for name in sorted(mgr.get_unsuitable_section_only_args()):
        print(f"{name} is only set in the default section")
    return 0


def paths_cmd(args: argparse.Namespace) -> int:
    mgr = _load(args)
    data = {
        "datadir": mgr.get_data_dir_base(),
        "datadir_net": mgr.get_data_dir_net(),
        "conf": mgr.get_config_file_path(),
        "settings": mgr.get_settings_path(),
    }
    if args.as_json:
        print(json.dumps({k: None if v is None else str(v) for k, v in data.items()}))
    else:
        for k, v in data.items():
            print(f"{k}: {v if v is not None else ''}")
    return 0


def settings_cmd(args: argparse.Namespace) -> int:
    mgr = _load(args)
    for name, value in sorted(mgr.rw_settings.items()):
        print(f"{name}={write_value(value)}")
    return 0


def log_cmd(args: argparse.Namespace) -> int:
    mgr = _load(args)
    mgr.log_args()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chainargs",
        description="Resolve node settings. Node options follow a '--' separator.",
    )
    parser.add_argument("--app", default="chainargs", help="Application name")
    parser.add_argument(
        "--allow", action="append", default=[], metavar="NAME",
        help="Register an extra option NAME (repeatable)",
    )
    parser.add_argument(
        "--sensitive", action="append", default=[], metavar="NAME",
        help="Register an extra option whose value is redacted in logs",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log diagnostics")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_get = subparsers.add_parser("get", help="Print the effective value of NAME.")
    p_get.add_argument("name")
    p_get.set_defaults(func=get_cmd)

    p_list = subparsers.add_parser("list", help="Print every value of NAME.")
    p_list.add_argument("name")
    p_list.set_defaults(func=list_cmd)

    p_chain = subparsers.add_parser("chain", help="Print the selected chain.")
    p_chain.set_defaults(func=chain_cmd)

    p_sections = subparsers.add_parser("sections", help="Report config file problems.")
    p_sections.set_defaults(func=sections_cmd)

    p_paths = subparsers.add_parser("paths", help="Show resolved paths.")
    p_paths.add_argument("--json", dest="as_json", action="store_true")
    p_paths.set_defaults(func=paths_cmd)

    p_settings = subparsers.add_parser("settings", help="Show the read/write settings.")
    p_settings.set_defaults(func=settings_cmd)

    p_log = subparsers.add_parser("log", help="Log every argument (sensitive values redacted).")
    p_log.set_defaults(func=log_cmd)

    return parser


def _split_node_args(argv: list[str]) -> tuple[list[str], list[str]]:
    if "--" in argv:
        idx = argv.index("--")
        return argv[:idx], argv[idx + 1:]
    return argv, []


def main(argv: list[str] | None = None) -> int:
    own, node_args = _split_node_args(list(sys.argv[1:] if argv is None else argv))
    parser = build_parser()
    args = parser.parse_args(own)
    args.node_args = node_args
    if args.verbose or args.command == "log":
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    try:
        return int(args.func(args))
    except ArgsError as exc:
        print(str(exc), file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
