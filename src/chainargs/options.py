"""Registration of the arguments the manager itself consults."""

from __future__ import annotations

from .manager import ArgsManager, setup_help_options
from .registry import ArgFlags, OptionsCategory


def setup_chain_params_base_options(args: ArgsManager) -> None:
    args.add_arg(
        "-chain=<chain>",
        "Use the chain <chain> (default: main). Allowed values: main, testnet, regtest",
        ArgFlags.ALLOW_ANY,
        OptionsCategory.CHAINPARAMS,
    )
    args.add_arg(
        "-regtest",
        "Enter regression test mode, which uses a special chain in which blocks "
        "can be solved instantly.",
        ArgFlags.ALLOW_ANY | ArgFlags.DEBUG_ONLY,
        OptionsCategory.CHAINPARAMS,
    )
    args.add_arg(
        "-testnet",
        "Use the test chain. Equivalent to -chain=testnet.",
        ArgFlags.ALLOW_ANY,
        OptionsCategory.CHAINPARAMS,
    )


def setup_base_options(args: ArgsManager) -> None:
    """Register help, chain selection and the file/directory options."""
    setup_help_options(args)
    setup_chain_params_base_options(args)
    args.add_hidden_args(["-help-debug"])
    args.add_arg(
        "-conf=<file>",
        "Specify path to read-only configuration file. Relative paths will be "
        "prefixed by datadir location.",
        ArgFlags.ALLOW_ANY,
        OptionsCategory.OPTIONS,
    )
    args.add_arg(
        "-datadir=<dir>",
        "Specify data directory",
        ArgFlags.ALLOW_ANY,
        OptionsCategory.OPTIONS,
    )
    args.add_arg(
        "-blocksdir=<dir>",
        "Specify directory to hold blocks subdirectory for *.dat files",
        ArgFlags.ALLOW_ANY,
        OptionsCategory.OPTIONS,
    )
    args.add_arg(
        "-settings=<file>",
        "Specify path to dynamic settings data file. Can be disabled with "
        "-nosettings. File is written at runtime and not meant to be edited by users.",
        ArgFlags.ALLOW_ANY,
        OptionsCategory.OPTIONS,
    )
    args.add_arg(
        "-includeconf=<file>",
        "Specify additional configuration file, relative to the -datadir path "
        "(only useable from configuration file, not command line)",
        ArgFlags.ALLOW_ANY,
        OptionsCategory.OPTIONS,
    )


__all__ = ["setup_base_options", "setup_chain_params_base_options"]
