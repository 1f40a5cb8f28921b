from __future__ import annotations

from pathlib import Path

from chainargs import ArgFlags, ArgsManager, OptionsCategory, setup_base_options

TEST_ARGS = {
    "-foo": ArgFlags.ALLOW_ANY,
    "-bar": ArgFlags.ALLOW_ANY,
    "-multi": ArgFlags.ALLOW_ANY,
    "-name": ArgFlags.ALLOW_STRING,
    "-count": ArgFlags.ALLOW_INT,
    "-netonly": ArgFlags.ALLOW_ANY | ArgFlags.NETWORK_ONLY,
    "-password": ArgFlags.ALLOW_ANY | ArgFlags.SENSITIVE,
}


def make_manager(default_dir: Path, *, base_options: bool = True) -> ArgsManager:
    """Return a manager whose platform data dir is *default_dir*."""
    mgr = ArgsManager("chainargs-test", default_data_dir=lambda: default_dir)
    if base_options:
        setup_base_options(mgr)
    for name, flags in TEST_ARGS.items():
        mgr.add_arg(name, "", flags, OptionsCategory.OPTIONS)
    return mgr
