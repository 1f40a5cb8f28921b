from __future__ import annotations

MAIN = "main"
TESTNET = "testnet"
REGTEST = "regtest"

# Section names accepted in the configuration file.
KNOWN_SECTIONS: frozenset[str] = frozenset({MAIN, TESTNET, REGTEST})

_DATA_DIRS: dict[str, str] = {
    MAIN: "",
    TESTNET: "testnet3",
    REGTEST: "regtest",
}


def data_dir_name(chain: str) -> str:
    """Return the data directory name for *chain* (empty for main).

    Unknown chain names use the chain name itself.
    """
    return _DATA_DIRS.get(chain, chain)


__all__ = ["KNOWN_SECTIONS", "MAIN", "REGTEST", "TESTNET", "data_dir_name"]
