from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from threading import RLock
from typing import Any

from . import chains
from .backends import get_backend_for_path
from .config_file import SectionInfo, parse_config_lines
from .errors import (
    ArgsError,
    ChainSelectionConflictError,
    ConfigFileError,
    IncludeConfError,
    InvalidParameterError,
    ProgrammingError,
    SettingsReadError,
    SettingsWriteError,
)
from .parser import check_valid, interpret_option, parse_key_value
from .paths import abs_path_join, default_data_dir as platform_data_dir, normalize_path
from .registry import ArgFlags, ArgRegistry, OptionsCategory, setting_name
from .settings import (
    Settings,
    Source,
    Span,
    get_setting,
    get_settings_list,
    merge_settings,
    only_has_default_section_setting,
)
from .value import (
    SettingsValue,
    setting_to_bool,
    setting_to_int,
    setting_to_string,
    write_value,
)

logger = logging.getLogger(__name__)

CONF_FILENAME = "chainargs.conf"
SETTINGS_FILENAME = "settings.json"


class ArgsManager:
    """Resolve node settings from forced values, the command line, config
    files and the read/write settings file.

    One instance owns the settings store, the argument registry and the path
    cache; every public method takes the instance lock.
    """

    def __init__(
        self,
        app_name: str = "chainargs",
        *,
        conf_filename: str = CONF_FILENAME,
        settings_filename: str = SETTINGS_FILENAME,
        default_data_dir: Callable[[], Path] | None = None,
    ) -> None:
        self.app_name = app_name
        self.conf_filename = conf_filename
        self.settings_filename = settings_filename
        self._default_data_dir = default_data_dir or (lambda: platform_data_dir(self.app_name))

        self._lock = RLock()
        self._settings = Settings()
        self._registry = ArgRegistry()
        self._network = ""
        self._config_sections: list[SectionInfo] = []

        self._cached_datadir_path: Path | None = None
        self._cached_network_datadir_path: Path | None = None
        self._cached_blocks_path: Path | None = None

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add_arg(
        self,
        name: str,
        help_text: str,
        flags: ArgFlags | int,
        category: OptionsCategory,
    ) -> None:
        """Register *name* (optionally ``-name=<hint>``) under *category*.

        Registering the same name twice in a category raises
        :class:`ProgrammingError`.
        """
        with self._lock:
            self._registry.add(name, help_text, flags, category)

    def add_hidden_args(self, names: Iterable[str]) -> None:
        with self._lock:
            self._registry.add_hidden(names)

    def get_arg_flags(self, name: str) -> ArgFlags | None:
        with self._lock:
            return self._registry.flags_of(name)

    def registered_args(self) -> list[tuple[OptionsCategory, str, str, ArgFlags]]:
        """Return ``(category, name, help_param, flags)`` for every argument."""
        with self._lock:
            return [
                (category, name, arg.help_param, arg.flags)
                for category, name, arg in self._registry.items()
            ]

    def clear_args(self) -> None:
        """Forget all settings and registrations."""
        with self._lock:
            self._settings = Settings()
            self._registry.clear()
            self._config_sections.clear()
            self._network = ""
            self.clear_path_cache()

    # ------------------------------------------------------------------
    # Network selection
    # ------------------------------------------------------------------

    @property
    def network(self) -> str:
        return self._network

    def select_config_network(self, network: str) -> None:
        """Make *network* the section consulted in the config file."""
        with self._lock:
            self._network = network
            self.clear_path_cache()

    def _use_default_section(self, name: str) -> bool:
        return self._network == chains.MAIN or not self._registry.is_network_only(name)

    def get_chain_name(self) -> str:
        """Return the selected chain name.

        Raises :class:`ChainSelectionConflictError` when more than one of
        ``-regtest``, ``-testnet`` and ``-chain`` is given.
        """

        def get_net(arg: str) -> bool:
            value = get_setting(
                self._settings, "", setting_name(arg), get_chain_name=True
            )
            return bool(setting_to_bool(value, False))

        with self._lock:
            regtest = get_net("-regtest")
            testnet = get_net("-testnet")
            chain_arg_set = self.is_arg_set("-chain")

            if int(chain_arg_set) + int(regtest) + int(testnet) > 1:
                raise ChainSelectionConflictError(
                    "Invalid combination of -regtest, -testnet and -chain. "
                    "Can use at most one."
                )
            if regtest:
                return chains.REGTEST
            if testnet:
                return chains.TESTNET
            return self.get_arg("-chain", chains.MAIN)

    # ------------------------------------------------------------------
    # Command line
    # ------------------------------------------------------------------

    def parse_parameters(self, tokens: Iterable[str]) -> None:
        """Parse command line *tokens* (without the program name).

        Parsing stops at the first token that is not an option or at a bare
        ``-``.  Any previously parsed command line is discarded first, and
        nothing from a batch that fails is kept.
        """
        with self._lock:
            command_line = self._settings.command_line
            command_line.clear()
            try:
                for token in tokens:
                    if token == "-":
                        break
                    parsed = parse_key_value(token)
                    if parsed is None:
                        break
                    key, raw = parsed
                    section, name, value = interpret_option(key[1:], raw)
                    flags = self._registry.flags_of(name)
                    # section-qualified keys are only valid in config files
                    if flags is None or section:
                        raise InvalidParameterError(f"Invalid parameter {token}")
                    check_valid(name, value, flags)
                    command_line.setdefault(name, []).append(value)
            except ArgsError:
                command_line.clear()
                raise

            includes = command_line.get("includeconf")
            if includes:
                messages = [
                    f"-includeconf cannot be used from commandline; -includeconf={value}"
                    for value in Span(includes)
                ]
                if messages:
                    raise IncludeConfError(messages)

    # ------------------------------------------------------------------
    # Config files
    # ------------------------------------------------------------------

    def read_config_stream(
        self,
        lines: Iterable[str],
        filepath: str,
        *,
        ignore_invalid_keys: bool = True,
    ) -> None:
        """Merge config file *lines* into the config store."""
        options, sections = parse_config_lines(lines, filepath)
        with self._lock:
            self._config_sections.extend(sections)
            for option in options:
                section, name, value = interpret_option(option.key, option.value)
                flags = self._registry.flags_of(name)
                if flags is None:
                    if not ignore_invalid_keys:
                        raise ConfigFileError(f"Invalid configuration value {option.key}")
                    logger.warning("Ignoring unknown configuration value %s", option.key)
                    continue
                check_valid(name, value, flags)
                self._settings.ro_config.setdefault(section, {}).setdefault(name, []).append(value)

    def read_config_files(self, *, ignore_invalid_keys: bool = True) -> None:
        """Read the main config file and the files it includes.

        A missing default config file is fine; a missing file named with
        ``-conf`` is not.  Only one level of ``includeconf`` is followed.
        """
        with self._lock:
            self._settings.ro_config.clear()
            self._config_sections.clear()

            conf_path = self.get_config_file_path()
            if conf_path.is_file():
                self._read_config_path(conf_path, ignore_invalid_keys)
                if "includeconf" not in self._settings.command_line:
                    self._read_included_files(ignore_invalid_keys)
            elif self.is_arg_set("-conf"):
                raise ConfigFileError(f'specified config file "{conf_path}" could not be opened.')

            # -datadir may have been set in the config file
            self.clear_path_cache()
            if not self.check_data_dir_option():
                raise ConfigFileError(
                    f'specified data directory "{self.get_arg("-datadir", "")}" does not exist.'
                )

    def _read_config_path(self, path: Path, ignore_invalid_keys: bool) -> None:
        try:
            with path.open(encoding="utf-8") as fh:
                self.read_config_stream(fh, str(path), ignore_invalid_keys=ignore_invalid_keys)
        except OSError as exc:
            raise ConfigFileError(f"Failed to read configuration file {path}: {exc}") from exc

    def _includes(self, section: str, skip: int = 0) -> tuple[list[str], int]:
        values = self._settings.ro_config.get(section, {}).get("includeconf", [])
        start = max(skip, Span(values).negated())
        return [str(v) for v in values[start:]], len(values)

    def _read_included_files(self, ignore_invalid_keys: bool) -> None:
        chain_id = self.get_chain_name()
        chain_names, chain_count = self._includes(chain_id)
        default_names, default_count = self._includes("")
        for name in chain_names + default_names:
            path = abs_path_join(self.get_data_dir_base() or Path(), name)
            if not path.is_file():
                raise ConfigFileError(f"Failed to include configuration file {name}")
            self._read_config_path(path, ignore_invalid_keys)
            logger.info("Included configuration file %s", name)

        nested = self._includes(chain_id, chain_count)[0] + self._includes("", default_count)[0]
        chain_id_final = self.get_chain_name()
        if chain_id_final != chain_id:
            nested += self._includes(chain_id_final)[0]
        for name in nested:
            logger.warning(
                "-includeconf cannot be used from included files; ignoring -includeconf=%s",
                name,
            )

    def get_config_file_path(self) -> Path:
        with self._lock:
            conf = self.get_path_arg("-conf", self.conf_filename)
            return abs_path_join(self.get_data_dir_base() or Path(), conf or self.conf_filename)

    def get_unrecognized_sections(self) -> list[SectionInfo]:
        with self._lock:
            return [s for s in self._config_sections if s.name not in chains.KNOWN_SECTIONS]

    def get_unsuitable_section_only_args(self) -> set[str]:
        """Return network-only args that are set only in the default section."""
        with self._lock:
            if not self._network or self._network == chains.MAIN:
                return set()
            return {
                f"-{name}"
                for name in self._registry.network_only
                if only_has_default_section_setting(self._settings, self._network, name)
            }

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_setting(self, arg: str, *, ignore_persistent: bool = False) -> SettingsValue:
        name = setting_name(arg)
        with self._lock:
            return get_setting(
                self._settings,
                self._network,
                name,
                ignore_default_section_config=not self._use_default_section(name),
                ignore_persistent=ignore_persistent,
            )

    def get_settings_list(self, arg: str) -> list[SettingsValue]:
        name = setting_name(arg)
        with self._lock:
            return get_settings_list(
                self._settings,
                self._network,
                name,
                ignore_default_section_config=not self._use_default_section(name),
            )

    def get_persistent_setting(self, arg: str) -> SettingsValue:
        """Return the value of *arg* ignoring forced and command line values."""
        name = setting_name(arg)
        with self._lock:
            return get_setting(
                self._settings,
                self._network,
                name,
                ignore_default_section_config=not self._use_default_section(name),
                ignore_nonpersistent=True,
            )

    def effective_source_for(self, arg: str) -> Source | None:
        """Return the source that decides the value of *arg*, if any."""
        name = setting_name(arg)
        found: list[Source] = []

        def visit(span: Span, source: Source) -> None:
            if source is Source.CONFIG_FILE_DEFAULT_SECTION and not self._use_default_section(name):
                if not span.last_negated():
                    return
            if span.values:
                found.append(source)

        with self._lock:
            merge_settings(self._settings, self._network, name, visit)
        return found[0] if found else None

    def get_args(self, arg: str) -> list[str]:
        return [setting_to_string(v) for v in self.get_settings_list(arg)]

    def is_arg_set(self, arg: str) -> bool:
        return self.get_setting(arg) is not None

    def is_arg_negated(self, arg: str) -> bool:
        return self.get_setting(arg) is False

    def get_arg(self, arg: str, default: str | None = None) -> str | None:
        return setting_to_string(self.get_setting(arg), default)

    def get_int_arg(self, arg: str, default: int | None = None) -> int | None:
        return setting_to_int(self.get_setting(arg), default)

    def get_bool_arg(self, arg: str, default: bool | None = None) -> bool | None:
        return setting_to_bool(self.get_setting(arg), default)

    def get_path_arg(self, arg: str, default: Any = None) -> Any:
        """Return *arg* as a normalised :class:`Path`.

        ``None`` if the argument was negated, *default* (unchanged) when it is
        unset or empty.
        """
        with self._lock:
            if self.is_arg_negated(arg):
                return None
            raw = self.get_arg(arg, "")
        if not raw:
            return default
        return normalize_path(raw)

    def scoped_values(self) -> Mapping[str, Any]:
        """Return a copy of every stored value grouped by source."""
        with self._lock:
            return {
                Source.FORCED.value: dict(self._settings.forced),
                Source.COMMAND_LINE.value: {
                    k: list(v) for k, v in self._settings.command_line.items()
                },
                "config": {
                    section: {k: list(v) for k, v in values.items()}
                    for section, values in self._settings.ro_config.items()
                },
                Source.RW_SETTINGS.value: dict(self._settings.rw_settings),
            }

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def soft_set_arg(self, arg: str, value: str) -> bool:
        """Force *arg* to *value* unless it already has a value."""
        with self._lock:
            if self.is_arg_set(arg):
                return False
            self.force_set_arg(arg, value)
            return True

    def soft_set_bool_arg(self, arg: str, value: bool) -> bool:
        return self.soft_set_arg(arg, "1" if value else "0")

    def force_set_arg(self, arg: str, value: SettingsValue) -> None:
        with self._lock:
            self._settings.forced[setting_name(arg)] = value

    def force_set_multi_arg(self, arg: str, values: Iterable[str]) -> None:
        with self._lock:
            self._settings.forced[setting_name(arg)] = list(values)

    def clear_forced_arg(self, arg: str) -> None:
        with self._lock:
            self._settings.forced.pop(setting_name(arg), None)

    @property
    def rw_settings(self) -> dict[str, SettingsValue]:
        with self._lock:
            return dict(self._settings.rw_settings)

    def update_rw_setting(self, name: str, value: SettingsValue) -> None:
        """Set or, when *value* is ``None``, remove a read/write setting."""
        name = setting_name(name)
        with self._lock:
            if value is None:
                self._settings.rw_settings.pop(name, None)
            else:
                self._settings.rw_settings[name] = value

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def _chain_dir(self) -> str:
        return chains.data_dir_name(self._network or chains.MAIN)

    def get_data_dir(self, net_specific: bool) -> Path | None:
        """Return the data directory, ``None`` if ``-datadir`` is not a directory."""
        with self._lock:
            cached = (
                self._cached_network_datadir_path
                if net_specific
                else self._cached_datadir_path
            )
            if cached is not None:
                return cached

            datadir = self.get_path_arg("-datadir")
            if datadir is not None:
                path = Path(datadir).absolute()
                if not path.is_dir():
                    return None
            else:
                path = Path(self._default_data_dir())

            chain_dir = self._chain_dir()
            if net_specific and chain_dir:
                path = path / chain_dir

            if net_specific:
                self._cached_network_datadir_path = path
            else:
                self._cached_datadir_path = path
            return path

    def get_data_dir_base(self) -> Path | None:
        return self.get_data_dir(False)

    def get_data_dir_net(self) -> Path | None:
        return self.get_data_dir(True)

    def get_blocks_dir(self) -> Path | None:
        """Return ``<blocks base>/<chain dir>/blocks``, creating it if needed."""
        with self._lock:
            if self._cached_blocks_path is not None:
                return self._cached_blocks_path

            if self.is_arg_set("-blocksdir"):
                blocksdir = self.get_path_arg("-blocksdir")
                if blocksdir is None:
                    return None
                path = Path(blocksdir).absolute()
                if not path.is_dir():
                    return None
            else:
                base = self.get_data_dir_base()
                if base is None:
                    return None
                path = base

            chain_dir = self._chain_dir()
            if chain_dir:
                path = path / chain_dir
            path = path / "blocks"
            path.mkdir(parents=True, exist_ok=True)
            self._cached_blocks_path = path
            return path

    def clear_path_cache(self) -> None:
        with self._lock:
            self._cached_datadir_path = None
            self._cached_network_datadir_path = None
            self._cached_blocks_path = None

    def ensure_data_dir(self) -> None:
        """Create ``wallets`` in new data directories."""
        with self._lock:
            for net_specific in (False, True):
                path = self.get_data_dir(net_specific)
                if path is not None and not path.exists():
                    (path / "wallets").mkdir(parents=True, exist_ok=True)

    def check_data_dir_option(self) -> bool:
        datadir = self.get_path_arg("-datadir")
        return datadir is None or Path(datadir).absolute().is_dir()

    # ------------------------------------------------------------------
    # Read/write settings file
    # ------------------------------------------------------------------

    def get_settings_path(self, *, temp: bool = False, backup: bool = False) -> Path | None:
        """Return the settings file path or ``None`` when disabled (``-nosettings``)."""
        with self._lock:
            settings = self.get_path_arg("-settings", self.settings_filename)
            if settings is None:
                return None
            name = str(settings)
            if backup:
                name += ".bak"
            if temp:
                name += ".tmp"
            return abs_path_join(self.get_data_dir_net() or Path(), name)

    def read_settings_file(self) -> None:
        """Replace the read/write settings with the contents of the settings file.

        Raises :class:`SettingsReadError` listing every problem; the
        read/write settings are left empty in that case.
        """
        with self._lock:
            path = self.get_settings_path()
            if path is None:
                return
            self._settings.rw_settings.clear()
            values = get_backend_for_path(path).load(path)
            self._settings.rw_settings.update(values)
            for key in values:
                _, name, _ = interpret_option(key, "")
                if self._registry.flags_of(name) is None:
                    logger.warning("Ignoring unknown rw_settings value %s", key)

    def write_settings_file(self, *, backup: bool = False) -> None:
        """Write the read/write settings to a temp file and rename it into place."""
        with self._lock:
            path = self.get_settings_path(backup=backup)
            path_tmp = self.get_settings_path(temp=True, backup=backup)
            if path is None or path_tmp is None:
                raise ProgrammingError(
                    "Attempt to write settings file when dynamic settings are disabled."
                )
            get_backend_for_path(path).save(
                path, dict(self._settings.rw_settings), tmp_path=path_tmp
            )

    def init_settings(self) -> None:
        """Create the data directories, then load and re-save the settings file."""
        with self._lock:
            self.ensure_data_dir()
            if self.get_settings_path() is None:
                return
            try:
                self.read_settings_file()
            except SettingsReadError as exc:
                raise SettingsReadError(exc.errors, summary="Failed loading settings file") from exc
            try:
                self.write_settings_file()
            except SettingsWriteError as exc:
                raise SettingsWriteError(exc.errors, summary="Failed saving settings file") from exc

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    def _format_value(self, name: str, value: SettingsValue) -> str | None:
        flags = self._registry.flags_of(name)
        if flags is None:
            return None
        return "****" if flags & ArgFlags.SENSITIVE else write_value(value)

    def _log_args_prefix(
        self, prefix: str, section: str, args: Mapping[str, list[SettingsValue]]
    ) -> None:
        section_str = f"[{section}] " if section else ""
        for name, values in args.items():
            for value in values:
                value_str = self._format_value(name, value)
                if value_str is not None:
                    logger.info("%s %s%s=%s", prefix, section_str, name, value_str)

    def log_args(self) -> None:
        """Log every config file, settings file and command line argument."""
        with self._lock:
            for section in sorted(self._settings.ro_config):
                self._log_args_prefix("Config file arg:", section, self._settings.ro_config[section])
            for name, value in self._settings.rw_settings.items():
                value_str = self._format_value(name, value) or write_value(value)
                logger.info("Setting file arg: %s = %s", name, value_str)
            self._log_args_prefix("Command-line arg:", "", self._settings.command_line)


# ---------------------------------------------------------------------------
# Help options
# ---------------------------------------------------------------------------

def setup_help_options(args: ArgsManager) -> None:
    args.add_arg("-?", "Print this help message and exit", ArgFlags.ALLOW_ANY, OptionsCategory.OPTIONS)
    args.add_hidden_args(["-h", "-help"])


def help_requested(args: ArgsManager) -> bool:
    return any(args.is_arg_set(a) for a in ("-?", "-h", "-help", "-help-debug"))


__all__ = [
    "ArgsManager",
    "CONF_FILENAME",
    "SETTINGS_FILENAME",
    "help_requested",
    "setup_help_options",
]
