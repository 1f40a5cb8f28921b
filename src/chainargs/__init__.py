from .errors import ArgsError, ProgrammingError
from .manager import ArgsManager, help_requested, setup_help_options
from .options import setup_base_options
from .registry import ArgFlags, OptionsCategory
from .value import SettingsValue, setting_to_bool, setting_to_int, setting_to_string


__all__ = [
    "ArgsManager",
    "ArgsError",
    "ProgrammingError",
    "ArgFlags",
    "OptionsCategory",
    "SettingsValue",
    "help_requested",
    "setup_help_options",
    "setup_base_options",
    "setting_to_bool",
    "setting_to_int",
    "setting_to_string",
]
