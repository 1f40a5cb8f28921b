from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_data_dir as _ud

# ---------------------------------------------------------------------------
# Platform directories
# ---------------------------------------------------------------------------

def _app_name(default: str) -> str:
    return os.getenv("CHAINARGS_APP_NAME", default)

def default_data_dir(app_name: str = "chainargs") -> Path:
    """Return the platform default data directory for *app_name*."""
    app = _app_name(app_name)
    return Path(_ud(appname=app, appauthor=False))

# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

def normalize_path(raw: str) -> Path:
    """Return *raw* lexically normalised, without trailing separators.

    ``"/tmp/x/"`` becomes ``/tmp/x`` while the root stays ``/``.
    """
    return Path(os.path.normpath(raw))

def abs_path_join(base: Path, path: Path | str) -> Path:
    """Join *path* onto *base* unless it is already absolute."""
    path = Path(path)
    if path.is_absolute():
        return path
    return Path(base) / path
