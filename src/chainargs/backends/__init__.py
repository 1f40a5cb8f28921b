"""Backend registry and factory."""
from __future__ import annotations

from pathlib import Path

from .base import BaseBackend

_REGISTRY: dict[str, type[BaseBackend]] = {}

DEFAULT_SUFFIX = ".json"

def register_backend(backend: type[BaseBackend]) -> type[BaseBackend]:
    """Register a backend class and return it for decorator use."""
    for suf in backend.suffixes:
        _REGISTRY[suf] = backend
    return backend

def get_backend_for_path(path: Path) -> BaseBackend:
    """Return a backend for *path*, ignoring ``.bak``/``.tmp`` suffixes.

    Paths with an unregistered suffix use the JSON backend.
    """
    suffixes = [s.lower() for s in Path(path).suffixes if s.lower() not in {".bak", ".tmp"}]
    suffix = suffixes[-1] if suffixes else DEFAULT_SUFFIX
    backend_cls = _REGISTRY.get(suffix) or _REGISTRY[DEFAULT_SUFFIX]
    return backend_cls()

# register default backends
from . import json_backend  # noqa: F401,E402
