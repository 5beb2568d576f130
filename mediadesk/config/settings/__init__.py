from __future__ import annotations

import importlib
from typing import TYPE_CHECKING, Any

__all__ = [
    "DEFAULT_API_BASE_URL",
    "DEFAULT_PLAYER_ORIGIN",
    "Settings",
    "core",
    "get_settings",
]

_MODULE_EXPORTS = {
    "core": {
        "DEFAULT_API_BASE_URL",
        "DEFAULT_PLAYER_ORIGIN",
        "Settings",
        "get_settings",
    },
}

_SUBMODULE_NAMES = {"core"}

if TYPE_CHECKING:  # pragma: no cover - only for static analysis
    from . import core
    from .core import DEFAULT_API_BASE_URL, DEFAULT_PLAYER_ORIGIN, Settings, get_settings


def __getattr__(name: str) -> Any:
    if name in _SUBMODULE_NAMES:
        module = importlib.import_module(f"{__name__}.{name}")
        globals()[name] = module
        return module

    for module_name, symbols in _MODULE_EXPORTS.items():
        if name in symbols:
            module = importlib.import_module(f"{__name__}.{module_name}")
            value = getattr(module, name)
            globals()[name] = value
            return value

    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


def __dir__() -> list[str]:
    exported = set(__all__)
    exported.update(_SUBMODULE_NAMES)
    for symbols in _MODULE_EXPORTS.values():
        exported.update(symbols)
    exported.update(globals().keys())
    return sorted(exported)
