"""Command auto-discovery and registration.

Scans pixelcraft/commands/ for modules that define a `command` object of
type Command. Collects them into a dict keyed by name.

Handles both normal Python (pkgutil.iter_modules) and frozen binaries
(where iter_modules returns nothing — falls back to the explicit list).
"""

import importlib
import pkgutil

from pixelcraft.core.types import Command

_registry: dict[str, Command] = {}
_modules: dict[str, str] = {}

# Known command module names, the fallback for frozen binaries
_COMMAND_MODULES = [
    'import_image',
    'info',
    'new',
    'render',
    'resize',
]


def discover() -> dict[str, Command]:
    """Import all command modules and return the registry."""
    if _registry:
        return _registry

    import pixelcraft.commands as pkg

    found_modules = [
        modname for _importer, modname, _ispkg in pkgutil.iter_modules(pkg.__path__) if not modname.startswith('_')
    ]
    if not found_modules:
        found_modules = _COMMAND_MODULES

    for modname in found_modules:
        module = importlib.import_module(f'pixelcraft.commands.{modname}')
        cmd = getattr(module, 'command', None)
        if isinstance(cmd, Command):
            _registry[cmd.name] = cmd
            _modules[cmd.name] = module.__name__

    return _registry


def get(name: str) -> Command:
    """Get a command by name."""
    reg = discover()
    if name not in reg:
        raise KeyError(f'Unknown command: {name}. Available: {", ".join(sorted(reg))}')
    return reg[name]


def module_doc(name: str) -> str:
    """Full module docstring for a command (its user documentation)."""
    get(name)
    module = importlib.import_module(_modules[name])
    return (module.__doc__ or '').strip()


def all_commands() -> dict[str, Command]:
    """Return all registered commands."""
    return discover()
