"""Auto-discovery of CLI command modules.

Every .py file in this package that defines a `command` object is
auto-registered by pixelcraft.registry.discover().

The explicit imports below ensure frozen builds include these modules.
Without them, pkgutil.iter_modules cannot find the command files at runtime.
"""

# Hidden imports: keep this list in sync with command modules
import pixelcraft.commands.import_image as _import_image  # noqa: F401
import pixelcraft.commands.info as _info  # noqa: F401
import pixelcraft.commands.new as _new  # noqa: F401
import pixelcraft.commands.render as _render  # noqa: F401
import pixelcraft.commands.resize as _resize  # noqa: F401
