"""Environment and settings for pixelcraft.

Load order (first wins):
  1. Existing OS environment variables — never overwrite.
  2. .env file at --env-file path (if explicitly provided).
  3. .env file walking up from cwd, stopping at .git (file or dir).

Recognised variables:
  PIXELCRAFT_STORE_DIR    directory holding the project slot (default ~/.pixelcraft)
  PIXELCRAFT_GRID_WIDTH   initial grid width (default 20)
  PIXELCRAFT_GRID_HEIGHT  initial grid height (default 20)
  PIXELCRAFT_CELL_SIZE    PNG export pixels per cell (default 20)
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from pixelcraft.core.types import DEFAULT_GRID_SIZE, MAX_GRID_SIZE, MIN_GRID_SIZE

ENV_PREFIX = 'PIXELCRAFT_'
DEFAULT_STORE_DIR = Path.home() / '.pixelcraft'
DEFAULT_CELL_SIZE = 20


def _find_dotenv(start: Path) -> Path | None:
    """Walk up from start, return first .env found, stop at .git boundary."""
    current = start.resolve()
    while True:
        candidate = current / '.env'
        if candidate.is_file():
            return candidate
        # .git is a dir in a normal clone and a file in a worktree
        if (current / '.git').exists():
            return None
        parent = current.parent
        if parent == current:
            return None
        current = parent


def _parse_dotenv(path: Path) -> dict[str, str]:
    """Parse KEY=value lines. Quotes and a leading `export ` are stripped."""
    result: dict[str, str] = {}
    for line in path.read_text(encoding='utf-8').splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        key, _, raw_value = line.partition('=')
        key = key.strip().removeprefix('export ').strip()
        if key:
            result[key] = raw_value.strip().strip('"').strip("'")
    return result


def load_env(env_file: str | None = None) -> Path | None:
    """Load .env into os.environ for keys not already set.

    Returns the path that was loaded, or None if no .env was found/used.
    """
    if env_file:
        path = Path(env_file)
        if not path.is_file():
            return None
    else:
        path = _find_dotenv(Path.cwd())
        if path is None:
            return None

    for key, value in _parse_dotenv(path).items():
        os.environ.setdefault(key, value)
    return path


def _int_setting(name: str, default: int, low: int, high: int) -> int:
    raw = os.environ.get(ENV_PREFIX + name, '').strip()
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if low <= value <= high else default


@dataclass
class Settings:
    store_dir: Path = field(default_factory=lambda: DEFAULT_STORE_DIR)
    grid_width: int = DEFAULT_GRID_SIZE
    grid_height: int = DEFAULT_GRID_SIZE
    cell_size: int = DEFAULT_CELL_SIZE


def load_settings() -> Settings:
    """Build Settings from the environment. Bad values fall back to defaults."""
    store_dir = os.environ.get(ENV_PREFIX + 'STORE_DIR', '').strip()
    return Settings(
        store_dir=Path(store_dir).expanduser() if store_dir else DEFAULT_STORE_DIR,
        grid_width=_int_setting('GRID_WIDTH', DEFAULT_GRID_SIZE, MIN_GRID_SIZE, MAX_GRID_SIZE),
        grid_height=_int_setting('GRID_HEIGHT', DEFAULT_GRID_SIZE, MIN_GRID_SIZE, MAX_GRID_SIZE),
        cell_size=_int_setting('CELL_SIZE', DEFAULT_CELL_SIZE, 1, 200),
    )
