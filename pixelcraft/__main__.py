"""pixelcraft — grid pattern editor toolkit.

Usage: pixelcraft <command> [options]

Commands are auto-discovered from pixelcraft/commands/.
Each command module's docstring is its documentation.
Run `pixelcraft help <command>` for full module docs.

Environment variables / .env loading:
  OS environment variables are always used first.
  If a variable is not set, pixelcraft looks for a .env file starting from
  the current directory and walking up, stopping at the nearest .git boundary.
  Use --env-file to override the .env location explicitly.
"""

import argparse
import sys

from pixelcraft import registry
from pixelcraft.core.env import load_env, load_settings
from pixelcraft.core.errors import PixelcraftError


def _short_help(name: str) -> str:
    doc = registry.module_doc(name)
    return doc.splitlines()[0] if doc else registry.get(name).help


def _build_parser() -> argparse.ArgumentParser:
    commands = registry.all_commands()

    epilog = (
        'Examples:\n'
        '  pixelcraft new pattern.json --width 32 --height 32\n'
        '  pixelcraft import-image photo.jpg pattern.json --width 40 --height 30\n'
        '  pixelcraft import-image photo.jpg pattern.json --extract 6\n'
        '  pixelcraft render pattern.json pattern.png --grid\n'
        '  pixelcraft resize pattern.json bigger.json --width 64 --height 64\n'
        '  pixelcraft info pattern.json --json\n'
        '  pixelcraft help import-image\n'
        '\n'
        'Settings (set in .env or environment):\n'
        '  PIXELCRAFT_GRID_WIDTH, PIXELCRAFT_GRID_HEIGHT  default grid size (20)\n'
        '  PIXELCRAFT_CELL_SIZE                           PNG pixels per cell (20)\n'
        '  PIXELCRAFT_STORE_DIR                           project slot directory (~/.pixelcraft)\n'
    )
    parser = argparse.ArgumentParser(
        prog='pixelcraft',
        description='Grid pattern editor toolkit: photo import, rendering, resizing.',
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        '--env-file',
        metavar='PATH',
        default=None,
        help='Path to .env file (default: walk up from cwd to .git boundary)',
    )
    sub = parser.add_subparsers(dest='cmd', help='Command to run')

    for name, cmd in sorted(commands.items()):
        p = sub.add_parser(name, help=_short_help(name))
        cmd.configure(p)

    help_parser = sub.add_parser('help', help='Print full docs for a command')
    help_parser.add_argument('topic', nargs='?', help='Command name')

    return parser


def _print_help(topic: str | None) -> int:
    """Print full module docstring for a command."""
    commands = registry.all_commands()

    if topic is None:
        print('Available commands:\n')
        for name in sorted(commands):
            print(f'  {name:<14} {_short_help(name)}')
        print('\nRun: pixelcraft help <command> for full docs.')
        return 0

    if topic not in commands:
        print(f'Unknown command: {topic}', file=sys.stderr)
        print(f'Available: {", ".join(sorted(commands))}', file=sys.stderr)
        return 1

    doc = registry.module_doc(topic)
    print(doc or f'(No module docs for {topic!r})')
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    # Load .env before anything else. OS env vars always win
    env_path = load_env(env_file=args.env_file)
    if env_path:
        print(f'pixelcraft: loaded {env_path}', file=sys.stderr)

    if not args.cmd:
        parser.print_help()
        return 1

    if args.cmd == 'help':
        return _print_help(args.topic)

    args.settings = load_settings()
    try:
        return registry.get(args.cmd).execute(args)
    except (PixelcraftError, OSError) as e:
        print(f'pixelcraft: error: {e}', file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
