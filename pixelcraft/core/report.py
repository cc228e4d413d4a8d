"""Report builder — text and JSON summaries of a pattern."""

import json
from collections import Counter
from typing import Any

from pixelcraft.core.types import EMPTY, PatternState


def census(state: PatternState) -> list[dict[str, Any]]:
    """Cells per colour, most common first. Empty cells are reported as '(empty)'."""
    counts = Counter(cell for row in state.grid for cell in row)
    total = sum(counts.values())
    ordered = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    return [
        {
            'colour': '(empty)' if colour == EMPTY else colour,
            'cells': n,
            'pct': round(n / total * 100, 1),
            'in_palette': colour in state.palette,
        }
        for colour, n in ordered
    ]


def format_text(state: PatternState, source: str | None = None) -> str:
    """Format a pattern summary as human-readable text."""
    size = state.grid_size
    header = f'pixelcraft: {size.width}×{size.height} grid'
    if source:
        header = f'pixelcraft: {source} ({size.width}×{size.height})'
    lines = [header, '']

    lines.append(f'── palette ({len(state.palette)})')
    lines.append('  ' + ' '.join(state.palette))
    lines.append('')

    lines.append('── census')
    for entry in census(state):
        # Colours painted outside the palette are allowed but worth flagging
        mark = '' if entry['in_palette'] or entry['colour'] == '(empty)' else '  (not in palette)'
        lines.append(f'  {entry["colour"]:<9} {entry["cells"]:>6} cells  {entry["pct"]:5.1f}%{mark}')
    return '\n'.join(lines)


def format_json(state: PatternState, source: str | None = None) -> str:
    """Format a pattern summary as JSON."""
    obj: dict[str, Any] = {'dimensions': state.grid_size.as_dict()}
    if source:
        obj['source'] = source
    obj['palette'] = list(state.palette)
    obj['census'] = census(state)
    return json.dumps(obj, indent=2)
