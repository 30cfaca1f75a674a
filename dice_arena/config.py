from __future__ import annotations

import json
import shutil
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from dice_arena.errors import ConfigFormatError
from dice_arena.models import MIN_ARENA_HEIGHT, MIN_ARENA_WIDTH, Arena


@dataclass(frozen=True)
class RollConfig:
    # None means "use the terminal size at roll time".
    width: int | None = None
    height: int | None = None
    # None means nondeterministic.
    seed: int | None = None
    # 1.0 is real time; 0 disables sleeping between steps.
    time_scale: float = 1.0
    color: bool = False
    live: bool = False

    def merged(self, **overrides: Any) -> RollConfig:
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def arena(self) -> Arena:
        """Snapshot the arena bounds for one roll."""
        size = shutil.get_terminal_size()
        width = self.width if self.width is not None else size.columns
        height = self.height if self.height is not None else size.lines
        return Arena(width=width, height=height)


_KNOWN_KEYS = {f.name for f in fields(RollConfig)}


def load_roll_config(path: Path) -> RollConfig:
    """Load and validate a roll config.

    Format (every key optional):
      {
        "width": 80,
        "height": 24,
        "seed": 1234,
        "time_scale": 0.5,
        "color": true,
        "live": false
      }
    """
    if not path.exists():
        raise ConfigFormatError(f"file not found: {path}")
    if not path.is_file():
        raise ConfigFormatError(f"not a file: {path}")

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigFormatError(
            f"invalid JSON: {e.msg} (line {e.lineno}, col {e.colno})"
        ) from e

    if not isinstance(raw, dict):
        raise ConfigFormatError("root must be a JSON object")

    unknown = sorted(set(raw) - _KNOWN_KEYS)
    if unknown:
        raise ConfigFormatError(f"unknown key(s): {', '.join(unknown)}")

    width = raw.get("width", None)
    if width is not None:
        if not isinstance(width, int) or isinstance(width, bool):
            raise ConfigFormatError("width must be an int when provided")
        if width < MIN_ARENA_WIDTH:
            raise ConfigFormatError(f"width must be >= {MIN_ARENA_WIDTH} (got {width})")

    height = raw.get("height", None)
    if height is not None:
        if not isinstance(height, int) or isinstance(height, bool):
            raise ConfigFormatError("height must be an int when provided")
        if height < MIN_ARENA_HEIGHT:
            raise ConfigFormatError(f"height must be >= {MIN_ARENA_HEIGHT} (got {height})")

    seed = raw.get("seed", None)
    if seed is not None and (not isinstance(seed, int) or isinstance(seed, bool)):
        raise ConfigFormatError("seed must be an int when provided")

    time_scale = raw.get("time_scale", 1.0)
    if not isinstance(time_scale, (int, float)) or isinstance(time_scale, bool):
        raise ConfigFormatError("time_scale must be a number")
    if time_scale < 0:
        raise ConfigFormatError(f"time_scale must be >= 0 (got {time_scale})")

    color = raw.get("color", False)
    if not isinstance(color, bool):
        raise ConfigFormatError("color must be a boolean")

    live = raw.get("live", False)
    if not isinstance(live, bool):
        raise ConfigFormatError("live must be a boolean")

    return RollConfig(
        width=width,
        height=height,
        seed=seed,
        time_scale=float(time_scale),
        color=color,
        live=live,
    )
