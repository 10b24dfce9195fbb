from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from .errors import ConfigError
from .hues import MODES

log = logging.getLogger(__name__)

CONFIG_FILENAMES = ("colors.config.json", "colors.json")
DEFAULT_OUTPUT_DIR = Path("./colors")


@dataclass(frozen=True)
class ColorsConfig:
    brand_colors: Tuple[str, ...] = ()
    output_dir: Path = DEFAULT_OUTPUT_DIR
    modes: Tuple[str, ...] = MODES
    path: Optional[Path] = None


def find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    current = Path(start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        for name in CONFIG_FILENAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate
    return None


def _parse_modes(value: Any, source: str) -> Tuple[str, ...]:
    if value == "both":
        return MODES
    if isinstance(value, str):
        value = [value]
    modes = tuple(value)
    bad = [m for m in modes if m not in MODES]
    if bad or not modes:
        raise ConfigError(f"{source}: modes must be 'light', 'dark' or both, got {value!r}")
    return modes


def _from_dict(data: Dict[str, Any], path: Path) -> ColorsConfig:
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a JSON object")

    colors = data.get("brandColors", [])
    if isinstance(colors, str) or not all(isinstance(c, str) for c in colors):
        raise ConfigError(f"{path}: brandColors must be a list of color strings")

    return ColorsConfig(
        brand_colors=tuple(colors),
        output_dir=Path(data.get("outputDir", DEFAULT_OUTPUT_DIR)),
        modes=_parse_modes(data.get("modes", list(MODES)), str(path)),
        path=path,
    )


def load_config(path: Optional[Path] = None, start: Optional[Path] = None) -> ColorsConfig:
    """
    Load an explicit config file, or discover one upward from ``start``.
    No file found is not an error: defaults are returned.
    """
    if path is None:
        path = find_config_file(start)
        if path is None:
            log.debug("No config file found; using defaults")
            return ColorsConfig()
    elif not Path(path).is_file():
        raise ConfigError(f"Config file not found: {path}")

    path = Path(path)
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file {path}: {e}") from e

    log.debug("Loaded config from %s", path)
    return _from_dict(data, path)


def split_colors(value: Union[str, Sequence[str]]) -> Tuple[str, ...]:
    if isinstance(value, str):
        value = value.split(",")
    return tuple(c.strip() for c in value if c and c.strip())


def merge_options(
    config: ColorsConfig,
    colors: Optional[Union[str, Sequence[str]]] = None,
    output_dir: Optional[Path] = None,
    mode: Optional[str] = None,
) -> ColorsConfig:
    """Command-line values win over file values when given."""
    merged = config
    if colors:
        merged = replace(merged, brand_colors=split_colors(colors))
    if output_dir is not None:
        merged = replace(merged, output_dir=Path(output_dir))
    if mode:
        merged = replace(merged, modes=_parse_modes(mode, "--mode"))
    return merged
