"""
Configuration loading for SCRIBE data assets.

Vocabularies, section tables, locale cues and style profiles are YAML files
under scribe/config/ (or SCRIBE_CONFIG_PATH). They are read once with
OmegaConf and cached; callers get plain containers and must treat them as
read-only.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List

from dotenv import load_dotenv
from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException

load_dotenv()
CONFIG_PATH = Path(os.getenv("SCRIBE_CONFIG_PATH", Path(__file__).resolve().parent.parent / "config"))


class InvalidConfigError(ValueError):
    """
    Raised when a configuration asset is missing, unparsable or lacks required keys.

    This is a deployment problem, not a document problem, so it is allowed to
    surface from otherwise total pipeline entry points.
    """

    pass


def get_config_path(name: str, config_dir: Path = None) -> Path:
    """Path of a named config asset (e.g. "vocabularies" -> vocabularies.yaml)."""
    return (config_dir or CONFIG_PATH) / f"{name}.yaml"


@lru_cache(maxsize=None)
def _load_cached(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise InvalidConfigError(f"Config file not found: {path}")
    try:
        data = OmegaConf.to_container(OmegaConf.load(path), resolve=True)
    except (OmegaConfBaseException, OSError, ValueError) as e:
        raise InvalidConfigError(f"Could not load config {path}: {e}") from e
    if not isinstance(data, dict):
        raise InvalidConfigError(f"Config {path} must contain a mapping at top level")
    return data


def load_config(name: str, required_keys: Iterable[str] = (), config_dir: Path = None) -> Dict[str, Any]:
    """
    Load a YAML config asset by name.

    Args:
        name: Asset name without extension ("vocabularies", "sections", ...)
        required_keys: Top-level keys that must be present
        config_dir: Override directory (default: SCRIBE_CONFIG_PATH)

    Returns:
        Config as a plain dict (cached; do not mutate)

    Raises:
        InvalidConfigError: If the file is missing, unparsable or incomplete
    """
    path = get_config_path(name, config_dir)
    data = _load_cached(path)

    missing = [key for key in required_keys if key not in data]
    if missing:
        raise InvalidConfigError(f"Config {path} is missing required keys: {missing}")

    return data


def merge_configs(*configs: Dict[str, Any], dotlist: List[str] = None) -> Dict[str, Any]:
    """
    Merge config dicts left to right, then apply dotlist overrides.

    Example:
        >>> merge_configs({"layout": {"margin": 15}}, dotlist=["layout.margin=18"])
        {'layout': {'margin': 18}}
    """
    merged = OmegaConf.merge(*[OmegaConf.create(c) for c in configs])
    if dotlist:
        try:
            merged = OmegaConf.merge(merged, OmegaConf.from_dotlist(list(dotlist)))
        except OmegaConfBaseException as e:
            raise InvalidConfigError(f"Invalid override {dotlist}: {e}") from e
    return OmegaConf.to_container(merged, resolve=True)
