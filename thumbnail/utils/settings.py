import copy
import os
from pathlib import Path

import yaml

_PROJECT_ROOT = Path(__file__).resolve().parents[2]
_CONFIG_PATH = _PROJECT_ROOT / "config.yaml"
_CONFIG_ENV = "THUMBNAIL_CONFIG"

DEFAULTS = {
    "resize": {
        "quality": 85,
        "resample": "lanczos",
        "keep_aspect": True,
        "keep_exif": True,
    },
    "walk": {
        "follow_symlinks": True,
        "sort_entries": True,
    },
}


def get_project_root() -> Path:
    return _PROJECT_ROOT


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _check_types(config: dict, config_path: Path) -> None:
    for section, defaults in DEFAULTS.items():
        values = config[section]
        if not isinstance(values, dict):
            raise ValueError(f"{config_path}: '{section}' must be a mapping")
        for key, default in defaults.items():
            if isinstance(default, bool) and not isinstance(values.get(key), bool):
                raise ValueError(
                    f"{config_path}: {section}.{key} must be true or false, "
                    f"got {values.get(key)!r}"
                )


def load_config(path: str | Path | None = None) -> dict:
    """
    Load settings from YAML and merge them over DEFAULTS.

    An explicit path (argument or $THUMBNAIL_CONFIG) must exist. The
    project-root config.yaml is optional.
    """
    if path is None:
        path = os.environ.get(_CONFIG_ENV) or None

    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        config_path = _CONFIG_PATH
        if not config_path.exists():
            return copy.deepcopy(DEFAULTS)

    with config_path.open("r", encoding="utf-8") as f:
        loaded = yaml.safe_load(f) or {}

    if not isinstance(loaded, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    merged = _merge(DEFAULTS, loaded)
    _check_types(merged, config_path)
    return merged
