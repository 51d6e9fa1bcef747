"""YAML-based configuration for augmentation pipelines.

This module provides a configuration system that supports:
    - Loading from YAML files
    - Dot notation access to nested values
    - Configuration merging and ``_base_`` inheritance

Example:
    >>> config = Config.from_file("augment.yaml")
    >>> size = config.get("pipeline.size", default=[224, 224])
    >>> config.image.fill = 0.5  # dot notation access
"""

import copy
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml


class ConfigDict(dict):
    """Dictionary with attribute-style access.

    Nested dictionaries are converted to ConfigDict, including dicts inside
    lists (pipeline entries are lists of dicts).

    Example:
        >>> cfg = ConfigDict({"image": {"fill": 0.0}})
        >>> cfg.image.fill
        0.0
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for key, value in self.items():
            if isinstance(value, dict) and not isinstance(value, ConfigDict):
                self[key] = ConfigDict(value)
            elif isinstance(value, list):
                self[key] = self._convert_list(value)

    def _convert_list(self, items: List) -> List:
        result = []
        for item in items:
            if isinstance(item, dict) and not isinstance(item, ConfigDict):
                result.append(ConfigDict(item))
            elif isinstance(item, list):
                result.append(self._convert_list(item))
            else:
                result.append(item)
        return result

    def __getattr__(self, name: str) -> Any:
        try:
            return self[name]
        except KeyError:
            raise AttributeError(f"Config has no attribute '{name}'")

    def __setattr__(self, name: str, value: Any) -> None:
        if isinstance(value, dict) and not isinstance(value, ConfigDict):
            value = ConfigDict(value)
        self[name] = value

    def __delattr__(self, name: str) -> None:
        try:
            del self[name]
        except KeyError:
            raise AttributeError(f"Config has no attribute '{name}'")

    def get_nested(self, key: str, default: Any = None) -> Any:
        """Get a nested value using dot notation, e.g. ``"image.fill"``."""
        value = self
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set_nested(self, key: str, value: Any) -> None:
        """Set a nested value using dot notation, creating parents."""
        keys = key.split(".")
        target = self
        for k in keys[:-1]:
            if k not in target or not isinstance(target[k], dict):
                target[k] = ConfigDict()
            target = target[k]
        target[keys[-1]] = value

    def to_dict(self) -> Dict:
        """Convert to a plain nested dictionary."""
        return _to_plain(self)


def _to_plain(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _to_plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_plain(v) for v in value]
    return value


class Config:
    """Configuration manager.

    Loads, merges and accesses configuration values from YAML files.

    Example:
        >>> config = Config.from_file("augment.yaml")
        >>> print(config.pipeline.train)
        >>> config.save("resolved.yaml")
    """

    def __init__(self, cfg_dict: Optional[Dict] = None):
        if cfg_dict is None:
            cfg_dict = {}
        self._cfg = ConfigDict(cfg_dict)

    @classmethod
    def from_file(cls, filepath: Union[str, Path]) -> "Config":
        """Load configuration from a YAML file.

        A ``_base_`` key (path or list of paths relative to the file) is
        loaded first and then overridden by the file's own values.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            yaml.YAMLError: If YAML parsing fails.
        """
        filepath = Path(filepath)
        if not filepath.exists():
            raise FileNotFoundError(f"Config file not found: {filepath}")

        with open(filepath, "r", encoding="utf-8") as f:
            cfg_dict = yaml.safe_load(f)

        if cfg_dict is None:
            cfg_dict = {}

        base_paths = cfg_dict.pop("_base_", None)
        config = cls(cfg_dict)

        if base_paths is not None:
            if isinstance(base_paths, str):
                base_paths = [base_paths]
            merged = None
            for bp in base_paths:
                base_config = cls.from_file(filepath.parent / bp)
                merged = base_config if merged is None else merged.merge(base_config)
            config = merged.merge(config)

        return config

    @classmethod
    def from_dict(cls, cfg_dict: Dict) -> "Config":
        return cls(cfg_dict)

    def merge(self, other: Union["Config", Dict]) -> "Config":
        """New config with ``other``'s values overriding this one's.

        Nested dicts are merged recursively; lists are replaced.
        """
        other_dict = other.to_dict() if isinstance(other, Config) else _to_plain(other)
        return Config(_deep_merge(self.to_dict(), other_dict))

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value with dot notation."""
        return self._cfg.get_nested(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a value with dot notation."""
        self._cfg.set_nested(key, value)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            return object.__getattribute__(self, name)
        try:
            return self._cfg[name]
        except KeyError:
            raise AttributeError(f"Config has no attribute '{name}'")

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
        else:
            if isinstance(value, dict) and not isinstance(value, ConfigDict):
                value = ConfigDict(value)
            self._cfg[name] = value

    def __getitem__(self, key: str) -> Any:
        return self._cfg[key]

    def __len__(self) -> int:
        return len(self._cfg)

    def __contains__(self, key: str) -> bool:
        """Check if key exists (supports dot notation)."""
        return self.get(key) is not None

    def to_dict(self) -> Dict:
        return self._cfg.to_dict()

    def save(self, filepath: Union[str, Path]) -> None:
        """Save configuration to a YAML file."""
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def __repr__(self) -> str:
        return f"Config({self._cfg})"


def _deep_merge(base: Dict, update: Dict) -> Dict:
    result = copy.deepcopy(base)
    for key, value in update.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def load_config(filepath: Union[str, Path]) -> Config:
    """Load configuration from a YAML file."""
    return Config.from_file(filepath)


def merge_config(config: Config, override: Union[Config, Dict]) -> Config:
    """Return ``config`` with ``override`` merged on top."""
    return config.merge(override)


def get_default_config() -> Config:
    """Default augmentation configuration.

    ``pipeline.train`` and ``pipeline.val`` are lists of transform entries
    understood by ``projaug.configs.build_transform``.
    """
    default_cfg = {
        "seed": None,
        "image": {
            "interpolation": "bilinear",
            "extrapolation": "constant",
            "fill": 0.0,
        },
        "pipeline": {
            "train": [
                {"type": "FlipX", "p": 0.5},
                {"type": "Rotate", "degrees": 10.0},
                {"type": "RandomResizeCrop", "size": [224, 224]},
            ],
            "val": [
                {"type": "CenterResizeCrop", "size": [224, 224]},
            ],
        },
    }
    return Config(default_cfg)
