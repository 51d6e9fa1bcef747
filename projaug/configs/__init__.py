"""Configuration management for projaug.

This module provides YAML-based configuration with dot notation access,
inheritance support and a registry that builds transform pipelines.

Example:
    >>> from projaug.configs import build_transform, load_config
    >>> config = load_config("augment.yaml")
    >>> tfm = build_transform(config.pipeline.train)
"""

from .config import Config, ConfigDict, get_default_config, load_config, merge_config
from .builder import TRANSFORMS, build_one, build_transform, register_transform

__all__ = [
    "Config",
    "ConfigDict",
    "load_config",
    "merge_config",
    "get_default_config",
    "TRANSFORMS",
    "build_one",
    "build_transform",
    "register_transform",
]
