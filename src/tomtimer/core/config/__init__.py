"""Core configuration loading exports."""

from tomtimer.core.config.loader import DEFAULT_CONFIG_PATH, load_config
from tomtimer.core.config.scaffold import scaffold_config, write_config

__all__ = ["DEFAULT_CONFIG_PATH", "load_config", "scaffold_config", "write_config"]
